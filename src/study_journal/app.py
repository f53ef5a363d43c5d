"""Interactive CLI application."""
import logging
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table

from study_journal.backup import export_data, import_data
from study_journal.badges import evaluate_badges
from study_journal.config import Settings, configure_logging, load_settings
from study_journal.dashboard import (
    get_daily_minutes, get_score_color, get_score_trend, get_streak_label, get_study_stats,
)
from study_journal.db import confirm_clear_all, init_db, request_clear_all
from study_journal.errors import (
    ChatTimeoutError, ConfigurationError, EntryNotFoundError, IncompleteAnswersError,
    QuizParseError, TransportError, UpstreamError, ValidationError,
)
from study_journal.gateway import ChatGateway
from study_journal.history import HistoryStore
from study_journal.importer import import_notes
from study_journal.journal import add_entry, delete_entry, get_entries, get_entry, search_entries
from study_journal.pipeline import generate_qa_pairs, generate_quiz, generate_summary
from study_journal.prompts import NOTE_QUIZ, TOPIC_QUIZ
from study_journal.quiz import QuizSession

console = Console()
logger = logging.getLogger(__name__)

EXIT_WORDS = ("q", "menu")
LETTERS = "abcd"


class SessionExitRequested(Exception):
    """Raised when the user types 'q' or 'menu' in the middle of a quiz."""


@dataclass
class AppContext:
    db_path: str
    store: HistoryStore
    gateway: ChatGateway


def session_prompt(prompt: str, **kwargs) -> str:
    """Prompt.ask that lets the user abandon the current quiz."""
    answer = Prompt.ask(prompt, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def show_welcome():
    console.print(Panel(
        "[bold]Study Journal[/bold]\n[dim]Log sessions, quiz yourself, track progress[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("log", "Log a study session"),
        ("journal", "Browse and search entries"),
        ("view", "Open an entry: AI summary, review Q&A, note quiz, delete"),
        ("quiz", "AI quiz on any topic"),
        ("progress", "Stats, badges, charts"),
        ("history", "Past quiz attempts"),
        ("import", "Log a notes file as an entry"),
        ("export", "Back up data to JSON"),
        ("restore", "Restore data from a JSON backup"),
        ("clear", "Delete all data"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def run_quiz_session(store: HistoryStore, session: QuizSession):
    """Ask every question, then grade and record the attempt.

    Typing 'q' or 'menu' abandons the quiz without recording anything.
    """
    total = len(session.questions)
    console.print(f"\n[bold]Quiz: {escape(session.topic)}[/bold] ({total} questions, 'q' to abandon)\n")
    for i, q in enumerate(session.questions):
        console.print(f"[bold]Q{i + 1}.[/bold] {escape(q.question_text)}\n")
        for letter, option in zip(LETTERS, q.options):
            console.print(f"  [cyan]{letter})[/cyan] {escape(option)}")
        answer = session_prompt("\nYour answer", choices=list(LETTERS) + list(EXIT_WORDS))
        session.select_option(i, LETTERS.index(answer.strip().lower()))
        console.print()

    try:
        record = session.submit()
    except IncompleteAnswersError as e:
        console.print(f"[yellow]{e.message}[/yellow]")
        return None
    record = store.append(record)

    for i, outcome in enumerate(session.question_results(), 1):
        q = outcome["question"]
        if outcome["is_correct"]:
            console.print(f"[green]Q{i} correct[/green]")
        else:
            console.print(
                f"[red]Q{i} incorrect.[/red] Answer: [green]{LETTERS[outcome['correct']]}) "
                f"{escape(q.correct_option)}[/green]"
            )
    color = get_score_color(record.percentage)
    console.print(
        f"\n[bold]Score: {record.correct_count}/{record.total_count} "
        f"([{color}]{record.percentage}%[/{color}])[/bold]\n"
    )
    return record


def request_quiz(ctx: AppContext, mode: str, **kwargs) -> QuizSession | None:
    """Run the generation pipeline, offering regenerate or raw text on failure."""
    while True:
        try:
            with console.status("Creating your quiz... Please wait."):
                return generate_quiz(ctx.gateway, mode, **kwargs)
        except ConfigurationError:
            console.print("[red]The AI service is not configured (OPENAI_API_KEY). Quizzes are unavailable.[/red]")
            return None
        except ValidationError as e:
            console.print(f"[red]{escape(e.message)}[/red]")
            return None
        except QuizParseError as e:
            console.print(f"[red]{escape(e.message)}[/red]")
            choice = Prompt.ask("Regenerate, show raw text, or cancel", choices=["r", "raw", "c"], default="r")
            if choice == "raw":
                console.print(Panel(escape(e.raw_text or "(empty reply)"), title="AI reply", border_style="yellow"))
                return None
            if choice == "c":
                return None
        except (UpstreamError, TransportError, ChatTimeoutError) as e:
            console.print(f"[red]Error generating quiz: {escape(e.message)}[/red]")
            if not Confirm.ask("Try again?", default=False):
                return None


def cmd_log(ctx: AppContext):
    console.print("\n[bold]Log a Study Session[/bold]")
    subject = Prompt.ask("Subject")
    duration = IntPrompt.ask("Duration (minutes)")
    notes = Prompt.ask("Notes")
    try:
        entry = add_entry(ctx.db_path, subject, duration, notes)
    except ValidationError as e:
        console.print(f"[red]{e.message}[/red]")
        return
    console.print(f"[green]Entry saved![/green] [dim](id {entry.id})[/dim]")


def show_entries(entries: list) -> None:
    if not entries:
        console.print("[yellow]No journal entries yet. Use 'log' to add one.[/yellow]")
        return
    table = Table(title=f"Journal ({len(entries)} entries)")
    table.add_column("ID", style="dim")
    table.add_column("Date")
    table.add_column("Subject", style="cyan")
    table.add_column("Minutes", justify="right")
    table.add_column("Notes")
    for e in entries:
        preview = e.notes if len(e.notes) <= 60 else e.notes[:57] + "..."
        table.add_row(str(e.id), e.created_at[:10], escape(e.subject), str(e.duration_minutes), escape(preview))
    console.print(table)


def cmd_journal(ctx: AppContext):
    term = Prompt.ask("Search (Enter for all)", default="")
    show_entries(search_entries(ctx.db_path, term))


def show_qa_pairs(ctx: AppContext, notes: str) -> list:
    """Print AI review questions with their answers for a note."""
    try:
        with console.status("Creating questions..."):
            pairs = generate_qa_pairs(ctx.gateway, notes)
    except ConfigurationError:
        console.print("[red]The AI service is not configured (OPENAI_API_KEY).[/red]")
        return []
    except QuizParseError as e:
        console.print(f"[red]{escape(e.message)}. Please try again.[/red]")
        return []
    except (UpstreamError, TransportError, ChatTimeoutError) as e:
        console.print(f"[red]Could not create questions: {escape(e.message)}. Please try again.[/red]")
        return []
    lines = [
        f"[bold]Q{i}:[/bold] {escape(p.question)}\n[green]A:[/green] {escape(p.answer)}"
        for i, p in enumerate(pairs, 1)
    ]
    console.print(Panel("\n\n".join(lines), title="Review Questions", border_style="green"))
    return pairs


def cmd_view(ctx: AppContext):
    entries = get_entries(ctx.db_path)
    show_entries(entries)
    if not entries:
        return
    entry_id = IntPrompt.ask("Entry ID")
    try:
        entry = get_entry(ctx.db_path, entry_id)
    except EntryNotFoundError as e:
        console.print(f"[red]{e.message}[/red]")
        return
    console.print(Panel(
        escape(entry.notes),
        title=f"{escape(entry.subject)} - {entry.created_at[:10]} - {entry.duration_minutes} min",
        border_style="cyan",
    ))
    action = Prompt.ask("Action", choices=["summary", "qa", "quiz", "delete", "back"], default="back")
    if action == "summary":
        try:
            with console.status("Generating summary..."):
                bullets = generate_summary(ctx.gateway, entry.notes)
        except ConfigurationError:
            console.print("[red]The AI service is not configured (OPENAI_API_KEY).[/red]")
            return
        except (UpstreamError, TransportError, ChatTimeoutError) as e:
            console.print(f"[red]Could not generate summary: {escape(e.message)}. Please try again.[/red]")
            return
        console.print(Panel("\n".join(f"• {escape(b)}" for b in bullets), title="AI Summary", border_style="green"))
    elif action == "qa":
        show_qa_pairs(ctx, entry.notes)
    elif action == "quiz":
        count = IntPrompt.ask("Number of questions", default=5)
        session = request_quiz(
            ctx, NOTE_QUIZ, source_text=entry.notes, question_count=count, label=entry.subject,
        )
        if session:
            run_quiz_session(ctx.store, session)
    elif action == "delete":
        if Confirm.ask("Delete this entry?", default=False):
            delete_entry(ctx.db_path, entry.id)
            console.print("[green]Entry deleted.[/green]")


def cmd_quiz(ctx: AppContext):
    console.print("\n[bold]Topic Quiz[/bold]")
    topic = Prompt.ask("Topic", default="general")
    count = Prompt.ask("Number of questions", default="5")
    session = request_quiz(ctx, TOPIC_QUIZ, topic=topic, question_count=count)
    if session:
        run_quiz_session(ctx.store, session)


def cmd_progress(ctx: AppContext):
    stats = get_study_stats(ctx.db_path)
    console.print(Panel(
        f"[bold]{get_streak_label(stats['streak'])}[/bold]",
        title="Your Progress", border_style="blue",
    ))
    console.print(f"\n  Entries: [bold]{stats['total_entries']}[/bold]  |  "
                  f"Minutes: [bold]{stats['total_minutes']}[/bold]  |  "
                  f"Quizzes: [bold]{stats['total_quizzes']}[/bold]  |  "
                  f"Avg Score: [bold]{stats['avg_score']}%[/bold]\n")

    # Study minutes, last 7 days
    daily = get_daily_minutes(ctx.db_path)
    peak = max((m for _, m in daily), default=0) or 1
    console.print("[bold]Study minutes (last 7 days)[/bold]")
    for day, minutes in daily:
        bar = "█" * round(minutes / peak * 30)
        console.print(f"  {day.strftime('%a %d %b')}  [cyan]{bar}[/cyan] {minutes}")

    trend = get_score_trend(ctx.db_path)
    if trend:
        console.print("\n[bold]Quiz scores (oldest to newest)[/bold]")
        console.print("  " + "  ".join(f"[{get_score_color(p)}]{p}%[/{get_score_color(p)}]" for p in trend))

    table = Table(title="Badges")
    table.add_column("")
    table.add_column("Badge")
    table.add_column("Status")
    for badge, unlocked in evaluate_badges(get_entries(ctx.db_path), ctx.store.get_attempts()):
        status = "[green]Unlocked[/green]" if unlocked else "[dim]Locked[/dim]"
        table.add_row(badge.icon, badge.display_name, status)
    console.print(table)


def cmd_history(ctx: AppContext):
    attempts = ctx.store.get_attempts(limit=10)
    if not attempts:
        console.print("[yellow]No quizzes taken yet. Take your first quiz![/yellow]")
        return
    table = Table(title="Recent Quizzes")
    table.add_column("Date")
    table.add_column("Topic", style="cyan")
    table.add_column("Score", justify="right")
    for a in attempts:
        color = get_score_color(a.percentage)
        table.add_row(
            a.completed_at[:10], escape(a.topic),
            f"{a.correct_count}/{a.total_count} ([{color}]{a.percentage}%[/{color}])",
        )
    console.print(table)


def cmd_import(ctx: AppContext):
    file_path = Prompt.ask("File path")
    if not Path(file_path).exists():
        console.print(f"[red]File not found: {file_path}[/red]")
        return
    duration = IntPrompt.ask("Duration (minutes)")
    subject = Prompt.ask("Subject (Enter to use the file name)", default="")
    try:
        entry = import_notes(ctx.db_path, file_path, duration, subject=subject or None)
    except ValidationError as e:
        console.print(f"[red]{e.message}[/red]")
        return
    console.print(f"[green]Imported {Path(file_path).name} ({len(entry.notes)} chars) → {escape(entry.subject)}[/green]")


def cmd_export(ctx: AppContext):
    file_path = Prompt.ask("Backup file", default="study-journal-backup.json")
    counts = export_data(ctx.db_path, file_path)
    console.print(f"[green]Saved {counts['entries']} entries and {counts['attempts']} quiz attempts to {file_path}[/green]")


def cmd_restore(ctx: AppContext):
    file_path = Prompt.ask("Backup file")
    counts = import_data(ctx.db_path, file_path)
    console.print(f"[green]Restored {counts['entries']} entries and {counts['attempts']} quiz attempts.[/green]")


def cmd_clear(ctx: AppContext):
    token = request_clear_all(ctx.db_path)
    console.print(Panel(
        f"This deletes ALL journal entries and quiz history.\nType [bold]{token}[/bold] to confirm.",
        title="Clear all data", border_style="red",
    ))
    answer = Prompt.ask("Confirmation code", default="")
    try:
        confirm_clear_all(ctx.db_path, answer)
    except ValidationError as e:
        console.print(f"[yellow]{e.message}[/yellow]")
        return
    console.print("[green]All data has been cleared.[/green]")


COMMANDS = {
    "log": cmd_log,
    "journal": cmd_journal,
    "view": cmd_view,
    "quiz": cmd_quiz,
    "progress": cmd_progress,
    "history": cmd_history,
    "import": cmd_import,
    "export": cmd_export,
    "restore": cmd_restore,
    "clear": cmd_clear,
}


def build_context(settings: Settings) -> AppContext:
    init_db(settings.db_path)
    return AppContext(
        db_path=settings.db_path,
        store=HistoryStore(settings.db_path),
        gateway=ChatGateway.from_settings(settings),
    )


def main():
    settings = load_settings()
    configure_logging(settings.log_level)
    ctx = build_context(settings)
    if not ctx.gateway.configured:
        console.print("[yellow]OPENAI_API_KEY is not set: AI summaries and quizzes are disabled.[/yellow]")

    show_welcome()

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="log").strip().lower()
        try:
            if choice in ("quit", "exit", "q"):
                console.print("[dim]Happy studying![/dim]")
                break
            elif choice in COMMANDS:
                COMMANDS[choice](ctx)
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except SessionExitRequested:
            console.print("[dim]Quiz abandoned. Nothing was recorded.[/dim]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            logger.debug("Command %s failed", choice, exc_info=True)
            console.print(f"[red]Error: {escape(str(e))}[/red]")


if __name__ == "__main__":
    main()
