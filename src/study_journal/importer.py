"""Create journal entries from notes files in various formats."""
import json
import re
from pathlib import Path

from study_journal.journal import add_entry
from study_journal.models import JournalEntry


BLANK_RUN_RE = re.compile(r"\n\s*\n+")


def _join_blocks(blocks) -> str:
    """Join non-blank text blocks with one empty line between them."""
    return "\n\n".join(b.strip() for b in blocks if b and b.strip())


def read_file_content(file_path: str) -> str:
    """Plain note text from a file, with blank pages and paragraphs dropped."""
    path = Path(file_path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        data = json.loads(path.read_text())
        return json.dumps(data, indent=2) if isinstance(data, (dict, list)) else str(data)
    elif suffix in (".yaml", ".yml"):
        import yaml
        data = yaml.safe_load(path.read_text())
        return yaml.safe_dump(data, sort_keys=False) if isinstance(data, (dict, list)) else str(data)
    elif suffix == ".pdf":
        from PyPDF2 import PdfReader
        return _join_blocks(page.extract_text() for page in PdfReader(file_path).pages)
    elif suffix == ".docx":
        from docx import Document
        return _join_blocks(p.text for p in Document(file_path).paragraphs)
    elif suffix in (".html", ".htm"):
        from bs4 import BeautifulSoup
        soup = BeautifulSoup(path.read_text(), "html.parser")
        for tag in soup(["script", "style", "nav"]):
            tag.decompose()
        return _join_blocks(soup.stripped_strings)
    # .txt, .md and anything unrecognised are read as plain text
    return BLANK_RUN_RE.sub("\n\n", path.read_text())


def guess_subject(file_path: str) -> str:
    """Subject from the file name: "cell_biology-notes.md" -> "Cell Biology Notes"."""
    words = re.split(r"[\s_\-]+", Path(file_path).stem)
    return " ".join(w.capitalize() for w in words if w) or "Imported Notes"


def import_notes(
    db_path: str,
    file_path: str,
    duration_minutes: int,
    subject: str | None = None,
) -> JournalEntry:
    """Read a notes file and log it as a journal entry."""
    content = read_file_content(file_path).strip()
    return add_entry(db_path, subject or guess_subject(file_path), duration_minutes, content)
