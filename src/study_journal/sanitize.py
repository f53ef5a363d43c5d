"""Strip markdown code fences from model replies."""
import re

FENCE = "```"
# A language tag only counts as one when a newline or the end of the text follows it.
OPENING_FENCE_RE = re.compile(r"^```(?:[A-Za-z0-9_+-]+(?=\s|$))?")
CLOSING_FENCE_RE = re.compile(r"```$")


def sanitize(text) -> str:
    """Remove a wrapping ```json ... ``` fence and surrounding whitespace.

    Fences are peeled until the text no longer starts with one, so applying
    the function twice gives the same result as applying it once. Only fence
    markers and language tags are removed, never the text between them.
    """
    if not isinstance(text, str):
        return ""
    content = text.strip()
    while content.startswith(FENCE):
        content = OPENING_FENCE_RE.sub("", content, count=1)
        content = CLOSING_FENCE_RE.sub("", content, count=1).strip()
    return content
