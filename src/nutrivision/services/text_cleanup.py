"""Text helpers for AI-written food descriptions."""

import re

# Applied in order, first match only; later rules rely on earlier ones having run.
GUESS_CLEANUP_RULES: list[tuple[re.Pattern[str], str]] = [
    (
        re.compile(
            r"I see .*?, and what looks like .*?, "
            r"but I'm not sure about the exact type of .*?\.",
            re.IGNORECASE,
        ),
        "",
    ),
    (re.compile(r"I'm not sure about the exact type of", re.IGNORECASE), ""),
    (re.compile(r"I see .*?, and what looks like a", re.IGNORECASE), ""),
    (re.compile(r"I see", re.IGNORECASE), ""),
    (re.compile(r"looks like a", re.IGNORECASE), ""),
    (re.compile(r"unclear", re.IGNORECASE), ""),
    (re.compile(r"not sure", re.IGNORECASE), ""),
    (re.compile(r"It appears to be", re.IGNORECASE), ""),
    (re.compile(r", but I am not certain.", re.IGNORECASE), ""),
]

_QUOTES = re.compile(r'"')
_BOLD_TITLE = re.compile(r"\*\*(.*?):\*\*")
_BOLD = re.compile(r"\*\*(.*?)\*\*")


def clean_guess(description: str) -> str:
    """Strip hedging phrases from an uncertain description to prefill a name.

    Purely cosmetic. An empty result means the user has to type the name.
    """
    cleaned = description
    for pattern, replacement in GUESS_CLEANUP_RULES:
        cleaned = pattern.sub(replacement, cleaned, count=1)
    cleaned = _QUOTES.sub("", cleaned)
    return cleaned.strip()


def split_components(description: str) -> list[str]:
    """Split a ``* **Item:** text`` description into plain component lines."""
    if not description:
        return []
    text = _BOLD_TITLE.sub(r"\1:", description)
    items = [item.strip() for item in text.split("* ") if item.strip()]
    return [_BOLD.sub(r"\1", item) for item in items]
