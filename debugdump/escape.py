"""Escaping of user text for Graphviz HTML-like labels."""
from typing import Any

# `&` must stay first so the entities produced below are not escaped again.
_REPLACEMENTS = (
    ("&", "&amp;"),
    ('"', "&quot;"),
    ("<", "&lt;"),
    (">", "&gt;"),
)


def escape_html(text: Any) -> str:
    """Escape `text` so it is suitable for inclusion in a Graphviz HTML label.

    Non-string values are rendered with `str()` first. When no character needs
    escaping the input string is returned unchanged.
    """
    if not isinstance(text, str):
        text = str(text)
    if not any(ch in text for ch, _ in _REPLACEMENTS):
        return text
    for raw, entity in _REPLACEMENTS:
        text = text.replace(raw, entity)
    return text
