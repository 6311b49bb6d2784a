"""
Markup stripping for free-text level fields.

Imported levels come from pasted text and files, so every free-text field
is reduced to plain text before validation. Tags are dropped and their text
kept; script-like elements are dropped together with their content.
"""

import html
from typing import Any, Dict, Mapping

import nh3

# Elements whose content is never text a player should see.
_DROP_CONTENT = frozenset({
    "script", "style", "template", "iframe", "noscript", "noembed",
    "noframes", "object", "embed", "svg", "math", "xmp", "title", "textarea",
})


def _strip_once(text: str) -> str:
    # nh3 returns escaped HTML; unescape it back to plain text.
    cleaned = nh3.clean(text, tags=set(), clean_content_tags=set(_DROP_CONTENT))
    return html.unescape(cleaned)


def sanitize_text(text: str) -> str:
    """
    Strip all markup from text, keeping only its text content.

    Unescaped entities can form new markup ("&lt;b&gt;" becomes "<b>"), so
    stripping repeats until the text stops changing, which makes the result
    idempotent.

    Args:
        text: Untrusted text

    Returns:
        Plain text with no markup
    """
    current = text
    for _ in range(len(text) + 1):
        cleaned = _strip_once(current)
        if cleaned == current:
            break
        current = cleaned
    return current


def _clean(value: Any) -> Any:
    return sanitize_text(value) if isinstance(value, str) else value


def sanitize_level(raw: Any) -> Any:
    """
    Return a copy of a raw level tree with its free-text fields sanitized.

    Sanitized fields: name, author, metadata.description, metadata.tags[i],
    settings.theme. Non-mapping input and non-string values are returned
    unchanged; the input is never mutated.
    """
    if not isinstance(raw, Mapping):
        return raw

    level: Dict[str, Any] = dict(raw)
    for key in ("name", "author"):
        if key in level:
            level[key] = _clean(level[key])

    metadata = level.get("metadata")
    if isinstance(metadata, Mapping):
        metadata = dict(metadata)
        if "description" in metadata:
            metadata["description"] = _clean(metadata["description"])
        if isinstance(metadata.get("tags"), list):
            metadata["tags"] = [_clean(tag) for tag in metadata["tags"]]
        level["metadata"] = metadata

    settings = level.get("settings")
    if isinstance(settings, Mapping):
        settings = dict(settings)
        if "theme" in settings:
            settings["theme"] = _clean(settings["theme"])
        level["settings"] = settings

    return level
