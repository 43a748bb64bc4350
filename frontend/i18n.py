# frontend/i18n.py
from typing import Any, Optional

LANGUAGES = {
    "en": "English",
    "hi": "हिन्दी",
}


def localized(record: dict, field: str, lang: str) -> Any:
    """Pick the Hindi variant of a bilingual field when asked for and present."""
    if lang == "hi":
        value = record.get(f"{field}_hi")
        if value:
            return value
    return record.get(field, "")


def t(translations: Optional[dict], key: str, **values) -> str:
    """Resolve a dotted key ('cart.empty') and fill {placeholders}; falls back to the key."""
    node: Any = translations or {}
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return key
        node = node[part]
    if not isinstance(node, str):
        return key
    try:
        return node.format(**values) if values else node
    except (KeyError, IndexError):
        return node
