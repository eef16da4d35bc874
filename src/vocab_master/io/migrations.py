"""Versioned migrations applied once to serialized payloads at load time."""

import logging
from typing import Any, Callable, Dict, List, Tuple

from vocab_master.core import SCHEMA_VERSION

logger = logging.getLogger(__name__)

TURKISH_EXPLANATION_ALIASES = ("turkishExplanation", "turkishExp", "turkExp")


def _version_key(version: Any) -> Tuple[int, ...]:
    parts = []
    for piece in str(version or "0").split("."):
        try:
            parts.append(int(piece))
        except ValueError:
            parts.append(0)
    return tuple(parts)


def _fold_turkish_explanation_aliases(payload: Dict[str, Any]) -> None:
    """1.x payloads mirrored the Turkish explanation under three keys."""
    words = payload.get("words")
    if isinstance(words, dict):
        items = words.values()
    elif isinstance(words, list):
        items = words
    else:
        return
    for word in items:
        if not isinstance(word, dict):
            continue
        value = next((word[k] for k in TURKISH_EXPLANATION_ALIASES if word.get(k)), "")
        word["turkishExplanation"] = str(value).strip()
        word.pop("turkishExp", None)
        word.pop("turkExp", None)


def _ensure_collection_shapes(payload: Dict[str, Any]) -> None:
    if not isinstance(payload.get("categories"), list):
        payload["categories"] = []
    if not isinstance(payload.get("history"), list):
        payload["history"] = []


MIGRATIONS: List[Tuple[str, Callable[[Dict[str, Any]], None]]] = [
    ("2.0", _fold_turkish_explanation_aliases),
    ("2.0", _ensure_collection_shapes),
]


def migrate_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Upgrade ``payload`` in place to SCHEMA_VERSION and return it.

    Payloads without a ``meta`` block are treated as version 0.
    Payloads already at or above the current version are left untouched.
    """
    meta = payload.get("meta")
    version = meta.get("version") if isinstance(meta, dict) else None
    current = _version_key(version)
    if current >= _version_key(SCHEMA_VERSION):
        return payload

    for target, step in MIGRATIONS:
        if current < _version_key(target):
            step(payload)

    if isinstance(meta, dict):
        meta["version"] = SCHEMA_VERSION
    logger.info("Migrated state payload from version %s to %s", version, SCHEMA_VERSION)
    return payload
