"""UUID helpers: generation and prefix resolution."""

from __future__ import annotations

import uuid
from collections.abc import Iterable


def generate_uuid() -> str:
    """Generate a new random (v4) UUID string."""
    return str(uuid.uuid4())


def resolve_prefix(prefix: str, ids: Iterable[str]) -> str | None:
    """Resolve a full id from a unique prefix.

    An exact match always wins. Returns None when nothing matches.

    Raises:
        ValueError: If the prefix matches more than one id
    """
    prefix = prefix.strip().lower()
    if not prefix:
        return None

    candidates = []
    for full_id in ids:
        if full_id.lower() == prefix:
            return full_id
        if full_id.lower().startswith(prefix):
            candidates.append(full_id)

    if len(candidates) > 1:
        raise ValueError(
            f"Ambiguous id '{prefix}' matches {len(candidates)} tasks; use more characters"
        )
    return candidates[0] if candidates else None
