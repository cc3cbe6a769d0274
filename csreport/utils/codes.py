"""Record identifier and lookup code generation."""

from __future__ import annotations

import random
import re
import uuid

LOOKUP_CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
LOOKUP_CODE_LENGTH = 8
LOOKUP_CODE_PATTERN = re.compile(r"^[A-Z0-9]{6,12}$")

_default_rng = random.Random()


def new_record_id(rng: random.Random | None = None) -> str:
    """Return a random version-4 UUID string (8-4-4-4-12 lowercase hex)."""
    if rng is None:
        return str(uuid.uuid4())
    return str(uuid.UUID(int=rng.getrandbits(128), version=4))


def new_lookup_code(rng: random.Random | None = None, length: int = LOOKUP_CODE_LENGTH) -> str:
    """Return a short code drawn uniformly from ``[A-Z0-9]``.

    Not suitable for secrets; uniqueness is enforced against the store.
    """
    source = rng or _default_rng
    return "".join(source.choice(LOOKUP_CODE_ALPHABET) for _ in range(length))


def normalize_lookup_code(code: str) -> str:
    """Canonical stored/compared form: trimmed and uppercased."""
    return code.strip().upper()


def is_valid_lookup_code(code: str) -> bool:
    return bool(LOOKUP_CODE_PATTERN.fullmatch(code))
