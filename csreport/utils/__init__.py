"""Shared utility helpers."""

from csreport.utils.codes import (
    LOOKUP_CODE_ALPHABET,
    LOOKUP_CODE_LENGTH,
    is_valid_lookup_code,
    new_lookup_code,
    new_record_id,
    normalize_lookup_code,
)

__all__ = [
    "LOOKUP_CODE_ALPHABET",
    "LOOKUP_CODE_LENGTH",
    "is_valid_lookup_code",
    "new_lookup_code",
    "new_record_id",
    "normalize_lookup_code",
]
