from __future__ import annotations

import base64
import binascii

from .errors import InvalidInputError


def b64e(data: bytes) -> str:
    """URL-safe base64 without padding"""
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def b64d(value: str, *, field: str = "value") -> bytes:
    """Inverse of ``b64e``; padding is optional on input"""
    if not isinstance(value, str):
        raise InvalidInputError(f"{field} must be a base64 string")
    pad = "=" * (-len(value) % 4)
    try:
        return base64.urlsafe_b64decode((value + pad).encode("ascii"))
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise InvalidInputError(f"{field} is not valid base64") from exc


__all__ = ["b64e", "b64d"]
