from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Final

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ..utils.errors import OpenError, SealError

AES256_KEY_SIZE: Final[int] = 32
IV_SIZE_BYTES: Final[int] = 12


@dataclass(slots=True)
class EnvelopeInfo:
    key: bytes
    iv: bytes
    ciphertext: bytes


class Envelope:
    """AES-256-GCM sealing under a fresh one-time data key"""

    @staticmethod
    def gen_key() -> bytes:
        return AESGCM.generate_key(bit_length=AES256_KEY_SIZE * 8)

    @staticmethod
    def gen_iv() -> bytes:
        return os.urandom(IV_SIZE_BYTES)

    def seal(self, plaintext: bytes, aad: bytes | None = None) -> EnvelopeInfo:
        if plaintext is None:
            raise SealError("plaintext for sealing is nil")
        key = self.gen_key()
        iv = self.gen_iv()
        try:
            ciphertext = AESGCM(key).encrypt(iv, plaintext, aad or None)
        except (TypeError, ValueError, OverflowError) as exc:
            raise SealError(f"error sealing data: {exc}") from exc
        return EnvelopeInfo(key=key, iv=iv, ciphertext=ciphertext)

    def open(self, info: EnvelopeInfo, aad: bytes | None = None) -> bytes:
        if len(info.key) != AES256_KEY_SIZE:
            raise OpenError("data key must be 32 bytes")
        if len(info.iv) != IV_SIZE_BYTES:
            raise OpenError("iv must be 12 bytes")
        try:
            return AESGCM(info.key).decrypt(info.iv, info.ciphertext, aad or None)
        except InvalidTag as exc:
            raise OpenError("AEAD tag verification failed") from exc
        except (TypeError, ValueError) as exc:
            raise OpenError(f"error opening data: {exc}") from exc


__all__ = ["AES256_KEY_SIZE", "IV_SIZE_BYTES", "Envelope", "EnvelopeInfo"]
