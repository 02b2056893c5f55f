from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Protocol

from ..models import EncryptedBlob

WRAPPER_TYPE_YANDEXCLOUD_KMS = "yandexcloudkms"


@dataclass(slots=True)
class EncryptResult:
    ciphertext: bytes
    key_id: str


class SymmetricKms(Protocol):
    """Remote symmetric crypto capability.

    Implementations raise ``RemoteError`` for any transport or service failure.
    """

    def encrypt(self, key_id: str, plaintext: bytes) -> EncryptResult:
        ...

    def decrypt(self, key_id: str, ciphertext: bytes) -> bytes:
        ...


class Wrapper(ABC):
    """Pluggable key-management backend."""

    @abstractmethod
    def type(self) -> str:
        """Constant identifier of the backend kind."""

    @abstractmethod
    def key_id(self) -> str:
        """Key id used by the most recent encryption."""

    @abstractmethod
    def hmac_key_id(self) -> str:
        """Key id of a separate HMAC key, if the backend has one."""

    @abstractmethod
    def set_config(self, config: Optional[Mapping[str, str]]) -> Dict[str, str]:
        """Apply configuration and return non-secret info about it."""

    def init(self) -> None:
        """Called once the host is ready to use the wrapper."""

    def finalize(self) -> None:
        """Called at shutdown."""

    @abstractmethod
    def encrypt(self, plaintext: bytes, aad: bytes | None = None) -> EncryptedBlob:
        ...

    @abstractmethod
    def decrypt(self, blob: EncryptedBlob, aad: bytes | None = None) -> bytes:
        ...


__all__ = ["EncryptResult", "SymmetricKms", "Wrapper", "WRAPPER_TYPE_YANDEXCLOUD_KMS"]
