"""Remote KMS backends."""
from .base import WRAPPER_TYPE_YANDEXCLOUD_KMS, EncryptResult, SymmetricKms, Wrapper

__all__ = ["EncryptResult", "SymmetricKms", "Wrapper", "WRAPPER_TYPE_YANDEXCLOUD_KMS"]
