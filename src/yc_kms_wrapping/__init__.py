"""Envelope encryption with a Yandex.Cloud KMS symmetric key."""
from .config import WrapperConfig, resolve_config
from .kms.base import WRAPPER_TYPE_YANDEXCLOUD_KMS, Wrapper
from .models import EncryptedBlob
from .utils.errors import (
    ConfigError,
    InvalidInputError,
    KmsConnectionError,
    NotConfiguredError,
    OpenError,
    RemoteError,
    SealError,
    SelfTestError,
    WrappingError,
)
from .wrapper import YandexCloudKmsWrapper

__version__ = "0.1.0"

__all__ = [
    "EncryptedBlob",
    "Wrapper",
    "WrapperConfig",
    "YandexCloudKmsWrapper",
    "WRAPPER_TYPE_YANDEXCLOUD_KMS",
    "resolve_config",
    "WrappingError",
    "ConfigError",
    "KmsConnectionError",
    "SelfTestError",
    "InvalidInputError",
    "NotConfiguredError",
    "RemoteError",
    "SealError",
    "OpenError",
]
