"""Utility exports."""
from .encoding import b64d, b64e
from .errors import (
    ConfigError,
    InvalidInputError,
    KmsConnectionError,
    NotConfiguredError,
    OpenError,
    RemoteError,
    SealError,
    SelfTestError,
    WrappingError,
    constant_time_compare,
)

__all__ = [
    "b64e",
    "b64d",
    "WrappingError",
    "ConfigError",
    "KmsConnectionError",
    "SelfTestError",
    "InvalidInputError",
    "NotConfiguredError",
    "RemoteError",
    "SealError",
    "OpenError",
    "constant_time_compare",
]
