from __future__ import annotations

import secrets


class WrappingError(Exception):
    """Base exception for the KMS wrapper"""


class ConfigError(WrappingError):
    """Raised for missing, ambiguous or invalid configuration"""


class KmsConnectionError(WrappingError):
    """Raised when a session with the remote KMS cannot be built"""


class SelfTestError(WrappingError):
    """Raised when the configured key id cannot round-trip the self-test payload"""


class InvalidInputError(WrappingError):
    """Raised when plaintext or blob input is absent or malformed"""


class NotConfiguredError(WrappingError):
    """Raised when encrypt/decrypt run before a successful set_config"""


class RemoteError(WrappingError):
    """Raised when a remote KMS call fails"""


class SealError(WrappingError):
    """Raised when local envelope encryption fails"""


class OpenError(WrappingError):
    """Raised when local envelope decryption or authentication fails"""


def constant_time_compare(lhs: bytes | str, rhs: bytes | str) -> bool:
    """Compare two byte sequences without leaking timing information"""
    if isinstance(lhs, str):
        lhs = lhs.encode("utf-8")
    if isinstance(rhs, str):
        rhs = rhs.encode("utf-8")
    return secrets.compare_digest(lhs, rhs)


__all__ = [
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
