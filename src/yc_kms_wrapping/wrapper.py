"""Envelope encryption backed by a Yandex.Cloud KMS symmetric key.

Payloads are sealed locally with a one-time AES-256-GCM data key; only that
data key travels to the KMS to be wrapped under the configured key id.
"""
from __future__ import annotations

import os
import threading
from typing import Callable, Dict, Mapping, Optional

import structlog

from .config import WrapperConfig, resolve_credentials, resolve_key_id
from .credentials import CredentialSource
from .crypto.envelope import Envelope, EnvelopeInfo
from .kms.base import WRAPPER_TYPE_YANDEXCLOUD_KMS, SymmetricKms, Wrapper
from .models import EncryptedBlob
from .tracker import CurrentKeyId
from .utils.errors import (
    InvalidInputError,
    NotConfiguredError,
    RemoteError,
    SelfTestError,
    constant_time_compare,
)

SELF_TEST_PLAINTEXT = b"plaintext"

ClientFactory = Callable[[CredentialSource], SymmetricKms]

logger = structlog.get_logger(__name__)


def _default_client_factory(credentials: CredentialSource) -> SymmetricKms:
    from .kms.yandexcloud import build_kms_client

    return build_kms_client(credentials)


class YandexCloudKmsWrapper(Wrapper):
    """Encrypts and decrypts blobs with a KMS-wrapped data key.

    ``set_config`` must succeed once before ``encrypt``/``decrypt``. The KMS
    client is built on the first successful call and reused afterwards; later
    calls only replace the key id.
    """

    def __init__(
        self,
        *,
        client_factory: ClientFactory | None = None,
        environ: Optional[Mapping[str, str]] = None,
        envelope: Envelope | None = None,
    ) -> None:
        self._client_factory = client_factory or _default_client_factory
        self._environ = environ
        self._envelope = envelope or Envelope()
        self._client: SymmetricKms | None = None
        self._config: WrapperConfig | None = None
        self._current_key_id = CurrentKeyId()
        self._configure_lock = threading.Lock()

    @property
    def config(self) -> WrapperConfig | None:
        return self._config

    def type(self) -> str:
        return WRAPPER_TYPE_YANDEXCLOUD_KMS

    def key_id(self) -> str:
        return self._current_key_id.load()

    def hmac_key_id(self) -> str:
        return ""

    def set_config(self, config: Optional[Mapping[str, str]]) -> Dict[str, str]:
        """Resolve configuration and connect to the KMS.

        Precedence per field: environment variable, then ``config``. Key id is
        mandatory. Credentials are resolved only while no client exists: an
        OAuth token, a service account key file, or the instance identity.
        The first client is accepted only after a round-trip self-test
        through the configured key.
        """
        config = config or {}
        environ = os.environ if self._environ is None else self._environ

        key_id = resolve_key_id(config, environ)

        with self._configure_lock:
            if self._client is not None and self._config is not None:
                if key_id != self._config.key_id:
                    logger.info("kms key id reconfigured", key_id=key_id, previous=self._config.key_id)
                self._config = self._config.with_key_id(key_id)
                return self._config.public_info()

            credentials = resolve_credentials(config, environ)
            resolved = WrapperConfig(key_id=key_id, credentials=credentials)
            client = self._client_factory(credentials)
            self._self_test(client, key_id)

            self._current_key_id.store(key_id)
            self._config = resolved
            self._client = client

        logger.info("kms wrapper configured", key_id=key_id, credentials=credentials.kind)
        return resolved.public_info()

    @staticmethod
    def _self_test(client: SymmetricKms, key_id: str) -> None:
        try:
            encrypted = client.encrypt(key_id, SELF_TEST_PLAINTEXT)
        except RemoteError as exc:
            raise SelfTestError(f"self-test encrypt with key {key_id} failed: {exc}") from exc
        try:
            decrypted = client.decrypt(key_id, encrypted.ciphertext)
        except RemoteError as exc:
            raise SelfTestError(f"self-test decrypt with key {key_id} failed: {exc}") from exc
        if not constant_time_compare(decrypted, SELF_TEST_PLAINTEXT):
            raise SelfTestError(f"self-test with key {key_id} returned different plaintext")
        logger.debug("kms self-test passed", key_id=key_id)

    def encrypt(self, plaintext: bytes, aad: bytes | None = None) -> EncryptedBlob:
        """Seal ``plaintext`` locally and wrap the data key in the KMS.

        The key id reported by the KMS is recorded as the current key id;
        with an alias it is the underlying key actually used.
        """
        if plaintext is None:
            raise InvalidInputError("given plaintext for encryption is nil")
        client, config = self._client, self._config
        if client is None or config is None:
            raise NotConfiguredError("encrypt called before set_config succeeded")

        env = self._envelope.seal(plaintext, aad)

        try:
            wrapped = client.encrypt(config.key_id, env.key)
        except RemoteError as exc:
            raise RemoteError(f"error encrypting data encryption key: {exc}") from exc

        if wrapped.key_id != config.key_id:
            logger.debug("kms resolved key id", configured=config.key_id, resolved=wrapped.key_id)
        self._current_key_id.store(wrapped.key_id)

        return EncryptedBlob(
            ciphertext=env.ciphertext,
            iv=env.iv,
            key_id=wrapped.key_id,
            wrapped_key=wrapped.ciphertext,
        )

    def decrypt(self, blob: EncryptedBlob, aad: bytes | None = None) -> bytes:
        """Unwrap the data key with the configured key id and open the blob.

        ``blob.key_id`` is informational only; an alias keeps unwrapping
        data keys wrapped under its earlier versions.
        """
        if blob is None:
            raise InvalidInputError("given input for decryption is nil")
        client, config = self._client, self._config
        if client is None or config is None:
            raise NotConfiguredError("decrypt called before set_config succeeded")

        try:
            data_key = client.decrypt(config.key_id, blob.wrapped_key)
        except RemoteError as exc:
            raise RemoteError(f"error decrypting data encryption key: {exc}") from exc

        return self._envelope.open(
            EnvelopeInfo(key=data_key, iv=blob.iv, ciphertext=blob.ciphertext),
            aad,
        )


__all__ = ["SELF_TEST_PLAINTEXT", "YandexCloudKmsWrapper"]
