"""Yandex.Cloud KMS symmetric crypto client built on the ``yandexcloud`` SDK."""
from __future__ import annotations

from typing import Any, Dict, Optional

import grpc
import structlog
import yandexcloud
from yandex.cloud.kms.v1.symmetric_crypto_service_pb2 import (
    SymmetricDecryptRequest,
    SymmetricEncryptRequest,
)
from yandex.cloud.kms.v1.symmetric_crypto_service_pb2_grpc import SymmetricCryptoServiceStub

from ..credentials import AmbientIdentity, CredentialSource, OAuthToken, ServiceAccountKeyFile
from ..utils.errors import ConfigError, KmsConnectionError, RemoteError
from .base import EncryptResult

logger = structlog.get_logger(__name__)


def _describe_rpc_error(exc: grpc.RpcError) -> str:
    code = exc.code() if hasattr(exc, "code") else None
    details = exc.details() if hasattr(exc, "details") else None
    name = getattr(code, "name", None) or "UNKNOWN"
    return f"{name}: {details or exc}"


class YandexCloudKmsClient:
    """Adapter from ``SymmetricCryptoServiceStub`` to ``SymmetricKms``"""

    def __init__(self, stub: Any) -> None:
        self._stub = stub

    def encrypt(self, key_id: str, plaintext: bytes) -> EncryptResult:
        request = SymmetricEncryptRequest(key_id=key_id, plaintext=plaintext)
        try:
            response = self._stub.Encrypt(request)
        except grpc.RpcError as exc:
            raise RemoteError(f"kms encrypt with key {key_id} failed: {_describe_rpc_error(exc)}") from exc
        return EncryptResult(ciphertext=response.ciphertext, key_id=response.key_id)

    def decrypt(self, key_id: str, ciphertext: bytes) -> bytes:
        request = SymmetricDecryptRequest(key_id=key_id, ciphertext=ciphertext)
        try:
            response = self._stub.Decrypt(request)
        except grpc.RpcError as exc:
            raise RemoteError(f"kms decrypt with key {key_id} failed: {_describe_rpc_error(exc)}") from exc
        return response.plaintext


def sdk_kwargs(credentials: CredentialSource) -> Dict[str, Any]:
    """SDK constructor arguments for a credential source.

    No arguments means the SDK authenticates through the instance metadata
    service.
    """
    if isinstance(credentials, OAuthToken):
        return {"token": credentials.token.get_secret_value()}
    if isinstance(credentials, ServiceAccountKeyFile):
        return {"service_account_key": credentials.key.as_sdk_key()}
    if isinstance(credentials, AmbientIdentity):
        return {}
    raise ConfigError(f"unsupported credential source: {type(credentials).__name__}")


def build_kms_client(credentials: CredentialSource, *, endpoint: Optional[str] = None) -> YandexCloudKmsClient:
    kwargs = sdk_kwargs(credentials)
    if endpoint:
        kwargs["endpoint"] = endpoint
    try:
        sdk = yandexcloud.SDK(**kwargs)
        stub = sdk.client(SymmetricCryptoServiceStub)
    except Exception as exc:
        raise KmsConnectionError(f"error initializing Yandex.Cloud KMS client: {exc}") from exc
    logger.debug("kms session built", credentials=credentials.kind)
    return YandexCloudKmsClient(stub)


__all__ = ["YandexCloudKmsClient", "build_kms_client", "sdk_kwargs"]
