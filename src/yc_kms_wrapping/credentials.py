"""Credential sources for the Yandex.Cloud KMS session."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any, Dict, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, field_validator

from .utils.errors import ConfigError


class ServiceAccountKey(BaseModel):
    """Authorized key as exported by ``yc iam key create``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(min_length=1)
    service_account_id: str = Field(min_length=1)
    private_key: SecretStr

    @field_validator("private_key")
    @classmethod
    def _require_private_key(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            raise ValueError("private_key must be non-empty")
        return value

    def as_sdk_key(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "service_account_id": self.service_account_id,
            "private_key": self.private_key.get_secret_value(),
        }


class OAuthToken(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["oauth_token"] = "oauth_token"
    token: SecretStr


class ServiceAccountKeyFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["service_account_key_file"] = "service_account_key_file"
    path: Path
    key: ServiceAccountKey


class AmbientIdentity(BaseModel):
    """Instance metadata service account; no explicit secret."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["ambient_identity"] = "ambient_identity"


CredentialSource = Annotated[
    Union[OAuthToken, ServiceAccountKeyFile, AmbientIdentity],
    Field(discriminator="kind"),
]


def load_service_account_key(path: str | Path) -> ServiceAccountKey:
    key_path = Path(path).expanduser()
    try:
        with key_path.open("r", encoding="utf-8") as handle:
            data: Any = json.load(handle)
    except (OSError, ValueError) as exc:
        raise ConfigError(f"invalid key file {key_path}: {exc}") from exc
    try:
        return ServiceAccountKey.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"invalid key file {key_path}: {exc}") from exc


def select_credentials(oauth_token: str, key_file: str) -> OAuthToken | ServiceAccountKeyFile | AmbientIdentity:
    """Pick exactly one credential source.

    A token and a key file together are rejected; with neither, the
    instance's own service account is used.
    """
    if oauth_token and key_file:
        raise ConfigError(
            "ambiguous credentials: both an OAuth token and a service account key file are set"
        )
    if oauth_token:
        return OAuthToken(token=SecretStr(oauth_token))
    if key_file:
        return ServiceAccountKeyFile(path=Path(key_file), key=load_service_account_key(key_file))
    return AmbientIdentity()


__all__ = [
    "AmbientIdentity",
    "CredentialSource",
    "OAuthToken",
    "ServiceAccountKey",
    "ServiceAccountKeyFile",
    "load_service_account_key",
    "select_credentials",
]
