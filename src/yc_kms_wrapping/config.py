"""Configuration resolution for the Yandex.Cloud KMS wrapper.

Every field is resolved independently, environment variable first and then
the supplied config mapping. Only the key id is required; credentials fall
back to the instance metadata identity.
"""
from __future__ import annotations

import os
from typing import Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from .credentials import CredentialSource, select_credentials
from .utils.errors import ConfigError

ENV_OAUTH_TOKEN = "YANDEXCLOUD_OAUTH_TOKEN"
ENV_SERVICE_ACCOUNT_KEY_FILE = "YANDEXCLOUD_SERVICE_ACCOUNT_KEY_FILE"
ENV_KMS_KEY_ID = "YANDEXCLOUD_KMS_KEY_ID"

CFG_OAUTH_TOKEN = "oauth_token"
CFG_SERVICE_ACCOUNT_KEY_FILE = "service_account_key_file"
CFG_KMS_KEY_ID = "kms_key_id"


class WrapperConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    key_id: str = Field(min_length=1)
    credentials: CredentialSource

    def with_key_id(self, key_id: str) -> "WrapperConfig":
        return self.model_copy(update={"key_id": key_id})

    def public_info(self) -> Dict[str, str]:
        return {CFG_KMS_KEY_ID: self.key_id}


def coalesce(*values: Optional[str]) -> str:
    for value in values:
        if value:
            return value
    return ""


def resolve_key_id(config: Mapping[str, str], environ: Mapping[str, str]) -> str:
    key_id = coalesce(environ.get(ENV_KMS_KEY_ID), config.get(CFG_KMS_KEY_ID))
    if not key_id:
        raise ConfigError(
            f"missing key id: neither '{ENV_KMS_KEY_ID}' environment variable "
            f"nor '{CFG_KMS_KEY_ID}' config parameter is set"
        )
    return key_id


def resolve_credentials(config: Mapping[str, str], environ: Mapping[str, str]) -> CredentialSource:
    oauth_token = coalesce(environ.get(ENV_OAUTH_TOKEN), config.get(CFG_OAUTH_TOKEN))
    key_file = coalesce(
        environ.get(ENV_SERVICE_ACCOUNT_KEY_FILE),
        config.get(CFG_SERVICE_ACCOUNT_KEY_FILE),
    )
    return select_credentials(oauth_token, key_file)


def resolve_config(
    config: Optional[Mapping[str, str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> WrapperConfig:
    config = config or {}
    environ = os.environ if environ is None else environ
    key_id = resolve_key_id(config, environ)
    return WrapperConfig(key_id=key_id, credentials=resolve_credentials(config, environ))


__all__ = [
    "CFG_KMS_KEY_ID",
    "CFG_OAUTH_TOKEN",
    "CFG_SERVICE_ACCOUNT_KEY_FILE",
    "ENV_KMS_KEY_ID",
    "ENV_OAUTH_TOKEN",
    "ENV_SERVICE_ACCOUNT_KEY_FILE",
    "WrapperConfig",
    "coalesce",
    "resolve_config",
    "resolve_credentials",
    "resolve_key_id",
]
