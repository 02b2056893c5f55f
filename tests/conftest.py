from __future__ import annotations

import os
from typing import Dict, List, Tuple

import pytest
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from yc_kms_wrapping.kms.base import EncryptResult
from yc_kms_wrapping.utils.errors import RemoteError
from yc_kms_wrapping.wrapper import YandexCloudKmsWrapper


class FakeKms:
    """In-memory symmetric KMS.

    Each key id owns a list of versions; encrypt uses the newest version and
    reports its id, decrypt accepts any version of the same key.
    """

    def __init__(self, *key_ids: str) -> None:
        self._versions: Dict[str, List[Tuple[str, bytes]]] = {}
        self.encrypt_calls: List[str] = []
        self.decrypt_calls: List[str] = []
        self.fail_encrypt = False
        self.fail_decrypt = False
        self.garble_decrypt = False
        for key_id in key_ids or ("key-1",):
            self.add_key(key_id)

    def add_key(self, key_id: str) -> None:
        self._versions[key_id] = [(key_id, AESGCM.generate_key(bit_length=256))]

    def rotate(self, key_id: str) -> str:
        versions = self._versions[key_id]
        version_id = f"{key_id}-v{len(versions) + 1}"
        versions.append((version_id, AESGCM.generate_key(bit_length=256)))
        return version_id

    @property
    def calls(self) -> int:
        return len(self.encrypt_calls) + len(self.decrypt_calls)

    def encrypt(self, key_id: str, plaintext: bytes) -> EncryptResult:
        self.encrypt_calls.append(key_id)
        if self.fail_encrypt:
            raise RemoteError("PERMISSION_DENIED: encrypt refused")
        versions = self._versions.get(key_id)
        if not versions:
            raise RemoteError(f"NOT_FOUND: key {key_id}")
        version_id, master = versions[-1]
        label = version_id.encode("utf-8")
        nonce = os.urandom(12)
        sealed = AESGCM(master).encrypt(nonce, plaintext, label)
        blob = len(label).to_bytes(2, "big") + label + nonce + sealed
        return EncryptResult(ciphertext=blob, key_id=version_id)

    def decrypt(self, key_id: str, ciphertext: bytes) -> bytes:
        self.decrypt_calls.append(key_id)
        if self.fail_decrypt:
            raise RemoteError("UNAVAILABLE: decrypt refused")
        versions = self._versions.get(key_id)
        if not versions:
            raise RemoteError(f"NOT_FOUND: key {key_id}")
        size = int.from_bytes(ciphertext[:2], "big")
        label = ciphertext[2 : 2 + size]
        nonce = ciphertext[2 + size : 14 + size]
        sealed = ciphertext[14 + size :]
        masters = {vid.encode("utf-8"): master for vid, master in versions}
        master = masters.get(label)
        if master is None:
            raise RemoteError(f"INVALID_ARGUMENT: ciphertext not produced by key {key_id}")
        try:
            plaintext = AESGCM(master).decrypt(nonce, sealed, label)
        except (InvalidTag, ValueError) as exc:
            raise RemoteError("INVALID_ARGUMENT: ciphertext is corrupted") from exc
        if self.garble_decrypt:
            return plaintext[::-1] + b"!"
        return plaintext


class RecordingFactory:
    def __init__(self, kms: FakeKms) -> None:
        self.kms = kms
        self.credentials: list = []

    def __call__(self, credentials):
        self.credentials.append(credentials)
        return self.kms


@pytest.fixture
def fake_kms() -> FakeKms:
    return FakeKms("key-1", "key-2")


@pytest.fixture
def factory(fake_kms: FakeKms) -> RecordingFactory:
    return RecordingFactory(fake_kms)


@pytest.fixture
def environ() -> Dict[str, str]:
    return {}


@pytest.fixture
def wrapper(factory: RecordingFactory, environ: Dict[str, str]) -> YandexCloudKmsWrapper:
    return YandexCloudKmsWrapper(client_factory=factory, environ=environ)


@pytest.fixture
def configured(wrapper: YandexCloudKmsWrapper) -> YandexCloudKmsWrapper:
    wrapper.set_config({"kms_key_id": "key-1", "oauth_token": "token"})
    return wrapper
