from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping

from .utils.encoding import b64d, b64e
from .utils.errors import InvalidInputError


@dataclass(slots=True)
class EncryptedBlob:
    """Durable result of an envelope encryption.

    ``wrapped_key`` is the data key encrypted by the remote KMS under
    ``key_id``; together with ``iv`` it opens ``ciphertext``.
    """

    ciphertext: bytes
    iv: bytes
    key_id: str
    wrapped_key: bytes

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ciphertext": b64e(self.ciphertext),
            "iv": b64e(self.iv),
            "key_id": self.key_id,
            "wrapped_key": b64e(self.wrapped_key),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"), sort_keys=True)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "EncryptedBlob":
        for name in ("ciphertext", "iv", "key_id", "wrapped_key"):
            if payload.get(name) is None:
                raise InvalidInputError(f"encrypted blob missing {name}")
        key_id = payload["key_id"]
        if not isinstance(key_id, str):
            raise InvalidInputError("key_id must be a string")
        return cls(
            ciphertext=b64d(payload["ciphertext"], field="ciphertext"),
            iv=b64d(payload["iv"], field="iv"),
            key_id=key_id,
            wrapped_key=b64d(payload["wrapped_key"], field="wrapped_key"),
        )

    @classmethod
    def from_json(cls, raw: str | bytes) -> "EncryptedBlob":
        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise InvalidInputError("encrypted blob is not valid JSON") from exc
        if not isinstance(data, dict):
            raise InvalidInputError("encrypted blob must be a JSON object")
        return cls.from_dict(data)


__all__ = ["EncryptedBlob"]
