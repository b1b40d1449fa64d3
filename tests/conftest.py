from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
for candidate in (
    ROOT / "libs" / "core" / "src",
    ROOT / "libs" / "adapters" / "pyca" / "src",
    ROOT / "apps" / "cli" / "src",
):
    candidate_str = str(candidate)
    if candidate_str not in sys.path:
        sys.path.insert(0, candidate_str)

from sigvec.errors import (  # noqa: E402
    InvalidKey,
    MalformedSignature,
    SigningError,
    UnsupportedAlgorithm,
    UnsupportedKey,
)
from sigvec.vectors import TestDocument  # noqa: E402

BAD_KEY = b"\xff\xff"
MALFORMED = b"\xde\xad"
BOOM = b"boom"
UNSIGNABLE = b"cannot-sign"


class DummyPrimitive:
    """Accepts a signature iff it equals b"ok:" + message."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._key: Any = None
        self._msg = b""

    def init_verify(self, key: Any) -> None:
        self._key = key
        self._msg = b""

    def init_sign(self, key: Any) -> None:
        if key == BAD_KEY:
            raise InvalidKey("bad key")
        self._key = key
        self._msg = b""

    def update(self, data: bytes) -> None:
        self._msg += data

    def verify(self, signature: bytes) -> bool:
        if signature == MALFORMED:
            raise MalformedSignature("cannot parse")
        if signature == BOOM:
            raise RuntimeError("provider bug")
        return signature == b"ok:" + self._msg

    def sign(self) -> bytes:
        if self._msg == UNSIGNABLE:
            raise SigningError("refused")
        return b"ok:" + self._msg


class DummyKeyFactory:
    def __init__(self, name: str) -> None:
        self.name = name

    def public_key_from(self, encoded: bytes) -> Any:
        if encoded == BAD_KEY:
            raise UnsupportedKey("unknown curve")
        return encoded

    def private_key_from(self, encoded: bytes) -> Any:
        if encoded == BAD_KEY:
            raise UnsupportedKey("unknown curve")
        return encoded


class DummyProvider:
    name = "dummy"

    def __init__(self, known: Optional[Iterable[str]] = None, factories: Iterable[str] = ("EC", "RSA", "DSA")) -> None:
        self.known = set(known) if known is not None else None
        self.factories = set(factories)
        self.requested: List[str] = []
        self.factory_requests: List[str] = []

    def signature(self, name: str) -> DummyPrimitive:
        self.requested.append(name)
        if self.known is not None and name not in self.known:
            raise UnsupportedAlgorithm(name)
        return DummyPrimitive(name)

    def key_factory(self, name: str) -> DummyKeyFactory:
        self.factory_requests.append(name)
        if name not in self.factories:
            raise UnsupportedAlgorithm(name)
        return DummyKeyFactory(name)


def case(tc_id: int, msg: bytes, sig: bytes, result: str = "valid", comment: str = "") -> Dict[str, Any]:
    return {"tcId": tc_id, "msg": msg.hex(), "sig": sig.hex(), "result": result, "comment": comment, "flags": []}


def group(tests: List[Dict[str, Any]], key: bytes = b"k1", sha: str = "SHA-256",
          curve: Optional[str] = "secp256r1", private: Optional[bytes] = None) -> Dict[str, Any]:
    g: Dict[str, Any] = {"keyDer": key.hex(), "sha": sha, "tests": tests, "type": "EcdsaVerify"}
    if curve is not None:
        g["key"] = {"curve": curve, "type": "EcPublicKey"}
    if private is not None:
        g["privateKeyPkcs8"] = private.hex()
    return g


def document(groups: List[Dict[str, Any]], algorithm: str = "ECDSA", schema: str = "ecdsa_verify_schema.json",
             number_of_tests: Optional[int] = None, source: str = "dummy_test.json") -> TestDocument:
    if number_of_tests is None:
        number_of_tests = sum(len(g["tests"]) for g in groups)
    raw = {
        "algorithm": algorithm,
        "generatorVersion": "0.8",
        "schema": schema,
        "numberOfTests": number_of_tests,
        "testGroups": groups,
    }
    return TestDocument.from_dict(raw, source=source)


@pytest.fixture
def provider() -> DummyProvider:
    return DummyProvider()
