"""In-memory model of Wycheproof-style signature test-vector documents.

Documents are parsed once into frozen dataclasses; hex fields are decoded here
so the executors only ever see bytes. Two generations of field names are in
circulation (``keyDer``/``keyPem``/``key`` and
``publicKeyDer``/``publicKeyPem``/``publicKey``); both are accepted.
"""
from __future__ import annotations

import base64
import binascii
import enum
import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple

from .errors import VectorFormatError


class Expected(str, enum.Enum):
    VALID = "valid"
    INVALID = "invalid"
    ACCEPTABLE = "acceptable"


_PEM_RE = re.compile(
    r"-----BEGIN [A-Z0-9 ]+-----(?P<body>.*?)-----END [A-Z0-9 ]+-----",
    re.DOTALL,
)


def h2b(value: str) -> bytes:
    s = value.strip()
    if s.startswith("0x") or s.startswith("0X"):
        s = s[2:]
    try:
        return binascii.unhexlify(s)
    except (binascii.Error, ValueError) as exc:
        raise VectorFormatError(f"Not hex: {s[:32]}...") from exc


def b2h(data: bytes) -> str:
    return binascii.hexlify(data).decode("ascii")


def pem_to_der(pem: str) -> bytes:
    """Strip the armour off a single PEM block."""
    m = _PEM_RE.search(pem)
    if m is None:
        raise VectorFormatError("PEM block not found")
    body = "".join(m.group("body").split())
    try:
        return base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise VectorFormatError("PEM body is not base64") from exc


def _first_present(*vals):
    for v in vals:
        if v is not None:
            return v
    return None


def _require(obj: Mapping[str, Any], name: str, where: str) -> Any:
    try:
        return obj[name]
    except KeyError:
        raise VectorFormatError(f"{where}: missing field {name!r}") from None


@dataclass(frozen=True)
class KeyDescriptor:
    curve: Optional[str] = None
    key_der: Optional[bytes] = None
    key_pem: Optional[str] = None
    private_key_pkcs8: Optional[bytes] = None
    private_key_pem: Optional[str] = None

    def public_der(self) -> Optional[bytes]:
        if self.key_der is not None:
            return self.key_der
        if self.key_pem is not None:
            return pem_to_der(self.key_pem)
        return None

    def private_der(self) -> Optional[bytes]:
        if self.private_key_pkcs8 is not None:
            return self.private_key_pkcs8
        if self.private_key_pem is not None:
            return pem_to_der(self.private_key_pem)
        return None

    @classmethod
    def from_group(cls, group: Mapping[str, Any]) -> "KeyDescriptor":
        key = _first_present(group.get("key"), group.get("publicKey"))
        curve = None
        if isinstance(key, Mapping):
            curve = key.get("curve")
        der = _first_present(group.get("keyDer"), group.get("publicKeyDer"))
        pem = _first_present(group.get("keyPem"), group.get("publicKeyPem"))
        priv = group.get("privateKeyPkcs8")
        return cls(
            curve=curve,
            key_der=h2b(der) if der is not None else None,
            key_pem=pem,
            private_key_pkcs8=h2b(priv) if priv is not None else None,
            private_key_pem=group.get("privateKeyPem"),
        )


@dataclass(frozen=True)
class TestCase:
    __test__ = False

    tc_id: int
    msg: bytes
    sig: bytes
    result: Expected
    comment: str = ""
    flags: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "TestCase":
        tc_id = _require(raw, "tcId", "test")
        where = f"tcId {tc_id}"
        result = _require(raw, "result", where)
        try:
            expected = Expected(result)
        except ValueError:
            raise VectorFormatError(f"{where}: unknown result {result!r}") from None
        return cls(
            tc_id=int(tc_id),
            msg=h2b(_require(raw, "msg", where)),
            sig=h2b(_require(raw, "sig", where)),
            result=expected,
            comment=raw.get("comment", ""),
            flags=tuple(raw.get("flags", ())),
        )


@dataclass(frozen=True)
class TestGroup:
    __test__ = False

    key: KeyDescriptor
    sha: str
    tests: Tuple[TestCase, ...]
    type: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "TestGroup":
        return cls(
            key=KeyDescriptor.from_group(raw),
            sha=_require(raw, "sha", "testGroup"),
            tests=tuple(TestCase.from_dict(t) for t in _require(raw, "tests", "testGroup")),
            type=raw.get("type"),
        )


@dataclass(frozen=True)
class TestDocument:
    __test__ = False

    algorithm: str
    schema: str
    number_of_tests: int
    groups: Tuple[TestGroup, ...]
    generator_version: Optional[str] = None
    source: str = ""

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any], source: str = "") -> "TestDocument":
        where = source or "document"
        return cls(
            algorithm=_require(raw, "algorithm", where),
            schema=raw.get("schema", ""),
            number_of_tests=int(_require(raw, "numberOfTests", where)),
            groups=tuple(TestGroup.from_dict(g) for g in _require(raw, "testGroups", where)),
            generator_version=raw.get("generatorVersion"),
            source=source,
        )


def load_document(path: Path | str) -> TestDocument:
    p = Path(path)
    with open(p, "r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise VectorFormatError(f"{p.name}: invalid JSON: {exc}") from exc
    return TestDocument.from_dict(raw, source=p.name)


__all__ = [
    "Expected",
    "KeyDescriptor",
    "TestCase",
    "TestGroup",
    "TestDocument",
    "load_document",
    "h2b",
    "b2h",
    "pem_to_der",
]
