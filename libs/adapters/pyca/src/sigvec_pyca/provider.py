from __future__ import annotations
import re
from typing import Any, Callable, Dict, Optional, Tuple

from cryptography.exceptions import InvalidSignature
from cryptography.exceptions import UnsupportedAlgorithm as _PycaUnsupported
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import dsa, ec, padding, rsa
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)

from sigvec import registry
from sigvec.errors import (
    InvalidKey,
    MalformedSignature,
    SigningError,
    SigvecError,
    UnsupportedAlgorithm,
    UnsupportedKey,
)

"""Signature and key-factory provider backed by pyca/cryptography.

Names follow the JCA conventions ("SHA256WITHECDSA", "SHA256WITHRSA",
"SHA3-256WITHECDSA"); both P1363 spellings ("...inP1363Format" and
"...WITHPLAIN-...") are understood.
"""

_HASHES: Dict[str, Callable[[], hashes.HashAlgorithm]] = {
    "SHA1": hashes.SHA1,
    "SHA224": hashes.SHA224,
    "SHA256": hashes.SHA256,
    "SHA384": hashes.SHA384,
    "SHA512": hashes.SHA512,
    "SHA512/224": hashes.SHA512_224,
    "SHA512/256": hashes.SHA512_256,
    "SHA3-224": hashes.SHA3_224,
    "SHA3-256": hashes.SHA3_256,
    "SHA3-384": hashes.SHA3_384,
    "SHA3-512": hashes.SHA3_512,
}

_NAME_RE = re.compile(
    r"^(?P<md>.+?)WITH(?P<plain>PLAIN-)?(?P<alg>ECDSA|DSA|RSA)(?P<p1363>INP1363FORMAT)?$",
    re.IGNORECASE,
)

# key factory name -> (public key type, private key type)
_KEY_TYPES: Dict[str, Tuple[type, type]] = {
    "EC": (ec.EllipticCurvePublicKey, ec.EllipticCurvePrivateKey),
    "RSA": (rsa.RSAPublicKey, rsa.RSAPrivateKey),
    "DSA": (dsa.DSAPublicKey, dsa.DSAPrivateKey),
}

_ALG_KEY_TYPE = {"ECDSA": "EC", "RSA": "RSA", "DSA": "DSA"}


def _component_len(key: Any) -> int:
    """Byte length of r and s in the P1363 encoding for `key`."""
    if isinstance(key, (ec.EllipticCurvePublicKey, ec.EllipticCurvePrivateKey)):
        return (key.curve.key_size + 7) // 8
    q = key.parameters().parameter_numbers().q
    return (q.bit_length() + 7) // 8


class PycaSignature:
    """JCA-like stateful signature object: init, update, then verify or sign."""

    def __init__(self, name: str, algorithm: str, hash_maker: Callable[[], hashes.HashAlgorithm], p1363: bool) -> None:
        self.name = name
        self.algorithm = algorithm
        self._hash_maker = hash_maker
        self._p1363 = p1363
        self._key: Any = None
        self._mode: Optional[str] = None
        self._buf = bytearray()

    def _init(self, key: Any, mode: str) -> None:
        public_type, private_type = _KEY_TYPES[_ALG_KEY_TYPE[self.algorithm]]
        expected = public_type if mode == "verify" else private_type
        if not isinstance(key, expected):
            raise InvalidKey(f"{self.name} cannot {mode} with {type(key).__name__}")
        self._key = key
        self._mode = mode
        self._buf = bytearray()

    def init_verify(self, key: Any) -> None:
        self._init(key, "verify")

    def init_sign(self, key: Any) -> None:
        self._init(key, "sign")

    def update(self, data: bytes) -> None:
        if self._mode is None:
            raise SigvecError(f"{self.name} used before initialisation")
        self._buf += data

    def _take_message(self, mode: str) -> bytes:
        if self._mode != mode:
            raise SigvecError(f"{self.name} not initialised for {mode}")
        msg = bytes(self._buf)
        self._buf = bytearray()
        return msg

    def _p1363_to_der(self, signature: bytes) -> bytes:
        n = _component_len(self._key)
        if len(signature) != 2 * n:
            raise MalformedSignature(f"P1363 signature must be {2 * n} bytes, got {len(signature)}")
        r = int.from_bytes(signature[:n], "big")
        s = int.from_bytes(signature[n:], "big")
        return encode_dss_signature(r, s)

    def verify(self, signature: bytes) -> bool:
        msg = self._take_message("verify")
        if self._p1363:
            signature = self._p1363_to_der(signature)
        try:
            if self.algorithm == "ECDSA":
                self._key.verify(signature, msg, ec.ECDSA(self._hash_maker()))
            elif self.algorithm == "DSA":
                self._key.verify(signature, msg, self._hash_maker())
            else:
                self._key.verify(signature, msg, padding.PKCS1v15(), self._hash_maker())
            return True
        except InvalidSignature:
            return False
        except ValueError as exc:
            raise MalformedSignature(str(exc)) from exc

    def sign(self) -> bytes:
        msg = self._take_message("sign")
        try:
            if self.algorithm == "ECDSA":
                sig = self._key.sign(msg, ec.ECDSA(self._hash_maker()))
            elif self.algorithm == "DSA":
                sig = self._key.sign(msg, self._hash_maker())
            else:
                sig = self._key.sign(msg, padding.PKCS1v15(), self._hash_maker())
        except (ValueError, TypeError, _PycaUnsupported) as exc:
            raise SigningError(f"{self.name}: {exc}") from exc
        if self._p1363:
            n = _component_len(self._key)
            r, s = decode_dss_signature(sig)
            return r.to_bytes(n, "big") + s.to_bytes(n, "big")
        return sig


class PycaKeyFactory:
    def __init__(self, name: str) -> None:
        self.name = name
        self._public_type, self._private_type = _KEY_TYPES[name]

    def public_key_from(self, encoded: bytes) -> Any:
        try:
            key = serialization.load_der_public_key(encoded)
        except (ValueError, _PycaUnsupported) as exc:
            raise UnsupportedKey(f"{self.name}: {exc}") from exc
        if not isinstance(key, self._public_type):
            raise UnsupportedKey(f"expected {self.name} public key, got {type(key).__name__}")
        return key

    def private_key_from(self, encoded: bytes) -> Any:
        try:
            key = serialization.load_der_private_key(encoded, password=None)
        except (ValueError, TypeError, _PycaUnsupported) as exc:
            raise UnsupportedKey(f"{self.name}: {exc}") from exc
        if not isinstance(key, self._private_type):
            raise UnsupportedKey(f"expected {self.name} private key, got {type(key).__name__}")
        return key


def _hash_maker(md: str) -> Callable[[], hashes.HashAlgorithm]:
    maker = _HASHES.get(md.upper())
    if maker is None:
        raise UnsupportedAlgorithm(f"Unknown digest {md!r}")
    try:
        hashes.Hash(maker())
    except _PycaUnsupported as exc:
        raise UnsupportedAlgorithm(f"Digest {md} not available: {exc}") from exc
    return maker


@registry.register("pyca")
class PycaProvider:
    """Provider adapter using cryptography."""
    name = "pyca"

    def signature(self, name: str) -> PycaSignature:
        m = _NAME_RE.match(name.strip())
        if m is None:
            raise UnsupportedAlgorithm(f"Unknown signature algorithm {name!r}")
        algorithm = m.group("alg").upper()
        plain = m.group("plain") is not None
        p1363 = m.group("p1363") is not None
        if plain and p1363:
            raise UnsupportedAlgorithm(f"Unknown signature algorithm {name!r}")
        if (plain or p1363) and algorithm == "RSA":
            raise UnsupportedAlgorithm(f"{name}: RSA has no P1363 encoding")
        return PycaSignature(name, algorithm, _hash_maker(m.group("md")), plain or p1363)

    def key_factory(self, name: str) -> PycaKeyFactory:
        if name not in _KEY_TYPES:
            raise UnsupportedAlgorithm(f"No key factory for {name!r}")
        return PycaKeyFactory(name)
