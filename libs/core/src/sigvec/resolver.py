"""Composing provider algorithm names from (digest, algorithm, format).

Digest identifiers and signature identifiers do not follow the same naming
convention: a digest is called "SHA-256" but the ECDSA signature over it is
"SHA256WITHECDSA". SHA-3 names keep their hyphen ("SHA3-256WITHECDSA").
Providers also disagree on how the IEEE P1363 variant is spelled, so that
format resolves through an ordered list of candidates.
"""
from __future__ import annotations

import enum
import logging
from typing import Any, Dict, Optional, Tuple

from .errors import UnsupportedAlgorithm

log = logging.getLogger(__name__)

SEPARATOR = "WITH"


class Format(str, enum.Enum):
    """Signature encoding. RAW means the scheme defines its own encoding (RSA)."""
    RAW = "RAW"
    ASN = "ASN"
    P1363 = "P1363"

    @classmethod
    def parse(cls, value: "Format | str") -> "Format":
        if isinstance(value, Format):
            return value
        key = value.strip().upper()
        if key == "ASN1":
            key = "ASN"
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown signature format: {value!r}") from None


# P1363 spellings, tried in order: JDK 11+ first, then BouncyCastle.
_P1363_TEMPLATES: Tuple[str, ...] = (
    "{md}" + SEPARATOR + "{alg}inP1363Format",
    "{md}" + SEPARATOR + "PLAIN-{alg}",
)

_P1363_ALGORITHMS = frozenset({"ECDSA", "DSA"})

_VERIFY_SCHEMAS: Dict[Tuple[str, Format], str] = {
    ("ECDSA", Format.ASN): "ecdsa_verify_schema.json",
    ("ECDSA", Format.P1363): "ecdsa_p1363_verify_schema.json",
    ("DSA", Format.ASN): "dsa_verify_schema.json",
    ("DSA", Format.P1363): "dsa_p1363_verify_schema.json",
    ("RSA", Format.RAW): "rsassa_pkcs1_verify_schema.json",
}

_SIGN_SCHEMAS: Dict[str, str] = {
    "RSA": "rsassa_pkcs1_generate_schema.json",
}


def normalize_digest(md: str) -> str:
    """Return the digest name as it appears inside a signature algorithm name.

    "SHA-256" -> "SHA256", "SHA-512/224" -> "SHA512/224"; "SHA3-256" and other
    names without the "SHA-" prefix are returned unchanged.
    """
    name = md.strip()
    if name.upper().startswith("SHA-"):
        return "SHA" + name[4:]
    return name


def candidate_names(md: str, algorithm: str, fmt: Format | str) -> Tuple[str, ...]:
    """Ordered algorithm names to try; empty when the combination is undefined."""
    fmt = Format.parse(fmt)
    digest = normalize_digest(md)
    if fmt in (Format.RAW, Format.ASN):
        return (f"{digest}{SEPARATOR}{algorithm}",)
    if fmt is Format.P1363 and algorithm in _P1363_ALGORITHMS:
        return tuple(t.format(md=digest, alg=algorithm) for t in _P1363_TEMPLATES)
    return ()


def resolve(
    provider: Any,
    md: str,
    algorithm: str,
    fmt: Format | str,
) -> Tuple[Optional[Any], Optional[str]]:
    """Return ``(primitive, None)`` or ``(None, reason)``.

    An unsupported combination is an expected outcome (it is how groups with
    unusual digests or formats get skipped), so it is reported, not raised.
    """
    fmt = Format.parse(fmt)
    names = candidate_names(md, algorithm, fmt)
    if not names:
        return None, f"Algorithm {algorithm} with format {fmt.value} is not supported"
    for name in names:
        try:
            return provider.signature(name), None
        except UnsupportedAlgorithm as exc:
            log.debug("provider %s rejected %s: %s", getattr(provider, "name", "?"), name, exc)
            continue
    return None, f"Algorithm {algorithm} with format {fmt.value} is not supported (tried {', '.join(names)})"


def expected_schema(algorithm: str, fmt: Format | str, verify: bool) -> str:
    """Schema a well-formed vector file for this setup declares, or "" if unknown."""
    fmt = Format.parse(fmt)
    if verify:
        return _VERIFY_SCHEMAS.get((algorithm, fmt), "")
    return _SIGN_SCHEMAS.get(algorithm, "")


def check_schema(document: Any, algorithm: str, fmt: Format | str, verify: bool) -> Optional[str]:
    """Log and return a warning when the declared schema is not the expected one."""
    schema = expected_schema(algorithm, fmt, verify)
    if schema and schema != document.schema:
        warning = (
            f"{algorithm}: expecting test vectors with schema {schema} "
            f"found vectors with schema {document.schema}"
        )
        log.warning("%s (%s)", warning, document.source or "<memory>")
        return warning
    return None


__all__ = [
    "Format",
    "SEPARATOR",
    "normalize_digest",
    "candidate_names",
    "resolve",
    "expected_schema",
    "check_schema",
]
