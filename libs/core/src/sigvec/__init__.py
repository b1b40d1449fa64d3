
from .errors import (
    SigvecError,
    UnsupportedAlgorithm,
    UnsupportedKey,
    MalformedSignature,
    InvalidKey,
    SigningError,
    VectorFormatError,
    VerdictFailure,
)
from .interfaces import Primitive, KeyFactory, Provider
from .registry import registry
from .vectors import Expected, KeyDescriptor, TestCase, TestGroup, TestDocument, load_document
from .resolver import Format, candidate_names, expected_schema, normalize_digest, resolve
from .outcome import CaseOutcome, OutcomeTally, Verdict, classify
from .verify import run_verification
from .sign import run_signing

__all__ = [
    "SigvecError",
    "UnsupportedAlgorithm",
    "UnsupportedKey",
    "MalformedSignature",
    "InvalidKey",
    "SigningError",
    "VectorFormatError",
    "VerdictFailure",
    "Primitive",
    "KeyFactory",
    "Provider",
    "registry",
    "Expected",
    "KeyDescriptor",
    "TestCase",
    "TestGroup",
    "TestDocument",
    "load_document",
    "Format",
    "candidate_names",
    "expected_schema",
    "normalize_digest",
    "resolve",
    "CaseOutcome",
    "OutcomeTally",
    "Verdict",
    "classify",
    "run_verification",
    "run_signing",
]
