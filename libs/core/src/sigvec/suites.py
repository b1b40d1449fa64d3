"""Catalogue of the signature vector files and how each one is run.

Curves that are not universally supported (secp256k1, brainpool) and all
P1363 files allow skipping keys; the mainstream NIST curves and RSA files do
not.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .errors import SigvecError
from .outcome import Verdict, error_verdict, missing_verdict
from .resolver import Format
from .sign import run_signing
from .vectors import load_document
from .verify import run_verification

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Suite:
    name: str
    filename: str
    algorithm: str
    format: Format
    mode: str = "verify"  # 'verify' | 'sign'
    allow_skipping_keys: bool = False


def _ecdsa(name: str, stem: str, allow: bool) -> List[Suite]:
    return [
        Suite(name, f"ecdsa_{stem}_test.json", "ECDSA", Format.ASN, allow_skipping_keys=allow),
        Suite(f"{name}-p1363", f"ecdsa_{stem}_p1363_test.json", "ECDSA", Format.P1363,
              allow_skipping_keys=True),
    ]


_ENTRIES: List[Suite] = [
    Suite("ecdsa", "ecdsa_test.json", "ECDSA", Format.ASN, allow_skipping_keys=True),
]
for _stem in (
    "secp224r1_sha224", "secp224r1_sha256", "secp224r1_sha512",
    "secp256r1_sha256", "secp256r1_sha512",
    "secp384r1_sha384", "secp384r1_sha512",
    "secp521r1_sha512",
):
    _ENTRIES += _ecdsa(_stem.replace("_", "-"), _stem, allow=False)
for _stem in (
    "secp256k1_sha256", "secp256k1_sha512",
    "brainpoolP224r1_sha224", "brainpoolP256r1_sha256", "brainpoolP320r1_sha384",
    "brainpoolP384r1_sha384", "brainpoolP512r1_sha512",
):
    _ENTRIES += _ecdsa(_stem.replace("_", "-").lower(), _stem, allow=True)

_ENTRIES += [
    Suite("rsa-sign", "rsa_sig_gen_misc_test.json", "RSA", Format.RAW, mode="sign"),
    Suite("rsa", "rsa_signature_test.json", "RSA", Format.RAW),
]
for _bits, _sha in (
    (2048, 224), (2048, 256), (2048, 512),
    (3072, 256), (3072, 384), (3072, 512),
    (4096, 384), (4096, 512),
):
    _ENTRIES.append(
        Suite(f"rsa-{_bits}-sha{_sha}", f"rsa_signature_{_bits}_sha{_sha}_test.json", "RSA", Format.RAW)
    )
_ENTRIES.append(Suite("dsa", "dsa_test.json", "DSA", Format.ASN))

SUITES: Dict[str, Suite] = {s.name: s for s in _ENTRIES}


def select(names: Optional[Sequence[str]] = None) -> List[Suite]:
    if not names:
        return list(SUITES.values())
    unknown = [n for n in names if n not in SUITES]
    if unknown:
        raise KeyError(f"Unknown suite(s): {', '.join(unknown)}")
    return [SUITES[n] for n in names]


def run_suite(
    suite: Suite,
    vector_dir: Path,
    provider: Any,
    allow_skipping: Optional[bool] = None,
) -> Verdict:
    """Load one vector file and run it.

    A missing file yields a 'missing' verdict, which only fails when skipping
    was explicitly refused (`allow_skipping=False`). A file that cannot be read
    or run yields a failed verdict instead of an exception.
    """
    path = Path(vector_dir) / suite.filename
    if not path.exists():
        log.warning("vector file not found: %s", path)
        return missing_verdict(suite.filename, suite.mode, strict=allow_skipping is False)
    allow = suite.allow_skipping_keys if allow_skipping is None else allow_skipping
    runner = run_signing if suite.mode == "sign" else run_verification
    try:
        document = load_document(path)
        return runner(document, suite.algorithm, suite.format, allow, provider=provider)
    except (SigvecError, OSError, ValueError) as exc:
        log.error("%s: %s", suite.filename, exc)
        return error_verdict(suite.filename, suite.mode, f"{type(exc).__name__}: {exc}")


def run_suites(
    suites: Iterable[Suite],
    vector_dir: Path,
    provider: Any,
    jobs: int = 1,
    allow_skipping: Optional[bool] = None,
) -> List[Verdict]:
    """Run documents independently; each worker gets its own tally."""
    items = list(suites)
    if jobs <= 1:
        return [run_suite(s, vector_dir, provider, allow_skipping) for s in items]
    with ThreadPoolExecutor(max_workers=jobs) as ex:
        futs = [ex.submit(run_suite, s, vector_dir, provider, allow_skipping) for s in items]
        return [f.result() for f in futs]


__all__ = ["Suite", "SUITES", "select", "run_suite", "run_suites"]
