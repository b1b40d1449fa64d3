"""Per-document bookkeeping and the pass/fail policy.

The executors feed every decision through `classify` and an `OutcomeTally`;
`Verdict` is the immutable summary handed back to callers.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

from .errors import VerdictFailure
from .vectors import Expected


class CaseOutcome(str, enum.Enum):
    PASS = "pass"
    ACCEPTABLE = "acceptable"
    VALID_REJECTED = "valid-rejected"
    INVALID_ACCEPTED = "invalid-accepted"
    SIGNATURE_MISMATCH = "signature-mismatch"
    SIGNING_FAILED = "signing-failed"
    HARNESS_DEFECT = "harness-defect"

    @property
    def is_error(self) -> bool:
        return self not in (CaseOutcome.PASS, CaseOutcome.ACCEPTABLE)


def classify(expected: Expected, verified: bool) -> CaseOutcome:
    """Single source of truth for verification grading."""
    if expected is Expected.ACCEPTABLE:
        return CaseOutcome.ACCEPTABLE
    if verified and expected is Expected.INVALID:
        return CaseOutcome.INVALID_ACCEPTED
    if not verified and expected is Expected.VALID:
        return CaseOutcome.VALID_REJECTED
    return CaseOutcome.PASS


@dataclass
class OutcomeTally:
    executed: int = 0
    errors: int = 0
    skipped_keys: int = 0
    skipped_group_reasons: Set[str] = field(default_factory=set)
    outcomes: Dict[CaseOutcome, int] = field(default_factory=dict)

    def record_case(self, outcome: CaseOutcome) -> None:
        self.outcomes[outcome] = self.outcomes.get(outcome, 0) + 1
        if outcome.is_error:
            self.errors += 1

    def record_skip(self, reason: Optional[str] = None) -> None:
        self.skipped_keys += 1
        if reason:
            self.skipped_group_reasons.add(reason)

    def merge(self, other: "OutcomeTally") -> "OutcomeTally":
        merged = OutcomeTally(
            executed=self.executed + other.executed,
            errors=self.errors + other.errors,
            skipped_keys=self.skipped_keys + other.skipped_keys,
            skipped_group_reasons=self.skipped_group_reasons | other.skipped_group_reasons,
            outcomes=dict(self.outcomes),
        )
        for k, v in other.outcomes.items():
            merged.outcomes[k] = merged.outcomes.get(k, 0) + v
        return merged

    def skip_report(self, source: str = "", generator_version: Optional[str] = None) -> List[str]:
        if self.skipped_keys == 0 and not self.skipped_group_reasons:
            return []
        head = f"File:{source} number of skipped keys:{self.skipped_keys}"
        if generator_version:
            head += f" generatorVersion:{generator_version}"
        lines = [head]
        lines += [f"Skipped groups where {r}" for r in sorted(self.skipped_group_reasons)]
        return lines

    def as_dict(self) -> Dict[str, Any]:
        return {
            "executed": self.executed,
            "errors": self.errors,
            "skipped_keys": self.skipped_keys,
            "skipped_group_reasons": sorted(self.skipped_group_reasons),
            "outcomes": {k.value: v for k, v in sorted(self.outcomes.items(), key=lambda kv: kv[0].value)},
        }


@dataclass(frozen=True)
class Verdict:
    source: str
    mode: str  # 'verify' | 'sign'
    passed: bool
    tally: OutcomeTally
    failures: Tuple[str, ...] = ()
    schema_warning: Optional[str] = None
    missing: bool = False
    generator_version: Optional[str] = None

    def raise_for_failure(self) -> None:
        if not self.passed:
            raise VerdictFailure(f"{self.source} ({self.mode}): " + "; ".join(self.failures))

    def as_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "mode": self.mode,
            "passed": self.passed,
            "missing": self.missing,
            "failures": list(self.failures),
            "schema_warning": self.schema_warning,
            "generator_version": self.generator_version,
            **self.tally.as_dict(),
        }


def render_verdict(
    tally: OutcomeTally,
    *,
    source: str,
    mode: str,
    allow_skipping_keys: bool,
    expected_count: Optional[int] = None,
    schema_warning: Optional[str] = None,
    generator_version: Optional[str] = None,
) -> Verdict:
    """Apply the document-level policy.

    `expected_count` is only enforced when no key was skipped; skips instead
    require the caller's permission.
    """
    failures: List[str] = []
    if tally.errors > 0:
        failures.append(f"{tally.errors} error(s)")
    if tally.skipped_keys == 0:
        if expected_count is not None and tally.executed != expected_count:
            failures.append(f"executed {tally.executed} of {expected_count} declared tests")
    elif not allow_skipping_keys:
        failures.append(f"{tally.skipped_keys} key(s) skipped but skipping is not allowed")
    return Verdict(
        source=source,
        mode=mode,
        passed=not failures,
        tally=tally,
        failures=tuple(failures),
        schema_warning=schema_warning,
        generator_version=generator_version,
    )


def missing_verdict(source: str, mode: str, strict: bool = False) -> Verdict:
    """Verdict for a vector file that is not present in the vector directory.

    The file only counts as a failure when `strict` is set.
    """
    return Verdict(
        source=source,
        mode=mode,
        passed=not strict,
        tally=OutcomeTally(),
        failures=("vector file not found",) if strict else (),
        missing=True,
    )


def error_verdict(source: str, mode: str, message: str) -> Verdict:
    """Failed verdict for a document that could not be run at all."""
    return Verdict(source=source, mode=mode, passed=False, tally=OutcomeTally(), failures=(message,))


def merge_tallies(verdicts: List[Verdict]) -> OutcomeTally:
    total = OutcomeTally()
    for v in verdicts:
        total = total.merge(v.tally)
    return total


__all__ = [
    "CaseOutcome",
    "classify",
    "OutcomeTally",
    "Verdict",
    "render_verdict",
    "missing_verdict",
    "error_verdict",
    "merge_tallies",
]
