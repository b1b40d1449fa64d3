"""Signature verification against a test-vector document."""
from __future__ import annotations

import logging
from typing import Any, Optional

from . import keys
from .errors import MalformedSignature
from .outcome import CaseOutcome, OutcomeTally, Verdict, classify, render_verdict
from .resolver import Format, check_schema, resolve
from .vectors import TestCase, TestDocument, b2h

log = logging.getLogger(__name__)


def _verify_case(primitive: Any, key: Any, case: TestCase) -> tuple[bool, Optional[Exception], bool]:
    """Return ``(verified, failure, defect)`` for one case."""
    try:
        primitive.init_verify(key)
        primitive.update(case.msg)
        return bool(primitive.verify(case.sig)), None, False
    except MalformedSignature as exc:
        return False, exc, False
    except Exception as exc:
        # Nothing a third party puts into a signature should trigger this.
        return False, exc, True


def run_verification(
    document: TestDocument,
    algorithm: str,
    fmt: Format | str,
    allow_skipping_keys: bool,
    provider: Any = None,
) -> Verdict:
    """Verify every case of `document` and grade the result.

    Key and primitive are resolved once per group. Groups whose key or
    algorithm the provider cannot handle are skipped; their cases do not count
    towards `executed`.
    """
    if provider is None:
        from .config import default_provider
        provider = default_provider()
    fmt = Format.parse(fmt)
    source = document.source or "<memory>"
    schema_warning = check_schema(document, algorithm, fmt, verify=True)
    tally = OutcomeTally()

    for group in document.groups:
        key, reason = keys.public_key(provider, group.key, algorithm)
        if key is None:
            tally.record_skip(f"curve = {group.key.curve}" if group.key.curve else None)
            log.debug("%s: skipping group (%s)", source, reason)
            continue
        verifier, reason = resolve(provider, group.sha, algorithm, fmt)
        if verifier is None:
            tally.record_skip()
            log.debug("%s: skipping group (%s)", source, reason)
            continue

        for case in group.tests:
            tally.executed += 1
            verified, failure, defect = _verify_case(verifier, key, case)
            sig_hex = b2h(case.sig)
            if defect:
                log.error(
                    "%s signature throws %r %s tcId:%d sig:%s",
                    algorithm, failure, source, case.tc_id, sig_hex,
                )
                tally.record_case(CaseOutcome.HARNESS_DEFECT)
            outcome = classify(case.result, verified)
            if outcome is CaseOutcome.VALID_REJECTED:
                reason_txt = f" reason:{failure!r}" if failure is not None else ""
                log.error(
                    "Valid %s signature not verified. %s tcId:%d sig:%s flags:%s%s",
                    algorithm, source, case.tc_id, sig_hex, ",".join(case.flags), reason_txt,
                )
            elif outcome is CaseOutcome.INVALID_ACCEPTED:
                log.error(
                    "Invalid %s signature verified. %s tcId:%d sig:%s flags:%s comment:%s",
                    algorithm, source, case.tc_id, sig_hex, ",".join(case.flags), case.comment,
                )
            elif outcome is CaseOutcome.ACCEPTABLE:
                log.debug("%s tcId:%d acceptable, verified=%s", source, case.tc_id, verified)
            if not (defect and outcome is CaseOutcome.PASS):
                tally.record_case(outcome)

    for line in tally.skip_report(source, document.generator_version):
        log.warning(line)

    return render_verdict(
        tally,
        source=source,
        mode="verify",
        allow_skipping_keys=allow_skipping_keys,
        expected_count=document.number_of_tests,
        schema_warning=schema_warning,
        generator_version=document.generator_version,
    )


__all__ = ["run_verification"]
