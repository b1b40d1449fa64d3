"""Signature generation for deterministic schemes (RSA PKCS#1 v1.5).

The produced signature must match the expected one byte for byte. A
standard-conforming signer is required: e.g. omitting the NULL parameter in
the DigestInfo is tolerated by some verifiers but is a mismatch here.
"""
from __future__ import annotations

import logging
from typing import Any

from . import keys
from .errors import InvalidKey, SigningError
from .outcome import CaseOutcome, OutcomeTally, Verdict, render_verdict
from .resolver import Format, check_schema, resolve
from .vectors import Expected, TestDocument, b2h

log = logging.getLogger(__name__)


def run_signing(
    document: TestDocument,
    algorithm: str,
    fmt: Format | str,
    allow_skipping_keys: bool,
    provider: Any = None,
) -> Verdict:
    if provider is None:
        from .config import default_provider
        provider = default_provider()
    fmt = Format.parse(fmt)
    source = document.source or "<memory>"
    schema_warning = check_schema(document, algorithm, fmt, verify=False)
    tally = OutcomeTally()

    for group in document.groups:
        key, reason = keys.private_key(provider, group.key, algorithm)
        if key is None:
            tally.record_skip(f"curve = {group.key.curve}" if group.key.curve else None)
            log.debug("%s: skipping group (%s)", source, reason)
            continue
        signer, reason = resolve(provider, group.sha, algorithm, fmt)
        if signer is None:
            tally.record_skip()
            log.debug("%s: skipping group (%s)", source, reason)
            continue

        for case in group.tests:
            tally.executed += 1
            expected_hex = b2h(case.sig)
            try:
                signer.init_sign(key)
                signer.update(case.msg)
                produced = signer.sign()
            except (InvalidKey, SigningError) as exc:
                if case.result is Expected.VALID:
                    log.error("Failed to sign %s tcId:%d with exception:%r", source, case.tc_id, exc)
                    tally.record_case(CaseOutcome.SIGNING_FAILED)
                else:
                    tally.record_case(CaseOutcome.PASS)
                continue
            if produced != case.sig:
                log.error(
                    "Incorrect signature generated %s tcId:%d expected:%s sig:%s",
                    source, case.tc_id, expected_hex, b2h(produced),
                )
                tally.record_case(CaseOutcome.SIGNATURE_MISMATCH)
            else:
                tally.record_case(CaseOutcome.PASS)

    if tally.skipped_keys > 0:
        log.warning(
            "File:%s number of signatures verified:%d number of skipped keys:%d",
            source, tally.executed - tally.errors, tally.skipped_keys,
        )
        for r in sorted(tally.skipped_group_reasons):
            log.warning("Skipped groups where %s", r)

    return render_verdict(
        tally,
        source=source,
        mode="sign",
        allow_skipping_keys=allow_skipping_keys,
        schema_warning=schema_warning,
        generator_version=document.generator_version,
    )


__all__ = ["run_signing"]
