from __future__ import annotations

from conftest import BAD_KEY, UNSIGNABLE, DummyProvider, case, document, group
from sigvec.outcome import CaseOutcome
from sigvec.resolver import Format
from sigvec.sign import run_signing

SCHEMA = "rsassa_pkcs1_generate_schema.json"


def _doc(groups, **kw):
    return document(groups, algorithm="RSA", schema=SCHEMA, **kw)


def test_matching_signatures_pass(provider: DummyProvider) -> None:
    doc = _doc([group([case(1, b"a", b"ok:a"), case(2, b"b", b"ok:b")], curve=None, private=b"sk")])
    verdict = run_signing(doc, "RSA", Format.RAW, False, provider=provider)
    assert verdict.passed
    assert verdict.tally.executed == 2
    assert verdict.schema_warning is None
    assert provider.factory_requests == ["RSA"]
    assert provider.requested == ["SHA256WITHRSA"]


def test_one_byte_difference_is_exactly_one_error(provider: DummyProvider) -> None:
    doc = _doc([group([
        case(1, b"a", b"ok:a"),
        case(2, b"b", b"ok:c"),
        case(3, b"c", b"ok:c"),
    ], curve=None, private=b"sk")])
    verdict = run_signing(doc, "RSA", Format.RAW, False, provider=provider)
    assert not verdict.passed
    assert verdict.tally.errors == 1
    assert verdict.tally.outcomes[CaseOutcome.SIGNATURE_MISMATCH] == 1


def test_failure_to_sign_only_matters_for_valid_cases(provider: DummyProvider) -> None:
    doc = _doc([group([
        case(1, UNSIGNABLE, b"", "invalid"),
        case(2, UNSIGNABLE, b"", "acceptable"),
    ], curve=None, private=b"sk")])
    verdict = run_signing(doc, "RSA", Format.RAW, False, provider=provider)
    assert verdict.passed

    doc = _doc([group([case(1, UNSIGNABLE, b"", "valid")], curve=None, private=b"sk")])
    verdict = run_signing(doc, "RSA", Format.RAW, False, provider=provider)
    assert verdict.tally.errors == 1
    assert verdict.tally.outcomes[CaseOutcome.SIGNING_FAILED] == 1


def test_unusable_private_key_skips_group(provider: DummyProvider) -> None:
    doc = _doc([
        group([case(1, b"a", b"ok:a")], curve=None, private=b"sk"),
        group([case(2, b"b", b"ok:b")], curve=None, private=BAD_KEY),
        group([case(3, b"c", b"ok:c")], curve=None),
    ])
    strict = run_signing(doc, "RSA", Format.RAW, False, provider=provider)
    assert not strict.passed
    assert strict.tally.skipped_keys == 2
    assert strict.tally.executed == 1
    lenient = run_signing(doc, "RSA", Format.RAW, True, provider=provider)
    assert lenient.passed


def test_unresolvable_algorithm_skips_group() -> None:
    provider = DummyProvider(known=set())
    doc = _doc([group([case(1, b"a", b"ok:a")], curve=None, private=b"sk")])
    verdict = run_signing(doc, "RSA", Format.RAW, True, provider=provider)
    assert verdict.passed
    assert verdict.tally.skipped_keys == 1
    assert verdict.tally.executed == 0


def test_signing_does_not_check_declared_count(provider: DummyProvider) -> None:
    doc = _doc([group([case(1, b"a", b"ok:a")], curve=None, private=b"sk")], number_of_tests=5)
    assert run_signing(doc, "RSA", Format.RAW, False, provider=provider).passed
