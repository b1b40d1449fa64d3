from __future__ import annotations

import logging

import pytest

from conftest import DummyProvider, document, group
from sigvec.resolver import (
    Format,
    candidate_names,
    check_schema,
    expected_schema,
    normalize_digest,
    resolve,
)


@pytest.mark.parametrize(
    "md, expected",
    [
        ("SHA-1", "SHA1"),
        ("SHA-224", "SHA224"),
        ("SHA-256", "SHA256"),
        ("SHA-384", "SHA384"),
        ("SHA-512", "SHA512"),
        ("SHA-512/256", "SHA512/256"),
        ("SHA3-256", "SHA3-256"),
        ("SHA256", "SHA256"),
    ],
)
def test_normalize_digest(md: str, expected: str) -> None:
    assert normalize_digest(md) == expected


def test_asn_composes_jca_name() -> None:
    provider = DummyProvider()
    primitive, reason = resolve(provider, "SHA-256", "ECDSA", Format.ASN)
    assert reason is None
    assert primitive.name == "SHA256WITHECDSA"


def test_raw_and_asn_share_a_name() -> None:
    assert candidate_names("SHA-256", "RSA", Format.RAW) == ("SHA256WITHRSA",)
    assert candidate_names("SHA-256", "RSA", "ASN1") == ("SHA256WITHRSA",)
    assert candidate_names("SHA3-512", "ECDSA", "RAW") == ("SHA3-512WITHECDSA",)


def test_p1363_tries_both_spellings_in_order() -> None:
    provider = DummyProvider(known={"SHA256WITHPLAIN-ECDSA"})
    primitive, reason = resolve(provider, "SHA-256", "ECDSA", Format.P1363)
    assert reason is None
    assert primitive.name == "SHA256WITHPLAIN-ECDSA"
    assert provider.requested == ["SHA256WITHECDSAinP1363Format", "SHA256WITHPLAIN-ECDSA"]


def test_p1363_first_match_wins() -> None:
    provider = DummyProvider()
    primitive, _ = resolve(provider, "SHA-384", "DSA", Format.P1363)
    assert primitive.name == "SHA384WITHDSAinP1363Format"
    assert provider.requested == ["SHA384WITHDSAinP1363Format"]


def test_p1363_unknown_to_provider_is_reported() -> None:
    provider = DummyProvider(known=set())
    primitive, reason = resolve(provider, "SHA-256", "ECDSA", "P1363")
    assert primitive is None
    assert "not supported" in reason
    assert len(provider.requested) == 2
    assert len(set(provider.requested)) == 2


def test_p1363_is_undefined_for_rsa() -> None:
    provider = DummyProvider()
    assert candidate_names("SHA-256", "RSA", Format.P1363) == ()
    primitive, reason = resolve(provider, "SHA-256", "RSA", Format.P1363)
    assert primitive is None
    assert reason
    assert provider.requested == []


@pytest.mark.parametrize(
    "md, algorithm, fmt",
    [
        (md, alg, fmt)
        for md in ("SHA-1", "SHA-224", "SHA-256", "SHA-384", "SHA-512", "SHA3-256")
        for alg, fmt in (
            ("ECDSA", Format.ASN),
            ("ECDSA", Format.P1363),
            ("DSA", Format.ASN),
            ("DSA", Format.P1363),
            ("RSA", Format.RAW),
        )
    ],
)
def test_supported_combinations_resolve(md: str, algorithm: str, fmt: Format) -> None:
    primitive, reason = resolve(DummyProvider(), md, algorithm, fmt)
    assert reason is None
    assert primitive is not None


def test_format_parse() -> None:
    assert Format.parse("asn1") is Format.ASN
    assert Format.parse(Format.RAW) is Format.RAW
    with pytest.raises(ValueError):
        Format.parse("PEM")


def test_expected_schema_table() -> None:
    assert expected_schema("ECDSA", Format.ASN, True) == "ecdsa_verify_schema.json"
    assert expected_schema("ECDSA", Format.P1363, True) == "ecdsa_p1363_verify_schema.json"
    assert expected_schema("DSA", Format.P1363, True) == "dsa_p1363_verify_schema.json"
    assert expected_schema("RSA", Format.RAW, True) == "rsassa_pkcs1_verify_schema.json"
    assert expected_schema("RSA", Format.RAW, False) == "rsassa_pkcs1_generate_schema.json"
    assert expected_schema("RSA", Format.ASN, True) == ""
    assert expected_schema("ECDSA", Format.ASN, False) == ""


def test_schema_mismatch_is_only_a_warning(caplog) -> None:
    doc = document([group([])], schema="ecdsa_p1363_verify_schema.json")
    with caplog.at_level(logging.WARNING, logger="sigvec.resolver"):
        warning = check_schema(doc, "ECDSA", Format.ASN, verify=True)
    assert warning is not None
    assert "ecdsa_verify_schema.json" in warning
    assert any("expecting test vectors" in r.message for r in caplog.records)
    assert check_schema(doc, "ECDSA", Format.P1363, verify=True) is None
    assert check_schema(doc, "RSA", Format.ASN, verify=True) is None
