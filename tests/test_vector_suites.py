from __future__ import annotations

"""Runs the catalogued vector files against the configured provider.

Point SIGVEC_VECTOR_DIR at a Wycheproof checkout's testvectors directory;
files that are not present are skipped.
"""

import pytest

from sigvec.config import get_provider, load_settings
from sigvec.suites import SUITES, run_suite

_SETTINGS = load_settings()


@pytest.mark.parametrize("name", sorted(SUITES))
def test_vector_file(name: str) -> None:
    suite = SUITES[name]
    if not (_SETTINGS.vector_dir / suite.filename).exists():
        pytest.skip(f"{suite.filename} not in {_SETTINGS.vector_dir}")
    verdict = run_suite(suite, _SETTINGS.vector_dir, get_provider(_SETTINGS.provider), _SETTINGS.allow_skipping)
    verdict.raise_for_failure()
