from __future__ import annotations

import logging

import pytest

from sigvec import config, registry
from sigvec.errors import ConfigError, UnsupportedAlgorithm


def test_defaults(tmp_path) -> None:
    settings = config.load_settings(env={}, cwd=tmp_path)
    assert settings.vector_dir == tmp_path / "testvectors"
    assert settings.provider == "pyca"
    assert settings.log_level == logging.WARNING
    assert settings.allow_skipping is None


def test_falls_back_to_v1_directory(tmp_path) -> None:
    (tmp_path / "testvectors_v1").mkdir()
    assert config.load_settings(env={}, cwd=tmp_path).vector_dir == tmp_path / "testvectors_v1"


def test_environment_overrides(tmp_path) -> None:
    env = {
        "SIGVEC_VECTOR_DIR": str(tmp_path / "vectors"),
        "SIGVEC_PROVIDER": "other",
        "SIGVEC_LOG_LEVEL": "debug",
        "SIGVEC_ALLOW_SKIPPING": "yes",
    }
    settings = config.load_settings(env=env)
    assert settings.vector_dir == tmp_path / "vectors"
    assert settings.provider == "other"
    assert settings.log_level == logging.DEBUG
    assert settings.allow_skipping is True


@pytest.mark.parametrize("name, value", [("SIGVEC_LOG_LEVEL", "loud"), ("SIGVEC_ALLOW_SKIPPING", "maybe")])
def test_bad_values_raise(name: str, value: str) -> None:
    with pytest.raises(ConfigError, match=name):
        config.load_settings(env={name: value})


def test_get_provider_loads_pyca_adapter() -> None:
    config.reset_provider_cache()
    provider = config.get_provider("pyca")
    assert provider.name == "pyca"
    assert config.get_provider("pyca") is provider
    assert "pyca" in registry.list()


def test_unknown_provider() -> None:
    with pytest.raises(UnsupportedAlgorithm):
        config.get_provider("no-such-provider")
