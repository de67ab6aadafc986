from __future__ import annotations

from pathlib import Path

import pytest

from imagegen_proxy.common.config import DEFAULT_MODEL_ID, FalSettings, load_settings
from imagegen_proxy.common.errors import ConfigurationError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("FAL_API_KEY", "FAL_API_URL", "FAL_MODEL_ID", "FAL_TIMEOUT_SECONDS"):
        monkeypatch.delenv(name, raising=False)


def _write(tmp_path: Path, text: str) -> str:
    path = tmp_path / "fal.yaml"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_defaults_without_file_or_env() -> None:
    settings = load_settings()
    assert settings.api_url is None
    assert settings.api_key is None
    assert settings.model_id == DEFAULT_MODEL_ID
    assert settings.timeout_seconds == 60.0


def test_yaml_file_is_read(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "fal:\n  api_url: https://fal.run\n  api_key: k-123456\n  model_id: fal-ai/flux/dev\n  timeout_seconds: 15\n",
    )
    settings = load_settings(path)
    assert settings == FalSettings(
        api_key="k-123456", api_url="https://fal.run", model_id="fal-ai/flux/dev", timeout_seconds=15.0
    )


def test_env_overrides_yaml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = _write(tmp_path, "fal:\n  api_url: https://fal.run\n  model_id: fal-ai/flux/dev\n")
    monkeypatch.setenv("FAL_API_URL", "https://queue.fal.run")
    monkeypatch.setenv("FAL_TIMEOUT_SECONDS", "5")
    settings = load_settings(path)
    assert settings.api_url == "https://queue.fal.run"
    assert settings.model_id == "fal-ai/flux/dev"
    assert settings.timeout_seconds == 5.0


def test_missing_explicit_file_is_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        load_settings(str(tmp_path / "missing.yaml"))


def test_bad_timeout_is_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FAL_TIMEOUT_SECONDS", "soon")
    with pytest.raises(ConfigurationError):
        load_settings()


def test_non_mapping_section_is_error(tmp_path: Path) -> None:
    path = _write(tmp_path, "fal:\n  - api_url\n")
    with pytest.raises(ConfigurationError):
        load_settings(path)


def test_masked_api_key() -> None:
    assert FalSettings(api_key="supersecret9876", api_url=None).masked_api_key() == "***9876"
    assert FalSettings(api_key=None, api_url=None).masked_api_key() == "NULL"


@pytest.mark.parametrize("value", ["0", "-1"])
def test_non_positive_timeout_is_error(value: str, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FAL_TIMEOUT_SECONDS", value)
    with pytest.raises(ConfigurationError):
        load_settings()


def test_unquoted_yaml_scalars_become_strings(tmp_path: Path) -> None:
    path = _write(tmp_path, "fal:\n  api_url: https://fal.run\n  api_key: 12345678\n")
    settings = load_settings(path)
    assert settings.api_key == "12345678"
    assert settings.masked_api_key() == "***5678"


def test_non_scalar_api_url_is_error(tmp_path: Path) -> None:
    path = _write(tmp_path, "fal:\n  api_url:\n    - https://fal.run\n")
    with pytest.raises(ConfigurationError):
        load_settings(path)
