from __future__ import annotations

import pytest

from pyxcsettings.config import LoaderConfig
from pyxcsettings.exceptions import XcSettingsConfigError


def test_defaults() -> None:
    config = LoaderConfig()

    assert config.xcrun_path == "/usr/bin/xcrun"
    assert config.timeout == 600.0
    assert config.retry_attempts == 5


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PYXCSETTINGS_XCRUN", "/opt/xcrun")
    monkeypatch.setenv("PYXCSETTINGS_TIMEOUT", "30")
    monkeypatch.setenv("PYXCSETTINGS_RETRY_ATTEMPTS", "2")

    config = LoaderConfig.from_env()

    assert config == LoaderConfig(xcrun_path="/opt/xcrun", timeout=30.0, retry_attempts=2)


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PYXCSETTINGS_TIMEOUT", "30")

    assert LoaderConfig.from_env(timeout=5.0).timeout == 5.0


def test_from_env_rejects_garbage(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PYXCSETTINGS_RETRY_ATTEMPTS", "many")

    with pytest.raises(XcSettingsConfigError):
        LoaderConfig.from_env()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"timeout": 0},
        {"retry_attempts": 0},
        {"xcrun_path": ""},
    ],
)
def test_invalid_values_rejected(kwargs: dict[str, object]) -> None:
    with pytest.raises(XcSettingsConfigError):
        LoaderConfig(**kwargs)  # type: ignore[arg-type]
