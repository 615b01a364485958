"""Loader configuration for pyxcsettings."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyxcsettings._constants import (
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_XCRUN_PATH,
)
from pyxcsettings.exceptions import XcSettingsConfigError


def _env_float(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise XcSettingsConfigError(f"{name} must be a number, got {value!r}") from exc


def _env_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise XcSettingsConfigError(f"{name} must be an integer, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class LoaderConfig:
    """Settings loader configuration.

    Parameters
    ----------
    xcrun_path : str
        Path to ``xcrun``, used to dispatch ``xcodebuild`` so the active
        developer directory is honoured.
    timeout : float
        Seconds a single ``-showBuildSettings`` invocation may run before
        it is killed. Measured by the event loop, not by the child.
    retry_attempts : int
        Total number of attempts (first try included) made when an
        invocation times out. Other failures are never retried.
    """

    xcrun_path: str = DEFAULT_XCRUN_PATH
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    retry_attempts: int = DEFAULT_RETRY_ATTEMPTS

    def __post_init__(self) -> None:
        if not self.xcrun_path:
            raise XcSettingsConfigError("xcrun_path must be non-empty")
        if self.timeout <= 0:
            raise XcSettingsConfigError(f"timeout must be positive, got {self.timeout}")
        if self.retry_attempts < 1:
            raise XcSettingsConfigError(f"retry_attempts must be at least 1, got {self.retry_attempts}")

    @classmethod
    def from_env(cls, **overrides: Any) -> LoaderConfig:
        """Create configuration from environment variables.

        Reads ``PYXCSETTINGS_XCRUN``, ``PYXCSETTINGS_TIMEOUT`` and
        ``PYXCSETTINGS_RETRY_ATTEMPTS``. Explicit keyword arguments
        override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        xcrun_env = env.get("PYXCSETTINGS_XCRUN")
        if xcrun_env is not None:
            config_kwargs["xcrun_path"] = xcrun_env

        timeout_env = env.get("PYXCSETTINGS_TIMEOUT")
        if timeout_env is not None and "timeout" not in overrides:
            config_kwargs["timeout"] = _env_float("PYXCSETTINGS_TIMEOUT", timeout_env)

        attempts_env = env.get("PYXCSETTINGS_RETRY_ATTEMPTS")
        if attempts_env is not None and "retry_attempts" not in overrides:
            config_kwargs["retry_attempts"] = _env_int("PYXCSETTINGS_RETRY_ATTEMPTS", attempts_env)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
