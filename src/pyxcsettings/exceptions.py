"""Custom exception hierarchy for pyxcsettings."""

from __future__ import annotations


class XcSettingsError(Exception):
    """Base exception for all pyxcsettings errors."""


class XcSettingsConfigError(XcSettingsError):
    """Invalid or missing configuration."""


class ProcessError(XcSettingsError):
    """An external process could not produce its output."""

    def __init__(self, message: str, *, executable: str = "") -> None:
        self.executable = executable
        super().__init__(message)


class ProcessSpawnError(ProcessError):
    """The executable could not be launched (not found, not executable)."""


class ProcessExitError(ProcessError):
    """The process ran but exited with a non-zero status."""

    def __init__(
        self,
        message: str,
        *,
        status: int,
        executable: str = "",
    ) -> None:
        self.status = status
        super().__init__(message, executable=executable)


class BuildSettingsTimeoutError(XcSettingsError, TimeoutError):
    """``xcodebuild -showBuildSettings`` did not finish in time.

    Carries the identity of the project whose settings were requested so
    the caller can tell which invocation hung.
    """

    def __init__(self, message: str, *, project: str = "") -> None:
        self.project = project
        super().__init__(message)


class SettingsDecodeError(XcSettingsError):
    """The tool's output is not valid UTF-8 text.

    Never retried: a different response shape will not fix itself.
    """


class BuildSettingQueryError(XcSettingsError):
    """A typed query against a settings record could not be answered."""

    def __init__(self, message: str, *, key: str) -> None:
        self.key = key
        super().__init__(message)


class MissingSettingError(BuildSettingQueryError):
    """A required build setting is absent from the record."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Missing build setting: {key}", key=key)


class UnrecognizedValueError(BuildSettingQueryError, ValueError):
    """A build setting is present but its value is not one we understand."""

    def __init__(self, key: str, raw_value: str) -> None:
        self.raw_value = raw_value
        super().__init__(f"Unrecognized value for {key}: {raw_value!r}", key=key)
