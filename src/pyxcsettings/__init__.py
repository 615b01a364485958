"""pyxcsettings - Async loading and querying of xcodebuild build settings."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyxcsettings")
except PackageNotFoundError:
    __version__ = "0+local"
from pyxcsettings._process import ProcessInvoker, SubprocessInvoker
from pyxcsettings.config import LoaderConfig
from pyxcsettings.exceptions import (
    BuildSettingQueryError,
    BuildSettingsTimeoutError,
    MissingSettingError,
    ProcessError,
    ProcessExitError,
    ProcessSpawnError,
    SettingsDecodeError,
    UnrecognizedValueError,
    XcSettingsConfigError,
    XcSettingsError,
)
from pyxcsettings.loader import BuildSettingsLoader
from pyxcsettings.models import (
    KNOWN_SDKS,
    SDK,
    BuildAction,
    BuildArguments,
    FrameworkType,
    MachOType,
    ProductType,
    ProjectLocator,
    Scheme,
)
from pyxcsettings.parser import match_target_marker, parse_build_settings
from pyxcsettings.sdks import ResolvedSDKCache, SDKResolver, sdks_for_scheme
from pyxcsettings.settings import BuildSettings

__all__ = [
    "__version__",
    "KNOWN_SDKS",
    "SDK",
    "BuildAction",
    "BuildArguments",
    "BuildSettingQueryError",
    "BuildSettings",
    "BuildSettingsLoader",
    "BuildSettingsTimeoutError",
    "FrameworkType",
    "LoaderConfig",
    "MachOType",
    "MissingSettingError",
    "ProcessError",
    "ProcessExitError",
    "ProcessInvoker",
    "ProcessSpawnError",
    "ProductType",
    "ProjectLocator",
    "ResolvedSDKCache",
    "SDKResolver",
    "Scheme",
    "SettingsDecodeError",
    "SubprocessInvoker",
    "UnrecognizedValueError",
    "XcSettingsConfigError",
    "XcSettingsError",
    "match_target_marker",
    "parse_build_settings",
    "sdks_for_scheme",
]
