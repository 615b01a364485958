"""Internal constants shared across the library."""

DEFAULT_XCRUN_PATH = "/usr/bin/xcrun"
DEFAULT_TIMEOUT_SECONDS = 600.0
DEFAULT_RETRY_ATTEMPTS = 5

# ------------------------------------------------------------------
# -showBuildSettings hang workaround
# ------------------------------------------------------------------

# xcodebuild can hang forever in -showBuildSettings on projects that carry
# Core Data models or share no schemes. Asking for the "archive" action
# avoids it, and also reports the archive layout we need for archive builds.
SHOW_BUILD_SETTINGS_ARGS: tuple[str, ...] = (
    "archive",
    "-showBuildSettings",
    "-skipUnavailableActions",
)

# ------------------------------------------------------------------
# Reference project probe
# ------------------------------------------------------------------

# Deterministic locale, and no user-level xcconfig injected into the probe.
PROBE_ENVIRONMENT_OVERRIDES: dict[str, str] = {
    "XCODE_XCCONFIG_FILE": "/dev/null",
    "LC_ALL": "c",
}

FALLBACK_XCODEBUILD_PATH = "/Applications/Xcode.app/Contents/Developer/usr/bin/xcodebuild"

# Relative to the directory holding the xcodebuild binary. Shipped with every
# Xcode from 7.3.1 onwards, and reports the Xcode-default AVAILABLE_PLATFORMS.
REFERENCE_PROJECT_RELATIVE_PATH = (
    "../../usr/share/xcs/xcsd/node_modules/nodobjc/node_modules/ffi/deps/libffi/libffi.xcodeproj"
)

REFERENCE_PROJECT_CONFIGURATION = "Release"
