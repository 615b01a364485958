"""Per-target build settings and the typed queries derived from them.

A :class:`BuildSettings` record is what ``xcodebuild -showBuildSettings``
reports for one target: a flat ``KEY -> value`` table plus the arguments
and logical action it was requested with.

Keyed lookups and derived facts raise typed errors instead of returning
sentinels:

* :class:`~pyxcsettings.exceptions.MissingSettingError` when a required key
  is absent.
* :class:`~pyxcsettings.exceptions.UnrecognizedValueError` when an
  enumerated setting carries a value we do not know.

A derived fact raises the first failure of the lookups it is built from;
it never returns a partial result.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from pathlib import Path, PurePosixPath
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pyxcsettings.exceptions import BuildSettingQueryError, MissingSettingError
from pyxcsettings.models.arguments import BuildAction, BuildArguments
from pyxcsettings.models.product import STATIC_FOLDER_NAME, FrameworkType, MachOType, ProductType

# "ios8.0" -> "ios". Matches the unversioned OS of `swift -print-target-info`.
_TRAILING_VERSION = re.compile(r"(?:[0-9]\.?)*$")


def _split_words(value: str) -> list[str]:
    return [word for word in value.split(" ") if word]


class BuildSettings(BaseModel):
    """Build settings reported for a single target."""

    model_config = ConfigDict(frozen=True)

    target: str
    settings: Mapping[str, str] = Field(default_factory=dict)
    arguments: BuildArguments
    action: BuildAction | None = None

    @field_validator("target")
    @classmethod
    def _non_empty_target(cls, value: str) -> str:
        if not value:
            raise ValueError("target must be non-empty")
        return value

    @field_validator("settings")
    @classmethod
    def _freeze_settings(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    def __hash__(self) -> int:
        return hash((self.target, frozenset(self.settings.items()), self.arguments, self.action))

    def __str__(self) -> str:
        return f'Build settings for target "{self.target}": {dict(self.settings)}'

    # ------------------------------------------------------------------
    # Keyed lookup
    # ------------------------------------------------------------------

    def value(self, key: str) -> str:
        """Return the value of *key*, raising :class:`MissingSettingError` if absent."""
        try:
            return self.settings[key]
        except KeyError:
            raise MissingSettingError(key) from None

    def __getitem__(self, key: str) -> str:
        return self.value(key)

    def get(self, key: str, default: str | None = None) -> str | None:
        return self.settings.get(key, default)

    # ------------------------------------------------------------------
    # Platforms and architectures
    # ------------------------------------------------------------------

    @property
    def build_sdk_raw_names(self) -> frozenset[str]:
        """SDK names this target builds for by default.

        Falls back from ``SUPPORTED_PLATFORMS`` to ``PLATFORM_NAME`` and
        finally to an empty set; never raises.
        """
        supported = self.get("SUPPORTED_PLATFORMS")
        if supported is not None:
            return frozenset(_split_words(supported))
        platform_name = self.get("PLATFORM_NAME")
        if platform_name is not None:
            return frozenset({platform_name})
        return frozenset()

    @property
    def archs(self) -> frozenset[str]:
        return frozenset(_split_words(self["ARCHS"]))

    @property
    def platform_triple_os(self) -> str:
        """The OS component of the target triple, without its version.

        ``LLVM_TARGET_TRIPLE_OS_VERSION`` is missing when
        ``USE_LLVM_TARGET_TRIPLES = NO``; ``SWIFT_PLATFORM_TARGET_PREFIX``
        then carries the unversioned OS, even in non-Swift projects.
        """
        try:
            os_version = self["LLVM_TARGET_TRIPLE_OS_VERSION"]
        except MissingSettingError:
            return self["SWIFT_PLATFORM_TARGET_PREFIX"]
        return _TRAILING_VERSION.sub("", os_version, count=1)

    @property
    def platform_triple_variant(self) -> str:
        """The environment component of the target triple (``simulator`` or empty)."""
        return self["LLVM_TARGET_TRIPLE_SUFFIX"].removeprefix("-")

    # ------------------------------------------------------------------
    # Product classification
    # ------------------------------------------------------------------

    @property
    def product_type(self) -> ProductType:
        return ProductType.from_setting("PRODUCT_TYPE", self["PRODUCT_TYPE"])

    @property
    def mach_o_type(self) -> MachOType:
        return MachOType.from_setting("MACH_O_TYPE", self["MACH_O_TYPE"])

    @property
    def framework_type(self) -> FrameworkType | None:
        """Framework linkage, or ``None`` when the product is not a framework."""
        return FrameworkType.classify(self.product_type, self.mach_o_type)

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    @property
    def built_products_directory(self) -> Path:
        return Path(self["BUILT_PRODUCTS_DIR"])

    @property
    def framework_search_paths(self) -> list[Path]:
        return [Path(path) for path in _split_words(self["FRAMEWORK_SEARCH_PATHS"])]

    @property
    def products_directory(self) -> Path:
        """Directory holding the built products for this record's action.

        Archive builds put their products under ``OBJROOT``; everything
        else uses ``BUILT_PRODUCTS_DIR``.
        """
        if self.action == BuildAction.ARCHIVE:
            objroot = self["OBJROOT"]
            return Path(objroot) / self.archive_intermediates_build_products_path
        return self.built_products_directory

    @property
    def archive_intermediates_build_products_path(self) -> str:
        """Path of the archive products, relative to ``OBJROOT``."""
        identifier = self.get("TARGET_NAME")
        if identifier is None and self.arguments.scheme is not None:
            identifier = self.arguments.scheme.name
        if identifier is None:
            raise MissingSettingError("TARGET_NAME")

        build_dir = self.get("BUILD_DIR")
        built_products_dir = self.get("BUILT_PRODUCTS_DIR")
        if build_dir is not None and built_products_dir and built_products_dir.startswith(build_dir):
            # CocoaPods-generated projects nest products below BUILD_DIR,
            # e.g. "/Release-iphoneos/Reusable-iOS".
            component = built_products_dir[len(build_dir) :]
        else:
            # EFFECTIVE_PLATFORM_NAME is "-iphoneos" or similar, or absent on macOS.
            component = self["CONFIGURATION"] + (self.get("EFFECTIVE_PLATFORM_NAME") or "")

        path = PurePosixPath("ArchiveIntermediates", identifier, "BuildProductsPath", component.lstrip("/"))
        return str(path)

    @property
    def executable_path(self) -> str:
        """Path of the built executable, relative to the products directory."""
        return self["EXECUTABLE_PATH"]

    @property
    def executable_url(self) -> Path:
        return self.products_directory / self.executable_path

    @property
    def wrapper_name(self) -> str:
        return self["WRAPPER_NAME"]

    @property
    def wrapper_url(self) -> Path:
        return self.products_directory / self.wrapper_name

    @property
    def product_name(self) -> str:
        return self["PRODUCT_NAME"]

    @property
    def relative_modules_path(self) -> str | None:
        """Where the product's Swift module lives, relative to the products directory.

        ``None`` when the product builds no module.
        """
        module_name = self.get("PRODUCT_MODULE_NAME")
        if module_name is None:
            return None
        contents = self["CONTENTS_FOLDER_PATH"]
        return str(PurePosixPath(contents, "Modules", f"{module_name}.swiftmodule"))

    @property
    def project_path(self) -> str:
        return self["PROJECT_FILE_PATH"]

    @property
    def target_build_directory(self) -> str:
        return self["TARGET_BUILD_DIR"]

    def product_destination_path(self, destination: Path) -> Path:
        """Directory the product should be copied into below *destination*.

        Static frameworks go into a ``Static`` subdirectory.
        """
        try:
            framework_type = self.framework_type
        except BuildSettingQueryError:
            framework_type = None
        if framework_type == FrameworkType.STATIC:
            return destination / STATIC_FOLDER_NAME
        return destination

    # ------------------------------------------------------------------
    # Flags
    # ------------------------------------------------------------------

    @property
    def bitcode_enabled(self) -> bool:
        return self["ENABLE_BITCODE"] == "YES"

    @property
    def code_signing_identity(self) -> str:
        return self["CODE_SIGN_IDENTITY"]

    @property
    def ad_hoc_code_signing_allowed(self) -> bool:
        return self["AD_HOC_CODE_SIGNING_ALLOWED"] == "YES"
