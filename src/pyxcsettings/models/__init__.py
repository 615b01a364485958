"""Data models for xcodebuild arguments, SDKs and build products."""

from pyxcsettings.models.arguments import BuildAction, BuildArguments, ProjectKind, ProjectLocator, Scheme
from pyxcsettings.models.product import STATIC_FOLDER_NAME, FrameworkType, MachOType, ProductType
from pyxcsettings.models.sdk import KNOWN_SDKS, SDK

__all__ = [
    "KNOWN_SDKS",
    "SDK",
    "STATIC_FOLDER_NAME",
    "BuildAction",
    "BuildArguments",
    "FrameworkType",
    "MachOType",
    "ProductType",
    "ProjectKind",
    "ProjectLocator",
    "Scheme",
]
