"""Build product enumerations derived from PRODUCT_TYPE / MACH_O_TYPE."""

from __future__ import annotations

import enum

from pyxcsettings.exceptions import UnrecognizedValueError


class ProductType(enum.StrEnum):
    """``PRODUCT_TYPE`` values we know how to handle."""

    FRAMEWORK = "com.apple.product-type.framework"
    STATIC_FRAMEWORK = "com.apple.product-type.framework.static"
    STATIC_LIBRARY = "com.apple.product-type.library.static"
    TEST_BUNDLE = "com.apple.product-type.bundle.unit-test"

    @classmethod
    def from_setting(cls, key: str, raw: str) -> ProductType:
        try:
            return cls(raw)
        except ValueError as exc:
            raise UnrecognizedValueError(key, raw) from exc


class MachOType(enum.StrEnum):
    """``MACH_O_TYPE`` values we know how to handle."""

    EXECUTABLE = "mh_executable"
    DYLIB = "mh_dylib"
    BUNDLE = "mh_bundle"
    RELOCATABLE = "mh_object"
    STATICLIB = "staticlib"

    @classmethod
    def from_setting(cls, key: str, raw: str) -> MachOType:
        try:
            return cls(raw)
        except ValueError as exc:
            raise UnrecognizedValueError(key, raw) from exc


class FrameworkType(enum.StrEnum):
    """Linkage of a built framework."""

    DYNAMIC = "dynamic"
    STATIC = "static"

    @classmethod
    def classify(cls, product_type: ProductType, mach_o_type: MachOType) -> FrameworkType | None:
        """Return the framework linkage, or ``None`` if the product is not a framework."""
        if product_type == ProductType.FRAMEWORK and mach_o_type == MachOType.DYLIB:
            return cls.DYNAMIC
        if product_type in (ProductType.FRAMEWORK, ProductType.STATIC_FRAMEWORK) and mach_o_type == MachOType.STATICLIB:
            return cls.STATIC
        return None


#: Subdirectory static frameworks are copied into, so they never shadow dynamic ones.
STATIC_FOLDER_NAME = "Static"
