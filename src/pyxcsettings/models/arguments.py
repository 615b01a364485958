"""Arguments identifying what ``xcodebuild`` should operate on."""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, field_validator

from pyxcsettings.models.sdk import SDK


class BuildAction(enum.StrEnum):
    """Logical ``xcodebuild`` actions a caller can ask settings for."""

    BUILD = "build"
    TEST = "test"
    ARCHIVE = "archive"
    CLEAN = "clean"


class ProjectKind(enum.StrEnum):
    WORKSPACE = "workspace"
    PROJECT_FILE = "project_file"


class ProjectLocator(BaseModel):
    """Where a buildable project lives: an ``.xcworkspace`` or an ``.xcodeproj``."""

    model_config = ConfigDict(frozen=True)

    kind: ProjectKind
    path: str

    @classmethod
    def workspace(cls, path: str) -> ProjectLocator:
        return cls(kind=ProjectKind.WORKSPACE, path=str(path))

    @classmethod
    def project_file(cls, path: str) -> ProjectLocator:
        return cls(kind=ProjectKind.PROJECT_FILE, path=str(path))

    def to_arguments(self) -> list[str]:
        flag = "-workspace" if self.kind == ProjectKind.WORKSPACE else "-project"
        return [flag, self.path]

    def __str__(self) -> str:
        return self.path


class Scheme(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str

    @field_validator("name")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("scheme name must be non-empty")
        return value

    def __str__(self) -> str:
        return self.name


class BuildArguments(BaseModel):
    """Project, scheme and configuration to pass to ``xcodebuild``.

    Owned by the caller; the library only reads it.
    """

    model_config = ConfigDict(frozen=True)

    project: ProjectLocator
    scheme: Scheme | None = None
    configuration: str | None = None
    derived_data_path: str | None = None
    sdk: SDK | None = None
    toolchain: str | None = None
    destination: str | None = None
    only_active_architecture: bool | None = None

    def to_arguments(self) -> list[str]:
        """Render the ``xcodebuild`` flags for these arguments."""
        args = self.project.to_arguments()
        if self.scheme is not None:
            args += ["-scheme", self.scheme.name]
        if self.configuration is not None:
            args += ["-configuration", self.configuration]
        if self.derived_data_path is not None:
            args += ["-derivedDataPath", self.derived_data_path]
        if self.sdk is not None:
            args += ["-sdk", self.sdk.name.lower()]
        if self.toolchain is not None:
            args += ["-toolchain", self.toolchain]
        if self.destination is not None:
            args += ["-destination", self.destination]
        if self.only_active_architecture is not None:
            args.append(f"ONLY_ACTIVE_ARCH={'YES' if self.only_active_architecture else 'NO'}")
        return args
