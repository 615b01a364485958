"""SDK (platform) descriptors."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator


class SDK(BaseModel):
    """A platform the toolchain can build against.

    Two descriptors are the same SDK when their names match, ignoring
    case; ``simulator_heuristic`` is informational only.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    simulator_heuristic: str = ""

    @field_validator("name")
    @classmethod
    def _normalize_name(cls, value: str) -> str:
        name = value.strip()
        if not name:
            raise ValueError("SDK name must be non-empty")
        return name

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SDK):
            return NotImplemented
        return self.name.lower() == other.name.lower()

    def __hash__(self) -> int:
        return hash(self.name.lower())

    def __str__(self) -> str:
        return self.name

    @property
    def is_simulator(self) -> bool:
        return self.name.lower().endswith("simulator")

    @classmethod
    def from_raw_name(cls, name: str) -> SDK:
        """Return the known descriptor for *name*, or a bare one if unknown."""
        known = _KNOWN_BY_NAME.get(name.strip().lower())
        if known is not None:
            return known
        return cls(name=name)


#: Last-known-good SDK set, in the capitalization Xcode used in 2019.
KNOWN_SDKS: frozenset[SDK] = frozenset(
    {
        SDK(name="MacOSX"),
        SDK(name="iPhoneOS"),
        SDK(name="iPhoneSimulator", simulator_heuristic="Simulator - iOS"),
        SDK(name="WatchOS"),
        SDK(name="WatchSimulator", simulator_heuristic="Simulator - watchOS"),
        SDK(name="AppleTVOS"),
        SDK(name="AppleTVSimulator", simulator_heuristic="Simulator - tvOS"),
    }
)

_KNOWN_BY_NAME: dict[str, SDK] = {sdk.name.lower(): sdk for sdk in KNOWN_SDKS}
