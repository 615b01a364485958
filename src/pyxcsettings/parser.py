"""Line scanner for ``xcodebuild -showBuildSettings`` output.

The output is a series of sections, each opened by a marker line::

    Build settings for action build and target "ReactiveCocoaLayout Mac":
    Build settings for action test and target CarthageKitTests:

followed by ``KEY = value`` lines. Only the first ``=`` of a line is
significant, so values may contain ``=`` themselves. Anything that is
neither a marker nor a setting line is ignored.
"""

from __future__ import annotations

from collections.abc import Iterator

from pyxcsettings.models.arguments import BuildAction, BuildArguments
from pyxcsettings.settings import BuildSettings

_MARKER_PREFIX = "build settings for action "
_MARKER_INFIX = " and target "
_MARKER_SUFFIX = ":"


def match_target_marker(line: str) -> str | None:
    """Return the target name if *line* opens a target section, else ``None``.

    The whole line must have the marker shape; matching is case-insensitive
    and the target name may be wrapped in double quotes.
    """
    if not line.lower().startswith(_MARKER_PREFIX):
        return None
    rest = line[len(_MARKER_PREFIX) :]

    action_end = 0
    while action_end < len(rest) and not rest[action_end].isspace():
        action_end += 1
    if action_end == 0:
        return None

    tail = rest[action_end:]
    if not tail.lower().startswith(_MARKER_INFIX) or not tail.endswith(_MARKER_SUFFIX):
        return None

    name = tail[len(_MARKER_INFIX) : -len(_MARKER_SUFFIX)]
    name = name.removeprefix('"').removesuffix('"')
    if not name or '"' in name or ":" in name:
        return None
    return name


def _split_setting(line: str) -> tuple[str, str] | None:
    """Split *line* at its first ``=`` that ends a non-empty piece.

    Empty pieces between separators are skipped, so ``=a=b`` gives
    ``("a", "b")`` and ``KEY=`` gives nothing. An empty key is rejected.
    """
    pieces: list[str] = []
    start = 0
    while not pieces:
        index = line.find("=", start)
        if index == -1:
            break
        if index > start:
            pieces.append(line[start:index])
        start = index + 1
    if start < len(line):
        pieces.append(line[start:])
    if len(pieces) != 2:
        return None

    key, value = (piece.strip() for piece in pieces)
    if not key:
        return None
    return key, value


def parse_build_settings(
    text: str,
    arguments: BuildArguments,
    action: BuildAction | None = None,
) -> Iterator[BuildSettings]:
    """Yield one :class:`BuildSettings` per target section in *text*.

    The scan is lazy and single-pass. Closing the generator stops it
    without emitting the section in progress.
    """
    current_target: str | None = None
    current_settings: dict[str, str] = {}

    for line in text.splitlines():
        target = match_target_marker(line)
        if target is not None:
            if current_target is not None:
                yield BuildSettings(
                    target=current_target,
                    settings=current_settings,
                    arguments=arguments,
                    action=action,
                )
            current_target = target
            current_settings = {}
            continue

        if current_target is None:
            continue
        setting = _split_setting(line)
        if setting is not None:
            key, value = setting
            current_settings[key] = value

    if current_target is not None:
        yield BuildSettings(
            target=current_target,
            settings=current_settings,
            arguments=arguments,
            action=action,
        )
