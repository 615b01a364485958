"""Resolve the set of SDKs the installed toolchain supports.

Three sources are consulted in strict priority order and the first
non-empty answer wins:

1. ``xcodebuild -showsdks -json`` (or any injected enumeration).
2. ``AVAILABLE_PLATFORMS`` from a reference project bundled with Xcode.
3. :data:`~pyxcsettings.models.sdk.KNOWN_SDKS`.

A source that fails for any reason counts as having no answer, so
resolution always ends with a set. The result is stored in a
:class:`ResolvedSDKCache` owned by the caller and reused from then on.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import os
from collections.abc import Awaitable, Callable, Mapping

from pyxcsettings._constants import (
    FALLBACK_XCODEBUILD_PATH,
    PROBE_ENVIRONMENT_OVERRIDES,
    REFERENCE_PROJECT_CONFIGURATION,
    REFERENCE_PROJECT_RELATIVE_PATH,
)
from pyxcsettings.loader import BuildSettingsLoader
from pyxcsettings.models.arguments import BuildArguments, ProjectLocator
from pyxcsettings.models.sdk import KNOWN_SDKS, SDK

_logger = logging.getLogger(__name__)

SDKSource = Callable[[], Awaitable[frozenset[SDK] | None]]


def probe_environment() -> dict[str, str]:
    """Ambient environment with a fixed locale and no injected xcconfig."""
    return {**os.environ, **PROBE_ENVIRONMENT_OVERRIDES}


def reference_project_path(xcodebuild_path: str) -> str:
    """Location of the bundled reference project for a given ``xcodebuild``."""
    base = os.path.dirname(xcodebuild_path)
    return os.path.normpath(os.path.join(base, REFERENCE_PROJECT_RELATIVE_PATH))


def sdks_from_show_sdks_json(text: str) -> frozenset[SDK]:
    """Parse ``xcodebuild -showsdks -json`` output into SDK descriptors.

    Entries without a ``platform`` are skipped. Known platforms keep their
    canonical capitalization.
    """
    entries = json.loads(text)
    if not isinstance(entries, list):
        return frozenset()

    sdks: set[SDK] = set()
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        platform = entry.get("platform")
        if not isinstance(platform, str) or not platform.strip():
            continue
        sdk = SDK.from_raw_name(platform)
        if not sdk.simulator_heuristic and sdk.is_simulator:
            display_name = entry.get("displayName")
            if isinstance(display_name, str):
                sdk = SDK(name=sdk.name, simulator_heuristic=display_name)
        sdks.add(sdk)
    return frozenset(sdks)


class ResolvedSDKCache:
    """Write-once holder for the resolved SDK set.

    Concurrent first callers serialize on a lock; only the first
    non-empty result is stored and it never changes afterwards.
    """

    def __init__(self) -> None:
        self._value: frozenset[SDK] | None = None
        self._lock = asyncio.Lock()

    @property
    def value(self) -> frozenset[SDK] | None:
        return self._value

    @property
    def is_populated(self) -> bool:
        return self._value is not None

    async def get_or_resolve(self, factory: Callable[[], Awaitable[frozenset[SDK]]]) -> frozenset[SDK]:
        if self._value is not None:
            return self._value
        async with self._lock:
            if self._value is not None:
                return self._value
            value = await factory()
            if value:
                self._value = value
            return value

    def reset(self) -> None:
        """Forget the stored value. Tests only."""
        self._value = None


class SDKResolver:
    """Resolve supported SDKs once, through the prioritized source chain.

    Parameters
    ----------
    loader : BuildSettingsLoader or None
        Loader used for the reference project probe. Its invoker and
        configuration are reused for the ``xcrun`` calls.
    enumerate_sdks : callable or None
        Highest-priority source. Defaults to ``xcodebuild -showsdks -json``.
    cache : ResolvedSDKCache or None
        Cache shared with other resolvers. A private one is created if
        omitted.
    concurrent : bool
        Start all sources at once. Results are still chosen by priority.
    """

    def __init__(
        self,
        loader: BuildSettingsLoader | None = None,
        *,
        enumerate_sdks: SDKSource | None = None,
        cache: ResolvedSDKCache | None = None,
        concurrent: bool = False,
    ) -> None:
        self._loader = loader if loader is not None else BuildSettingsLoader()
        self._enumerate_sdks = enumerate_sdks if enumerate_sdks is not None else self.sdks_from_show_sdks
        self._cache = cache if cache is not None else ResolvedSDKCache()
        self._concurrent = concurrent

    @property
    def cache(self) -> ResolvedSDKCache:
        return self._cache

    async def resolve(self) -> frozenset[SDK]:
        """Return the supported SDK set, resolving it on first use."""
        return await self._cache.get_or_resolve(self._resolve_uncached)

    # ------------------------------------------------------------------
    # Source chain
    # ------------------------------------------------------------------

    def _sources(self) -> list[tuple[str, SDKSource]]:
        return [
            ("showsdks", self._enumerate_sdks),
            ("reference project", self.sdks_from_reference_project),
        ]

    async def _run_source(self, name: str, source: SDKSource) -> frozenset[SDK] | None:
        try:
            result = await source()
        except Exception:
            _logger.debug("SDK source %s failed", name, exc_info=True)
            return None
        if not result:
            _logger.debug("SDK source %s returned nothing", name)
            return None
        return frozenset(result)

    async def _resolve_uncached(self) -> frozenset[SDK]:
        sources = self._sources()
        if self._concurrent:
            tasks = [asyncio.create_task(self._run_source(name, source)) for name, source in sources]
            try:
                for task in tasks:
                    result = await task
                    if result:
                        return result
            finally:
                for task in tasks:
                    task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
        else:
            for name, source in sources:
                result = await self._run_source(name, source)
                if result:
                    return result

        _logger.warning("Could not determine supported SDKs; using the built-in list")
        return KNOWN_SDKS

    # ------------------------------------------------------------------
    # Sources
    # ------------------------------------------------------------------

    async def _xcrun(self, arguments: list[str], environment: Mapping[str, str]) -> bytes:
        config = self._loader.config
        return await asyncio.wait_for(
            self._loader.invoker.run(config.xcrun_path, arguments, environment),
            timeout=config.timeout,
        )

    async def sdks_from_show_sdks(self) -> frozenset[SDK] | None:
        output = await self._xcrun(["xcodebuild", "-showsdks", "-json"], probe_environment())
        return sdks_from_show_sdks_json(output.decode("utf-8"))

    async def locate_xcodebuild(self, environment: Mapping[str, str]) -> str:
        """Path of the active ``xcodebuild``, or the default Xcode location."""
        try:
            output = await self._xcrun(["--find", "xcodebuild"], environment)
            path = output.decode("utf-8").strip()
        except Exception:
            _logger.debug("xcrun --find xcodebuild failed", exc_info=True)
            path = ""
        return path or FALLBACK_XCODEBUILD_PATH

    async def sdks_from_reference_project(self) -> frozenset[SDK] | None:
        environment = probe_environment()
        xcodebuild = await self.locate_xcodebuild(environment)
        arguments = BuildArguments(
            project=ProjectLocator.project_file(reference_project_path(xcodebuild)),
            configuration=REFERENCE_PROJECT_CONFIGURATION,
        )
        async with contextlib.aclosing(self._loader.load(arguments, environment=environment)) as records:
            async for settings in records:
                available = settings.get("AVAILABLE_PLATFORMS")
                if available is None:
                    continue
                return frozenset(SDK.from_raw_name(name) for name in available.split(" ") if name)
        return None


async def sdks_for_scheme(
    loader: BuildSettingsLoader,
    resolver: SDKResolver,
    arguments: BuildArguments,
) -> frozenset[SDK]:
    """SDKs the scheme builds for by default, limited to supported ones.

    Uses the first target the scheme reports.
    """
    async with contextlib.aclosing(loader.load(arguments)) as records:
        async for settings in records:
            supported = await resolver.resolve()
            wanted = {name.lower() for name in settings.build_sdk_raw_names}
            return frozenset(sdk for sdk in supported if sdk.name.lower() in wanted)
    return frozenset()
