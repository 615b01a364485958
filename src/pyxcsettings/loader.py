"""Resilient ``xcodebuild -showBuildSettings`` loading."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator, Mapping

from pyxcsettings._constants import SHOW_BUILD_SETTINGS_ARGS
from pyxcsettings._process import ProcessInvoker, SubprocessInvoker
from pyxcsettings.config import LoaderConfig
from pyxcsettings.exceptions import BuildSettingsTimeoutError, SettingsDecodeError
from pyxcsettings.models.arguments import BuildAction, BuildArguments
from pyxcsettings.parser import parse_build_settings
from pyxcsettings.settings import BuildSettings

_logger = logging.getLogger(__name__)


def _decode(output: bytes, project: str) -> str:
    try:
        return output.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise SettingsDecodeError(f"Build settings for {project} are not valid UTF-8: {exc}") from exc


class BuildSettingsLoader:
    """Load build settings for a project, working around ``xcodebuild`` hangs.

    ``xcodebuild -showBuildSettings`` is always invoked with the ``archive``
    action, whatever logical action the caller asks for; the logical action
    is only attached to the resulting records. Each invocation is killed
    after ``config.timeout`` seconds and retried, from scratch, up to
    ``config.retry_attempts`` times in total. Only timeouts are retried.
    """

    def __init__(
        self,
        config: LoaderConfig | None = None,
        *,
        invoker: ProcessInvoker | None = None,
    ) -> None:
        self._config = config if config is not None else LoaderConfig()
        self._invoker = invoker if invoker is not None else SubprocessInvoker()

    @property
    def config(self) -> LoaderConfig:
        return self._config

    @property
    def invoker(self) -> ProcessInvoker:
        return self._invoker

    def command(self, arguments: BuildArguments) -> list[str]:
        """Arguments passed to ``xcrun`` for a settings query."""
        return ["xcodebuild", *arguments.to_arguments(), *SHOW_BUILD_SETTINGS_ARGS]

    async def _fetch_output(
        self,
        arguments: BuildArguments,
        environment: Mapping[str, str] | None,
    ) -> str:
        project = str(arguments.project)
        command = self.command(arguments)
        attempts = self._config.retry_attempts
        last_error: BuildSettingsTimeoutError | None = None

        for attempt in range(1, attempts + 1):
            try:
                output = await asyncio.wait_for(
                    self._invoker.run(self._config.xcrun_path, command, environment),
                    timeout=self._config.timeout,
                )
            except TimeoutError:
                last_error = BuildSettingsTimeoutError(
                    f"xcodebuild -showBuildSettings timed out after {self._config.timeout}s for {project}",
                    project=project,
                )
                _logger.warning(
                    "Build settings for %s timed out (attempt %d/%d)",
                    project,
                    attempt,
                    attempts,
                )
                continue
            return _decode(output, project)

        assert last_error is not None  # noqa: S101
        raise last_error

    async def load(
        self,
        arguments: BuildArguments,
        action: BuildAction | None = None,
        environment: Mapping[str, str] | None = None,
    ) -> AsyncIterator[BuildSettings]:
        """Yield the build settings of every target the arguments select.

        Parameters
        ----------
        arguments : BuildArguments
            Project, scheme and configuration to query.
        action : BuildAction or None
            Logical action recorded on each record. Not passed to
            ``xcodebuild``.
        environment : Mapping or None
            Full replacement for the child's environment.
        """
        text = await self._fetch_output(arguments, environment)
        with contextlib.closing(parse_build_settings(text, arguments, action)) as records:
            for record in records:
                yield record

    async def load_all(
        self,
        arguments: BuildArguments,
        action: BuildAction | None = None,
        environment: Mapping[str, str] | None = None,
    ) -> list[BuildSettings]:
        return [record async for record in self.load(arguments, action, environment)]
