from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence

import pytest

from pyxcsettings.config import LoaderConfig
from pyxcsettings.exceptions import (
    BuildSettingsTimeoutError,
    ProcessExitError,
    ProcessSpawnError,
    SettingsDecodeError,
)
from pyxcsettings.loader import BuildSettingsLoader
from pyxcsettings.models.arguments import BuildAction, BuildArguments, ProjectLocator, Scheme

ARGS = BuildArguments(
    project=ProjectLocator.workspace("/src/App.xcworkspace"),
    scheme=Scheme(name="App"),
    configuration="Release",
)

OUTPUT = b"""\
Build settings for action archive and target "App":
    PRODUCT_NAME = App
    ACTION = archive
Build settings for action archive and target AppKit:
    PRODUCT_NAME = AppKit
"""


class _FakeInvoker:
    def __init__(self, output: bytes = OUTPUT) -> None:
        self.output = output
        self.calls: list[tuple[str, list[str], Mapping[str, str] | None]] = []

    async def run(
        self,
        executable: str,
        arguments: Sequence[str],
        environment: Mapping[str, str] | None = None,
    ) -> bytes:
        self.calls.append((executable, list(arguments), environment))
        return self.output


class _HangingInvoker:
    """Never finishes; records every attempt and every kill."""

    def __init__(self, *, succeed_on_attempt: int | None = None) -> None:
        self.succeed_on_attempt = succeed_on_attempt
        self.attempts = 0
        self.terminated = 0
        self.running = 0

    async def run(
        self,
        executable: str,
        arguments: Sequence[str],
        environment: Mapping[str, str] | None = None,
    ) -> bytes:
        self.attempts += 1
        assert self.running == 0, "attempts must not overlap"
        if self.attempts == self.succeed_on_attempt:
            return OUTPUT
        self.running += 1
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.terminated += 1
            raise
        finally:
            self.running -= 1
        raise AssertionError("unreachable")


class _FailingInvoker:
    def __init__(self, error: Exception) -> None:
        self.error = error
        self.attempts = 0

    async def run(
        self,
        executable: str,
        arguments: Sequence[str],
        environment: Mapping[str, str] | None = None,
    ) -> bytes:
        self.attempts += 1
        raise self.error


@pytest.mark.asyncio
async def test_load_invokes_archive_workaround_and_tags_records() -> None:
    invoker = _FakeInvoker()
    loader = BuildSettingsLoader(LoaderConfig(xcrun_path="/usr/bin/xcrun"), invoker=invoker)

    records = await loader.load_all(ARGS, BuildAction.TEST)

    assert [r.target for r in records] == ["App", "AppKit"]
    assert all(r.action == BuildAction.TEST for r in records)
    assert all(r.arguments == ARGS for r in records)

    (executable, arguments, environment) = invoker.calls[0]
    assert executable == "/usr/bin/xcrun"
    assert arguments == [
        "xcodebuild",
        "-workspace",
        "/src/App.xcworkspace",
        "-scheme",
        "App",
        "-configuration",
        "Release",
        "archive",
        "-showBuildSettings",
        "-skipUnavailableActions",
    ]
    assert environment is None


@pytest.mark.asyncio
async def test_load_passes_environment_through() -> None:
    invoker = _FakeInvoker()
    loader = BuildSettingsLoader(invoker=invoker)
    env = {"LC_ALL": "c"}

    await loader.load_all(ARGS, environment=env)

    assert invoker.calls[0][2] == env


@pytest.mark.asyncio
async def test_timeout_retries_then_raises_with_project() -> None:
    invoker = _HangingInvoker()
    loader = BuildSettingsLoader(LoaderConfig(timeout=0.01), invoker=invoker)

    with pytest.raises(BuildSettingsTimeoutError) as exc_info:
        await loader.load_all(ARGS)

    assert invoker.attempts == 5
    assert invoker.terminated == 5
    assert exc_info.value.project == "/src/App.xcworkspace"
    assert isinstance(exc_info.value, TimeoutError)


@pytest.mark.asyncio
async def test_timeout_retry_can_recover() -> None:
    invoker = _HangingInvoker(succeed_on_attempt=3)
    loader = BuildSettingsLoader(LoaderConfig(timeout=0.01), invoker=invoker)

    records = await loader.load_all(ARGS)

    assert invoker.attempts == 3
    assert invoker.terminated == 2
    assert len(records) == 2


@pytest.mark.asyncio
async def test_retry_bound_is_configurable() -> None:
    invoker = _HangingInvoker()
    loader = BuildSettingsLoader(LoaderConfig(timeout=0.01, retry_attempts=2), invoker=invoker)

    with pytest.raises(BuildSettingsTimeoutError):
        await loader.load_all(ARGS)

    assert invoker.attempts == 2


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        ProcessSpawnError("missing", executable="/usr/bin/xcrun"),
        ProcessExitError("failed", status=65, executable="/usr/bin/xcrun"),
    ],
)
async def test_process_failures_are_not_retried(error: Exception) -> None:
    invoker = _FailingInvoker(error)
    loader = BuildSettingsLoader(invoker=invoker)

    with pytest.raises(type(error)):
        await loader.load_all(ARGS)

    assert invoker.attempts == 1


@pytest.mark.asyncio
async def test_invalid_utf8_is_a_decode_error() -> None:
    invoker = _FakeInvoker(b"Build settings for action archive and target App:\n    NAME = \xff\xfe\n")
    loader = BuildSettingsLoader(invoker=invoker)

    with pytest.raises(SettingsDecodeError):
        await loader.load_all(ARGS)

    assert len(invoker.calls) == 1


@pytest.mark.asyncio
async def test_caller_cancellation_stops_retry_loop() -> None:
    invoker = _HangingInvoker()
    loader = BuildSettingsLoader(LoaderConfig(timeout=60.0), invoker=invoker)

    task = asyncio.create_task(loader.load_all(ARGS))
    await asyncio.sleep(0.01)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert invoker.attempts == 1
    assert invoker.terminated == 1


@pytest.mark.asyncio
async def test_consumer_can_stop_early() -> None:
    loader = BuildSettingsLoader(invoker=_FakeInvoker())

    seen = []
    async for record in loader.load(ARGS):
        seen.append(record.target)
        break

    assert seen == ["App"]
