#!/usr/bin/env python3
"""Dump the build settings and derived facts pyxcsettings sees for a project.

This script runs ``xcodebuild -showBuildSettings`` the way the library
does (archive workaround, timeout, retries), then prints each target's
derived facts **and** optionally its raw settings, so you can see which
queries fail for a given project.

Usage
-----
::

    python scripts/dump_build_settings.py --workspace App.xcworkspace --scheme App

Options::

    --project PATH       Use an .xcodeproj instead of a workspace
    --configuration C    Build configuration (e.g. Release)
    --action ACTION      Logical action recorded on records (archive changes paths)
    --raw                Also print every raw setting
    --sdks               Also resolve the supported SDK set
    --json               Output as machine-readable JSON
    --output FILE        Write JSON output to FILE instead of stdout
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyxcsettings import (  # noqa: E402
    BuildAction,
    BuildArguments,
    BuildSettings,
    BuildSettingsLoader,
    LoaderConfig,
    ProjectLocator,
    ResolvedSDKCache,
    Scheme,
    SDKResolver,
    XcSettingsError,
)

# ── helpers ──────────────────────────────────────────────────

_FACTS: dict[str, Callable[[BuildSettings], Any]] = {
    "product_name": lambda s: s.product_name,
    "product_type": lambda s: s.product_type,
    "mach_o_type": lambda s: s.mach_o_type,
    "framework_type": lambda s: s.framework_type,
    "archs": lambda s: sorted(s.archs),
    "build_sdk_raw_names": lambda s: sorted(s.build_sdk_raw_names),
    "products_directory": lambda s: s.products_directory,
    "executable_url": lambda s: s.executable_url,
    "wrapper_url": lambda s: s.wrapper_url,
    "relative_modules_path": lambda s: s.relative_modules_path,
    "platform_triple_os": lambda s: s.platform_triple_os,
    "platform_triple_variant": lambda s: s.platform_triple_variant,
    "bitcode_enabled": lambda s: s.bitcode_enabled,
    "ad_hoc_code_signing_allowed": lambda s: s.ad_hoc_code_signing_allowed,
}


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _facts(settings: BuildSettings) -> dict[str, Any]:
    facts: dict[str, Any] = {}
    for name, query in _FACTS.items():
        try:
            facts[name] = query(settings)
        except XcSettingsError as exc:
            facts[name] = f"!! {exc}"
    return facts


def _print_target(settings: BuildSettings, *, raw: bool, out: list[str]) -> dict[str, Any]:
    out.append(_section(f"TARGET  {settings.target}"))
    facts = _facts(settings)
    for name, value in facts.items():
        out.append(f"  {name}: {value}")
    if raw:
        out.append("\n  ── raw settings ──")
        for key in sorted(settings.settings):
            out.append(f"    {key} = {settings.settings[key]}")
    return {"target": settings.target, "facts": facts, "settings": dict(settings.settings)}


# ── main ─────────────────────────────────────────────────────


async def main() -> None:
    parser = argparse.ArgumentParser(
        description="Dump build settings and derived facts for debugging / development.",
    )
    location = parser.add_mutually_exclusive_group(required=True)
    location.add_argument("--workspace", help="Path to an .xcworkspace")
    location.add_argument("--project", help="Path to an .xcodeproj")
    parser.add_argument("--scheme", help="Scheme to query")
    parser.add_argument("--configuration", help="Build configuration")
    parser.add_argument("--action", choices=[a.value for a in BuildAction], help="Logical action")
    parser.add_argument("--raw", action="store_true", help="Print raw settings")
    parser.add_argument("--sdks", action="store_true", help="Resolve the supported SDK set")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--output", "-o", help="Write JSON output to FILE instead of stdout")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    project = ProjectLocator.workspace(args.workspace) if args.workspace else ProjectLocator.project_file(args.project)
    arguments = BuildArguments(
        project=project,
        scheme=Scheme(name=args.scheme) if args.scheme else None,
        configuration=args.configuration,
    )
    action = BuildAction(args.action) if args.action else None

    loader = BuildSettingsLoader(LoaderConfig.from_env())
    result: dict[str, Any] = {"project": str(project), "targets": []}
    out: list[str] = [_section("pyxcsettings dump_build_settings"), f"  project   : {project}"]

    async for settings in loader.load(arguments, action):
        result["targets"].append(_print_target(settings, raw=args.raw, out=out))

    if args.sdks:
        resolver = SDKResolver(loader, cache=ResolvedSDKCache())
        sdks = sorted(sdk.name for sdk in await resolver.resolve())
        result["sdks"] = sdks
        out.append(_section("SUPPORTED SDKS"))
        out.extend(f"  - {name}" for name in sdks)

    # ── Output ──
    if args.json_mode or args.output:
        payload = json.dumps(result, indent=2, default=str, ensure_ascii=False)
        if args.output:
            Path(args.output).write_text(payload, encoding="utf-8")
            print(f"JSON written to {args.output}", file=sys.stderr)
        else:
            print(payload)
    else:
        print("\n".join(out))


if __name__ == "__main__":
    asyncio.run(main())
