"""Command-line interface: archive instructions and constitution reports."""

from __future__ import annotations

import argparse
import json
import os
import sys
from dataclasses import asdict
from typing import Any, Sequence, TextIO

from .config import load_config
from .constitution import (
    ConstitutionRegistry,
    ConstitutionStatus,
    get_status,
    load_constitution_registry,
)
from .errors import SpecforceError

VERSION = "0.2.2"

DEFAULT_KIT_DIR = os.path.join("src", "internal", "agent", "kit")
DEFAULT_ARTIFACTS_DIR = os.path.join("src", "internal", "agent", "artifacts")

_ARCHIVE_FALLBACK = "Follow the standard archiving procedure."
_PROGRESS_WIDTH = 40


def _to_json(value: Any) -> str:
    text = json.dumps(value, indent=2, ensure_ascii=False)
    for raw, escaped in (
        ("&", "\\u0026"),
        ("<", "\\u003c"),
        (">", "\\u003e"),
        ("\u2028", "\\u2028"),
        ("\u2029", "\\u2029"),
    ):
        text = text.replace(raw, escaped)
    return text


def _render_status(status: ConstitutionStatus) -> str:
    lines = []
    for artifact in status.artifacts:
        mark = "[EXISTS]" if artifact.exists else "[MISSING]"
        lines.append(f"{mark} {artifact.name}: {artifact.description}\n")
    return "".join(lines)


def _render_progress_bar(progress: int, width: int) -> str:
    filled = max(0, min(width, progress * width // 100))
    return f"[{'#' * filled}{'-' * (width - filled)}] {progress}%"


class Executor:
    """Runs the commands against a kit, an artifacts directory and a project root."""

    def __init__(
        self,
        version: str = VERSION,
        kit_dir: str | None = None,
        artifacts_dir: str | None = None,
        project_root: str = ".",
        out: TextIO | None = None,
    ) -> None:
        self.version = version
        self.kit_dir = kit_dir or os.environ.get("SPECFORCE_KIT_DIR") or DEFAULT_KIT_DIR
        self.artifacts_dir = (
            artifacts_dir or os.environ.get("SPECFORCE_ARTIFACTS_DIR") or DEFAULT_ARTIFACTS_DIR
        )
        self.project_root = project_root
        self._out = out

    def _print(self, *lines: str) -> None:
        stream = self._out if self._out is not None else sys.stdout
        for line in lines:
            stream.write(line + "\n")

    def _write(self, text: str) -> None:
        stream = self._out if self._out is not None else sys.stdout
        stream.write(text)

    def _constitution_registry(self) -> ConstitutionRegistry:
        try:
            return load_constitution_registry(os.path.join(self.artifacts_dir, "constitution"))
        except SpecforceError as exc:
            raise SpecforceError(f"failed to initialize constitution registry: {exc}") from exc

    def archive_instructions(self) -> None:
        """Print the constitution context, core archive rules and project rules."""
        status = get_status(self.project_root, self._constitution_registry())

        try:
            with open(
                os.path.join(self.kit_dir, "instructions", "archive.md"), encoding="utf-8"
            ) as handle:
                kit_instructions = handle.read()
        except OSError:
            kit_instructions = _ARCHIVE_FALLBACK

        custom = load_config(self.project_root).instructions.get("archive", [])

        self._print(
            "# ARCHIVE INSTRUCTIONS",
            "",
            "## 1. Project Constitution Context",
            "These are the global standards of the project:",
        )
        for artifact in status.artifacts:
            mark = "[EXISTS]" if artifact.exists else "[MISSING]"
            self._print(
                f"- {mark} {artifact.name}: {artifact.description} (Path: {artifact.path})"
            )
        self._print("", "## 2. Core Archiving Rules", kit_instructions, "")

        if custom:
            self._print("## 3. Project-Specific Rules (config.yaml)")
            self._print(*(f"- {instruction}" for instruction in custom))
            self._print("")

    def constitution_status(self, json_mode: bool = False) -> None:
        """Print how many constitution documents the project has."""
        status = get_status(self.project_root, self._constitution_registry())
        if json_mode:
            self._print(_to_json(status.to_dict()))
            return

        self._print("\nCONSTITUTION COMPLETENESS REPORT", "Target: .specforce/docs/", "")
        self._write(_render_status(status))
        self._print("", _render_progress_bar(status.progress, _PROGRESS_WIDTH), "")

    def constitution_artifact(self, slug: str = "", json_mode: bool = False) -> None:
        """Print one artifact's instructions and template, or list them all."""
        registry = self._constitution_registry()
        if not slug:
            self.list_artifacts(registry, json_mode)
            return

        artifact = registry.get(slug)
        if artifact is None:
            self._print(
                f"Unknown artifact slug: {slug}",
                "Use 'specforce constitution artifact' to list available slugs.",
            )
            return

        if json_mode:
            self._print(_to_json(asdict(artifact)))
            return

        self._print(
            f"\nCONSTITUTION ARTIFACT: {artifact.slug.upper()}",
            f"Description: {artifact.description}",
            "",
            "> INSTRUCTIONS",
            artifact.instruction,
            "",
            "> TEMPLATE",
            artifact.template,
            "",
        )

    def list_artifacts(self, registry: ConstitutionRegistry, json_mode: bool = False) -> None:
        """Print every available constitution artifact."""
        artifacts = registry.list()
        if json_mode:
            self._print(_to_json([asdict(artifact) for artifact in artifacts]))
            return

        self._print(
            "\nAVAILABLE CONSTITUTION ARTIFACTS",
            "Use 'specforce constitution artifact [slug]' to see full details.",
            "",
        )
        self._print(*(f"  {artifact.slug:<16} {artifact.description}" for artifact in artifacts))
        self._print("")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the ``specforce`` command."""
    parser = argparse.ArgumentParser(
        prog="specforce",
        description="Specforce: AI-Native Software Design and Delivery Framework",
    )
    parser.add_argument(
        "--version", action="version", version=f"specforce version {VERSION}"
    )
    parser.add_argument("--kit-dir", default=None, help="directory holding the kit")
    parser.add_argument("--artifacts-dir", default=None, help="directory holding the artifacts")
    parser.set_defaults(handler=None, help_parser=parser, agent_command=False)
    commands = parser.add_subparsers(title="commands", dest="command")

    archive = commands.add_parser("archive", help="Manage feature archiving and lifecycle")
    archive.set_defaults(help_parser=archive)
    archive_commands = archive.add_subparsers(dest="subcommand")
    instructions = archive_commands.add_parser(
        "instructions", help="Show instructions for archiving a feature"
    )
    instructions.set_defaults(handler=lambda executor, args: executor.archive_instructions())

    constitution = commands.add_parser("constitution", help="Manage project constitution docs")
    constitution.set_defaults(help_parser=constitution, agent_command=True)
    constitution_commands = constitution.add_subparsers(dest="subcommand")

    status = constitution_commands.add_parser(
        "status", help="Show the completeness status of the project constitution"
    )
    status.add_argument("--json", action="store_true", help="output in JSON format")
    status.set_defaults(
        handler=lambda executor, args: executor.constitution_status(args.json)
    )

    artifact = constitution_commands.add_parser(
        "artifact", help="Show details of a specific constitution artifact"
    )
    artifact.add_argument("slug", nargs="?", default="")
    artifact.add_argument("--json", action="store_true", help="output in JSON format")
    artifact.set_defaults(
        handler=lambda executor, args: executor.constitution_artifact(args.slug, args.json)
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line; return the process exit status."""
    args = build_parser().parse_args(argv)
    if args.handler is None:
        args.help_parser.print_help()
        return 0

    executor = Executor(VERSION, kit_dir=args.kit_dir, artifacts_dir=args.artifacts_dir)
    try:
        args.handler(executor, args)
    except SpecforceError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Error: interrupted", file=sys.stderr)
        return 1
    return 0