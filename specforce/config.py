"""Project configuration stored in .specforce/config.yaml."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from typing import Any

import yaml

from .errors import SecurityError, SpecforceError
from .paths import secure_path

DEFAULT_CONFIG_CONTENT = """instructions:
  # Example: Project-wide instructions for all requirements artifacts
  # requirements:
  #   - "Always use BDD GIVEN/WHEN/THEN syntax"
  #   - "Ensure accessibility is mentioned for UI components"

  # Example: Project-wide instructions for all design artifacts
  # design:
  #   - "Use Mermaid.js for architecture diagrams"
  #   - "Include a detailed component inventory"

  # Example: Project-wide instructions for all tasks artifacts
  # tasks:
  #   - "Each task must have a clear verification step"
  #   - "Group tasks by implementation phases"

  # Example: Project-wide instructions for the implementation phase
  # implementation:
  #   - "Always run the code formatter before finishing a task"
  #   - "Prefer explicit types over loose dynamic structures"

  # Example: Project-wide instructions for the archive phase
  # archive:
  #   - "Always update the project memorial with lessons learned"
  #   - "Ensure all temporary artifacts are cleaned up"

hooks:
  # Example: Run linting and tests automatically when finishing tasks
  # on_task_finished:
  #   - "make lint"
  # on_phase_finished:
  #   - "make test-unit"
  # on_all_tasks_finished:
  #   - "make test"
"""

_CONFIG_RELATIVE = os.path.join(".specforce", "config.yaml")


@dataclass
class HooksConfig:
    """Commands to run on implementation events."""

    on_task_finished: list[str] = field(default_factory=list)
    on_phase_finished: list[str] = field(default_factory=list)
    on_all_tasks_finished: list[str] = field(default_factory=list)


@dataclass
class ProjectConfig:
    """Project-specific configuration."""

    instructions: dict[str, list[str]] = field(default_factory=dict)
    hooks: HooksConfig = field(default_factory=HooksConfig)


def _strings(value: Any, key: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or any(isinstance(item, (dict, list)) for item in value):
        raise SpecforceError(f"field {key!r} must be a list of strings")
    return ["" if item is None else str(item) for item in value]


def _section(value: Any, key: str) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise SpecforceError(f"field {key!r} must be a mapping")
    return value


def _parse_project_config(data: bytes) -> ProjectConfig:
    document = _section(yaml.safe_load(data), "document")
    instructions = _section(document.get("instructions"), "instructions")
    hooks = _section(document.get("hooks"), "hooks")
    return ProjectConfig(
        instructions={str(key): _strings(value, str(key)) for key, value in instructions.items()},
        hooks=HooksConfig(
            on_task_finished=_strings(hooks.get("on_task_finished"), "on_task_finished"),
            on_phase_finished=_strings(hooks.get("on_phase_finished"), "on_phase_finished"),
            on_all_tasks_finished=_strings(
                hooks.get("on_all_tasks_finished"), "on_all_tasks_finished"
            ),
        ),
    )


def ensure_config_exists(root: str | os.PathLike[str]) -> None:
    """Create .specforce/config.yaml with default content unless it already exists."""
    specforce_dir = secure_path(root, ".specforce")
    config_path = secure_path(root, _CONFIG_RELATIVE)

    if os.path.exists(config_path):
        return

    try:
        os.makedirs(specforce_dir, mode=0o750, exist_ok=True)
    except OSError as exc:
        raise SpecforceError(f"failed to create .specforce directory: {exc}") from exc

    try:
        descriptor = os.open(config_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(descriptor, "w", encoding="utf-8", newline="") as handle:
            handle.write(DEFAULT_CONFIG_CONTENT)
    except OSError as exc:
        raise SpecforceError(f"failed to write default config file: {exc}") from exc


def load_config(root: str | os.PathLike[str]) -> ProjectConfig:
    """Read the project configuration; problems are reported and yield an empty config."""
    try:
        config_path = secure_path(root, _CONFIG_RELATIVE)
    except SecurityError as exc:
        print(f"Warning: Security: {exc}", file=sys.stderr)
        return ProjectConfig()

    try:
        with open(config_path, "rb") as handle:
            data = handle.read()
    except FileNotFoundError:
        return ProjectConfig()
    except OSError as exc:
        print(f"Warning: Failed to read config file at {config_path}: {exc}", file=sys.stderr)
        return ProjectConfig()

    try:
        return _parse_project_config(data)
    except (yaml.YAMLError, SpecforceError, ValueError) as exc:
        print(f"Warning: Malformed config file at {config_path}: {exc}", file=sys.stderr)
        return ProjectConfig()