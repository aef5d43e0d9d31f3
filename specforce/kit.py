"""Kit configuration and blueprint models, parsed from YAML."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import yaml

from .errors import SpecforceError

TOOL_PREFIXES: tuple[str, ...] = (
    ".gemini/",
    ".claude/",
    ".opencode/",
    ".kilocode/",
    ".agent/",
    ".qwen/",
    ".codex/",
    ".kimi/",
)
"""Directory prefixes of agent tools, updatable apart from the project constitution."""


@dataclass
class MappingConfig:
    """Where and how a blueprint is adapted for an agent."""

    target: str = ""
    path: str = ""
    name: str = ""
    ext: str = ""


@dataclass
class ToolRoute:
    """Target routing path and per-category mappings for an agent tool."""

    name: str = ""
    description: str = ""
    target: str = ""
    mappings: dict[str, list[MappingConfig]] = field(default_factory=dict)


@dataclass
class KitConfig:
    """Root structure of kit.yaml: mapping rules for every supported agent."""

    tools: dict[str, ToolRoute] = field(default_factory=dict)


@dataclass
class BlueprintMetadata:
    """Structured metadata of a framework asset."""

    name: str = ""
    description: str = ""
    version: str = ""
    priority: str = ""
    triggers: list[str] = field(default_factory=list)
    mapping: dict[str, MappingConfig] = field(default_factory=dict)
    content: str = ""


@dataclass
class Blueprint:
    """A framework asset with its metadata and content."""

    id: str
    metadata: BlueprintMetadata
    content: str


def _text(value: Any, key: str) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        raise SpecforceError(f"field {key!r} must be a scalar value")
    return str(value)


def _string_list(value: Any, key: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise SpecforceError(f"field {key!r} must be a list")
    return [_text(item, key) for item in value]


def _mapping_node(value: Any, key: str) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise SpecforceError(f"field {key!r} must be a mapping")
    return value


def _load_document(data: str | bytes) -> dict:
    try:
        document = yaml.safe_load(data)
    except (yaml.YAMLError, ValueError) as exc:
        raise SpecforceError(str(exc)) from exc
    return _mapping_node(document, "document")


def parse_mapping(data: Any) -> MappingConfig:
    """Build a MappingConfig from a decoded YAML mapping."""
    node = _mapping_node(data, "mapping")
    return MappingConfig(
        target=_text(node.get("target"), "target"),
        path=_text(node.get("path"), "path"),
        name=_text(node.get("name"), "name"),
        ext=_text(node.get("ext"), "ext"),
    )


def parse_mappings(data: Any) -> list[MappingConfig]:
    """Accept either one mapping or a list of mappings."""
    if data is None or isinstance(data, dict):
        return [parse_mapping(data)]
    if isinstance(data, list):
        return [parse_mapping(item) for item in data]
    raise SpecforceError("mappings must be a mapping or a list of mappings")


def _tool_route(data: Any) -> ToolRoute:
    node = _mapping_node(data, "tool")
    mappings = _mapping_node(node.get("mappings"), "mappings")
    return ToolRoute(
        name=_text(node.get("name"), "name"),
        description=_text(node.get("description"), "description"),
        target=_text(node.get("target"), "target"),
        mappings={str(category): parse_mappings(value) for category, value in mappings.items()},
    )


def parse_kit_config(data: str | bytes) -> KitConfig:
    """Parse the text of a kit.yaml file."""
    document = _load_document(data)
    tools = _mapping_node(document.get("tools"), "tools")
    return KitConfig(tools={str(tool_id): _tool_route(route) for tool_id, route in tools.items()})


def _blueprint_metadata(document: dict) -> BlueprintMetadata:
    mapping = _mapping_node(document.get("mapping"), "mapping")
    return BlueprintMetadata(
        name=_text(document.get("name"), "name"),
        description=_text(document.get("description"), "description"),
        version=_text(document.get("version"), "version"),
        priority=_text(document.get("priority"), "priority"),
        triggers=_string_list(document.get("triggers"), "triggers"),
        mapping={str(agent): parse_mapping(value) for agent, value in mapping.items()},
        content=_text(document.get("content"), "content"),
    )


def parse_blueprint(blueprint_id: str, data: str | bytes) -> Blueprint:
    """Parse a YAML blueprint holding both metadata and content."""
    try:
        metadata = _blueprint_metadata(_load_document(data))
    except SpecforceError as exc:
        raise SpecforceError(
            f"failed to parse blueprint metadata (ID: {blueprint_id}): {exc}"
        ) from exc
    return Blueprint(id=blueprint_id, metadata=metadata, content=metadata.content.strip())