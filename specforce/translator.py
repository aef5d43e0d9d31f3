"""Adapting kit blueprints into the file layout each agent tool expects."""

from __future__ import annotations

import dataclasses
import json
import os
from dataclasses import dataclass, field
from typing import Callable, Iterator

from .errors import SecurityError, SpecforceError, ToolMappingNotFoundError
from .kit import Blueprint, KitConfig, MappingConfig, parse_blueprint, parse_kit_config
from .paths import expand_path, secure_path
from .ui import UI

GLOBAL_ENABLED_AGENTS: tuple[str, ...] = ("codex",)
"""Agents allowed to write artifacts to paths outside the project root."""

ShouldInstall = Callable[[str], bool]

_SKIPPED_FILES = frozenset({"mapping.yaml", "manifest.yaml"})


def _go_quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _strip_ext(name: str) -> str:
    dot = name.rfind(".")
    return name[:dot] if dot != -1 else name


def _slash(path: str) -> str:
    return path.replace(os.sep, "/") if os.sep != "/" else path


def _clean(path: str) -> str:
    if not path:
        return "."
    cleaned = os.path.normpath(path)
    if cleaned.startswith("//") and not cleaned.startswith("///"):
        cleaned = cleaned[1:]
    return cleaned


def _join(*elements: str) -> str:
    """Join path elements, keeping later absolute elements relative to earlier ones."""
    present = [element for element in elements if element]
    if not present:
        return ""
    return _clean(os.sep.join(present))


@dataclass
class NameTracker:
    """Tracks header names within one adaptation run to detect duplicates."""

    names: dict[str, str] = field(default_factory=dict)

    def validate(self, name: str, path: str) -> None:
        """Record ``name`` for ``path``; raise if another blueprint already uses it."""
        existing = self.names.get(name)
        if existing is not None and existing != path:
            raise SecurityError(
                f"security: duplicate header name {_go_quote(name)} detected in {path} "
                f"(conflicts with {existing})"
            )
        self.names[name] = path


def _toml_transform(blueprint: Blueprint, mapping: MappingConfig) -> str:
    description = blueprint.metadata.description or mapping.name
    return f'description = {_go_quote(description)}\nprompt = """\n{blueprint.content}\n"""\n'


_TRANSFORMERS: dict[str, Callable[[Blueprint, MappingConfig], str]] = {
    ".toml": _toml_transform,
}


def load_kit_config(kit_dir: str | os.PathLike[str], root: str | os.PathLike[str]) -> KitConfig:
    """Load kit.yaml from ``kit_dir``, then merge tools from an optional ``root/kit.yaml``."""
    kit_file = os.path.join(os.fspath(kit_dir), "kit.yaml")
    try:
        with open(kit_file, "rb") as handle:
            data = handle.read()
    except OSError as exc:
        raise SpecforceError(f"failed to read embedded kit.yaml: {exc}") from exc

    try:
        config = parse_kit_config(data)
    except SpecforceError as exc:
        raise SpecforceError(f"failed to parse embedded kit.yaml: {exc}") from exc

    try:
        override_path = secure_path(root, "kit.yaml")
        with open(override_path, "rb") as handle:
            override = parse_kit_config(handle.read())
    except (SpecforceError, OSError):
        return config

    config.tools.update(override.tools)
    return config


def _walk_files(base: str, prefix: str = "") -> Iterator[tuple[str, str]]:
    directory = os.path.join(base, prefix) if prefix else base
    with os.scandir(directory) as scan:
        entries = sorted(scan, key=lambda entry: entry.name)
    for entry in entries:
        relative = f"{prefix}/{entry.name}" if prefix else entry.name
        if entry.is_dir():
            yield from _walk_files(base, relative)
        else:
            yield relative, entry.name


def adapt_artifacts(
    root: str | os.PathLike[str],
    kit_dir: str | os.PathLike[str],
    agent: str,
    ui: UI | None = None,
    should_install: ShouldInstall | None = None,
) -> None:
    """Adapt every blueprint in ``kit_dir`` for ``agent``, writing under ``root``."""
    if ui is not None:
        ui.sub_task(f"Adapting artifacts for {agent}...")

    kit_config = load_kit_config(kit_dir, root)
    tracker = NameTracker()

    for path, name in _walk_files(os.fspath(kit_dir)):
        if not name.endswith(".yaml") or name in _SKIPPED_FILES:
            continue
        _validate_header_name(kit_dir, kit_config, path, agent, tracker)
        process_blueprint(root, kit_dir, kit_config, path, agent, should_install)


def _validate_header_name(
    kit_dir: str | os.PathLike[str],
    kit_config: KitConfig,
    path: str,
    agent: str,
    tracker: NameTracker,
) -> None:
    # Read or mapping problems are reported later by process_blueprint.
    try:
        with open(os.path.join(os.fspath(kit_dir), path), "rb") as handle:
            blueprint = parse_blueprint(path, handle.read())
        mappings = resolve_mappings(kit_config, path, blueprint, agent)
    except (OSError, SpecforceError):
        return

    category = _slash(path).split("/")[0]
    for mapping in mappings:
        if mapping.ext == ".md":
            tracker.validate(resolve_header_name(blueprint, mapping, category), path)


def _write_private(path: str, content: str) -> None:
    descriptor = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(descriptor, "wb") as handle:
        handle.write(content.encode("utf-8"))


def process_blueprint(
    root: str | os.PathLike[str],
    kit_dir: str | os.PathLike[str],
    kit_config: KitConfig,
    path: str,
    agent: str,
    should_install: ShouldInstall | None = None,
) -> None:
    """Adapt one blueprint, given by its path inside ``kit_dir``, for ``agent``."""
    try:
        with open(os.path.join(os.fspath(kit_dir), path), "rb") as handle:
            data = handle.read()
    except OSError as exc:
        raise SpecforceError(f"failed to read blueprint {path}: {exc}") from exc

    try:
        blueprint = parse_blueprint(path, data)
    except SpecforceError as exc:
        raise SpecforceError(f"failed to parse blueprint {path}: {exc}") from exc

    root_text = os.fspath(root)
    category = _slash(path).split("/")[0]

    for mapping in resolve_mappings(kit_config, path, blueprint, agent):
        if should_install is not None and not should_install(mapping.path):
            continue

        file_name = mapping.name + mapping.ext
        if agent in GLOBAL_ENABLED_AGENTS:
            target_dir = mapping.path
            if not os.path.isabs(target_dir):
                target_dir = _join(root_text, target_dir)
            target_file = _join(target_dir, file_name)
        else:
            try:
                target_dir = secure_path(root_text, mapping.path)
                target_file = secure_path(root_text, _join(mapping.path, file_name))
            except SecurityError as exc:
                raise SecurityError(f"security: {exc}") from exc

        try:
            os.makedirs(target_dir, mode=0o750, exist_ok=True)
        except OSError as exc:
            raise SpecforceError(
                f"failed to create target directory {target_dir}: {exc}"
            ) from exc

        content = apply_transformation(blueprint, mapping, path, category)
        try:
            _write_private(target_file, content)
        except OSError as exc:
            raise SpecforceError(
                f"failed to write adapted artifact {target_file}: {exc}"
            ) from exc


def _apply_overrides(mapping: MappingConfig, blueprint: Blueprint, agent: str) -> None:
    override = blueprint.metadata.mapping.get(agent)
    if override is None:
        return
    if override.path:
        mapping.path = override.path
    if override.name:
        mapping.name = override.name
    if override.ext:
        mapping.ext = override.ext


def _apply_wildcards(
    mapping: MappingConfig, slug: str, parts: list[str], initial_path: str
) -> None:
    wildcard_in_path = "*" in mapping.path
    wildcard_in_name = "*" in mapping.name
    mapping.path = mapping.path.replace("*", slug)
    mapping.name = mapping.name.replace("*", slug)

    if not wildcard_in_path and not wildcard_in_name and len(parts) > 2:
        mapping.path = _join(mapping.path, _join(*parts[1:-1]))

    # A wildcard name with a fixed "." path means a flat export into the target.
    if wildcard_in_name and not wildcard_in_path and initial_path == ".":
        mapping.path = "."


def resolve_mappings(
    kit_config: KitConfig, path: str, blueprint: Blueprint, agent: str
) -> list[MappingConfig]:
    """Return the concrete mappings for a blueprint and agent, with final target paths."""
    parts = _slash(path).split("/")
    category = parts[0]
    slug = _strip_ext(os.path.basename(path))

    tool_route = kit_config.tools.get(agent)
    if tool_route is None:
        raise ToolMappingNotFoundError()

    if category in tool_route.mappings:
        results = []
        for raw in tool_route.mappings[category]:
            mapping = dataclasses.replace(raw)
            _apply_overrides(mapping, blueprint, agent)
            results.append(mapping)
    else:
        override = blueprint.metadata.mapping.get(agent)
        if override is None:
            return []
        results = [dataclasses.replace(override)]

    for mapping in results:
        initial_path = mapping.path
        _apply_wildcards(mapping, slug, parts, initial_path)

        if not mapping.name:
            mapping.name = slug

        target = expand_path(mapping.target or tool_route.target)
        if target.startswith("~"):
            raise SpecforceError(f"failed to resolve home directory for path: {target}")

        mapping.path = _clean(_join(target, mapping.path))

    return results


def apply_transformation(
    blueprint: Blueprint, mapping: MappingConfig, source_path: str, category: str
) -> str:
    """Render a blueprint into the text for the mapping's file format."""
    transformer = _TRANSFORMERS.get(mapping.ext)
    if transformer is not None:
        return transformer(blueprint, mapping)
    if mapping.ext == ".md":
        return _inject_yaml_header(blueprint, mapping, category)
    return blueprint.content


def _inject_yaml_header(blueprint: Blueprint, mapping: MappingConfig, category: str) -> str:
    metadata = blueprint.metadata
    display_name = resolve_header_name(blueprint, mapping, category)
    fields: list[str] = []

    if category == "agents":
        fields += [f"name: {display_name}", f"description: {metadata.description}"]

    if mapping.name == "SKILL":
        fields += [f"name: {display_name}", f"description: {metadata.description}"]
        if metadata.version:
            fields.append(f"version: {metadata.version}")
        if metadata.priority:
            fields.append(f"priority: {metadata.priority}")
    elif category == "skills":
        # Secondary skill files carry no header.
        return blueprint.content

    if category == "commands" and mapping.name != "SKILL":
        fields += [f"name: {display_name}", f"description: {metadata.description}"]

    if not fields:
        return blueprint.content

    header = "".join(f"{line}\n" for line in fields)
    return f"---\n{header}---\n\n{blueprint.content}"


def resolve_header_name(blueprint: Blueprint, mapping: MappingConfig, category: str) -> str:
    """Name for the header: metadata name, else mapping name, with SKILL made unique."""
    if blueprint.metadata.name:
        return blueprint.metadata.name
    name = mapping.name
    if name == "SKILL":
        name = _strip_ext(os.path.basename(blueprint.id))
        if category == "commands":
            name = "spf." + name
    return name


def resolve_template_path(root: str | os.PathLike[str], template_name: str) -> str:
    """Path of a template under the project's .specforce/templates, or "" if unsafe."""
    try:
        return secure_path(root, os.path.join(".specforce", "templates", template_name))
    except SecurityError:
        return ""