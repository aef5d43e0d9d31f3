"""Constitution artifacts: the project-wide documents and their completeness."""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field
from typing import Any

import yaml

from .errors import SpecforceError

CORE_ORDER: tuple[str, ...] = (
    "principles",
    "architecture",
    "ui-ux",
    "security",
    "engineering",
    "governance",
    "memorial",
)
"""Display order of the standard constitution artifacts."""

_GENERIC_SLUG = "module"


@dataclass
class Artifact:
    """Specification of one constitution document."""

    slug: str = ""
    name: str = ""
    description: str = ""
    instruction: str = ""
    template: str = ""
    path: str = ""


@dataclass
class ConstitutionRegistry:
    """The constitution artifacts, keyed by slug."""

    artifacts: dict[str, Artifact] = field(default_factory=dict)

    def get(self, slug: str) -> Artifact | None:
        """Return the artifact with ``slug``, or None if there is none."""
        return self.artifacts.get(slug)

    def list(self) -> list[Artifact]:
        """Return the standard artifacts in their usual order, then the rest by slug."""
        ordered = [self.artifacts[slug] for slug in CORE_ORDER if slug in self.artifacts]
        extras = [
            self.artifacts[slug] for slug in sorted(self.artifacts) if slug not in CORE_ORDER
        ]
        return ordered + extras


def _field(document: dict, key: str, path: str) -> str:
    value = document.get(key)
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        raise SpecforceError(f"failed to parse artifact {path}: field {key!r} must be a string")
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _load_artifact(full_path: str, path: str, file_name: str) -> Artifact:
    try:
        with open(full_path, "rb") as handle:
            data = handle.read()
    except OSError as exc:
        raise SpecforceError(f"failed to read artifact {path}: {exc}") from exc

    try:
        document: Any = yaml.safe_load(data)
    except (yaml.YAMLError, ValueError) as exc:
        raise SpecforceError(f"failed to parse artifact {path}: {exc}") from exc
    if document is None:
        document = {}
    if not isinstance(document, dict):
        raise SpecforceError(f"failed to parse artifact {path}: document must be a mapping")

    description = _field(document, "description", path)
    instruction = _field(document, "instruction", path)
    template = _field(document, "template", path)
    for key, value in (
        ("description", description),
        ("instruction", instruction),
        ("template", template),
    ):
        if not value:
            raise SpecforceError(f"artifact {path} is missing '{key}'")

    slug = file_name[: -len(".yaml")]
    if slug == "_index":
        slug = "index"
    md_name = "_index.md" if slug == "index" else f"{slug}.md"

    return Artifact(
        slug=slug,
        name=slug,
        description=description,
        instruction=instruction,
        template=template,
        path=os.path.join(".specforce", "docs", md_name),
    )


def load_constitution_registry(artifacts_dir: str | os.PathLike[str]) -> ConstitutionRegistry:
    """Load every ``*.yaml`` artifact (except mapping.yaml) found under ``artifacts_dir``."""
    base = os.fspath(artifacts_dir)
    if not os.path.isdir(base):
        raise SpecforceError(
            f"failed to load constitution artifacts: {base}: no such directory"
        )

    registry = ConstitutionRegistry()
    try:
        for directory, subdirs, files in os.walk(base):
            subdirs.sort()
            for file_name in sorted(files):
                if not file_name.endswith(".yaml") or file_name == "mapping.yaml":
                    continue
                full_path = os.path.join(directory, file_name)
                relative = os.path.relpath(full_path, base).replace(os.sep, "/")
                artifact = _load_artifact(full_path, relative, file_name)
                registry.artifacts[artifact.slug] = artifact
    except SpecforceError as exc:
        raise SpecforceError(f"failed to load constitution artifacts: {exc}") from exc
    return registry


@dataclass
class ArtifactStatus:
    """Presence and description of one constitution document."""

    name: str = ""
    description: str = ""
    path: str = ""
    exists: bool = False


@dataclass
class ConstitutionStatus:
    """Overall completion state of the project's constitution documents."""

    artifacts: list[ArtifactStatus] = field(default_factory=list)
    progress: int = 0
    total: int = 0
    found: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Plain representation, in the field order of the JSON report."""
        return {
            "artifacts": [asdict(artifact) for artifact in self.artifacts],
            "progress": self.progress,
            "total": self.total,
            "found": self.found,
        }


def get_status(
    project_root: str | os.PathLike[str], registry: ConstitutionRegistry
) -> ConstitutionStatus:
    """Check which core artifacts exist under ``project_root`` and summarise progress."""
    root = os.fspath(project_root)
    core = [artifact for artifact in registry.list() if artifact.slug != _GENERIC_SLUG]

    statuses = [
        ArtifactStatus(
            name=artifact.name,
            description=artifact.description,
            path=artifact.path,
            exists=os.path.exists(os.path.join(root, artifact.path)),
        )
        for artifact in core
    ]
    found = sum(1 for status in statuses if status.exists)
    total = len(statuses)
    progress = (found * 100) // total if total else 0
    return ConstitutionStatus(artifacts=statuses, progress=progress, total=total, found=found)