"""Error types raised across the package."""

from __future__ import annotations


class SpecforceError(Exception):
    """Base class for every error the package raises."""

    default_message = "specforce error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(self.default_message if message is None else message)


class ProjectAlreadyInitializedError(SpecforceError):
    """Init was called on a project that already exists."""

    default_message = "project already initialized"


class AgentNotFoundError(SpecforceError):
    """The agent registry cannot locate a requested agent."""

    default_message = "agent not found"


class InvalidSpecFileError(SpecforceError):
    """A spec markdown file has an invalid format."""

    default_message = "invalid spec file"


class InstallerPermissionDeniedError(SpecforceError):
    """File system permissions are insufficient for installation."""

    default_message = "installer permission denied"


class MissingKitConfigError(SpecforceError):
    """The kit.yaml configuration file is missing."""

    default_message = "kit.yaml configuration is missing"


class ToolMappingNotFoundError(SpecforceError):
    """No tool mapping exists in kit.yaml for the requested agent."""

    default_message = "tool mapping not found in kit.yaml"


class SpecAlreadyActiveError(SpecforceError):
    """A spec slug is already used in the active specs directory."""

    default_message = "feature specification is already active"


class SpecAlreadyArchivedError(SpecforceError):
    """A spec slug is already used in the archive directory."""

    default_message = "feature specification already exists in the archive"


class SecurityError(SpecforceError):
    """A path would escape the directory it is confined to."""

    default_message = "security: path traversal attempt detected"