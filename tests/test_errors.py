import pytest

from specforce.errors import (
    AgentNotFoundError,
    InstallerPermissionDeniedError,
    InvalidSpecFileError,
    MissingKitConfigError,
    ProjectAlreadyInitializedError,
    SecurityError,
    SpecAlreadyActiveError,
    SpecAlreadyArchivedError,
    SpecforceError,
    ToolMappingNotFoundError,
)


@pytest.mark.parametrize(
    ("error_class", "message"),
    [
        (ProjectAlreadyInitializedError, "project already initialized"),
        (AgentNotFoundError, "agent not found"),
        (InvalidSpecFileError, "invalid spec file"),
        (InstallerPermissionDeniedError, "installer permission denied"),
        (MissingKitConfigError, "kit.yaml configuration is missing"),
        (ToolMappingNotFoundError, "tool mapping not found in kit.yaml"),
        (SpecAlreadyActiveError, "feature specification is already active"),
        (SpecAlreadyArchivedError, "feature specification already exists in the archive"),
    ],
)
def test_default_messages(error_class, message):
    assert str(error_class()) == message


def _catch_as_domain_error(error):
    try:
        raise error
    except SpecforceError as caught:
        return caught
    return None


def _is_caught_by(error, error_class):
    try:
        raise error
    except error_class:
        return True
    except Exception:
        return False


@pytest.mark.parametrize(
    ("error_class", "message"),
    [
        (ProjectAlreadyInitializedError, "project already initialized"),
        (AgentNotFoundError, "agent not found"),
        (InvalidSpecFileError, "invalid spec file"),
        (InstallerPermissionDeniedError, "installer permission denied"),
    ],
)
def test_domain_errors_are_caught_through_wrapping(error_class, message):
    original = error_class()
    wrapper = SpecforceError(f"operation failed: {original}")
    wrapper.__cause__ = original

    caught = _catch_as_domain_error(wrapper)
    assert caught is wrapper
    assert str(caught) == f"operation failed: {message}"
    assert caught.__cause__ is original

    caught_original = _catch_as_domain_error(original)
    assert caught_original is original
    assert str(caught_original) == message


def test_security_error_is_domain_error():
    error = SecurityError("path escapes root")
    assert isinstance(error, SpecforceError)
    assert str(error) == "path escapes root"


def test_domain_errors_do_not_match_each_other():
    agent_missing = AgentNotFoundError()
    already_initialized = ProjectAlreadyInitializedError()
    invalid_spec = InvalidSpecFileError()
    permission_denied = InstallerPermissionDeniedError()

    assert _is_caught_by(agent_missing, AgentNotFoundError) is True
    assert _is_caught_by(agent_missing, SpecforceError) is True
    assert _is_caught_by(agent_missing, ProjectAlreadyInitializedError) is False
    assert _is_caught_by(already_initialized, AgentNotFoundError) is False
    assert _is_caught_by(invalid_spec, InstallerPermissionDeniedError) is False
    assert _is_caught_by(permission_denied, InvalidSpecFileError) is False


def test_custom_message_replaces_default():
    assert str(AgentNotFoundError("no such agent: foo")) == "no such agent: foo"