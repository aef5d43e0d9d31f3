import pytest

from specforce.config import (
    DEFAULT_CONFIG_CONTENT,
    HooksConfig,
    ProjectConfig,
    ensure_config_exists,
    load_config,
)
from specforce.errors import SpecforceError


def test_ensure_config_creates_new_config(tmp_path):
    ensure_config_exists(tmp_path)
    config_path = tmp_path / ".specforce" / "config.yaml"
    assert config_path.read_text(encoding="utf-8") == DEFAULT_CONFIG_CONTENT


def test_ensure_config_does_not_overwrite(tmp_path):
    ensure_config_exists(tmp_path)
    config_path = tmp_path / ".specforce" / "config.yaml"
    config_path.write_text("instructions: {}", encoding="utf-8")
    ensure_config_exists(tmp_path)
    assert config_path.read_text(encoding="utf-8") == "instructions: {}"


def test_ensure_config_fails_for_unusable_root(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    with pytest.raises(SpecforceError):
        ensure_config_exists(blocker / "root")


def test_default_content_loads_as_empty_config(tmp_path):
    ensure_config_exists(tmp_path)
    assert load_config(tmp_path) == ProjectConfig()


@pytest.fixture
def specforce_dir(tmp_path):
    directory = tmp_path / ".specforce"
    directory.mkdir()
    return directory


def test_load_hooks(tmp_path, specforce_dir):
    (specforce_dir / "config.yaml").write_text(
        """
hooks:
  on_task_finished:
    - "echo task"
  on_phase_finished:
    - "echo phase"
  on_all_tasks_finished:
    - "echo all"
""",
        encoding="utf-8",
    )
    config = load_config(tmp_path)
    assert config.hooks == HooksConfig(
        on_task_finished=["echo task"],
        on_phase_finished=["echo phase"],
        on_all_tasks_finished=["echo all"],
    )


def test_load_instructions(tmp_path, specforce_dir):
    (specforce_dir / "config.yaml").write_text(
        """
instructions:
  requirements:
    - "Instruction 1"
""",
        encoding="utf-8",
    )
    config = load_config(tmp_path)
    assert config.instructions["requirements"] == ["Instruction 1"]


def test_load_missing_file_gives_empty_config(tmp_path):
    config = load_config(tmp_path)
    assert config.instructions == {}
    assert config.hooks.on_task_finished == []


def test_load_malformed_gives_empty_config(tmp_path, specforce_dir, capsys):
    (specforce_dir / "config.yaml").write_text("invalid: yaml: :", encoding="utf-8")
    config = load_config(tmp_path)
    assert config.instructions == {}
    assert "Malformed config file" in capsys.readouterr().err