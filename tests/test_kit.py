import pytest

from specforce.errors import SpecforceError
from specforce.kit import (
    MappingConfig,
    parse_blueprint,
    parse_kit_config,
    parse_mapping,
    parse_mappings,
)

KIT_YAML = """
tools:
  gemini-cli:
    target: ".gemini/"
    mappings:
      skills:
        path: "skills"
        ext: ".md"
      agents:
        path: "prompts"
        ext: ".md"
  claude-code:
    target: ".claude/"
    mappings:
      skills:
        path: "instructions"
        ext: ".md"
"""


def test_kit_config_unmarshal():
    config = parse_kit_config(KIT_YAML)
    assert len(config.tools) == 2
    gemini = config.tools["gemini-cli"]
    assert gemini.target == ".gemini/"
    assert len(gemini.mappings) == 2
    skills = gemini.mappings["skills"][0]
    assert skills.path == "skills"
    assert skills.ext == ".md"
    assert config.tools["claude-code"].target == ".claude/"


def test_kit_config_list_of_mappings():
    config = parse_kit_config(
        """
tools:
  test-agent:
    target: ".test/"
    mappings:
      commands:
        - path: "cmds"
          ext: ".md"
        - path: "skills/spf-*"
          name: "SKILL"
          ext: ".md"
"""
    )
    commands = config.tools["test-agent"].mappings["commands"]
    assert commands == [
        MappingConfig(path="cmds", ext=".md"),
        MappingConfig(path="skills/spf-*", name="SKILL", ext=".md"),
    ]


def test_kit_config_accepts_bytes():
    config = parse_kit_config(KIT_YAML.encode("utf-8"))
    assert config.tools["claude-code"].mappings["skills"][0].path == "instructions"


def test_parse_mappings_forms():
    assert parse_mappings({"path": "a"}) == [MappingConfig(path="a")]
    assert parse_mappings([{"path": "a"}, {"path": "b"}]) == [
        MappingConfig(path="a"),
        MappingConfig(path="b"),
    ]
    with pytest.raises(SpecforceError):
        parse_mappings("not a mapping")


def test_parse_mapping_target():
    mapping = parse_mapping({"target": "/global", "path": "global-cmds", "ext": ".md"})
    assert mapping.target == "/global"
    assert mapping.name == ""


def test_parse_blueprint_valid():
    data = """
name: Test Blueprint
description: A test blueprint
mapping:
  agent1:
    path: path/to/agent1
    name: name1
    ext: .md
content: |
  This is the content.
"""
    blueprint = parse_blueprint("test-bp", data)
    assert blueprint.id == "test-bp"
    assert blueprint.metadata.name == "Test Blueprint"
    assert blueprint.content == "This is the content."
    assert blueprint.metadata.mapping["agent1"] == MappingConfig(
        path="path/to/agent1", name="name1", ext=".md"
    )


def test_parse_blueprint_invalid_yaml():
    with pytest.raises(SpecforceError) as info:
        parse_blueprint("invalid-yaml", "name: : invalid")
    assert "invalid-yaml" in str(info.value)


def test_parse_blueprint_scalar_fields():
    blueprint = parse_blueprint(
        "skills/x/SKILL.yaml",
        'name: test-skill\ndescription: Test Skill Description\nversion: "2.1"\npriority: HIGH\n',
    )
    assert blueprint.metadata.version == "2.1"
    assert blueprint.metadata.priority == "HIGH"
    assert blueprint.content == ""


def test_parse_blueprint_triggers():
    blueprint = parse_blueprint("bp", "triggers:\n  - one\n  - two\n")
    assert blueprint.metadata.triggers == ["one", "two"]