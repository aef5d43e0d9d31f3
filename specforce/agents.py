"""Registry of the agents described in a kit's kit.yaml."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from .errors import SpecforceError
from .kit import parse_kit_config

DEFAULT_AGENT_VERSION = "1.0.0"


@dataclass
class AgentMetadata:
    """Descriptive metadata for one agent."""

    id: str = ""
    name: str = ""
    description: str = ""
    dir_name: str = ""
    version: str = ""


@dataclass
class AgentRegistry:
    """Stores the agents discovered in a kit directory."""

    agents: dict[str, AgentMetadata] = field(default_factory=dict)

    def initialize(self, kit_dir: str | os.PathLike[str]) -> None:
        """Populate the registry from ``kit.yaml`` inside ``kit_dir``."""
        self.agents = {}
        kit_file = os.path.join(os.fspath(kit_dir), "kit.yaml")
        try:
            with open(kit_file, "rb") as handle:
                data = handle.read()
        except OSError as exc:
            raise SpecforceError(f"failed to read kit.yaml: {exc}") from exc

        try:
            config = parse_kit_config(data)
        except SpecforceError as exc:
            raise SpecforceError(f"failed to parse kit.yaml: {exc}") from exc

        for agent_id, route in config.tools.items():
            self.agents[agent_id] = AgentMetadata(
                id=agent_id,
                name=route.name or agent_id,
                description=route.description,
                dir_name=route.target,
                version=DEFAULT_AGENT_VERSION,
            )

    def get_agents(self) -> list[AgentMetadata]:
        """Return every agent, sorted by id."""
        return sorted(self.agents.values(), key=lambda agent: agent.id)

    def get_agent(self, agent_id: str) -> AgentMetadata | None:
        """Return the agent with ``agent_id``, or None if it is unknown."""
        return self.agents.get(agent_id)