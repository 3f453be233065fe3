"""Department -> agent configuration lookup."""

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from agent_hub.agents.types import AgentConfig, Tool
from agent_hub.core.errors import ToolNotFound, UnknownDepartment


class ToolRegistry:
    """Immutable table of department agents and their tools.

    Built once at startup; tool lookup is an explicit per-department table so
    an unknown tool name raises ``ToolNotFound`` instead of failing later.
    """

    def __init__(self, configs: Iterable[AgentConfig] | Mapping[str, AgentConfig]):
        if isinstance(configs, Mapping):
            configs = configs.values()

        by_department: dict[str, AgentConfig] = {}
        tools: dict[str, Mapping[str, Tool]] = {}
        for config in configs:
            if config.department in by_department:
                raise ValueError(f"Duplicate department: {config.department}")
            names = [t.name for t in config.tools]
            if len(names) != len(set(names)):
                raise ValueError(f"Duplicate tool name in department {config.department}")
            by_department[config.department] = config
            tools[config.department] = MappingProxyType({t.name: t for t in config.tools})

        self._configs = MappingProxyType(by_department)
        self._tools = MappingProxyType(tools)

    @property
    def departments(self) -> list[str]:
        return list(self._configs)

    def __contains__(self, department: object) -> bool:
        return department in self._configs

    def get_config(self, department: str) -> AgentConfig:
        config = self._configs.get(department)
        if config is None:
            raise UnknownDepartment(department)
        return config

    def get_tool(self, department: str, tool_name: str) -> Tool:
        tools = self._tools.get(department)
        if tools is None:
            raise UnknownDepartment(department)
        tool = tools.get(tool_name)
        if tool is None:
            raise ToolNotFound(tool_name)
        return tool

    def tool_declarations(self, department: str) -> list[dict[str, Any]]:
        return [t.declaration() for t in self.get_config(department).tools]

    def find_by_agent_name(self, agent_name: str) -> AgentConfig | None:
        return next((c for c in self._configs.values() if c.name == agent_name), None)
