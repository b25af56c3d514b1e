"""
Capability registry for the execution core.

Maps capability strings (e.g. "enrichment.waterfall") to the agent that
serves them. One registry instance is built at process start and injected
into the Supervisor and the HTTP service.

Collisions are last-write-wins: registering a second agent for a capability
silently replaces the first (a warning is logged). Writers are serialized by
a lock and publish fresh dict snapshots, so readers never lock.
"""

import logging
import threading
from typing import Dict, List, Optional

from agents.spec import AgentSpec
from models.schemas import RegistryStats

logger = logging.getLogger(__name__)


class CapabilityRegistry:

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._agents: Dict[str, AgentSpec] = {}
        self._capability_index: Dict[str, AgentSpec] = {}

    def register(self, spec: AgentSpec) -> None:
        with self._lock:
            agents = dict(self._agents)
            index = dict(self._capability_index)

            agents[spec.id] = spec
            for capability in spec.capabilities:
                previous = index.get(capability)
                if previous is not None and previous.id != spec.id:
                    logger.warning(
                        "Capability '%s' is already registered by %s, overwriting with %s",
                        capability,
                        previous.id,
                        spec.id,
                    )
                index[capability] = spec

            self._agents = agents
            self._capability_index = index

        logger.info(
            "Registered agent %s (%s) with capabilities: %s",
            spec.id,
            spec.source,
            ", ".join(spec.capabilities),
        )

    def resolve(self, capability: str) -> Optional[AgentSpec]:
        """Exact lookup; None when no agent serves the capability."""
        return self._capability_index.get(capability)

    def get_agent(self, agent_id: str) -> Optional[AgentSpec]:
        return self._agents.get(agent_id)

    def list_agents(self) -> List[AgentSpec]:
        return list(self._agents.values())

    def list_capabilities(self) -> List[str]:
        return sorted(self._capability_index)

    def get_stats(self) -> RegistryStats:
        agents = self._agents
        builtin = sum(1 for a in agents.values() if a.source == "builtin")
        return RegistryStats(
            total_agents=len(agents),
            capabilities=len(self._capability_index),
            builtin_agents=builtin,
            external_agents=len(agents) - builtin,
        )

    def __contains__(self, capability: str) -> bool:
        return capability in self._capability_index

    def __len__(self) -> int:
        return len(self._agents)
