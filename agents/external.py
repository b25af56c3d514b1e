"""
Registration of externally defined agents.

Any *.json file in the external agents directory that carries an id, name,
description and a non-empty capabilities list becomes an agent with
source="external". Its handler forwards payload["task"] to the subagent
invoker, using the definition's "subagent" role (or its id).

Malformed files are skipped with a warning; a missing directory registers
nothing. This never raises.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from agents.registry import CapabilityRegistry
from agents.spec import AgentOutcome, AgentSpec
from models.schemas import ExecutionContext
from subagents.invoker import SubagentInvoker

logger = logging.getLogger(__name__)


def is_valid_agent_definition(definition: Any) -> bool:
    if not isinstance(definition, dict):
        return False
    for key in ("id", "name", "description"):
        value = definition.get(key)
        if not isinstance(value, str) or not value.strip():
            return False
    capabilities = definition.get("capabilities")
    return (
        isinstance(capabilities, list)
        and len(capabilities) > 0
        and all(isinstance(c, str) and c.strip() for c in capabilities)
    )


def build_external_agent(definition: Dict[str, Any], invoker: SubagentInvoker) -> AgentSpec:
    role = definition.get("subagent") or definition["id"]

    async def handler(context: ExecutionContext) -> AgentOutcome:
        result = await invoker.invoke(
            agent=role,
            task=context.payload.get("task"),
            context=context.payload.get("context"),
            company_id=context.payload.get("companyId"),
        )
        return result.model_dump(by_alias=True)

    return AgentSpec(
        id=definition["id"],
        name=definition["name"],
        capabilities=definition["capabilities"],
        handler=handler,
        description=definition["description"],
        version=str(definition.get("version", "1.0.0")),
        source="external",
    )


def register_external_agents(
    registry: CapabilityRegistry,
    directory: Union[str, Path],
    invoker: SubagentInvoker,
) -> int:
    """Register every valid JSON agent definition; returns how many were registered."""
    base = Path(directory)
    if not base.is_dir():
        logger.info(f"External agents directory {base} not found, skipping external agent registration")
        return 0

    registered = 0
    for path in sorted(base.glob("*.json")):
        try:
            definition = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Error loading external agent from {path.name}: {e}")
            continue

        if not is_valid_agent_definition(definition):
            logger.warning(f"Skipping {path.name}: not a valid agent definition")
            continue

        registry.register(build_external_agent(definition, invoker))
        registered += 1

    logger.info(f"Successfully registered {registered} external agents from {base}")
    return registered
