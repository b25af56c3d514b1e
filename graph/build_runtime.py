"""
Process-start wiring for the execution core.

Builds one registry, one Supervisor and one SubagentInvoker and registers
the built-in and external agents. Everything is constructed here and passed
by reference; nothing in the core reaches for a module-level singleton.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from agents.builtin import register_builtin_agents
from agents.external import register_external_agents
from agents.registry import CapabilityRegistry
from agents.supervisor import Supervisor
from config.config import Settings, build_llm, get_settings
from crm.client import AuditSink, build_crm
from subagents.gateway import LanguageModelGateway
from subagents.invoker import SubagentInvoker
from subagents.resolver import RoleSpecResolver

logger = logging.getLogger(__name__)


@dataclass
class Runtime:
    settings: Settings
    registry: CapabilityRegistry
    crm: AuditSink
    gateway: LanguageModelGateway
    invoker: SubagentInvoker
    supervisor: Supervisor


def build_runtime(
    settings: Optional[Settings] = None,
    gateway: Optional[LanguageModelGateway] = None,
    crm: Optional[AuditSink] = None,
) -> Runtime:
    settings = settings or get_settings()

    if gateway is None:
        gateway = LanguageModelGateway(
            llm_factory=lambda: build_llm(settings),
            timeout=settings.llm_timeout_seconds,
        )
    if crm is None:
        crm = build_crm(settings.crm_base_url, timeout=settings.crm_timeout_seconds)

    registry = CapabilityRegistry()
    invoker = SubagentInvoker(RoleSpecResolver(settings.subagents_dir), gateway)

    register_builtin_agents(registry, gateway, invoker)
    register_external_agents(registry, settings.external_agents_dir, invoker)

    supervisor = Supervisor(registry, crm, handler_timeout=settings.agent_timeout_seconds)

    stats = registry.get_stats()
    logger.info(
        f"Runtime ready: {stats.total_agents} agents, "
        f"{stats.capabilities} capabilities registered"
    )
    return Runtime(
        settings=settings,
        registry=registry,
        crm=crm,
        gateway=gateway,
        invoker=invoker,
        supervisor=supervisor,
    )
