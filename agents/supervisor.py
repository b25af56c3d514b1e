"""
Supervisor: resolves a capability to an agent and executes it.

Every execute() call returns an ExecutionResult and never raises:
- unknown capability -> ok=False, "Unknown capability: <name>"
- handler raised or timed out -> ok=False with the handler's message
- handler returned -> ok=True with its output as data

Timing metadata is populated on every path. Exactly one audit record is
written per call, from a background task whose failures are logged on the
audit dead-letter logger and never touch the result.
"""

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional, Set, Tuple

from agents.errors import AgentTimeoutError
from agents.registry import CapabilityRegistry
from agents.spec import AgentSpec
from agents.utils import call_maybe_async, describe_error
from config.logging_config import AUDIT_DEAD_LETTER_LOGGER
from crm.client import AuditSink
from crm.redaction import redact_sensitive_data
from models.schemas import (
    AgentInfo,
    AuditRecord,
    ExecutionContext,
    ExecutionMetadata,
    ExecutionResult,
)

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger(AUDIT_DEAD_LETTER_LOGGER)


def _elapsed_ms(started: float) -> float:
    return max(0.0, (time.perf_counter() - started) * 1000.0)


class Supervisor:

    def __init__(
        self,
        registry: CapabilityRegistry,
        crm: AuditSink,
        handler_timeout: Optional[float] = 60.0,
    ):
        self.registry = registry
        self.crm = crm
        self.handler_timeout = handler_timeout
        self._pending_audits: Set[asyncio.Task] = set()

    async def execute(self, capability: str, context: Optional[ExecutionContext] = None) -> ExecutionResult:
        context = context or ExecutionContext()
        started = time.perf_counter()

        agent = self.registry.resolve(capability)
        if agent is None:
            logger.warning("Supervisor: no agent registered for capability '%s'", capability)
            result = ExecutionResult(
                ok=False,
                error=f"Unknown capability: {capability}",
                metadata=ExecutionMetadata(duration_ms=_elapsed_ms(started)),
            )
            self._schedule_audit(None, capability, context, result)
            return result

        logger.info("Supervisor: dispatching capability=%s to agent=%s", capability, agent.id)

        try:
            data = await self._run_handler(agent, context)
        except Exception as e:
            duration = _elapsed_ms(started)
            logger.error(
                "Supervisor: agent %s failed for capability '%s' after %.1fms: %s",
                agent.id,
                capability,
                duration,
                describe_error(e),
                exc_info=True,
            )
            result = ExecutionResult(
                ok=False,
                error=describe_error(e),
                metadata=ExecutionMetadata(duration_ms=duration, agent_id=agent.id),
            )
        else:
            result = ExecutionResult(
                ok=True,
                data=data,
                metadata=ExecutionMetadata(duration_ms=_elapsed_ms(started), agent_id=agent.id),
            )
            logger.info(
                "Supervisor: agent %s completed capability '%s' in %.1fms",
                agent.id,
                capability,
                result.metadata.duration_ms,
            )

        self._schedule_audit(agent.id, capability, context, result)
        return result

    async def _run_handler(self, agent: AgentSpec, context: ExecutionContext) -> Optional[Dict[str, Any]]:
        # Each handler gets its own copy; nothing it mutates leaks back to the caller.
        call = call_maybe_async(agent.handler, context.model_copy(deep=True))
        try:
            if self.handler_timeout:
                output = await asyncio.wait_for(call, timeout=self.handler_timeout)
            else:
                output = await call
        except asyncio.TimeoutError:
            raise AgentTimeoutError(
                f"Agent {agent.id} timed out after {self.handler_timeout:g}s"
            ) from None

        if output is not None and not isinstance(output, dict):
            raise TypeError(
                f"Agent {agent.id} returned {type(output).__name__}, expected a mapping"
            )
        return output

    def _schedule_audit(
        self,
        agent_id: Optional[str],
        capability: str,
        context: ExecutionContext,
        result: ExecutionResult,
    ) -> None:
        try:
            record = self._build_audit_record(agent_id, capability, context, result)
        except Exception:
            audit_logger.exception(
                "Failed to build audit record (agent=%s, capability=%s)",
                agent_id,
                capability,
            )
            return
        task = asyncio.create_task(self._write_audit(record))
        self._pending_audits.add(task)
        task.add_done_callback(self._pending_audits.discard)

    def _build_audit_record(
        self,
        agent_id: Optional[str],
        capability: str,
        context: ExecutionContext,
        result: ExecutionResult,
    ) -> AuditRecord:
        try:
            result_view = result.model_dump(mode="json", by_alias=True)
        except (ValueError, TypeError) as e:
            # Output the CRM cannot store as JSON is left out of the audit, not the result
            audit_logger.warning(
                "Agent %s output for '%s' is not JSON-serializable, auditing without data: %s",
                agent_id,
                capability,
                e,
            )
            result_view = result.model_dump(mode="json", by_alias=True, exclude={"data"})
        return AuditRecord(
            agent_id=agent_id,
            capability=capability,
            record_type=context.record_type,
            record_id=context.record_id,
            user_id=context.user_id,
            org_id=context.org_id,
            payload=redact_sensitive_data(context.payload),
            result=redact_sensitive_data(result_view),
        )

    async def _write_audit(self, record: AuditRecord) -> None:
        try:
            await call_maybe_async(self.crm.audit_agent_run, record)
        except Exception:
            audit_logger.exception(
                "Failed to audit agent execution (agent=%s, capability=%s)",
                record.agent_id,
                record.capability,
            )

    async def flush_audits(self) -> None:
        """Wait for audit writes that are still in flight."""
        while self._pending_audits:
            await asyncio.gather(*list(self._pending_audits), return_exceptions=True)

    def is_capability_supported(self, capability: str) -> bool:
        return self.registry.resolve(capability) is not None

    def get_supported_capabilities(self) -> List[str]:
        return self.registry.list_capabilities()

    def validate_context(
        self, capability: str, context: Optional[ExecutionContext] = None
    ) -> Tuple[bool, Optional[str]]:
        """Pre-flight check without executing: (valid, error)."""
        context = context or ExecutionContext()
        agent = self.registry.resolve(capability)
        if agent is None:
            return False, f"No agent found for capability: {capability}"

        try:
            accepted = agent.can_handle(capability, context)
        except Exception:
            logger.exception("Supervisor: can_handle of agent %s raised for '%s'", agent.id, capability)
            accepted = False
        if not accepted:
            return False, f"Invalid context for capability: {capability}"
        return True, None

    def get_agent_info(self, capability: str) -> Optional[AgentInfo]:
        agent = self.registry.resolve(capability)
        if agent is None:
            return None
        return AgentInfo(id=agent.id, name=agent.name, description=agent.description)

    async def get_execution_history(
        self,
        record_type: Optional[str] = None,
        record_id: Optional[str] = None,
        limit: int = 10,
    ) -> List[Dict[str, Any]]:
        try:
            return await call_maybe_async(self.crm.get_agent_audit_logs, record_type, record_id, limit)
        except Exception:
            logger.exception("Error fetching execution history")
            return []
