"""
Ad-hoc, role-based task execution.

invoke() resolves a role specification by name, composes a prompt and makes
one language-model call. It is fail-open: a missing role, an unreadable
library or a failing model all produce the same deterministic fallback
answer, in the same SubagentResult shape as a real answer. The only error a
caller can see is InvalidInvocationError for an empty task, raised before
any I/O.
"""

import asyncio
import logging
from typing import List, Optional

from agents.errors import InvalidInvocationError
from models.schemas import SubagentResult
from subagents.gateway import CompletionGateway
from subagents.prompts import build_fallback_answer, build_prompt
from subagents.resolver import RoleSpecResolver

logger = logging.getLogger(__name__)


class SubagentInvoker:

    def __init__(self, resolver: RoleSpecResolver, gateway: CompletionGateway):
        self.resolver = resolver
        self.gateway = gateway

    async def invoke(
        self,
        agent: str,
        task: Optional[str],
        context: Optional[str] = None,
        company_id: Optional[str] = None,
    ) -> SubagentResult:
        if not isinstance(task, str) or not task.strip():
            raise InvalidInvocationError("Missing required field: task")

        agent = agent or ""
        fallback = SubagentResult(answer=build_fallback_answer(agent, task), sources=[])

        try:
            # Directory scan and file read are blocking
            role = await asyncio.to_thread(self.resolver.resolve, agent)
            if role is None:
                logger.warning("Subagent '%s' has no role specification; using fallback answer", agent)
                return fallback

            prompt = build_prompt(role.text, task, context)
            logger.info(
                "Invoking subagent '%s' (role=%s, company=%s, prompt_chars=%d)",
                agent,
                role.slug,
                company_id,
                len(prompt),
            )
            completion = await self.gateway.complete(prompt)
        except Exception:
            logger.exception("invoke_subagent error for '%s'; using fallback answer", agent)
            return fallback

        return SubagentResult(answer=completion.answer, sources=[])

    def list_subagents(self) -> List[str]:
        return self.resolver.list_slugs()
