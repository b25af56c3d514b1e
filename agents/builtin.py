"""
Built-in agents registered at process start.

Agent business logic stays thin here: each agent is an opaque
capability implementation as far as the Supervisor is concerned.
"""

import logging

from agents.base_agent import BaseAgent, create_chain
from agents.registry import CapabilityRegistry
from agents.spec import AgentOutcome
from models.schemas import ExecutionContext
from subagents.gateway import LanguageModelGateway
from subagents.invoker import SubagentInvoker

logger = logging.getLogger(__name__)


INSIGHTS_SYSTEM_PROMPT = (
    "You are the Conversation Insights Agent for a sales team. "
    "Read the call transcript and reply with: a two-sentence summary, "
    "buying signals, objections, competitors mentioned, and next steps. "
    "Use short bullet points."
)


class ConversationInsightsAgent(BaseAgent):
    id = "conversation-insights"
    name = "Conversation Insights Agent"
    description = "Summarises call transcripts into buying signals, objections and next steps"
    capabilities = ("conversation.insights",)

    def __init__(self, gateway: LanguageModelGateway):
        self.gateway = gateway

    def can_handle(self, capability: str, context: ExecutionContext) -> bool:
        transcript = context.payload.get("transcript")
        return isinstance(transcript, str) and bool(transcript.strip())

    async def handle(self, context: ExecutionContext) -> AgentOutcome:
        transcript = context.payload.get("transcript")
        if not transcript or not isinstance(transcript, str):
            raise ValueError("payload.transcript is required for conversation insights")

        chain = create_chain(self.gateway.llm, INSIGHTS_SYSTEM_PROMPT)
        message = await chain.ainvoke({"input": transcript})
        return {
            "insights": getattr(message, "content", str(message)),
            "source": context.payload.get("source"),
            "recordType": context.record_type,
            "recordId": context.record_id,
        }


class SubagentDelegateAgent(BaseAgent):
    id = "subagent-delegate"
    name = "Subagent Delegate"
    description = "Runs a role-based subagent task through the capability interface"
    capabilities = ("subagent.delegate",)

    def __init__(self, invoker: SubagentInvoker):
        self.invoker = invoker

    def can_handle(self, capability: str, context: ExecutionContext) -> bool:
        task = context.payload.get("task")
        return isinstance(task, str) and bool(task.strip())

    async def handle(self, context: ExecutionContext) -> AgentOutcome:
        payload = context.payload
        result = await self.invoker.invoke(
            agent=payload.get("agent", ""),
            task=payload.get("task"),
            context=payload.get("context"),
            company_id=payload.get("companyId"),
        )
        return result.model_dump(by_alias=True)


def register_builtin_agents(
    registry: CapabilityRegistry,
    gateway: LanguageModelGateway,
    invoker: SubagentInvoker,
) -> None:
    registry.register(ConversationInsightsAgent(gateway).as_spec())
    registry.register(SubagentDelegateAgent(invoker).as_spec())
    logger.info("Built-in agents registered successfully")
