from abc import ABC, abstractmethod
from typing import Tuple

from langchain_core.prompts import ChatPromptTemplate

from agents.spec import AgentOutcome, AgentSpec
from models.schemas import ExecutionContext


def create_chain(llm, system_prompt: str):
    prompt = ChatPromptTemplate.from_messages([
        ("system", system_prompt),
        ("human", "{input}"),
    ])
    return prompt | llm


class BaseAgent(ABC):
    """Class-style agent: subclasses set the identity fields and implement handle()."""

    id: str = ""
    name: str = ""
    description: str = ""
    capabilities: Tuple[str, ...] = ()
    version: str = "1.0.0"

    @abstractmethod
    async def handle(self, context: ExecutionContext) -> AgentOutcome:
        ...

    def can_handle(self, capability: str, context: ExecutionContext) -> bool:
        """Pre-flight check; override to reject contexts missing required input."""
        return True

    def as_spec(self, source: str = "builtin") -> AgentSpec:
        return AgentSpec(
            id=self.id,
            name=self.name,
            capabilities=self.capabilities,
            handler=self.handle,
            description=self.description,
            version=self.version,
            source=source,
            can_handle=self.can_handle,
        )
