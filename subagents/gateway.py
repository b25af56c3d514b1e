"""
Language-model gateway used by the subagent path and LLM-backed agents.

Wraps a LangChain chat model behind a single complete(prompt) call. The
model is built on first use, so importing or wiring the service does not
require OPENAI_API_KEY; a missing key surfaces as a GatewayError.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from langchain_core.language_models import BaseChatModel
from langchain_core.prompts import ChatPromptTemplate

from agents.errors import GatewayError
from subagents.prompts import GATEWAY_SYSTEM_PROMPT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Completion:
    answer: str


class CompletionGateway(Protocol):
    async def complete(self, prompt: str) -> Completion:
        ...


class LanguageModelGateway:

    def __init__(
        self,
        llm: Optional[BaseChatModel] = None,
        llm_factory: Optional[Callable[[], BaseChatModel]] = None,
        timeout: Optional[float] = 30.0,
    ):
        if llm is None and llm_factory is None:
            raise ValueError("LanguageModelGateway needs an llm or an llm_factory")
        self._llm = llm
        self._llm_factory = llm_factory
        self.timeout = timeout
        self._prompt = ChatPromptTemplate.from_messages([
            ("system", GATEWAY_SYSTEM_PROMPT),
            ("human", "{prompt}"),
        ])

    @property
    def llm(self) -> BaseChatModel:
        if self._llm is None:
            self._llm = self._llm_factory()
        return self._llm

    async def complete(self, prompt: str) -> Completion:
        try:
            chain = self._prompt | self.llm
            call = chain.ainvoke({"prompt": prompt})
            if self.timeout:
                message = await asyncio.wait_for(call, timeout=self.timeout)
            else:
                message = await call
        except asyncio.TimeoutError:
            raise GatewayError(f"Language model did not answer within {self.timeout:g}s") from None
        except GatewayError:
            raise
        except Exception as e:
            raise GatewayError(f"Language model call failed: {e}") from e

        content = getattr(message, "content", message)
        if not isinstance(content, str):
            # Multi-part content: keep only the text blocks
            content = "".join(
                part.get("text", "") if isinstance(part, dict) else str(part)
                for part in content
            )
        logger.debug("Language model answered with %d chars", len(content))
        return Completion(answer=content)
