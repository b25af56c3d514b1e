"""
Unit tests for LanguageModelGateway using LangChain's fake chat models.
"""

import asyncio

import pytest
from langchain_core.language_models import FakeListChatModel

from agents.errors import GatewayError
from subagents.gateway import LanguageModelGateway


class SlowChatModel(FakeListChatModel):
    async def _agenerate(self, *args, **kwargs):
        await asyncio.sleep(1)
        return await super()._agenerate(*args, **kwargs)


@pytest.mark.asyncio
async def test_complete_returns_model_text():
    gateway = LanguageModelGateway(llm=FakeListChatModel(responses=["Three bullet points."]))

    completion = await gateway.complete("Summarise this")

    assert completion.answer == "Three bullet points."


@pytest.mark.asyncio
async def test_model_is_built_lazily():
    built = []

    def factory():
        built.append(True)
        return FakeListChatModel(responses=["ok"])

    gateway = LanguageModelGateway(llm_factory=factory)
    assert built == []

    await gateway.complete("hello")
    await gateway.complete("again")

    assert built == [True]


@pytest.mark.asyncio
async def test_factory_failure_becomes_gateway_error():
    def factory():
        raise RuntimeError("OPENAI_API_KEY is not set")

    gateway = LanguageModelGateway(llm_factory=factory)

    with pytest.raises(GatewayError, match="OPENAI_API_KEY"):
        await gateway.complete("hello")


@pytest.mark.asyncio
async def test_slow_model_times_out():
    gateway = LanguageModelGateway(llm=SlowChatModel(responses=["late"]), timeout=0.05)

    with pytest.raises(GatewayError, match="did not answer"):
        await gateway.complete("hello")


def test_gateway_requires_a_model_source():
    with pytest.raises(ValueError):
        LanguageModelGateway()
