"""
Unit tests for SubagentInvoker: fail-open behaviour and input validation.
"""

import pytest

from agents.errors import InvalidInvocationError
from subagents.invoker import SubagentInvoker
from subagents.prompts import build_prompt


@pytest.mark.asyncio
async def test_known_role_answers_through_gateway(resolver, gateway):
    invoker = SubagentInvoker(resolver, gateway)

    result = await invoker.invoke(
        agent="sales-executive",
        task="Write a follow-up email",
        context="Met the CMO at the summit",
    )

    assert result.answer == "Here is your follow-up draft."
    assert result.sources == []
    assert gateway.calls == 1
    prompt = gateway.prompts[0]
    assert "senior enterprise account executive" in prompt
    assert "Task:\nWrite a follow-up email" in prompt
    assert "Additional Context:\nMet the CMO at the summit" in prompt


@pytest.mark.asyncio
async def test_prompt_matches_composer_output(resolver, gateway):
    invoker = SubagentInvoker(resolver, gateway)

    await invoker.invoke(agent="python-pro", task="Review this function")

    role = resolver.resolve("python-pro")
    assert gateway.prompts == [build_prompt(role.text, "Review this function")]


@pytest.mark.asyncio
async def test_gateway_failure_falls_back_without_raising(resolver, unreachable_gateway):
    invoker = SubagentInvoker(resolver, unreachable_gateway)

    result = await invoker.invoke(agent="sales-executive", task="Write a follow-up email")

    assert unreachable_gateway.calls == 1
    assert result.answer.startswith("I'm a sales-executive subagent.")
    assert "Write a follow-up email" in result.answer
    assert "subagent library is not currently available" in result.answer
    assert result.sources == []


@pytest.mark.asyncio
async def test_unknown_role_falls_back_without_calling_gateway(resolver, gateway):
    invoker = SubagentInvoker(resolver, gateway)

    result = await invoker.invoke(agent="quantum-astrologer", task="Read my stars")

    assert "quantum-astrologer" in result.answer
    assert "Read my stars" in result.answer
    assert result.sources == []
    assert gateway.calls == 0


@pytest.mark.asyncio
async def test_missing_library_falls_back(tmp_path, gateway):
    from subagents.resolver import RoleSpecResolver

    invoker = SubagentInvoker(RoleSpecResolver(tmp_path / "missing"), gateway)

    result = await invoker.invoke(agent="sales-executive", task="Draft an intro")

    assert result.answer.startswith("I'm a sales-executive subagent.")
    assert gateway.calls == 0


@pytest.mark.asyncio
async def test_fallback_is_deterministic(resolver, unreachable_gateway):
    invoker = SubagentInvoker(resolver, unreachable_gateway)

    first = await invoker.invoke(agent="sales-executive", task="Same task")
    second = await invoker.invoke(agent="sales-executive", task="Same task")

    assert first == second


@pytest.mark.asyncio
@pytest.mark.parametrize("task", ["", "   ", None])
async def test_empty_task_is_rejected_before_any_io(resolver, gateway, task):
    invoker = SubagentInvoker(resolver, gateway)

    with pytest.raises(InvalidInvocationError, match="Missing required field: task"):
        await invoker.invoke(agent="sales-executive", task=task)

    assert gateway.calls == 0


def test_list_subagents_reads_library(resolver, gateway):
    invoker = SubagentInvoker(resolver, gateway)

    assert "sales-executive" in invoker.list_subagents()
