"""Command-line entry point for the agent execution core.

    python main.py list
    python main.py run conversation.insights --record-type ACCOUNT --record-id acc_1 --payload '{"transcript": "They asked about pricing tiers."}'
    python main.py ask sales-executive "Draft a follow-up" --context "Met the CMO yesterday"
"""

import argparse
import asyncio
import json
import sys

from agents.errors import InvalidInvocationError
from config.logging_config import setup_logging
from graph.build_runtime import build_runtime
from graph.execution_graph import build_execution_graph
from models.schemas import ExecutionContext


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Capability-routed agent execution")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List capabilities and subagent roles")

    run = sub.add_parser("run", help="Execute a capability")
    run.add_argument("capability")
    run.add_argument("--record-type")
    run.add_argument("--record-id")
    run.add_argument("--payload", default="{}", help="JSON object passed to the agent")

    ask = sub.add_parser("ask", help="Invoke a role-based subagent")
    ask.add_argument("agent")
    ask.add_argument("task")
    ask.add_argument("--context")
    ask.add_argument("--company-id")

    return parser


async def _run(args) -> int:
    runtime = build_runtime()

    if args.command == "list":
        print("Capabilities:")
        for capability in runtime.supervisor.get_supported_capabilities():
            info = runtime.supervisor.get_agent_info(capability)
            print(f"  {capability:<28} {info.id if info else '-'}")
        print("Subagents:")
        for slug in runtime.invoker.list_subagents():
            print(f"  {slug}")
        return 0

    if args.command == "run":
        try:
            payload = json.loads(args.payload)
        except json.JSONDecodeError as e:
            print(f"--payload is not valid JSON: {e}", file=sys.stderr)
            return 2
        if not isinstance(payload, dict):
            print("--payload must be a JSON object", file=sys.stderr)
            return 2

        context = ExecutionContext(
            record_type=args.record_type,
            record_id=args.record_id,
            payload=payload,
        )
        workflow = build_execution_graph(runtime.supervisor)
        state = await workflow.ainvoke({
            "capability": args.capability,
            "context": context.model_dump(),
        })
        await runtime.supervisor.flush_audits()
        result = state["result"]
        print(json.dumps(result, indent=2))
        return 0 if result["ok"] else 1

    try:
        result = await runtime.invoker.invoke(
            agent=args.agent,
            task=args.task,
            context=args.context,
            company_id=args.company_id,
        )
    except InvalidInvocationError as e:
        print(str(e), file=sys.stderr)
        return 2
    print(result.answer)
    return 0


def main(argv=None) -> int:
    setup_logging()
    args = build_parser().parse_args(argv)
    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(main())
