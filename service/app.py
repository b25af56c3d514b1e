"""
FastAPI service exposing the execution core.

Endpoints:
- POST /agents/run          - execute a capability (ExecutionResult envelope)
- GET  /agents/history      - recent audit records for a CRM record
- GET  /capabilities        - supported capabilities and registry stats
- GET  /capabilities/{cap}  - agent serving a capability
- POST /subagents/invoke    - role-based subagent task
- POST /subagents/{agent}   - same, agent named in the path
- GET  /subagents/list      - role library roster
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from agents.errors import InvalidInvocationError
from config.logging_config import setup_logging
from graph.build_runtime import Runtime, build_runtime
from models.schemas import (
    AgentInfo,
    ExecutionContext,
    ExecutionResult,
    RunCapabilityRequest,
    SubagentInvocation,
    SubagentResult,
)

logger = logging.getLogger(__name__)


def create_app(runtime: Optional[Runtime] = None) -> FastAPI:
    setup_logging()
    runtime = runtime or build_runtime()
    supervisor = runtime.supervisor
    invoker = runtime.invoker

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await supervisor.flush_audits()

    app = FastAPI(
        title="Agent Execution Service",
        description="Capability-routed agent execution and subagent invocation",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.runtime = runtime

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root():
        return {
            "service": "Agent Execution Service",
            "status": "running",
            "endpoints": {
                "run": "/agents/run - Execute a capability",
                "history": "/agents/history - Recent executions for a record",
                "capabilities": "/capabilities - Capability discovery",
                "subagents": "/subagents/invoke - Role-based subagent task",
            },
        }

    @app.post("/agents/run", response_model=ExecutionResult)
    async def run_capability(request: RunCapabilityRequest):
        if not request.capability:
            return JSONResponse(status_code=400, content={"error": "capability is required"})
        context = ExecutionContext.model_validate(request.model_dump(exclude={"capability"}))
        return await supervisor.execute(request.capability, context)

    @app.get("/agents/history")
    async def execution_history(
        record_type: Optional[str] = Query(None, alias="recordType"),
        record_id: Optional[str] = Query(None, alias="recordId"),
        limit: int = Query(10, ge=1, le=100),
    ):
        # Audits from this process are written in the background; land them before reading back.
        await supervisor.flush_audits()
        logs = await supervisor.get_execution_history(record_type, record_id, limit)
        return {"logs": logs}

    @app.get("/capabilities")
    async def capabilities():
        return {
            "capabilities": supervisor.get_supported_capabilities(),
            "stats": runtime.registry.get_stats().model_dump(by_alias=True),
        }

    @app.get("/capabilities/{capability}", response_model=AgentInfo)
    async def capability_info(capability: str):
        info = supervisor.get_agent_info(capability)
        if info is None:
            return JSONResponse(status_code=404, content={"error": f"Unknown capability: {capability}"})
        return info

    async def _invoke(agent: Optional[str], body: SubagentInvocation):
        try:
            return await invoker.invoke(
                agent=agent or "",
                task=body.task,
                context=body.context,
                company_id=body.company_id,
            )
        except InvalidInvocationError as e:
            return JSONResponse(status_code=400, content={"error": str(e)})

    @app.post("/subagents/invoke", response_model=SubagentResult)
    async def invoke_subagent(body: SubagentInvocation):
        return await _invoke(body.agent, body)

    @app.get("/subagents/list")
    async def list_subagents():
        return {"agents": invoker.list_subagents()}

    @app.post("/subagents/{agent}", response_model=SubagentResult)
    async def invoke_named_subagent(agent: str, body: SubagentInvocation):
        return await _invoke(agent, body)

    return app
