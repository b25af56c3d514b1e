from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    # snake_case in Python, camelCase on the wire
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExecutionContext(CamelModel):
    record_type: Optional[str] = None
    record_id: Optional[str] = None
    user_id: Optional[str] = None
    org_id: Optional[str] = None
    payload: Dict[str, Any] = Field(default_factory=dict)


class ExecutionMetadata(CamelModel):
    duration_ms: float
    timestamp: datetime = Field(default_factory=utcnow)
    agent_id: Optional[str] = None


class ExecutionResult(CamelModel):
    ok: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    metadata: ExecutionMetadata


class RunCapabilityRequest(ExecutionContext):
    capability: Optional[str] = None


class Source(CamelModel):
    title: str
    url: str
    snippet: str = ""


class SubagentInvocation(CamelModel):
    agent: Optional[str] = None
    task: Optional[str] = None
    context: Optional[str] = None
    company_id: Optional[str] = None


class SubagentResult(CamelModel):
    answer: str
    sources: List[Source] = Field(default_factory=list)


class AuditRecord(CamelModel):
    agent_id: Optional[str] = None
    capability: str
    record_type: Optional[str] = None
    record_id: Optional[str] = None
    user_id: Optional[str] = None
    org_id: Optional[str] = None
    payload: Dict[str, Any] = Field(default_factory=dict)
    result: Dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=utcnow)


class RegistryStats(CamelModel):
    total_agents: int
    capabilities: int
    builtin_agents: int = 0
    external_agents: int = 0


class AgentInfo(CamelModel):
    id: str
    name: str
    description: str = ""
