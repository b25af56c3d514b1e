"""
Shared fixtures: recording CRM doubles, gateway doubles and a temporary
role library. No test talks to a real language model or CRM.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from agents.errors import GatewayError
from agents.registry import CapabilityRegistry
from models.schemas import AuditRecord
from subagents.gateway import Completion
from subagents.resolver import RoleSpecResolver


class RecordingCRM:
    """Audit sink double that records every call; optionally fails."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.records: List[AuditRecord] = []

    def audit_agent_run(self, record: AuditRecord) -> Dict[str, Any]:
        self.records.append(record)
        if self.fail:
            raise RuntimeError("CRM is down")
        return {"id": f"audit_{len(self.records)}"}

    def get_agent_audit_logs(
        self,
        record_type: Optional[str] = None,
        record_id: Optional[str] = None,
        limit: int = 10,
    ) -> List[Dict[str, Any]]:
        if self.fail:
            raise RuntimeError("CRM is down")
        return [r.model_dump(mode="json", by_alias=True) for r in self.records][:limit]


class StubGateway:
    """Gateway double: answers with a fixed string or raises, counting calls."""

    def __init__(self, answer: str = "stub answer", error: Optional[Exception] = None):
        self.answer = answer
        self.error = error
        self.prompts: List[str] = []

    @property
    def calls(self) -> int:
        return len(self.prompts)

    async def complete(self, prompt: str) -> Completion:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return Completion(answer=self.answer)


SALES_EXECUTIVE_ROLE = """# Sales Executive

You are a senior enterprise account executive. Keep follow-ups short,
reference the last conversation, and always propose a concrete next step.
"""


@pytest.fixture
def registry():
    return CapabilityRegistry()


@pytest.fixture
def crm():
    return RecordingCRM()


@pytest.fixture
def failing_crm():
    return RecordingCRM(fail=True)


@pytest.fixture
def gateway():
    return StubGateway(answer="Here is your follow-up draft.")


@pytest.fixture
def unreachable_gateway():
    return StubGateway(error=GatewayError("connection refused"))


@pytest.fixture
def role_library(tmp_path: Path) -> Path:
    library = tmp_path / "Subagents-collection"
    library.mkdir()
    (library / "sales-executive.md").write_text(SALES_EXECUTIVE_ROLE, encoding="utf-8")
    (library / "Python Pro.md").write_text("# Python Pro\nWrite idiomatic Python.", encoding="utf-8")
    (library / "inside-sales-rep.md").write_text("# Inside Sales\nQualify inbound leads.", encoding="utf-8")
    (library / "notes.txt").write_text("not a role", encoding="utf-8")
    return library


@pytest.fixture
def resolver(role_library: Path) -> RoleSpecResolver:
    return RoleSpecResolver(role_library)
