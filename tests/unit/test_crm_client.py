"""
Unit tests for the CRM audit collaborators.
"""

from unittest.mock import MagicMock

import pytest
import requests

from agents.errors import CRMError
from crm.client import HttpCRMClient, InMemoryCRM, build_crm
from models.schemas import AuditRecord


def _record(record_id="acc_1", capability="enrichment.waterfall"):
    return AuditRecord(
        agent_id="enrichment-waterfall",
        capability=capability,
        record_type="ACCOUNT",
        record_id=record_id,
        payload={"maxCost": 50},
        result={"ok": True},
    )


def test_in_memory_crm_returns_newest_first_and_filters():
    crm = InMemoryCRM()
    first = crm.audit_agent_run(_record("acc_1", "a.one"))
    crm.audit_agent_run(_record("acc_2", "a.two"))
    crm.audit_agent_run(_record("acc_1", "a.three"))

    assert first["id"] == "audit_1"
    assert first["agentId"] == "enrichment-waterfall"

    logs = crm.get_agent_audit_logs("ACCOUNT", "acc_1")
    assert [log["capability"] for log in logs] == ["a.three", "a.one"]

    assert len(crm.get_agent_audit_logs(limit=2)) == 2


def test_http_client_posts_camel_case_record():
    session = MagicMock()
    session.post.return_value.json.return_value = {"id": "log_9"}
    client = HttpCRMClient("http://crm.local/api/", timeout=2.0, session=session)

    assert client.audit_agent_run(_record()) == {"id": "log_9"}

    url = session.post.call_args.args[0]
    body = session.post.call_args.kwargs["json"]
    assert url == "http://crm.local/api/agent-audit-logs"
    assert body["recordType"] == "ACCOUNT"
    assert body["agentId"] == "enrichment-waterfall"
    assert session.post.call_args.kwargs["timeout"] == 2.0


def test_http_client_wraps_transport_errors():
    session = MagicMock()
    session.post.side_effect = requests.ConnectionError("refused")
    client = HttpCRMClient("http://crm.local", session=session)

    with pytest.raises(CRMError, match="audit write failed"):
        client.audit_agent_run(_record())


def test_http_client_reads_logs_envelope():
    session = MagicMock()
    session.get.return_value.json.return_value = {"logs": [{"capability": "a.one"}]}
    client = HttpCRMClient("http://crm.local", session=session)

    logs = client.get_agent_audit_logs("ACCOUNT", "acc_1", limit=5)

    assert logs == [{"capability": "a.one"}]
    assert session.get.call_args.kwargs["params"] == {"limit": 5, "recordType": "ACCOUNT", "recordId": "acc_1"}


def test_http_client_rejects_unexpected_listing():
    session = MagicMock()
    session.get.return_value.json.return_value = "nope"
    client = HttpCRMClient("http://crm.local", session=session)

    with pytest.raises(CRMError):
        client.get_agent_audit_logs()


def test_build_crm_picks_collaborator_from_url():
    assert isinstance(build_crm(None), InMemoryCRM)
    assert isinstance(build_crm("http://crm.local"), HttpCRMClient)
