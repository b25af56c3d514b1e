"""
CRM collaborator used by the Supervisor for audit side effects.

The execution core owns no persistence: audit records are handed to whatever
implements AuditSink. HttpCRMClient talks to the CRM over HTTP; InMemoryCRM
is the default when no CRM_BASE_URL is configured.
"""

import logging
import threading
from typing import Any, Dict, List, Optional, Protocol

import requests

from agents.errors import CRMError
from models.schemas import AuditRecord

logger = logging.getLogger(__name__)


class AuditSink(Protocol):
    def audit_agent_run(self, record: AuditRecord) -> Dict[str, Any]:
        ...

    def get_agent_audit_logs(
        self,
        record_type: Optional[str] = None,
        record_id: Optional[str] = None,
        limit: int = 10,
    ) -> List[Dict[str, Any]]:
        ...


class HttpCRMClient:
    """Blocking HTTP client; the Supervisor calls it from a worker thread."""

    def __init__(self, base_url: str, timeout: float = 5.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def audit_agent_run(self, record: AuditRecord) -> Dict[str, Any]:
        url = f"{self.base_url}/agent-audit-logs"
        try:
            response = self._session.post(
                url,
                json=record.model_dump(mode="json", by_alias=True),
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            raise CRMError(f"CRM audit write failed at {url}: {e}") from e
        except ValueError as e:
            raise CRMError(f"CRM returned a non-JSON audit response from {url}") from e

    def get_agent_audit_logs(
        self,
        record_type: Optional[str] = None,
        record_id: Optional[str] = None,
        limit: int = 10,
    ) -> List[Dict[str, Any]]:
        url = f"{self.base_url}/agent-audit-logs"
        params: Dict[str, Any] = {"limit": limit}
        if record_type and record_id:
            params["recordType"] = record_type
            params["recordId"] = record_id
        try:
            response = self._session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            body = response.json()
        except requests.RequestException as e:
            raise CRMError(f"CRM audit read failed at {url}: {e}") from e
        except ValueError as e:
            raise CRMError(f"CRM returned a non-JSON audit listing from {url}") from e

        if isinstance(body, dict):
            body = body.get("logs", [])
        if not isinstance(body, list):
            raise CRMError(f"Unexpected audit listing format from {url}: {type(body).__name__}")
        return body


class InMemoryCRM:
    """Process-local audit log, newest first on read."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: List[Dict[str, Any]] = []

    def audit_agent_run(self, record: AuditRecord) -> Dict[str, Any]:
        with self._lock:
            stored = {"id": f"audit_{len(self._records) + 1}", **record.model_dump(mode="json", by_alias=True)}
            self._records.append(stored)
        return stored

    def get_agent_audit_logs(
        self,
        record_type: Optional[str] = None,
        record_id: Optional[str] = None,
        limit: int = 10,
    ) -> List[Dict[str, Any]]:
        with self._lock:
            records = list(self._records)
        if record_type and record_id:
            records = [
                r for r in records
                if r.get("recordType") == record_type and r.get("recordId") == record_id
            ]
        records.reverse()
        return records[:limit]


def build_crm(base_url: Optional[str], timeout: float = 5.0) -> AuditSink:
    if base_url:
        logger.info("Using HTTP CRM collaborator at %s", base_url)
        return HttpCRMClient(base_url, timeout=timeout)
    logger.info("CRM_BASE_URL not set; audit records are kept in memory")
    return InMemoryCRM()
