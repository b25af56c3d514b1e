"""Exceptions raised across the execution core.

Only InvalidInvocationError ever reaches a caller; the others are absorbed
at the Supervisor / SubagentInvoker boundaries.
"""


class InvalidInvocationError(ValueError):
    """A subagent was invoked without a usable task."""


class GatewayError(RuntimeError):
    """The language-model provider failed, timed out or returned nothing usable."""


class CRMError(RuntimeError):
    """The CRM collaborator could not read or persist audit data."""


class AgentTimeoutError(RuntimeError):
    """An agent handler exceeded the configured execution timeout."""
