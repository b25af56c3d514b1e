from typing import Any, Awaitable, Callable, Dict, Iterable, Optional, Tuple, Union

from models.schemas import ExecutionContext

AgentOutcome = Optional[Dict[str, Any]]
AgentHandler = Callable[[ExecutionContext], Union[AgentOutcome, Awaitable[AgentOutcome]]]
ContextPredicate = Callable[[str, ExecutionContext], bool]

AGENT_SOURCES = ("builtin", "external")


class AgentSpec:
    """Descriptor the registry stores for one agent.

    The handler may be a plain function or a coroutine function; the
    Supervisor decides how to run it. can_handle is an optional pre-flight
    check on (capability, context); without one, an agent accepts any
    context for the capabilities it declares.
    """

    __slots__ = (
        "id", "name", "capabilities", "handler", "description", "version", "source", "_can_handle",
    )

    def __init__(
        self,
        id: str,
        name: str,
        capabilities: Iterable[str],
        handler: AgentHandler,
        description: str = "",
        version: str = "1.0.0",
        source: str = "builtin",
        can_handle: Optional[ContextPredicate] = None,
    ):
        if source not in AGENT_SOURCES:
            raise ValueError(f"Unknown agent source: {source}")
        # dict.fromkeys keeps first-seen order while dropping duplicates
        caps: Tuple[str, ...] = tuple(dict.fromkeys(capabilities))
        object.__setattr__(self, "id", id)
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "capabilities", caps)
        object.__setattr__(self, "handler", handler)
        object.__setattr__(self, "description", description)
        object.__setattr__(self, "version", version)
        object.__setattr__(self, "source", source)
        object.__setattr__(self, "_can_handle", can_handle)

    def can_handle(self, capability: str, context: ExecutionContext) -> bool:
        if capability not in self.capabilities:
            return False
        if self._can_handle is None:
            return True
        return bool(self._can_handle(capability, context))

    def __setattr__(self, key, value):
        raise AttributeError(f"AgentSpec is immutable (tried to set {key!r})")

    def __repr__(self) -> str:
        return f"AgentSpec(id={self.id!r}, capabilities={list(self.capabilities)!r}, source={self.source!r})"
