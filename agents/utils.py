import asyncio
import inspect
from typing import Any, Callable


async def call_maybe_async(func: Callable[..., Any], *args: Any) -> Any:
    """
    Run func to completion from async code.

    Coroutine functions are awaited directly. Plain callables run in a worker
    thread so blocking I/O (requests, file reads) does not stall the event
    loop; if they hand back an awaitable it is awaited as well.
    """
    if inspect.iscoroutinefunction(func):
        return await func(*args)

    result = await asyncio.to_thread(func, *args)
    if inspect.isawaitable(result):
        return await result
    return result


def describe_error(exc: BaseException) -> str:
    message = str(exc).strip()
    return message or type(exc).__name__
