"""Tagged result of a wrapped operation.

The command wrapper turns every invocation into exactly one Outcome before
touching the logs, so "success or failure, never both" holds by construction.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Union


@dataclass(frozen=True)
class Success:
    value: Any = None


@dataclass(frozen=True)
class Failure:
    error: Exception
    message: str


Outcome = Union[Success, Failure]


def describe_error(error: Exception) -> str:
    """Human-readable description of an exception for the error log."""
    text = str(error)
    return text if text else type(error).__name__


async def capture(
    operation: Callable[..., Union[Any, Awaitable[Any]]],
    *args,
    error_message: str | None = None,
    **kwargs,
) -> Outcome:
    """Run ``operation`` and fold its result or exception into an Outcome.

    Coroutine functions are awaited; plain callables are called directly and
    their return value awaited only if it is awaitable. Never raises for
    ``Exception`` subclasses — cancellation and interpreter exits propagate.
    """
    try:
        result = operation(*args, **kwargs)
        if inspect.isawaitable(result):
            result = await result
    except Exception as e:
        return Failure(error=e, message=error_message or describe_error(e))
    return Success(result)
