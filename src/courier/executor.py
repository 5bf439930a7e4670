"""Request executor: run a request thunk and normalize how it fails.

Three call conventions share one classification rule:

- ``execute_with_result``: never raises; returns ``Ok(value)`` or ``Err(failure)``.
- ``execute_void``: returns ``None`` or raises a ``Failure``.
- ``execute_without_result``: returns the value or raises a ``Failure``.

Only ``Failure`` values ever escape the raising conventions. The original
error is logged at DEBUG and then dropped; failures carry no cause.

Cancelling the calling task propagates ``asyncio.CancelledError`` untouched,
as do interpreter exits. A ``CancelledError`` from something the thunk awaited
(the caller itself not being cancelled) classifies as ``CANCELLED``, as does
request-level cancellation via ``CancelToken`` (``RequestCancelledError``).
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, TypeVar

from courier.errors import TransportError
from courier.failures import Failure, FailureKind
from courier.result import Err, Ok

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from courier.result import Result

T = TypeVar("T")

logger = logging.getLogger(__name__)


def classify(exc: BaseException) -> Failure:
    """Map any raised error to exactly one default ``Failure``.

    Transport errors keep their kind; a ``Failure`` re-enters as a fresh
    default of its kind; a stray ``asyncio.CancelledError`` becomes
    ``CANCELLED``; everything else becomes ``UNKNOWN``.
    """
    if isinstance(exc, (TransportError, Failure)):
        kind = exc.kind
    elif isinstance(exc, asyncio.CancelledError):
        kind = FailureKind.CANCELLED
    else:
        kind = FailureKind.UNKNOWN

    logger.debug("Classified %s as %s", type(exc).__name__, kind.value)
    return Failure.from_kind(kind)


def _caller_is_cancelling() -> bool:
    """True when the running task itself has a pending cancellation request."""
    task = asyncio.current_task()
    return task is not None and task.cancelling() > 0


class RequestExecutor:
    """Run zero-argument async operations and normalize their failures.

    Stateless: one instance can serve any number of concurrent callers.

    Example:
        executor = RequestExecutor()
        result = await executor.execute_with_result(lambda: transport.get("/users"))
        match result:
            case Ok(response):
                print(response.json())
            case Err(failure):
                print(failure.title, failure.message)
    """

    async def execute_with_result(
        self, thunk: Callable[[], Awaitable[T]]
    ) -> Result[T]:
        """Await *thunk* once and wrap the outcome; never raises for ``Exception``."""
        try:
            value = await thunk()
        except asyncio.CancelledError as exc:
            if _caller_is_cancelling():
                raise
            return Err(classify(exc))
        except Exception as exc:
            return Err(classify(exc))
        return Ok(value)

    async def execute_void(self, thunk: Callable[[], Awaitable[object]]) -> None:
        """Await *thunk* once; raise a ``Failure`` if it fails."""
        try:
            await thunk()
        except asyncio.CancelledError as exc:
            if _caller_is_cancelling():
                raise
            raise classify(exc) from None
        except Exception as exc:
            raise classify(exc) from None

    async def execute_without_result(self, thunk: Callable[[], Awaitable[T]]) -> T:
        """Await *thunk* once and return its value; raise a ``Failure`` if it fails."""
        try:
            return await thunk()
        except asyncio.CancelledError as exc:
            if _caller_is_cancelling():
                raise
            raise classify(exc) from None
        except Exception as exc:
            raise classify(exc) from None
