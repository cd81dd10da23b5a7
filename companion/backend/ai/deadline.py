from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Set, TypeVar, Union

from companion.backend.ai.parsing import ModelClientError


logger = logging.getLogger(__name__)

T = TypeVar("T")

Operation = Union[Awaitable[T], Callable[[], Awaitable[T]]]
Fallback = Union[T, Callable[[], T]]

# Late operations are kept referenced until they finish so they are not
# garbage collected mid-flight; their outcome is dropped.
_LATE_TASKS: Set["asyncio.Future[Any]"] = set()


def _resolve_fallback(fallback: Fallback) -> Any:
	return fallback() if callable(fallback) else fallback


def _discard_late_outcome(task: "asyncio.Future[Any]") -> None:
	_LATE_TASKS.discard(task)
	if task.cancelled():
		return
	exc = task.exception()
	if exc is not None:
		logger.debug("Late operation failed after its deadline: %r", exc)


def _detach(task: "asyncio.Future[Any]") -> None:
	_LATE_TASKS.add(task)
	task.add_done_callback(_discard_late_outcome)


def pending_late_operations() -> int:
	return len(_LATE_TASKS)


def _describe(exc: BaseException) -> str:
	if isinstance(exc, ModelClientError):
		return exc.code
	return exc.__class__.__name__


async def with_deadline(
	operation: Operation,
	deadline_s: float,
	fallback: Fallback,
	*,
	label: str = "operation",
) -> Any:
	"""Race ``operation`` against ``deadline_s`` seconds.

	Returns the operation's value when it finishes first. When the deadline
	fires first, or the operation raises, ``fallback`` is returned instead
	(called once if it is a zero-argument callable). A late operation keeps
	running in the background and its outcome is discarded.
	"""
	try:
		awaitable = operation() if callable(operation) else operation
		task = asyncio.ensure_future(awaitable)
	except Exception as exc:
		logger.warning("%s could not start (%s); using fallback.", label, _describe(exc))
		return _resolve_fallback(fallback)

	try:
		done, _pending = await asyncio.wait({task}, timeout=max(deadline_s, 0))
	except asyncio.CancelledError:
		_detach(task)
		raise

	if task not in done:
		_detach(task)
		logger.warning("%s exceeded its %.1fs deadline; using fallback.", label, deadline_s)
		return _resolve_fallback(fallback)
	if task.cancelled():
		logger.warning("%s was cancelled; using fallback.", label)
		return _resolve_fallback(fallback)
	exc = task.exception()
	if exc is not None:
		logger.warning("%s failed (%s); using fallback.", label, _describe(exc))
		return _resolve_fallback(fallback)
	return task.result()
