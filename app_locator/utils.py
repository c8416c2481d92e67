import logging
import time
from collections.abc import Callable, Coroutine, Iterable, Sequence
from functools import wraps
from typing import Any, ParamSpec, TypeVar

logger = logging.getLogger(__name__)

P = ParamSpec('P')
R = TypeVar('R')
T = TypeVar('T')

ABSENT_TOKEN = 'null'


def is_valid(value: Any) -> bool:
	"""A value is usable when present, not the literal "null" token and not blank."""
	return isinstance(value, str) and value != ABSENT_TOKEN and value.strip() != ''


def valid_or_none(value: Any) -> str | None:
	return value if is_valid(value) else None


def chunked(items: Sequence[T], size: int) -> Iterable[Sequence[T]]:
	"""Yield consecutive fixed-size slices of `items` (the last one may be shorter)."""
	if size < 1:
		raise ValueError(f'chunk size must be >= 1, got {size}')
	for start in range(0, len(items), size):
		yield items[start : start + size]


def time_execution_sync(additional_text: str = '') -> Callable[[Callable[P, R]], Callable[P, R]]:
	def decorator(func: Callable[P, R]) -> Callable[P, R]:
		@wraps(func)
		def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
			start_time = time.time()
			result = func(*args, **kwargs)
			execution_time = time.time() - start_time
			if execution_time > 0.25:
				logger.debug(f'⏳ {additional_text.strip("-")}() took {execution_time:.2f}s')
			return result

		return wrapper

	return decorator


def time_execution_async(
	additional_text: str = '',
) -> Callable[[Callable[P, Coroutine[Any, Any, R]]], Callable[P, Coroutine[Any, Any, R]]]:
	def decorator(func: Callable[P, Coroutine[Any, Any, R]]) -> Callable[P, Coroutine[Any, Any, R]]:
		@wraps(func)
		async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
			start_time = time.time()
			result = await func(*args, **kwargs)
			execution_time = time.time() - start_time
			if execution_time > 0.25:
				logger.debug(f'⏳ {additional_text.strip("-")}() took {execution_time:.2f}s')
			return result

		return wrapper

	return decorator
