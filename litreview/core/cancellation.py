import random
import threading
import time
from collections.abc import Callable, Iterable, Iterator
from typing import Generic, TypeVar

T = TypeVar('T')


class CancellationToken:
	"""Advisory stop flag shared between a running stage and whoever may stop it.

	Setting the flag never interrupts an in-flight call; stages poll it at their checkpoints.
	"""

	def __init__(self):
		self._event = threading.Event()

	def cancel(self) -> None:
		self._event.set()

	@property
	def cancelled(self) -> bool:
		return self._event.is_set()

	def reset(self) -> None:
		self._event.clear()


class CancellableRun(Generic[T]):
	"""Iterates work items, stopping at the first checkpoint that sees the token set.

	Stage loops call ``checkpoint()`` between I/O steps; a True result means the caller
	should return what it has so far. Iteration itself checks before yielding each item.
	"""

	def __init__(self, items: Iterable[T], token: CancellationToken | None = None):
		self._items = list(items)
		self.token = token or CancellationToken()
		self.stopped = False

	def __len__(self) -> int:
		return len(self._items)

	def __iter__(self) -> Iterator[tuple[int, T]]:
		for index, item in enumerate(self._items, 1):
			if self.checkpoint():
				return
			yield index, item

	def checkpoint(self) -> bool:
		if self.token.cancelled:
			self.stopped = True
		return self.stopped


class PacingDelay:
	"""Randomized wait within a fixed window between consecutive external queries."""

	def __init__(
		self,
		min_seconds: float = 2.0,
		max_seconds: float = 5.0,
		sleep: Callable[[float], None] = time.sleep,
		rng: random.Random | None = None,
	):
		if min_seconds < 0 or max_seconds < min_seconds:
			raise ValueError(f'Invalid pacing window: [{min_seconds}, {max_seconds}]')
		self.min_seconds = min_seconds
		self.max_seconds = max_seconds
		self._sleep = sleep
		self._rng = rng or random.Random()

	def next_delay(self) -> float:
		return self._rng.uniform(self.min_seconds, self.max_seconds)

	def wait(self) -> float:
		delay = self.next_delay()
		if delay > 0:
			self._sleep(delay)
		return delay
