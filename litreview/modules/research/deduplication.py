from collections.abc import Iterable, Sequence

from litreview.models import LiteratureRecord
from litreview.utils.logger import logger

from .title_matching import normalize_title


def _url_key(record: LiteratureRecord) -> str | None:
	url = (record.url or '').strip()
	return url or None


class LiteraturePool:
	"""Ordered, deduplicated literature collection.

	Two records are the same paper when their normalized titles match or they share a
	non-empty url. The first record seen is kept; later duplicates are dropped untouched.
	"""

	def __init__(self, records: Iterable[LiteratureRecord] = ()):
		self._records: list[LiteratureRecord] = []
		self._titles: set[str] = set()
		self._urls: set[str] = set()
		for record in records:
			self.add(record)

	def __len__(self) -> int:
		return len(self._records)

	def __iter__(self):
		return iter(self._records)

	def __contains__(self, record: object) -> bool:
		return isinstance(record, LiteratureRecord) and self._is_duplicate(record)

	@property
	def records(self) -> list[LiteratureRecord]:
		return list(self._records)

	def _is_duplicate(self, record: LiteratureRecord) -> bool:
		title = normalize_title(record.title)
		if title and title in self._titles:
			return True
		url = _url_key(record)
		return bool(url and url in self._urls)

	def add(self, record: LiteratureRecord) -> bool:
		if self._is_duplicate(record):
			logger.debug(f'Duplicate skipped: {record.title[:60]}')
			return False

		self._records.append(record)
		title = normalize_title(record.title)
		if title:
			self._titles.add(title)
		url = _url_key(record)
		if url:
			self._urls.add(url)
		return True

	def merge(self, records: Iterable[LiteratureRecord]) -> int:
		return sum(1 for record in records if self.add(record))


def deduplicate(records: Sequence[LiteratureRecord]) -> list[LiteratureRecord]:
	if not records:
		return []

	pool = LiteraturePool(records)
	removed = len(records) - len(pool)
	if removed:
		logger.info(f'Deduplication complete: {len(records)} → {len(pool)} ({removed} duplicates removed)')
	return pool.records
