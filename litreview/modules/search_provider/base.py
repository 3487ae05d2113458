from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from litreview.errors import ProviderQueryError
from litreview.models import LiteratureRecord


class SearchProvider(ABC):
	name = 'provider'

	@abstractmethod
	def search(self, keyword: str, limit: int, min_year: int | None = None) -> list[LiteratureRecord]:
		raise NotImplementedError


@dataclass(frozen=True)
class ProviderSuccess:
	records: list[LiteratureRecord]
	ok = True


@dataclass(frozen=True)
class ProviderFailure:
	error: ProviderQueryError
	ok = False

	@property
	def records(self) -> list[LiteratureRecord]:
		return []


ProviderResponse = ProviderSuccess | ProviderFailure


def _to_record(item: Any, source: str | None) -> LiteratureRecord | None:
	if isinstance(item, LiteratureRecord):
		return item
	if isinstance(item, Mapping):
		record = LiteratureRecord.from_dict(dict(item))
		if source and not record.source:
			record.source = source
		return record
	return None


def normalize_provider_response(raw: Any, query: str, source: str | None = None) -> ProviderResponse:
	"""Collapse the shapes a collaborator may hand back into one result type.

	Accepted: a bare list, ``{"results": [...]}`` and ``{"success": bool, "results": [...], "error": str}``.
	Entries without a title are dropped.
	"""
	if raw is None:
		return ProviderSuccess(records=[])

	items: Any = raw
	if isinstance(raw, Mapping):
		if raw.get('success') is False:
			return ProviderFailure(error=ProviderQueryError(query, raw.get('error') or 'provider reported failure'))
		items = raw.get('results', [])

	if not isinstance(items, list | tuple):
		return ProviderFailure(error=ProviderQueryError(query, f'unexpected response type {type(items).__name__}'))

	records = []
	for item in items:
		record = _to_record(item, source)
		if record is not None and record.title:
			records.append(record)
	return ProviderSuccess(records=records)


def query_provider(provider: Any, keyword: str, limit: int, min_year: int | None) -> ProviderResponse:
	"""Call ``provider.search`` and turn any raised error into a ProviderFailure."""
	source = getattr(provider, 'name', None)
	try:
		raw = provider.search(keyword, limit, min_year)
	except Exception as e:
		return ProviderFailure(error=ProviderQueryError(keyword, e))
	return normalize_provider_response(raw, keyword, source)
