import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


class CompletionStatus(Enum):
	PENDING = 'pending'
	PROCESSING = 'processing'
	COMPLETED = 'completed'
	FAILED = 'failed'


@dataclass(frozen=True)
class YearPolicy:
	recent_years: int
	percentage: int

	def is_active(self) -> bool:
		return self.recent_years > 0 and self.percentage > 0


@dataclass
class KeywordPlanItem:
	keyword: str
	min_year: int | None = None
	count: int = 1

	def to_dict(self) -> dict[str, Any]:
		return {'keyword': self.keyword, 'minYear': self.min_year, 'count': self.count}

	@classmethod
	def from_dict(cls, data: dict[str, Any]) -> 'KeywordPlanItem':
		return cls(
			keyword=str(data.get('keyword', '')).strip(),
			min_year=_coerce_int(data.get('minYear', data.get('min_year'))),
			count=max(_coerce_int(data.get('count')) or 1, 1),
		)


@dataclass
class LiteratureRecord:
	title: str
	authors: str | list[str] | None = None
	year: int | None = None
	journal: str | None = None
	abstract: str | None = None
	cited_count: int | None = None
	url: str | None = None
	completion_status: CompletionStatus = CompletionStatus.PENDING
	initial_index: int | None = None
	actual_index: int | None = None
	source: str | None = None
	selected: bool | None = None
	recommend_reason: str | None = None
	chapter: int | None = None
	paragraph: int | None = None
	extra: dict[str, Any] = field(default_factory=dict)

	@property
	def display_index(self) -> int | None:
		return self.actual_index if self.actual_index is not None else self.initial_index

	def authors_text(self, default: str = 'Unknown') -> str:
		if not self.authors:
			return default
		if isinstance(self.authors, list):
			return ', '.join(self.authors)
		return self.authors

	def copy(self, **changes: Any) -> 'LiteratureRecord':
		return replace(self, extra=dict(self.extra), **changes)

	def to_dict(self) -> dict[str, Any]:
		data = {
			'title': self.title,
			'authors': self.authors,
			'year': self.year,
			'journal': self.journal,
			'abstract': self.abstract,
			'citedCount': self.cited_count,
			'url': self.url,
			'completionStatus': self.completion_status.value,
			'initialIndex': self.initial_index,
			'actualIndex': self.actual_index,
		}
		optional = {
			'source': self.source,
			'selected': self.selected,
			'aiRecommendReason': self.recommend_reason,
			'chapter': self.chapter,
			'paragraph': self.paragraph,
		}
		data.update({key: value for key, value in optional.items() if value is not None})
		data.update(self.extra)
		return data

	@classmethod
	def from_dict(cls, data: dict[str, Any]) -> 'LiteratureRecord':
		known = {
			'title',
			'authors',
			'year',
			'journal',
			'abstract',
			'citedCount',
			'url',
			'completionStatus',
			'initialIndex',
			'actualIndex',
			'source',
			'selected',
			'aiRecommendReason',
			'chapter',
			'paragraph',
		}
		status = data.get('completionStatus') or CompletionStatus.PENDING.value
		try:
			completion_status = CompletionStatus(status)
		except ValueError:
			completion_status = CompletionStatus.PENDING

		return cls(
			title=str(data.get('title') or '').strip(),
			authors=data.get('authors'),
			year=parse_year(data.get('year')),
			journal=data.get('journal'),
			abstract=data.get('abstract'),
			cited_count=_coerce_int(data.get('citedCount')),
			url=data.get('url'),
			completion_status=completion_status,
			initial_index=_coerce_int(data.get('initialIndex')),
			actual_index=_coerce_int(data.get('actualIndex')),
			source=data.get('source'),
			selected=data.get('selected'),
			recommend_reason=data.get('aiRecommendReason'),
			chapter=_coerce_int(data.get('chapter')),
			paragraph=_coerce_int(data.get('paragraph')),
			extra={key: value for key, value in data.items() if key not in known},
		)


def parse_year(value: Any) -> int | None:
	"""Return a plausible publication year (1900 < year < 2100) or None."""
	if isinstance(value, bool) or value is None:
		return None
	if isinstance(value, int):
		year = value
	else:
		match = re.match(r'\s*(\d{4})', str(value))
		if not match:
			return None
		year = int(match.group(1))
	return year if 1900 < year < 2100 else None


def _coerce_int(value: Any) -> int | None:
	if value is None or isinstance(value, bool):
		return None
	try:
		return int(value)
	except (TypeError, ValueError):
		return None
