import re
from collections.abc import Iterable, Sequence

from litreview.models import CitationMapping, LiteratureRecord, parse_year
from litreview.utils.logger import logger

_NUMBER_OR_RANGE = r'\s*\d+\s*(?:[-–—]\s*\d+\s*)?'
CITATION_MARKER = re.compile(rf'\[({_NUMBER_OR_RANGE}(?:[,，、;]{_NUMBER_OR_RANGE})*)\]')
_RANGE = re.compile(r'(\d+)\s*[-–—]\s*(\d+)')

UNMAPPED = 999


def _expand(part: str, upper: int) -> list[int]:
	match = _RANGE.fullmatch(part.strip())
	if not match:
		return [int(part)]

	start, end = int(match.group(1)), int(match.group(2))
	# clipped to [1, upper]
	if start <= end:
		return list(range(max(start, 1), min(end, upper) + 1))
	return list(range(min(start, upper), max(end, 1) - 1, -1))


def extract_citation_numbers(text: str, literature_count: int) -> list[int]:
	"""All in-range citation numbers in reading order, ranges expanded, repeats kept."""
	numbers: list[int] = []
	for marker in CITATION_MARKER.finditer(text or ''):
		for part in re.split(r'[,，、;]', marker.group(1)):
			if not part.strip():
				continue
			numbers.extend(n for n in _expand(part, literature_count) if 1 <= n <= literature_count)
	return numbers


def first_use_order(text: str, literature_count: int) -> list[int]:
	seen: set[int] = set()
	order: list[int] = []
	for number in extract_citation_numbers(text, literature_count):
		if number not in seen:
			seen.add(number)
			order.append(number)
	return order


class CitationReconciler:
	"""Renumbers literature by the order in which generated text first cites it.

	Markers are read against the numbers the prompts showed: ``actual_index`` when a
	record has one, otherwise ``initial_index``.
	"""

	def reconcile(self, text: str, literature: Sequence[LiteratureRecord]) -> list[LiteratureRecord]:
		by_number: dict[int, LiteratureRecord] = {}
		for position, record in enumerate(literature, 1):
			number = record.display_index if record.display_index is not None else position
			by_number.setdefault(number, record)

		order = first_use_order(text, len(literature))
		reconciled: list[LiteratureRecord] = []
		cited: set[int] = set()

		for number in order:
			record = by_number.get(number)
			if record is None:
				continue
			cited.add(number)
			reconciled.append(record.copy(actual_index=len(reconciled) + 1))

		uncited = sorted(
			((record.initial_index if record.initial_index is not None else number, number), record)
			for number, record in by_number.items()
			if number not in cited
		)
		reconciled.extend(record.copy(actual_index=None) for _, record in uncited)

		logger.info(f'Citation reconciliation: {len(cited)} of {len(literature)} items cited')
		return reconciled


def sort_for_numbering(literature: Iterable[LiteratureRecord]) -> list[LiteratureRecord]:
	"""Sort by actual_index when assigned, then by initial_index."""

	def key(record: LiteratureRecord):
		has_actual = record.actual_index is not None
		return (0 if has_actual else 1, record.actual_index or 0, record.initial_index or 0)

	return sorted(literature, key=key)


def assign_initial_indices(literature: Iterable[LiteratureRecord]) -> list[LiteratureRecord]:
	"""Deduplicate a curated selection and number it 1..N in its current order."""
	indexed: list[LiteratureRecord] = []
	seen: set[str] = set()
	for record in literature:
		key = f'{record.title}_{record.url or ""}'
		if key in seen:
			continue
		seen.add(key)
		indexed.append(record.copy(initial_index=len(indexed) + 1, actual_index=None))
	return indexed


def reorder_by_mapping(
	literature: Sequence[LiteratureRecord], mapping: Sequence[CitationMapping] | None
) -> list[LiteratureRecord]:
	"""Order literature by mapped chapter, then paragraph, newest year first, and renumber it."""
	if not mapping:
		return [record.copy(chapter=None, paragraph=None) for record in literature]

	by_index = {entry.literature_index: entry for entry in mapping}

	def lookup(record: LiteratureRecord) -> CitationMapping | None:
		index = record.initial_index if record.initial_index is not None else (record.actual_index or 0)
		return by_index.get(index)

	def sort_key(item: tuple[int, LiteratureRecord]):
		position, record = item
		entry = lookup(record)
		chapter = (entry.chapter if entry and entry.chapter else None) or UNMAPPED
		paragraph = (entry.paragraph if entry and entry.paragraph else None) or UNMAPPED
		return (chapter, paragraph, -(parse_year(record.year) or 0), position)

	ordered = sorted(enumerate(literature), key=sort_key)
	result = []
	for new_index, (_, record) in enumerate(ordered, 1):
		entry = lookup(record)
		result.append(
			record.copy(
				actual_index=new_index,
				chapter=entry.chapter if entry else None,
				paragraph=entry.paragraph if entry else None,
			)
		)
	return result
