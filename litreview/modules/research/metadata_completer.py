import re
from collections.abc import Sequence

from litreview.core.cancellation import CancellableRun, CancellationToken
from litreview.models import CompletionStatus, CompletionSummary, LiteratureRecord, ProgressCallback, parse_year
from litreview.utils.logger import logger

from ..search_provider import ProviderFailure, SearchProvider, query_provider
from .title_matching import title_similarity

MIN_ABSTRACT_LENGTH = 150

_TRUNCATED_END = re.compile(r'(\.\.\.?|…)\s*$')
_SENTENCE_END = re.compile(r'[.!?。！？]["\'”’)\]]*\s*$')
_YEAR_IN_TEXT = re.compile(r'\b(19\d{2}|20\d{2})\b')


def is_abstract_complete(abstract: str | None) -> bool:
	"""An abstract counts as complete when it is long enough, ends a sentence and is not cut off."""
	if not abstract or not isinstance(abstract, str):
		return False
	trimmed = abstract.strip()
	if len(trimmed) < MIN_ABSTRACT_LENGTH:
		return False
	if _TRUNCATED_END.search(trimmed):
		return False
	return bool(_SENTENCE_END.search(trimmed))


def split_scraped_authors(authors: str) -> str:
	# scraped bylines look like "A Smith, B Lee - Journal, 2020 - site.org"
	dash = authors.find(' - ')
	return authors[:dash].strip() if dash > 0 else authors.strip()


def has_authors(authors: str | list[str] | None) -> bool:
	if not authors:
		return False
	if isinstance(authors, list):
		return any(str(a).strip() for a in authors)
	text = authors.strip()
	return bool(text) and ' - ' not in text


def has_journal(journal: str | None) -> bool:
	return isinstance(journal, str) and bool(journal.strip())


def is_record_complete(record: LiteratureRecord) -> bool:
	return (
		has_authors(record.authors)
		and parse_year(record.year) is not None
		and has_journal(record.journal)
		and is_abstract_complete(record.abstract)
	)


def missing_fields(record: LiteratureRecord) -> list[str]:
	missing = []
	if not has_authors(record.authors):
		missing.append('authors')
	if parse_year(record.year) is None:
		missing.append('year')
	if not has_journal(record.journal):
		missing.append('journal')
	if not is_abstract_complete(record.abstract):
		missing.append('abstract')
	return missing


class MetadataCompleter:
	def __init__(self, provider: SearchProvider, search_limit: int = 3, match_threshold: float = 30.0):
		self.provider = provider
		self.search_limit = max(search_limit, 1)
		self.match_threshold = match_threshold

	def complete(
		self,
		records: Sequence[LiteratureRecord],
		token: CancellationToken | None = None,
		on_progress: ProgressCallback | None = None,
	) -> CompletionSummary:
		summary = CompletionSummary(total=len(records))
		run = CancellableRun(records, token)

		def report(index: int, record: LiteratureRecord, message: str) -> None:
			if on_progress:
				on_progress(index, summary.total, record.title or 'Untitled', message)

		for index, record in run:
			record.completion_status = CompletionStatus.PROCESSING

			if is_record_complete(record):
				record.completion_status = CompletionStatus.COMPLETED
				summary.skipped += 1
				summary.completed += 1
				report(index, record, 'Already complete')
				continue

			if not record.title or not record.title.strip():
				record.completion_status = CompletionStatus.FAILED
				summary.failed += 1
				report(index, record, 'Missing title, cannot search')
				continue

			report(index, record, f'Completing {", ".join(missing_fields(record))}...')
			response = query_provider(self.provider, record.title.strip(), self.search_limit, None)
			if run.checkpoint():
				record.completion_status = CompletionStatus.PENDING
				break

			if isinstance(response, ProviderFailure):
				logger.warning(str(response.error))
			else:
				best, score = self.best_match(record.title, response.records)
				if best is not None and score > self.match_threshold:
					logger.debug(f'Matched "{record.title[:50]}" → "{best.title[:50]}" (score {score:.1f})')
					self.apply_match(record, best)
				else:
					logger.debug(f'No confident match for "{record.title[:50]}" (best score {score:.1f})')

			if record.abstract and record.abstract.strip():
				record.completion_status = CompletionStatus.COMPLETED
				summary.completed += 1
				report(index, record, 'Completed')
			else:
				record.completion_status = CompletionStatus.FAILED
				summary.failed += 1
				report(index, record, f'Completion failed: missing {", ".join(missing_fields(record))}')

		summary.cancelled = run.stopped
		logger.info(
			f'Completion finished: {summary.completed} completed ({summary.skipped} already complete), '
			f'{summary.failed} failed, of {summary.total}'
		)
		return summary

	def best_match(
		self, title: str, candidates: Sequence[LiteratureRecord]
	) -> tuple[LiteratureRecord | None, float]:
		best = None
		best_score = 0.0
		for candidate in candidates:
			score = title_similarity(title, candidate.title)
			if best is None or score > best_score:
				best, best_score = candidate, score
		return best, best_score

	def apply_match(self, record: LiteratureRecord, match: LiteratureRecord) -> bool:
		updated = False

		current_abstract = (record.abstract or '').strip()
		match_abstract = (match.abstract or '').strip()
		if match_abstract and not is_abstract_complete(current_abstract):
			if is_abstract_complete(match_abstract) or len(match_abstract) >= len(current_abstract):
				record.abstract = match_abstract
				updated = True

		match_journal = (match.journal or '').strip()
		if match_journal and not re.fullmatch(r'\d{4}', match_journal) and not has_journal(record.journal):
			record.journal = match_journal
			updated = True

		if not has_authors(record.authors) and match.authors:
			if isinstance(match.authors, list):
				authors = [str(a).strip() for a in match.authors if str(a).strip()]
			else:
				authors = split_scraped_authors(match.authors)
			if authors:
				record.authors = authors
				updated = True

		if parse_year(record.year) is None:
			year = parse_year(match.year)
			if year is None and isinstance(match.authors, str):
				found = _YEAR_IN_TEXT.search(match.authors)
				year = parse_year(found.group(1)) if found else None
			if year is not None:
				record.year = year
				updated = True

		if not (record.url or '').strip() and match.url:
			record.url = match.url
			updated = True

		return updated
