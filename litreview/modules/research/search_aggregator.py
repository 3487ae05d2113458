from collections.abc import Sequence

from litreview.core.cancellation import CancellableRun, CancellationToken, PacingDelay
from litreview.models import (
	KeywordPlanItem,
	PipelineRunState,
	ProgressCallback,
	ProgressUpdate,
	SearchRunResult,
)
from litreview.utils.logger import logger

from ..search_provider import ProviderFailure, SearchProvider, query_provider
from .deduplication import LiteraturePool


class SearchAggregator:
	"""Runs the keyword plan against one SearchProvider and merges the hits into one pool."""

	def __init__(self, provider: SearchProvider, pacing: PacingDelay | None = None):
		self.provider = provider
		self.pacing = pacing or PacingDelay()

	def run(
		self,
		plan: Sequence[KeywordPlanItem],
		token: CancellationToken | None = None,
		on_progress: ProgressCallback | None = None,
	) -> SearchRunResult:
		items = [item for item in plan if item.keyword and item.keyword.strip()]
		if not items:
			logger.warning('No valid keywords in plan, returning empty result')
			return SearchRunResult(literature=[], results_by_keyword={})

		state = PipelineRunState()
		pool = LiteraturePool()
		results_by_keyword = {}
		failed_keywords = []
		progress: list[ProgressUpdate] = []
		run = CancellableRun(items, token)
		total = len(run)

		def report(index: int, keyword: str, message: str) -> None:
			progress.append(ProgressUpdate(index, total, keyword, message, pool_size=len(pool)))
			if on_progress:
				on_progress(index, total, keyword, message)

		logger.info(f'Searching {total} keywords with {type(self.provider).__name__}...')

		for index, item in run:
			keyword = item.keyword.strip()
			year_text = f' ({item.min_year} and later)' if item.min_year else ''
			report(index, keyword, f'Searching{year_text}... {len(pool)} found so far')

			self.pacing.wait()
			if run.checkpoint():
				break

			response = query_provider(self.provider, keyword, item.count, item.min_year)
			if run.checkpoint():
				break

			if isinstance(response, ProviderFailure):
				logger.error(str(response.error))
				failed_keywords.append(keyword)
				report(index, keyword, f'Search failed: {response.error.cause}')
				continue

			results_by_keyword[keyword] = response.records
			added = pool.merge(response.records)
			logger.info(
				f"[{index}/{total}] '{keyword}': {len(response.records)} results, {added} new (pool: {len(pool)})"
			)
			report(index, keyword, f'Done, found {len(response.records)} ({len(pool)} total)')

		state.cancelled = run.stopped
		state.accumulated_literature = pool.records
		if state.cancelled:
			logger.warning(f'Search cancelled; returning {len(pool)} records accumulated so far')

		return SearchRunResult(
			literature=state.accumulated_literature,
			results_by_keyword=results_by_keyword,
			cancelled=state.cancelled,
			failed_keywords=failed_keywords,
			progress=progress,
		)
