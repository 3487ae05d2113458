import arxiv

from litreview.models import LiteratureRecord
from litreview.utils.logger import logger

from .base import SearchProvider


class ArxivProvider(SearchProvider):
	name = 'arxiv'

	def __init__(self, client: arxiv.Client | None = None):
		self.client = client or arxiv.Client(delay_seconds=3, num_retries=3)

	def search(self, keyword: str, limit: int, min_year: int | None = None) -> list[LiteratureRecord]:
		logger.info(f"Searching arXiv for: '{keyword}' (max {limit} results)")

		# arXiv has no year filter, so over-fetch and drop older papers locally
		fetch_limit = limit * 3 if min_year else limit
		search = arxiv.Search(query=keyword, max_results=fetch_limit, sort_by=arxiv.SortCriterion.Relevance)

		results: list[LiteratureRecord] = []
		for paper in self.client.results(search):
			year = paper.published.year if paper.published else None
			if min_year and (year is None or year < min_year):
				continue

			results.append(
				LiteratureRecord(
					title=' '.join(paper.title.split()),
					authors=[author.name for author in paper.authors],
					year=year,
					journal=paper.journal_ref or 'arXiv',
					abstract=' '.join(paper.summary.split()),
					url=paper.entry_id,
					source=self.name,
				)
			)
			if len(results) >= limit:
				break

		logger.info(f'Found {len(results)} papers on arXiv')
		return results
