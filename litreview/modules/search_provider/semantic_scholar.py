import requests

from litreview.models import LiteratureRecord, parse_year
from litreview.utils.logger import logger

from .base import SearchProvider


class SemanticScholarProvider(SearchProvider):
	name = 'semantic_scholar'

	def __init__(self, api_key: str | None = None, timeout: int = 30):
		self.api_key = api_key
		self.timeout = timeout
		self.base_url = 'https://api.semanticscholar.org/graph/v1'

	def search(self, keyword: str, limit: int, min_year: int | None = None) -> list[LiteratureRecord]:
		headers = {}
		if self.api_key:
			headers['x-api-key'] = self.api_key

		params = {
			'query': keyword,
			'limit': min(max(limit, 1), 100),
			'fields': 'title,authors,year,abstract,citationCount,url,venue,journal',
		}
		if min_year:
			params['year'] = f'{min_year}-'

		logger.debug(f"Semantic Scholar query: '{keyword}' (limit={limit}, min_year={min_year})")
		response = requests.get(
			f'{self.base_url}/paper/search',
			params=params,
			headers=headers,
			timeout=self.timeout,
		)
		response.raise_for_status()

		data = response.json()
		results: list[LiteratureRecord] = []

		for paper in data.get('data', []):
			title = (paper.get('title') or '').strip()
			if not title:
				continue

			journal = (paper.get('journal') or {}).get('name') or paper.get('venue') or None
			results.append(
				LiteratureRecord(
					title=title,
					authors=[a['name'] for a in paper.get('authors', []) if a.get('name')] or None,
					year=parse_year(paper.get('year')),
					journal=journal,
					abstract=paper.get('abstract'),
					cited_count=paper.get('citationCount'),
					url=paper.get('url'),
					source=self.name,
				)
			)

		return results
