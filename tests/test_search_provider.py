from unittest.mock import MagicMock, patch

import pytest
from conftest import StubProvider, make_record

from litreview.config.settings import SearchBackend, settings
from litreview.errors import ConfigurationError, ProviderQueryError
from litreview.modules import get_search_provider
from litreview.modules.search_provider import (
	ArxivProvider,
	ProviderFailure,
	ProviderSuccess,
	SemanticScholarProvider,
	normalize_provider_response,
	query_provider,
)


def test_bare_list_of_dicts():
	response = normalize_provider_response(
		[{'title': 'A', 'year': '2021', 'citedCount': '12'}, {'title': ''}], 'q', source='stub'
	)
	assert isinstance(response, ProviderSuccess)
	assert [(r.title, r.year, r.cited_count, r.source) for r in response.records] == [('A', 2021, 12, 'stub')]


def test_results_envelope():
	response = normalize_provider_response({'success': True, 'results': [make_record('B')]}, 'q')
	assert [r.title for r in response.records] == ['B']


def test_failure_envelope():
	response = normalize_provider_response({'success': False, 'error': 'captcha'}, 'deep learning')
	assert isinstance(response, ProviderFailure)
	assert response.records == []
	assert response.error.query == 'deep learning'
	assert 'captcha' in str(response.error)


def test_unexpected_shape_is_a_failure():
	assert isinstance(normalize_provider_response({'results': 'oops'}, 'q'), ProviderFailure)
	assert normalize_provider_response(None, 'q').records == []


def test_query_provider_wraps_exceptions():
	provider = StubProvider(errors={'q': ConnectionError('reset')})
	response = query_provider(provider, 'q', 5, None)
	assert isinstance(response, ProviderFailure)
	assert isinstance(response.error, ProviderQueryError)
	assert isinstance(response.error.cause, ConnectionError)


@patch('litreview.modules.search_provider.semantic_scholar.requests.get')
def test_semantic_scholar_maps_papers(mock_get):
	mock_get.return_value.json.return_value = {
		'data': [
			{
				'title': 'Microplastics review',
				'authors': [{'name': 'A. Smith'}],
				'year': 2022,
				'abstract': 'Abstract.',
				'citationCount': 40,
				'url': 'https://s2/1',
				'venue': 'Venue',
				'journal': {'name': 'Env. Sci.'},
			},
			{'title': None},
		]
	}

	records = SemanticScholarProvider(api_key='key').search('microplastics', 5, min_year=2019)

	assert len(records) == 1
	assert records[0].journal == 'Env. Sci.'
	assert records[0].authors == ['A. Smith']
	_, kwargs = mock_get.call_args
	assert kwargs['params']['year'] == '2019-'
	assert kwargs['headers'] == {'x-api-key': 'key'}


def test_arxiv_filters_by_year_and_limit():
	def paper(title, year):
		item = MagicMock()
		item.title = title
		item.published.year = year
		item.authors = []
		item.journal_ref = None
		item.summary = 'summary text'
		item.entry_id = f'http://arxiv.org/abs/{title}'
		return item

	client = MagicMock()
	client.results.return_value = iter([paper('old', 2015), paper('new1', 2021), paper('new2', 2023), paper('new3', 2024)])

	records = ArxivProvider(client=client).search('llm', 2, min_year=2020)

	assert [r.title for r in records] == ['new1', 'new2']
	assert records[0].journal == 'arXiv'


def test_get_search_provider_by_backend():
	assert isinstance(get_search_provider('arxiv'), ArxivProvider)
	assert isinstance(get_search_provider(SearchBackend.SEMANTIC_SCHOLAR), SemanticScholarProvider)
	with pytest.raises(ConfigurationError):
		get_search_provider('google_scholar')


@pytest.mark.skipif(not settings.SEMANTIC_SCHOLAR_API_KEY, reason='No Semantic Scholar API key configured')
def test_semantic_scholar_live():
	records = SemanticScholarProvider(api_key=settings.SEMANTIC_SCHOLAR_API_KEY).search('attention mechanisms', 3)
	assert records
	assert all(r.title for r in records)
