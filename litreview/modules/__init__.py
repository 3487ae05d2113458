from litreview.config.settings import SearchBackend, settings
from litreview.errors import ConfigurationError
from litreview.modules.search_provider import ArxivProvider, SearchProvider, SemanticScholarProvider


def get_search_provider(backend: str | SearchBackend | None = None) -> SearchProvider:
	value = backend.value if isinstance(backend, SearchBackend) else (backend or settings.SEARCH_BACKEND)
	try:
		selected = SearchBackend(str(value).lower())
	except ValueError:
		raise ConfigurationError(f'Unknown search backend: {value}') from None

	if selected == SearchBackend.ARXIV:
		return ArxivProvider()
	return SemanticScholarProvider(
		api_key=settings.SEMANTIC_SCHOLAR_API_KEY,
		timeout=settings.SEARCH_TIMEOUT_SECONDS,
	)
