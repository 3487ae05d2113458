from .arxiv_provider import ArxivProvider
from .base import (
	ProviderFailure,
	ProviderResponse,
	ProviderSuccess,
	SearchProvider,
	normalize_provider_response,
	query_provider,
)
from .semantic_scholar import SemanticScholarProvider

__all__ = [
	'SearchProvider',
	'ArxivProvider',
	'SemanticScholarProvider',
	'ProviderFailure',
	'ProviderResponse',
	'ProviderSuccess',
	'normalize_provider_response',
	'query_provider',
]
