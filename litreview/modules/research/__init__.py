from .deduplication import LiteraturePool, deduplicate
from .keyword_planner import KeywordPlanner
from .metadata_completer import MetadataCompleter, is_abstract_complete, is_record_complete
from .relevance_filter import RelevanceFilter
from .search_aggregator import SearchAggregator
from .title_matching import normalize_title, title_similarity

__all__ = [
	'KeywordPlanner',
	'LiteraturePool',
	'MetadataCompleter',
	'RelevanceFilter',
	'SearchAggregator',
	'deduplicate',
	'is_abstract_complete',
	'is_record_complete',
	'normalize_title',
	'title_similarity',
]
