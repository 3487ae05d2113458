from .citations import (
	CitationReconciler,
	assign_initial_indices,
	extract_citation_numbers,
	first_use_order,
	reorder_by_mapping,
	sort_for_numbering,
)
from .outline import OutlineGenerator, OutlineParser
from .synthesizer import ReviewSynthesizer

__all__ = [
	'CitationReconciler',
	'OutlineGenerator',
	'OutlineParser',
	'ReviewSynthesizer',
	'assign_initial_indices',
	'extract_citation_numbers',
	'first_use_order',
	'reorder_by_mapping',
	'sort_for_numbering',
]
