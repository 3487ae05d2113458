from .literature import (
	CompletionStatus,
	KeywordPlanItem,
	LiteratureRecord,
	YearPolicy,
	parse_year,
)
from .review import (
	Chapter,
	ChapterDraft,
	CitationMapping,
	OutlineDraft,
	ReviewDocument,
)
from .run import (
	CompletionSummary,
	FilterSummary,
	PipelineRunState,
	ProgressCallback,
	ProgressUpdate,
	SearchRunResult,
)


__all__ = [
	'CompletionStatus',
	'KeywordPlanItem',
	'LiteratureRecord',
	'YearPolicy',
	'parse_year',
	'Chapter',
	'ChapterDraft',
	'CitationMapping',
	'OutlineDraft',
	'ReviewDocument',
	'CompletionSummary',
	'FilterSummary',
	'PipelineRunState',
	'ProgressCallback',
	'ProgressUpdate',
	'SearchRunResult',
]
