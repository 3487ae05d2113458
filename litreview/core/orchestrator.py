import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from litreview.core.cancellation import CancellationToken, PacingDelay
from litreview.core.config_loader import (
	CompletionConfig,
	ConfigLoader,
	KeywordPlanConfig,
	ReviewConfig,
	SearchConfig,
	get_config,
)
from litreview.llm.client import TextGenerator, create_llm_client_from_config
from litreview.models import (
	CitationMapping,
	CompletionSummary,
	FilterSummary,
	KeywordPlanItem,
	LiteratureRecord,
	ProgressCallback,
	OutlineDraft,
	ReviewDocument,
	SearchRunResult,
)
from litreview.modules import get_search_provider
from litreview.modules.research import KeywordPlanner, MetadataCompleter, RelevanceFilter, SearchAggregator
from litreview.modules.search_provider import SearchProvider
from litreview.modules.writing import (
	OutlineGenerator,
	ReviewSynthesizer,
	assign_initial_indices,
	reorder_by_mapping,
)
from litreview.utils.logger import logger


@dataclass
class PipelineResult:
	plan: list[KeywordPlanItem] = field(default_factory=list)
	search: SearchRunResult | None = None
	completion: CompletionSummary | None = None
	filtering: FilterSummary | None = None
	outline: str = ''
	mappings: list[CitationMapping] = field(default_factory=list)
	review: ReviewDocument | None = None

	@property
	def cancelled(self) -> bool:
		stages = (self.search, self.completion, self.filtering, self.review)
		return any(stage is not None and stage.cancelled for stage in stages)


class ReviewPipeline:
	"""Runs keyword planning, search, completion, relevance filtering and review writing.

	Every stage shares one cancellation token and one progress callback. Stages can also be
	called one at a time, which is how the CLI drives them.
	"""

	def __init__(
		self,
		generator: TextGenerator,
		provider: SearchProvider,
		keyword_config: KeywordPlanConfig | None = None,
		search_config: SearchConfig | None = None,
		completion_config: CompletionConfig | None = None,
		review_config: ReviewConfig | None = None,
		token: CancellationToken | None = None,
		on_progress: ProgressCallback | None = None,
		sleep: Callable[[float], None] = time.sleep,
	):
		self.generator = generator
		self.provider = provider
		self.keyword_config = keyword_config or KeywordPlanConfig()
		self.search_config = search_config or SearchConfig()
		self.completion_config = completion_config or CompletionConfig()
		self.review_config = review_config or ReviewConfig()
		self.token = token or CancellationToken()
		self.on_progress = on_progress

		self.planner = KeywordPlanner(generator)
		self.aggregator = SearchAggregator(
			provider,
			PacingDelay(self.search_config.pacing_min_seconds, self.search_config.pacing_max_seconds, sleep=sleep),
		)
		self.completer = MetadataCompleter(
			provider,
			search_limit=self.completion_config.search_limit,
			match_threshold=self.completion_config.match_threshold,
		)
		self.relevance_filter = RelevanceFilter(generator)
		self.outline_generator = OutlineGenerator(generator)
		self.synthesizer = ReviewSynthesizer(generator)

		logger.info(f'Review pipeline initialized with provider: {getattr(provider, "name", type(provider).__name__)}')

	@classmethod
	def from_config(
		cls,
		config: ConfigLoader | None = None,
		backend: str | None = None,
		on_progress: ProgressCallback | None = None,
	) -> 'ReviewPipeline':
		config = config or get_config()
		return cls(
			generator=create_llm_client_from_config(config.get_llm_config()),
			provider=get_search_provider(backend),
			keyword_config=config.get_keyword_config(),
			search_config=config.get_search_config(),
			completion_config=config.get_completion_config(),
			review_config=config.get_review_config(),
			on_progress=on_progress,
		)

	def cancel(self) -> None:
		logger.warning('Cancellation requested')
		self.token.cancel()

	def plan(self, requirement: str) -> list[KeywordPlanItem]:
		cfg = self.keyword_config
		return self.planner.plan(
			requirement,
			keyword_count=cfg.keyword_count,
			per_keyword_count=cfg.per_keyword_count,
			year_policy=cfg.year_policy,
			language=cfg.language,
			literature_source=cfg.literature_source,
		)

	def search(self, plan: Sequence[KeywordPlanItem]) -> SearchRunResult:
		return self.aggregator.run(plan, self.token, self.on_progress)

	def complete(self, records: Sequence[LiteratureRecord]) -> CompletionSummary:
		return self.completer.complete(records, self.token, self.on_progress)

	def filter(self, records: Sequence[LiteratureRecord], requirement: str) -> FilterSummary:
		return self.relevance_filter.filter(records, requirement, self.token, self.on_progress)

	def outline(
		self,
		requirement: str,
		literature: Sequence[LiteratureRecord] = (),
		chapter_count: int = 3,
	) -> OutlineDraft:
		return self.outline_generator.generate(
			requirement,
			literature,
			chapter_count=chapter_count,
			language=self.review_config.language,
		)

	def write_review(
		self,
		outline: str,
		literature: Sequence[LiteratureRecord],
		requirement: str,
		mappings: Sequence[CitationMapping] | None = None,
	) -> ReviewDocument:
		if any(record.initial_index is None for record in literature):
			literature = assign_initial_indices(literature)
		if mappings:
			literature = reorder_by_mapping(literature, mappings)

		cfg = self.review_config
		return self.synthesizer.synthesize(
			outline,
			literature,
			requirement,
			mappings=mappings,
			extra_instructions=cfg.extra_instructions,
			chapter_word_count=cfg.chapter_word_count,
			language=cfg.language,
			reconcile=cfg.reconcile,
			token=self.token,
			on_progress=self.on_progress,
		)

	def run(self, requirement: str, outline: str | None = None, chapter_count: int = 3) -> PipelineResult:
		start_time = time.time()
		result = PipelineResult()

		logger.info('=== Planning keywords ===')
		result.plan = self.plan(requirement)

		logger.info('=== Searching literature ===')
		result.search = self.search(result.plan)
		if result.search.cancelled:
			return self._stop(result, 'search')

		logger.info('=== Completing metadata ===')
		result.completion = self.complete(result.search.literature)
		if result.completion.cancelled:
			return self._stop(result, 'completion')

		logger.info('=== Filtering by relevance ===')
		result.filtering = self.filter(result.search.literature, requirement)
		if result.filtering.cancelled:
			return self._stop(result, 'filtering')

		if not result.filtering.selected:
			logger.warning('No relevant literature selected, skipping review writing')
			return result

		selected = assign_initial_indices(result.filtering.selected)
		if outline is None:
			logger.info('=== Drafting outline ===')
			draft = self.outline(requirement, selected, chapter_count)
			result.outline, result.mappings = draft.outline, draft.mappings
		else:
			result.outline = outline

		logger.info('=== Writing review ===')
		result.review = self.write_review(result.outline, selected, requirement, result.mappings or None)

		logger.info(f'\n{"=" * 60}')
		logger.info('LITERATURE REVIEW COMPLETE')
		logger.info(f'{"=" * 60}')
		logger.info(f'Keywords: {len(result.plan)}')
		logger.info(f'Literature found: {result.search.total}')
		logger.info(f'Selected: {len(result.filtering.selected)}')
		logger.info(f'Chapters: {len(result.review.chapters)}')
		logger.info(f'Elapsed: {time.time() - start_time:.2f}s')
		logger.info(f'{"=" * 60}')
		return result

	def _stop(self, result: PipelineResult, stage: str) -> PipelineResult:
		logger.warning(f'Pipeline cancelled during {stage}')
		return result
