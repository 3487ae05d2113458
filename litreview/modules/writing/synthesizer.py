from collections.abc import Sequence

from litreview.core.cancellation import CancellableRun, CancellationToken
from litreview.llm.client import TextGenerator
from litreview.models import (
	Chapter,
	ChapterDraft,
	CitationMapping,
	LiteratureRecord,
	ProgressCallback,
	ReviewDocument,
)
from litreview.utils.logger import logger

from .citations import UNMAPPED, CitationReconciler, sort_for_numbering
from .outline import OutlineParser
from .prompt_builder import ChapterContext, build_chapter_prompt, build_review_prompt


class ReviewSynthesizer:
	"""Writes the review chapter by chapter, or in one pass when the outline has no chapters."""

	def __init__(
		self,
		generator: TextGenerator,
		parser: OutlineParser | None = None,
		reconciler: CitationReconciler | None = None,
	):
		self.generator = generator
		self.parser = parser or OutlineParser()
		self.reconciler = reconciler or CitationReconciler()

	def synthesize(
		self,
		outline: str,
		literature: Sequence[LiteratureRecord],
		requirement: str,
		mappings: Sequence[CitationMapping] | None = None,
		extra_instructions: str = '',
		chapter_word_count: int | None = None,
		language: str = 'en',
		reconcile: bool = True,
		token: CancellationToken | None = None,
		on_progress: ProgressCallback | None = None,
	) -> ReviewDocument:
		ordered = sort_for_numbering(literature)
		chapters = sorted(self.parser.parse(outline), key=lambda chapter: chapter.number)

		if not chapters:
			logger.info(f'Outline has no chapters, writing the review in one pass over {len(ordered)} items')
			content = self.generator.generate(
				build_review_prompt(requirement, outline or '', ordered, extra_instructions, language)
			).strip()
			return self._finish(content, [], ordered, reconcile, cancelled=False)

		drafts: list[ChapterDraft] = []
		run = CancellableRun(chapters, token)
		for index, chapter in run:
			subset = self.chapter_literature(chapter, ordered, mappings)
			if on_progress:
				on_progress(index, len(chapters), chapter.heading, f'Writing chapter with {len(subset)} references...')

			context = ChapterContext(
				chapter=chapter,
				outline=outline,
				requirement=requirement,
				literature=subset,
				extra_instructions=extra_instructions or '',
				word_count=chapter_word_count,
				language=language,
			)
			content = self.generator.generate(build_chapter_prompt(context))
			drafts.append(ChapterDraft(chapter=chapter, content=content.strip()))
			logger.info(f'Chapter {chapter.heading} written ({len(content.split())} words, {len(subset)} references)')

			if on_progress:
				on_progress(index, len(chapters), chapter.heading, 'Chapter complete')

		if run.stopped:
			logger.warning(f'Review writing cancelled after {len(drafts)} of {len(chapters)} chapters')

		content = '\n\n'.join(draft.render() for draft in drafts)
		return self._finish(content, drafts, ordered, reconcile, cancelled=run.stopped)

	def chapter_literature(
		self,
		chapter: Chapter,
		literature: Sequence[LiteratureRecord],
		mappings: Sequence[CitationMapping] | None,
	) -> list[LiteratureRecord]:
		if not mappings:
			return list(literature)

		by_initial = {record.initial_index: record for record in literature if record.initial_index is not None}
		selected = []
		for entry in mappings:
			if entry.chapter != chapter.number:
				continue
			record = by_initial.get(entry.literature_index)
			if record is None:
				logger.debug(f'Mapping refers to unknown literature index {entry.literature_index}')
				continue
			selected.append((entry.paragraph or UNMAPPED, record.display_index or 0, record))

		selected.sort(key=lambda item: (item[0], item[1]))
		return [record for _, _, record in selected]

	def _finish(
		self,
		content: str,
		drafts: list[ChapterDraft],
		literature: list[LiteratureRecord],
		reconcile: bool,
		cancelled: bool,
	) -> ReviewDocument:
		if reconcile:
			final_literature = self.reconciler.reconcile(content, literature)
		else:
			final_literature = [record.copy() for record in literature]
		return ReviewDocument(content=content, chapters=drafts, literature=final_literature, cancelled=cancelled)
