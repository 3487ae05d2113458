import re
from collections.abc import Sequence

from litreview.core.cancellation import CancellableRun, CancellationToken
from litreview.errors import GenerationFormatError
from litreview.llm.client import TextGenerator
from litreview.models import FilterSummary, LiteratureRecord, ProgressCallback
from litreview.utils.json_extraction import extract_json_object
from litreview.utils.logger import logger

_NEGATIVE = re.compile(r'\b(not relevant|irrelevant|false)\b|不相关', re.IGNORECASE)
_POSITIVE = re.compile(r'\b(relevant|true)\b|相关', re.IGNORECASE)

DEFAULT_SELECTED_REASON = 'Relevance check failed; selected by default'


class RelevanceFilter:
	"""Asks the text generator whether each record fits the research requirement.

	A record whose check fails outright stays selected so nothing is silently lost.
	"""

	def __init__(self, generator: TextGenerator):
		self.generator = generator

	def filter(
		self,
		records: Sequence[LiteratureRecord],
		requirement: str,
		token: CancellationToken | None = None,
		on_progress: ProgressCallback | None = None,
	) -> FilterSummary:
		summary = FilterSummary(total=len(records))
		if not requirement or not requirement.strip():
			logger.error('Relevance filter needs a requirement description')
			return summary

		run = CancellableRun(records, token)
		for index, record in run:
			label = record.title or 'Untitled'
			if on_progress:
				on_progress(index, summary.total, label, 'Judging relevance...')

			try:
				answer = self.generator.generate(self._build_prompt(record, requirement))
				relevant, reason = self.parse_judgement(answer)
			except Exception as e:
				logger.warning(f'Relevance check failed for "{label[:60]}": {e}')
				relevant, reason = True, DEFAULT_SELECTED_REASON

			if run.checkpoint():
				break

			record.selected = relevant
			record.recommend_reason = reason
			if relevant:
				summary.selected.append(record)
				summary.relevant_count += 1
			else:
				summary.irrelevant_count += 1
			if on_progress:
				on_progress(index, summary.total, label, 'Recommended' if relevant else 'Not recommended')

		summary.cancelled = run.stopped
		logger.info(
			f'Relevance filter: {summary.relevant_count} selected, {summary.irrelevant_count} rejected '
			f'of {summary.total}'
		)
		return summary

	def parse_judgement(self, answer: str) -> tuple[bool, str]:
		try:
			data = extract_json_object(answer)
		except GenerationFormatError:
			text = answer.strip()
			relevant = bool(_POSITIVE.search(text)) and not _NEGATIVE.search(text)
			return relevant, text

		value = data.get('relevant')
		relevant = value is True or (isinstance(value, str) and value.strip().lower() == 'true')
		return relevant, str(data.get('reason') or '')

	def _build_prompt(self, record: LiteratureRecord, requirement: str) -> str:
		return f"""Decide whether the following paper is relevant to the research topic and explain why.

RESEARCH TOPIC: {requirement.strip()}

PAPER TITLE: {record.title}
AUTHORS: {record.authors_text()}
YEAR: {record.year or 'Unknown'}
ABSTRACT: {record.abstract or 'No abstract'}

Respond with ONLY a JSON object in this exact format:
{{
  "relevant": true,
  "reason": "why it is recommended, or why it is not relevant"
}}"""
