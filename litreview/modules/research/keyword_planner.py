import math
from datetime import UTC, datetime
from typing import Any

from litreview.errors import GenerationFormatError
from litreview.llm.client import TextGenerator
from litreview.models import KeywordPlanItem, YearPolicy, parse_year
from litreview.utils.json_extraction import extract_json_object
from litreview.utils.logger import logger

MAX_KEYWORDS = 20

LANGUAGE_NAMES = {'en': 'English', 'zh': 'Chinese'}


class KeywordPlanner:
	def __init__(self, generator: TextGenerator, current_year: int | None = None):
		self.generator = generator
		self._current_year = current_year

	@property
	def current_year(self) -> int:
		return self._current_year or datetime.now(UTC).year

	def plan(
		self,
		requirement: str,
		keyword_count: int = 10,
		per_keyword_count: int = 20,
		year_policy: YearPolicy | None = None,
		language: str = 'en',
		literature_source: str = 'semantic_scholar',
	) -> list[KeywordPlanItem]:
		keyword_count = min(max(int(keyword_count), 1), MAX_KEYWORDS)
		per_keyword_count = max(int(per_keyword_count), 1)

		prompt = self._build_prompt(requirement, keyword_count, year_policy, language, literature_source)
		logger.info(f'Planning {keyword_count} keywords ({per_keyword_count} records each)...')
		raw_response = self.generator.generate(prompt)

		items = self._parse_keywords(raw_response, per_keyword_count)

		if len(items) < keyword_count:
			logger.warning(f'Only {len(items)} usable keywords returned (wanted {keyword_count}); using them as-is')
		elif len(items) > keyword_count:
			logger.warning(f'{len(items)} keywords returned; keeping the first {keyword_count}')
			items = items[:keyword_count]

		if year_policy and year_policy.is_active():
			self.apply_year_policy(items, year_policy)

		logger.info(f'Keyword plan: {[item.keyword for item in items]}')
		return items

	def apply_year_policy(self, items: list[KeywordPlanItem], policy: YearPolicy) -> list[KeywordPlanItem]:
		threshold = self.current_year - policy.recent_years
		recent_count = math.ceil(len(items) * policy.percentage / 100)

		for index, item in enumerate(items):
			if index >= recent_count:
				break
			if item.min_year is None:
				item.min_year = threshold

		return items

	def _build_prompt(
		self,
		requirement: str,
		keyword_count: int,
		year_policy: YearPolicy | None,
		language: str,
		literature_source: str,
	) -> str:
		language_name = LANGUAGE_NAMES.get(language, language)
		year_text = ''
		if year_policy and year_policy.is_active():
			year_text = (
				f'\nYEAR LIMIT: {year_policy.percentage}% of the results should be published within '
				f'the last {year_policy.recent_years} years.'
			)

		return f"""You are a professional literature retrieval assistant. Generate search keywords for the
following literature search need.

REQUIREMENT:
{requirement.strip() or 'Not provided'}

SEARCH CONFIGURATION:
- Literature language: {language_name}
- Literature source: {literature_source}{year_text}

STRICT CONSTRAINTS:
1. QUANTITY: Generate EXACTLY {keyword_count} different keywords.
2. LANGUAGE: Every keyword must be a {language_name} technical term or phrase suitable for an academic search engine.
3. SPECIFICITY: Each keyword is one specific phrase, not a list of phrases.
4. COVERAGE: Together the keywords cover every main research direction in the requirement.
5. DISTINCTNESS: Avoid duplicated or near-identical keywords.
6. YEARS: When a year limit is configured, set "minYear" on keywords that should favour recent work.
7. FORMAT: Return ONLY a JSON object. No conversational text.

REQUIRED JSON STRUCTURE:
{{
  "keywords": [
    {{"keyword": "first keyword", "minYear": 2020}},
    {{"keyword": "second keyword", "minYear": null}}
  ]
}}"""

	def _parse_keywords(self, text: str, per_keyword_count: int) -> list[KeywordPlanItem]:
		data = extract_json_object(text)
		raw_keywords: Any = data.get('keywords')
		if not isinstance(raw_keywords, list):
			raise GenerationFormatError("Generator response has no 'keywords' array", raw_response=text)

		items = []
		for entry in raw_keywords:
			if isinstance(entry, str):
				entry = {'keyword': entry}
			if not isinstance(entry, dict):
				continue
			keyword = str(entry.get('keyword') or '').strip()
			if not keyword:
				continue
			items.append(
				KeywordPlanItem(
					keyword=keyword,
					min_year=parse_year(entry.get('minYear')),
					count=per_keyword_count,
				)
			)
		return items
