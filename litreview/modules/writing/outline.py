import re
from collections.abc import Sequence

from litreview.errors import GenerationFormatError
from litreview.llm.client import TextGenerator
from litreview.models import Chapter, CitationMapping, LiteratureRecord, OutlineDraft
from litreview.utils.json_extraction import extract_json_object
from litreview.utils.logger import logger

CHAPTER_LINE = re.compile(r'^(\d+)(?:\s*[.、:：)）\]-]\s*|\s+)(\S.*)$')
SUBSECTION_LINE = re.compile(r'^\d+\.\d+')
BULLET = re.compile(r'^[-*•]\s+')


class OutlineParser:
	"""Turns a numbered outline into chapters.

	Unindented ``N. Title`` lines open chapters; indented lines under them are the chapter's
	paragraph topics. Chapter numbers are kept exactly as written.
	"""

	def parse(self, text: str | None) -> list[Chapter]:
		chapters: list[Chapter] = []
		current: Chapter | None = None

		for raw_line in (text or '').splitlines():
			if not raw_line.strip():
				continue

			indented = raw_line[0].isspace()
			line = raw_line.strip()

			if not indented and not SUBSECTION_LINE.match(line):
				match = CHAPTER_LINE.match(line)
				if match:
					current = Chapter(number=int(match.group(1)), title=match.group(2).strip())
					chapters.append(current)
					continue

			if current is not None and (indented or SUBSECTION_LINE.match(line)):
				current.paragraphs.append(BULLET.sub('', line))

		logger.debug(f'Parsed outline into {len(chapters)} chapters')
		return chapters


class OutlineGenerator:
	"""Drafts a review outline and maps the selected literature onto its chapters."""

	def __init__(self, generator: TextGenerator):
		self.generator = generator

	def generate(
		self,
		requirement: str,
		literature: Sequence[LiteratureRecord] = (),
		chapter_count: int = 3,
		language: str = 'en',
		extra: str = '',
	) -> OutlineDraft:
		raw_response = self.generator.generate(
			self._build_prompt(requirement, literature, chapter_count, language, extra)
		)
		data = extract_json_object(raw_response)
		outline = data.get('outline')
		if not isinstance(outline, str) or not outline.strip():
			raise GenerationFormatError("Generator response has no 'outline' text", raw_response=raw_response)

		known = {_literature_number(position, record) for position, record in enumerate(literature, 1)}
		mappings = self._parse_mapping(data.get('literatureMapping'), known)

		logger.info(
			f'Generated outline with {len(OutlineParser().parse(outline))} chapters, '
			f'{len(mappings)} of {len(known)} items mapped'
		)
		return OutlineDraft(outline=outline.strip(), mappings=mappings)

	def _parse_mapping(self, raw_mapping, known: set[int]) -> list[CitationMapping]:
		if not isinstance(raw_mapping, list):
			return []

		mappings: list[CitationMapping] = []
		seen: set[int] = set()
		for item in raw_mapping:
			if not isinstance(item, dict):
				continue
			try:
				entry = CitationMapping.from_dict(item)
			except (KeyError, TypeError, ValueError):
				logger.warning(f'Skipping malformed literature mapping entry: {item}')
				continue
			if entry.literature_index not in known or entry.literature_index in seen:
				continue
			seen.add(entry.literature_index)
			mappings.append(entry)
		return mappings

	def _build_prompt(
		self,
		requirement: str,
		literature: Sequence[LiteratureRecord],
		chapter_count: int,
		language: str,
		extra: str,
	) -> str:
		language_name = 'Chinese' if language == 'zh' else 'English'
		extra_text = f'\nADDITIONAL OUTLINE REQUIREMENTS:\n{extra.strip()}\n' if extra and extra.strip() else ''

		if literature:
			lines = []
			for position, record in enumerate(literature, 1):
				year = f' ({record.year})' if record.year else ''
				lines.append(f'[{_literature_number(position, record)}] {record.title}{year}')
			literature_text = '\nSELECTED LITERATURE:\n' + '\n'.join(lines) + '\n'
			mapping_rule = '- assign every listed item to the chapter and paragraph (1-based) where it fits best\n'
			mapping_json = (
				',\n  "literatureMapping": [\n'
				'    {"literatureIndex": 1, "chapter": 1, "paragraph": 1}\n'
				'  ]'
			)
		else:
			literature_text = mapping_rule = mapping_json = ''

		return f"""You are an academic literature review assistant. Draft the outline of a literature review
in SCI paper format for the following need.

REQUIREMENT:
{requirement.strip()}
{extra_text}{literature_text}
STRUCTURE:
- {chapter_count} main chapters, each focused on one core research direction
- each chapter holds 2-4 paragraph topics that group related literature
- list only the structure and topic directions, no citations or detailed content
{mapping_rule}- write everything in {language_name}

Return ONLY a JSON object:
{{
  "outline": "1. Chapter title\\n   Paragraph topic\\n   Paragraph topic\\n2. Chapter title\\n   Paragraph topic"{mapping_json}
}}"""


def _literature_number(position: int, record: LiteratureRecord) -> int:
	return record.initial_index if record.initial_index is not None else position
