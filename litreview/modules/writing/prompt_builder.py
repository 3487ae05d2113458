from dataclasses import dataclass, field

from litreview.models import Chapter, LiteratureRecord

LANGUAGE_NAMES = {'en': 'English', 'zh': 'Chinese'}


@dataclass
class ChapterContext:
	chapter: Chapter
	outline: str
	requirement: str
	literature: list[LiteratureRecord] = field(default_factory=list)
	extra_instructions: str = ''
	word_count: int | None = None
	language: str = 'en'


def format_literature_block(literature: list[LiteratureRecord]) -> str:
	entries = []
	for position, record in enumerate(literature, 1):
		number = record.display_index if record.display_index is not None else position
		entries.append(
			f'[{number}] {record.title}\n'
			f'Authors: {record.authors_text()}\n'
			f'Year: {record.year or "Unknown"}\n'
			f'Journal: {record.journal or "Unknown"}\n'
			f'Abstract: {record.abstract or "No abstract"}'
		)
	return '\n\n'.join(entries)


def _citation_numbers(literature: list[LiteratureRecord]) -> str:
	numbers = [
		str(record.display_index if record.display_index is not None else position)
		for position, record in enumerate(literature, 1)
	]
	return ', '.join(f'[{n}]' for n in numbers)


def _ordering_contract(literature: list[LiteratureRecord]) -> str:
	return f"""CITATION RULES (STRICT):
1. Cite EVERY reference listed below EXACTLY ONCE, using its number in square brackets, e.g. [3].
2. Cite them in exactly this order: {_citation_numbers(literature)}
3. Do NOT skip, reorder, repeat or invent reference numbers.
4. Cite only the references listed below."""


def _language_line(language: str) -> str:
	return f'Write the entire text in {LANGUAGE_NAMES.get(language, language)}.'


def build_chapter_prompt(context: ChapterContext) -> str:
	paragraphs = '\n'.join(f'- Paragraph {i}: {topic}' for i, topic in enumerate(context.chapter.paragraphs, 1))
	extra = f'\nADDITIONAL INSTRUCTIONS:\n{context.extra_instructions.strip()}\n' if context.extra_instructions.strip() else ''
	length = f'\nLENGTH: about {context.word_count} words for this chapter.' if context.word_count else ''

	return f"""You are an expert academic writer. Write ONE chapter of a literature review in SCI paper format.

TARGET CHAPTER: {context.chapter.heading}

### CHAPTER STRUCTURE
{paragraphs if paragraphs else 'No paragraph topics given; organise the chapter into coherent paragraphs.'}

### FULL REVIEW OUTLINE (for context only, write only the target chapter)
{context.outline.strip()}

### RESEARCH REQUIREMENT
{context.requirement.strip()}
{extra}
### WRITING INSTRUCTIONS
- Professional, objective, analytical academic prose.
- Do not repeat the chapter heading; begin directly with the chapter body.
- {_language_line(context.language)}{length}

{_ordering_contract(context.literature)}

### REFERENCES FOR THIS CHAPTER
{format_literature_block(context.literature)}
"""


def build_review_prompt(
	requirement: str,
	outline: str,
	literature: list[LiteratureRecord],
	extra_instructions: str = '',
	language: str = 'en',
) -> str:
	extra = f'\nADDITIONAL INSTRUCTIONS:\n{extra_instructions.strip()}\n' if extra_instructions.strip() else ''
	outline_text = outline.strip() or 'No outline given; choose a logical structure.'

	return f"""You are an expert academic writer. Write a complete literature review in SCI paper format.

### RESEARCH REQUIREMENT
{requirement.strip()}

### OUTLINE
{outline_text}
{extra}
### WRITING INSTRUCTIONS
- Introduction, thematic body sections and a concluding outlook.
- Professional, objective, analytical academic prose.
- {_language_line(language)}

{_ordering_contract(literature)}

### REFERENCES
{format_literature_block(literature)}
"""
