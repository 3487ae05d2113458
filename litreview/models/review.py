from dataclasses import dataclass, field
from typing import Any

from .literature import LiteratureRecord, _coerce_int


@dataclass
class Chapter:
	number: int
	title: str
	paragraphs: list[str] = field(default_factory=list)

	@property
	def heading(self) -> str:
		return f'{self.number}. {self.title}'

	def to_dict(self) -> dict[str, Any]:
		return {'number': self.number, 'title': self.title, 'paragraphs': list(self.paragraphs)}

	@classmethod
	def from_dict(cls, data: dict[str, Any]) -> 'Chapter':
		return cls(
			number=int(data['number']),
			title=str(data.get('title', '')),
			paragraphs=[str(p) for p in data.get('paragraphs', [])],
		)


@dataclass(frozen=True)
class CitationMapping:
	literature_index: int
	chapter: int | None
	paragraph: int | None = None

	def to_dict(self) -> dict[str, Any]:
		return {'literatureIndex': self.literature_index, 'chapter': self.chapter, 'paragraph': self.paragraph}

	@classmethod
	def from_dict(cls, data: dict[str, Any]) -> 'CitationMapping':
		return cls(
			literature_index=int(data['literatureIndex']),
			chapter=_coerce_int(data.get('chapter')),
			paragraph=_coerce_int(data.get('paragraph')),
		)


@dataclass
class OutlineDraft:
	outline: str
	mappings: list[CitationMapping] = field(default_factory=list)

	def to_dict(self) -> dict[str, Any]:
		return {'outline': self.outline, 'literatureMapping': [m.to_dict() for m in self.mappings]}


@dataclass
class ChapterDraft:
	chapter: Chapter
	content: str

	def render(self) -> str:
		return f'{self.chapter.heading}\n\n{self.content.strip()}'


@dataclass
class ReviewDocument:
	content: str
	chapters: list[ChapterDraft]
	literature: list[LiteratureRecord]
	cancelled: bool = False

	@property
	def is_single_pass(self) -> bool:
		return not self.chapters

	def to_dict(self) -> dict[str, Any]:
		return {
			'content': self.content,
			'chapters': [{**draft.chapter.to_dict(), 'content': draft.content} for draft in self.chapters],
			'literature': [record.to_dict() for record in self.literature],
			'cancelled': self.cancelled,
		}
