import re
from datetime import datetime
from pathlib import Path

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Inches, Pt

from litreview.config.settings import settings
from litreview.models import LiteratureRecord, ReviewDocument
from litreview.utils.logger import logger

CHAPTER_HEADING = re.compile(r'^\d+[.、]\s*\S')
MARKDOWN_HEADING = re.compile(r'^(#{1,6})\s+(.+)$')


def reference_entries(literature: list[LiteratureRecord]) -> list[LiteratureRecord]:
	"""Cited records in citation order; every record by display number when none is cited."""
	cited = [record for record in literature if record.actual_index is not None]
	if cited:
		return sorted(cited, key=lambda record: record.actual_index)
	return sorted(
		(record for record in literature if record.display_index is not None),
		key=lambda record: record.display_index,
	)


def format_reference(number: int, record: LiteratureRecord) -> str:
	authors = record.authors
	if isinstance(authors, list):
		author_str = ', '.join(authors[:3]) + (', et al.' if len(authors) > 3 else '')
	else:
		author_str = authors or 'Unknown'

	reference = f'[{number}] {author_str}, "{record.title}"'
	if record.journal:
		reference += f', {record.journal}'
	reference += f', {record.year}.' if record.year else ', n.d.'
	if record.url:
		reference += f' [Online]. Available: {record.url}'
	return reference


class WordExporter:
	def __init__(self, output_dir: str | Path | None = None):
		self.output_dir = Path(output_dir) if output_dir else settings.OUTPUT_DIR

	def export(self, document: ReviewDocument, title: str, filename: str | None = None) -> Path:
		logger.info(f'Exporting review to Word: {title}')

		doc = Document()
		self._setup_document_style(doc)
		self._add_title(doc, title)
		self._add_content(doc, document.content)
		count = self._add_references(doc, document.literature)

		self.output_dir.mkdir(parents=True, exist_ok=True)
		output_path = self.output_dir / (filename or f'{_safe_filename(title)}.docx')
		doc.save(output_path)

		logger.info(f'Review exported to: {output_path} ({count} references)')
		return output_path

	def _setup_document_style(self, doc: Document):
		style = doc.styles['Normal']
		style.font.name = 'Times New Roman'
		style.font.size = Pt(12)
		style.paragraph_format.line_spacing = 1.5
		style.paragraph_format.space_after = Pt(6)

		for section in doc.sections:
			section.top_margin = Inches(1)
			section.bottom_margin = Inches(1)
			section.left_margin = Inches(1)
			section.right_margin = Inches(1)

	def _add_title(self, doc: Document, title: str):
		heading = doc.add_heading(title, 0)
		heading.alignment = WD_ALIGN_PARAGRAPH.CENTER

		date_para = doc.add_paragraph(datetime.now().strftime('%B %Y'))
		date_para.alignment = WD_ALIGN_PARAGRAPH.CENTER

	def _add_content(self, doc: Document, text: str):
		for block in re.split(r'\n\s*\n', text or ''):
			block = block.strip()
			if not block:
				continue

			header_match = MARKDOWN_HEADING.match(block)
			if header_match:
				doc.add_heading(header_match.group(2).strip(), level=min(len(header_match.group(1)), 3))
				continue

			# short numbered lines are chapter headings, not list items
			first_line, _, rest = block.partition('\n')
			if CHAPTER_HEADING.match(first_line) and len(first_line) < 100:
				doc.add_heading(first_line.strip(), level=1)
				block = rest.strip()
				if not block:
					continue

			if block.startswith('- ') or block.startswith('* '):
				for line in block.splitlines():
					line = line.strip()
					if line.startswith('- ') or line.startswith('* '):
						doc.add_paragraph(line[2:], style='List Bullet')
			else:
				self._add_formatted_paragraph(doc, block)

	def _add_formatted_paragraph(self, doc: Document, text: str):
		para = doc.add_paragraph()
		for part in re.split(r'(\*\*[^*]+\*\*|\*[^*]+\*)', text):
			if not part:
				continue
			if part.startswith('**') and part.endswith('**'):
				para.add_run(part[2:-2]).bold = True
			elif part.startswith('*') and part.endswith('*'):
				para.add_run(part[1:-1]).italic = True
			else:
				para.add_run(part)

	def _add_references(self, doc: Document, literature: list[LiteratureRecord]) -> int:
		entries = reference_entries(literature)
		if not entries:
			logger.info('No references to export')
			return 0

		doc.add_page_break()
		heading = doc.add_heading('References', 1)
		heading.alignment = WD_ALIGN_PARAGRAPH.CENTER

		for record in entries:
			number = record.actual_index if record.actual_index is not None else record.display_index
			doc.add_paragraph(format_reference(number, record), style='Normal')
		return len(entries)


def _safe_filename(title: str) -> str:
	cleaned = re.sub(r'[\\/:*?"<>|]+', '', title).strip()
	return re.sub(r'\s+', '_', cleaned)[:80] or 'literature_review'
