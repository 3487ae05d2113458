import argparse
import json
import signal
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from litreview.core.orchestrator import ReviewPipeline
from litreview.errors import LiteratureReviewError
from litreview.export.word_exporter import WordExporter
from litreview.models import CitationMapping, KeywordPlanItem, LiteratureRecord
from litreview.modules.writing import assign_initial_indices
from litreview.utils.logger import logger


def read_json(path: str | Path) -> Any:
	with open(path, encoding='utf-8') as f:
		return json.load(f)


def write_json(path: str | Path, data: Any) -> None:
	path = Path(path)
	path.parent.mkdir(parents=True, exist_ok=True)
	with open(path, 'w', encoding='utf-8') as f:
		json.dump(data, f, ensure_ascii=False, indent=2)
	print(f'Saved: {path}')


def read_literature(path: str | Path) -> list[LiteratureRecord]:
	data = read_json(path)
	if isinstance(data, dict):
		data = data.get('literature', [])
	return [LiteratureRecord.from_dict(item) for item in data]


def read_text(value: str) -> str:
	path = Path(value)
	if path.is_file():
		return path.read_text(encoding='utf-8')
	return value


def print_progress(done: int, total: int, label: str, message: str) -> None:
	print(f'[{done}/{total}] {label[:60]}: {message}')


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(description='LitReview - literature search and review writing')
	parser.add_argument('--backend', help='Search backend (semantic_scholar or arxiv)')
	sub = parser.add_subparsers(dest='command', required=True)

	plan = sub.add_parser('plan', help='Plan search keywords for a research requirement')
	plan.add_argument('requirement', help='Requirement text or a file containing it')
	plan.add_argument('-o', '--output', default='plan.json')

	search = sub.add_parser('search', help='Run a keyword plan against the search backend')
	search.add_argument('plan', help='Keyword plan JSON file')
	search.add_argument('-o', '--output', default='literature.json')

	complete = sub.add_parser('complete', help='Fill in missing metadata for literature records')
	complete.add_argument('literature', help='Literature JSON file')
	complete.add_argument('-o', '--output', help='Output file (defaults to the input file)')

	filter_ = sub.add_parser('filter', help='Select literature relevant to the requirement')
	filter_.add_argument('literature', help='Literature JSON file')
	filter_.add_argument('--requirement', required=True, help='Requirement text or a file containing it')
	filter_.add_argument('-o', '--output', default='selected.json')

	outline = sub.add_parser('outline', help='Draft a review outline')
	outline.add_argument('requirement', help='Requirement text or a file containing it')
	outline.add_argument('--literature', help='Selected literature JSON file to map onto the chapters')
	outline.add_argument('--chapters', type=int, default=3)
	outline.add_argument('-o', '--output', default='outline.txt')
	outline.add_argument('--mapping-output', default='mapping.json', help='Where to save the literature mapping')

	review = sub.add_parser('review', help='Write the review from an outline and selected literature')
	review.add_argument('literature', help='Selected literature JSON file')
	review.add_argument('--requirement', required=True, help='Requirement text or a file containing it')
	review.add_argument('--outline', default='', help='Outline text or a file containing it')
	review.add_argument('--mapping', help='Citation mapping JSON file')
	review.add_argument('-o', '--output', default='review.json')
	review.add_argument('--docx', action='store_true', help='Also export the review to Word')
	review.add_argument('--title', default='Literature Review')

	run = sub.add_parser('run', help='Run every stage end to end')
	run.add_argument('requirement', help='Requirement text or a file containing it')
	run.add_argument('--outline', help='Outline text or a file containing it')
	run.add_argument('--chapters', type=int, default=3)
	run.add_argument('-o', '--output', default='review.json')
	run.add_argument('--title', default='Literature Review')

	return parser


def execute(args: argparse.Namespace, pipeline: ReviewPipeline) -> int:
	if args.command == 'plan':
		items = pipeline.plan(read_text(args.requirement))
		write_json(args.output, [item.to_dict() for item in items])
		return 0

	if args.command == 'search':
		items = [KeywordPlanItem.from_dict(item) for item in read_json(args.plan)]
		result = pipeline.search(items)
		write_json(
			args.output,
			{
				'literature': [record.to_dict() for record in result.literature],
				'failedKeywords': result.failed_keywords,
				'cancelled': result.cancelled,
			},
		)
		print(f'Found {result.total} records')
		return 0

	if args.command == 'complete':
		records = read_literature(args.literature)
		summary = pipeline.complete(records)
		write_json(args.output or args.literature, [record.to_dict() for record in records])
		print(f'Completed {summary.completed}/{summary.total}, failed {summary.failed}')
		return 0

	if args.command == 'filter':
		records = read_literature(args.literature)
		summary = pipeline.filter(records, read_text(args.requirement))
		write_json(args.output, [record.to_dict() for record in summary.selected])
		print(f'Selected {summary.relevant_count}/{summary.total}')
		return 0

	if args.command == 'outline':
		records = read_literature(args.literature) if args.literature else []
		if any(record.initial_index is None for record in records):
			records = assign_initial_indices(records)
		draft = pipeline.outline(read_text(args.requirement), records, chapter_count=args.chapters)
		path = Path(args.output)
		path.write_text(draft.outline, encoding='utf-8')
		print(f'Saved: {path}')
		if args.literature:
			write_json(args.mapping_output, [entry.to_dict() for entry in draft.mappings])
		return 0

	if args.command == 'review':
		records = read_literature(args.literature)
		mappings = [CitationMapping.from_dict(item) for item in read_json(args.mapping)] if args.mapping else None
		document = pipeline.write_review(read_text(args.outline), records, read_text(args.requirement), mappings)
		write_json(args.output, document.to_dict())
		if args.docx:
			WordExporter().export(document, args.title)
		return 0

	if args.command == 'run':
		outline = read_text(args.outline) if args.outline else None
		result = pipeline.run(read_text(args.requirement), outline=outline, chapter_count=args.chapters)
		if result.review is None:
			print('Pipeline stopped before the review was written')
			return 1
		write_json(args.output, result.review.to_dict())
		WordExporter().export(result.review, args.title)
		return 0

	raise ValueError(f'Unknown command: {args.command}')


def main(argv: list[str] | None = None) -> int:
	load_dotenv()

	args = build_parser().parse_args(argv)
	try:
		pipeline = ReviewPipeline.from_config(backend=args.backend, on_progress=print_progress)
	except LiteratureReviewError as e:
		logger.error(str(e))
		return 1

	def request_stop(signum, frame):
		print('\nStopping after the current step... (press Ctrl+C again to abort)')
		pipeline.cancel()
		signal.signal(signal.SIGINT, signal.default_int_handler)

	signal.signal(signal.SIGINT, request_stop)

	try:
		return execute(args, pipeline)
	except LiteratureReviewError as e:
		logger.error(str(e))
		return 1


if __name__ == '__main__':
	try:
		sys.exit(main())
	except KeyboardInterrupt:
		print('\n\nInterrupted.')
		sys.exit(130)
	except Exception as e:
		print(f'\nError: {e}')
		sys.exit(1)
