import pytest
from conftest import ScriptedGenerator, make_record

from litreview.core.cancellation import CancellationToken
from litreview.models import CitationMapping
from litreview.modules.writing import ReviewSynthesizer

OUTLINE = '1. Intro\n  Background\n2. Methods\n  Data'


@pytest.fixture
def literature():
	return [
		make_record('Paper A', initial_index=1, year=2020, authors=['Ann']),
		make_record('Paper B', initial_index=2, year=2021),
		make_record('Paper C', initial_index=3, year=2022),
	]


def test_writes_one_call_per_chapter_and_concatenates(literature):
	generator = ScriptedGenerator('Intro text cites [2] and [1].', 'Methods text cites [3].')

	document = ReviewSynthesizer(generator).synthesize(OUTLINE, literature, 'microplastics')

	assert len(generator.prompts) == 2
	assert document.content == '1. Intro\n\nIntro text cites [2] and [1].\n\n2. Methods\n\nMethods text cites [3].'
	assert [draft.chapter.number for draft in document.chapters] == [1, 2]
	assert [(r.title, r.actual_index) for r in document.literature] == [
		('Paper B', 1),
		('Paper A', 2),
		('Paper C', 3),
	]
	assert all(r.actual_index is None for r in literature)


def test_chapters_are_written_in_ascending_number(literature):
	generator = ScriptedGenerator('first', 'second')

	document = ReviewSynthesizer(generator).synthesize('2. Later\n1. Earlier', literature, 'topic')

	assert 'TARGET CHAPTER: 1. Earlier' in generator.prompts[0]
	assert 'TARGET CHAPTER: 2. Later' in generator.prompts[1]
	assert document.content.startswith('1. Earlier')


def test_chapter_prompt_carries_context_and_ordering_contract(literature):
	generator = ScriptedGenerator('a', 'b')

	ReviewSynthesizer(generator).synthesize(
		OUTLINE,
		literature,
		'microplastics in sediments',
		extra_instructions='Focus on methods.',
		chapter_word_count=800,
		language='zh',
	)

	prompt = generator.prompts[0]
	assert 'Paragraph 1: Background' in prompt
	assert '2. Methods' in prompt
	assert 'microplastics in sediments' in prompt
	assert 'Focus on methods.' in prompt
	assert 'about 800 words' in prompt
	assert 'Chinese' in prompt
	assert 'EXACTLY ONCE' in prompt
	assert 'in exactly this order: [1], [2], [3]' in prompt
	assert '[1] Paper A\nAuthors: Ann\nYear: 2020' in prompt


def test_numbering_uses_actual_index_when_assigned(literature):
	literature[0].actual_index = 3
	literature[1].actual_index = 1
	literature[2].actual_index = 2
	generator = ScriptedGenerator('a', 'b')

	ReviewSynthesizer(generator).synthesize(OUTLINE, literature, 'topic', reconcile=False)

	assert 'in exactly this order: [1], [2], [3]' in generator.prompts[0]
	assert generator.prompts[0].index('[1] Paper B') < generator.prompts[0].index('[3] Paper A')


def test_reconciled_literature_keeps_its_numbers_on_rewrite(literature):
	synthesizer = ReviewSynthesizer(ScriptedGenerator('[2] then [1]', 'none', '[1] then [2]', 'none'))

	first = synthesizer.synthesize(OUTLINE, literature, 'topic')
	second = synthesizer.synthesize(OUTLINE, first.literature, 'topic')

	assert [(r.title, r.actual_index) for r in first.literature] == [('Paper B', 1), ('Paper A', 2), ('Paper C', None)]
	assert [(r.title, r.actual_index) for r in second.literature] == [('Paper B', 1), ('Paper A', 2), ('Paper C', None)]


def test_mapping_selects_chapter_subset(literature):
	mappings = [
		CitationMapping(literature_index=3, chapter=1, paragraph=1),
		CitationMapping(literature_index=1, chapter=2, paragraph=1),
		CitationMapping(literature_index=2, chapter=1, paragraph=2),
	]
	generator = ScriptedGenerator('a', 'b')

	ReviewSynthesizer(generator).synthesize(OUTLINE, literature, 'topic', mappings=mappings)

	chapter_one, chapter_two = generator.prompts
	assert 'Paper C' in chapter_one and 'Paper B' in chapter_one and 'Paper A' not in chapter_one
	assert chapter_one.index('Paper C') < chapter_one.index('Paper B')
	assert 'Paper A' in chapter_two and 'Paper C' not in chapter_two


def test_single_pass_when_outline_has_no_chapters(literature):
	generator = ScriptedGenerator('Whole review citing [3] [1].')

	document = ReviewSynthesizer(generator).synthesize('just some prose', literature, 'topic')

	assert len(generator.prompts) == 1
	assert 'complete literature review' in generator.prompts[0]
	assert 'in exactly this order: [1], [2], [3]' in generator.prompts[0]
	assert document.is_single_pass
	assert document.content == 'Whole review citing [3] [1].'
	assert [(r.title, r.actual_index) for r in document.literature] == [
		('Paper C', 1),
		('Paper A', 2),
		('Paper B', None),
	]


def test_without_reconcile_literature_is_returned_as_copies(literature):
	document = ReviewSynthesizer(ScriptedGenerator('[3]', '[1]')).synthesize(
		OUTLINE, literature, 'topic', reconcile=False
	)
	assert [r.actual_index for r in document.literature] == [None, None, None]
	assert document.literature[0] is not literature[0]


def test_generator_failure_propagates(literature):
	generator = ScriptedGenerator('ok', RuntimeError('model unavailable'))
	with pytest.raises(RuntimeError):
		ReviewSynthesizer(generator).synthesize(OUTLINE, literature, 'topic')


def test_cancellation_between_chapters_returns_finished_chapters(literature):
	token = CancellationToken()

	def on_progress(done, total, label, message):
		if message == 'Chapter complete':
			token.cancel()

	generator = ScriptedGenerator('first chapter [1]', 'never written')
	document = ReviewSynthesizer(generator).synthesize(
		OUTLINE, literature, 'topic', token=token, on_progress=on_progress
	)

	assert document.cancelled
	assert len(generator.prompts) == 1
	assert [draft.chapter.title for draft in document.chapters] == ['Intro']
	assert document.literature[0].title == 'Paper A'
	assert document.literature[0].actual_index == 1
