from conftest import ScriptedGenerator, make_record

from litreview.modules.research import RelevanceFilter
from litreview.modules.research.relevance_filter import DEFAULT_SELECTED_REASON


def test_selects_relevant_records():
	generator = ScriptedGenerator(
		'{"relevant": true, "reason": "Directly studies sediments"}',
		'```json\n{"relevant": false, "reason": "About astronomy"}\n```',
	)
	records = [make_record('Sediment microplastics'), make_record('Exoplanet survey')]

	summary = RelevanceFilter(generator).filter(records, 'microplastics in sediments')

	assert summary.selected == [records[0]]
	assert (summary.relevant_count, summary.irrelevant_count, summary.total) == (1, 1, 2)
	assert records[0].recommend_reason == 'Directly studies sediments'
	assert records[1].selected is False
	assert 'Sediment microplastics' in generator.prompts[0]


def test_failed_check_selects_by_default():
	generator = ScriptedGenerator(TimeoutError('model timed out'))
	record = make_record('Anything')

	summary = RelevanceFilter(generator).filter([record], 'topic')

	assert summary.selected == [record]
	assert record.selected is True
	assert record.recommend_reason == DEFAULT_SELECTED_REASON


def test_plain_text_answers_fall_back_to_keywords():
	relevance_filter = RelevanceFilter(ScriptedGenerator())
	assert relevance_filter.parse_judgement('Relevant: covers the topic.')[0] is True
	assert relevance_filter.parse_judgement('Not relevant to the topic.')[0] is False
	assert relevance_filter.parse_judgement('{"relevant": "true", "reason": "ok"}') == (True, 'ok')


def test_empty_requirement_selects_nothing():
	generator = ScriptedGenerator()
	summary = RelevanceFilter(generator).filter([make_record('A')], '   ')
	assert summary.selected == []
	assert generator.prompts == []
