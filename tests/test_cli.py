import json
from unittest.mock import patch

import pytest
from conftest import ScriptedGenerator, StubProvider, keywords_json, make_record

import main
from litreview.core.config_loader import KeywordPlanConfig
from litreview.core.orchestrator import ReviewPipeline


@pytest.fixture
def run_cli(tmp_path, monkeypatch):
	monkeypatch.chdir(tmp_path)

	def run(argv, generator, provider=None):
		pipeline = ReviewPipeline(
			generator,
			provider or StubProvider(),
			keyword_config=KeywordPlanConfig(keyword_count=2, recent_years=0),
			sleep=lambda _: None,
		)
		with patch.object(main.ReviewPipeline, 'from_config', return_value=pipeline), patch('main.signal.signal'):
			return main.main(argv)

	return run


def test_plan_writes_keyword_json(run_cli, tmp_path):
	code = run_cli(['plan', 'microplastics', '-o', 'plan.json'], ScriptedGenerator(keywords_json('a', 'b')))

	assert code == 0
	data = json.loads((tmp_path / 'plan.json').read_text())
	assert data == [{'keyword': 'a', 'minYear': None, 'count': 20}, {'keyword': 'b', 'minYear': None, 'count': 20}]


def test_search_reads_plan_and_writes_literature(run_cli, tmp_path):
	(tmp_path / 'plan.json').write_text(json.dumps([{'keyword': 'a', 'minYear': None, 'count': 2}]))
	provider = StubProvider(responses={'a': [make_record('P1'), make_record('P2'), make_record('P3')]})

	code = run_cli(['search', 'plan.json'], ScriptedGenerator(), provider)

	assert code == 0
	data = json.loads((tmp_path / 'literature.json').read_text())
	assert [item['title'] for item in data['literature']] == ['P1', 'P2']
	assert data['cancelled'] is False


def test_review_writes_document(run_cli, tmp_path):
	(tmp_path / 'selected.json').write_text(json.dumps([{'title': 'A'}, {'title': 'B'}]))

	code = run_cli(
		['review', 'selected.json', '--requirement', 'topic', '--outline', '1. Intro'],
		ScriptedGenerator('Text [2] [1].'),
	)

	assert code == 0
	data = json.loads((tmp_path / 'review.json').read_text())
	assert data['content'] == '1. Intro\n\nText [2] [1].'
	assert [(item['title'], item['actualIndex']) for item in data['literature']] == [('B', 1), ('A', 2)]


def test_generation_errors_exit_with_status_one(run_cli):
	assert run_cli(['plan', 'topic'], ScriptedGenerator('no json')) == 1


def test_outline_mapping_feeds_review(run_cli, tmp_path):
	(tmp_path / 'selected.json').write_text(json.dumps([{'title': 'A', 'year': 2015}, {'title': 'B', 'year': 2021}]))
	outline_response = json.dumps(
		{
			'outline': '1. Intro\n   Scope',
			'literatureMapping': [
				{'literatureIndex': 1, 'chapter': 1, 'paragraph': 1},
				{'literatureIndex': 2, 'chapter': 1, 'paragraph': 1},
			],
		}
	)

	assert run_cli(['outline', 'topic', '--literature', 'selected.json', '--chapters', '1'], ScriptedGenerator(outline_response)) == 0
	assert (tmp_path / 'outline.txt').read_text(encoding='utf-8') == '1. Intro\n   Scope'
	mapping = json.loads((tmp_path / 'mapping.json').read_text())
	assert mapping[0] == {'literatureIndex': 1, 'chapter': 1, 'paragraph': 1}

	code = run_cli(
		['review', 'selected.json', '--requirement', 'topic', '--outline', 'outline.txt', '--mapping', 'mapping.json'],
		ScriptedGenerator('Recent [1] and earlier [2].'),
	)

	assert code == 0
	data = json.loads((tmp_path / 'review.json').read_text())
	assert [(item['title'], item['actualIndex']) for item in data['literature']] == [('B', 1), ('A', 2)]
