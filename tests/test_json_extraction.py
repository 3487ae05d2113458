import pytest

from litreview.errors import GenerationFormatError
from litreview.utils.json_extraction import extract_json_object, first_object_span


def test_prefers_json_fence():
	text = 'Sure {"ignored": 1}\n```json\n{"keywords": ["a"]}\n```'
	assert extract_json_object(text) == {'keywords': ['a']}


def test_plain_fence():
	assert extract_json_object('```\n{"outline": "1. A"}\n```') == {'outline': '1. A'}


def test_first_object_span_in_prose():
	text = 'Result: {"relevant": true, "reason": "uses {braces} inside"} trailing {"x": 2}'
	assert extract_json_object(text) == {'relevant': True, 'reason': 'uses {braces} inside'}


def test_falls_back_to_span_when_fence_is_invalid():
	text = '```json\nnot json\n```\n{"ok": true}'
	assert extract_json_object(text) == {'ok': True}


def test_span_skips_unbalanced_prefix():
	assert first_object_span('{ broken but {"a": 1}') == '{"a": 1}'
	assert extract_json_object('{ broken but {"a": 1}') == {'a': 1}


@pytest.mark.parametrize('text', ['', '   ', 'no json here', '[1, 2, 3]', '```json\n[]\n```'])
def test_raises_when_no_object(text):
	with pytest.raises(GenerationFormatError):
		extract_json_object(text)
