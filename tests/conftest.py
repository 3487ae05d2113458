import json

import pytest

from litreview.core.cancellation import PacingDelay
from litreview.models import LiteratureRecord
from litreview.modules.search_provider import SearchProvider


class StubProvider(SearchProvider):
	name = 'stub'

	def __init__(self, responses=None, errors=None):
		self.responses = responses or {}
		self.errors = errors or {}
		self.calls = []

	def search(self, keyword, limit, min_year=None):
		self.calls.append((keyword, limit, min_year))
		if keyword in self.errors:
			raise self.errors[keyword]
		return self.responses.get(keyword, [])[:limit]


class ScriptedGenerator:
	"""Returns queued responses in order and keeps every prompt it was given."""

	def __init__(self, *responses):
		self.responses = list(responses)
		self.prompts = []

	def generate(self, prompt: str) -> str:
		self.prompts.append(prompt)
		if not self.responses:
			raise AssertionError('ScriptedGenerator ran out of responses')
		response = self.responses.pop(0)
		if isinstance(response, Exception):
			raise response
		return response


def make_record(title, **kwargs) -> LiteratureRecord:
	return LiteratureRecord(title=title, **kwargs)


def keywords_json(*keywords) -> str:
	return json.dumps({'keywords': [{'keyword': k, 'minYear': None} for k in keywords]})


@pytest.fixture
def no_pacing():
	return PacingDelay(0, 0, sleep=lambda _: None)


@pytest.fixture
def complete_abstract():
	return (
		'This study measures the distribution of microplastic particles across coastal sediments '
		'and links particle density to nearby urban runoff, industrial discharge and tidal patterns.'
	)
