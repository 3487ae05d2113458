from unittest.mock import MagicMock, patch

import pytest

from litreview.config.settings import settings
from litreview.errors import ConfigurationError
from litreview.llm.client import LLMClient, TextGenerator, create_llm_client_from_config


@pytest.fixture
def openrouter_client():
	with patch.object(LLMClient, '_initialize_client', return_value=MagicMock()):
		client = LLMClient('openrouter', 'test-model', api_key='key')
	response = MagicMock()
	response.choices = [MagicMock(message=MagicMock(content='generated text'))]
	response.usage.prompt_tokens = 11
	response.usage.completion_tokens = 7
	client._client.chat.completions.create.return_value = response
	return client


def test_generate_tracks_usage(openrouter_client):
	assert openrouter_client.generate('prompt') == 'generated text'
	assert openrouter_client.get_usage_stats() == {'input_tokens': 11, 'output_tokens': 7, 'total_tokens': 18}
	_, kwargs = openrouter_client._client.chat.completions.create.call_args
	assert kwargs['model'] == 'test-model'
	assert kwargs['messages'] == [{'role': 'user', 'content': 'prompt'}]


def test_client_satisfies_text_generator(openrouter_client):
	assert isinstance(openrouter_client, TextGenerator)


def test_anthropic_messages():
	with patch.object(LLMClient, '_initialize_client', return_value=MagicMock()):
		client = LLMClient('anthropic', 'claude-test', api_key='key')
	client._client.messages.create.return_value.content = [MagicMock(text='answer')]
	client._client.messages.create.return_value.usage.input_tokens = 3
	client._client.messages.create.return_value.usage.output_tokens = 4

	assert client.generate('q', system_prompt='be brief') == 'answer'
	assert client._client.messages.create.call_args.kwargs['system'] == 'be brief'


def test_unknown_provider():
	with pytest.raises(ConfigurationError):
		LLMClient('mystery', 'model', api_key='key')


def test_usage_accumulates_and_system_prompt_leads(openrouter_client):
	openrouter_client.generate('first', system_prompt='be brief', temperature=0.1)
	openrouter_client.generate('second')

	assert openrouter_client.get_usage_stats()['total_tokens'] == 36
	first_call = openrouter_client._client.chat.completions.create.call_args_list[0].kwargs
	assert first_call['messages'][0] == {'role': 'system', 'content': 'be brief'}
	assert first_call['temperature'] == 0.1
	assert first_call['max_tokens'] == 8000


def test_config_falls_back_to_settings_key(monkeypatch):
	monkeypatch.setattr(settings, 'ANTHROPIC_API_KEY', 'from-env')
	with patch.object(LLMClient, '_initialize_client', return_value=MagicMock()):
		client = create_llm_client_from_config({'provider': 'anthropic', 'model': 'claude-test'})
	assert client.api_key == 'from-env'


@pytest.mark.skipif(not settings.OPENROUTER_API_KEY, reason='No LLM API key configured')
def test_openrouter_live():
	client = LLMClient('openrouter', settings.WRITING_MODEL, api_key=settings.OPENROUTER_API_KEY, max_tokens=50)
	assert client.generate('Reply with the single word: ok').strip()
