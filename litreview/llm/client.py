from enum import Enum
from typing import Any, Protocol, runtime_checkable

from tenacity import retry, stop_after_attempt, wait_exponential

from litreview.config.settings import settings
from litreview.errors import ConfigurationError
from litreview.utils.logger import logger

OPENROUTER_BASE_URL = 'https://openrouter.ai/api/v1'


@runtime_checkable
class TextGenerator(Protocol):
	def generate(self, prompt: str) -> str: ...


class LLMProvider(Enum):
	OPENROUTER = 'openrouter'
	ANTHROPIC = 'anthropic'


class LLMClient:
	"""Single-prompt text generation over OpenRouter (OpenAI API) or Anthropic.

	Calls are retried three times with exponential backoff; token usage accumulates
	across calls and is available from ``get_usage_stats``.
	"""

	def __init__(self, provider: str, model: str, api_key: str, temperature: float = 0.7, max_tokens: int = 8000):
		try:
			self.provider = LLMProvider(provider)
		except ValueError as e:
			raise ConfigurationError(f'Unsupported LLM provider: {provider}') from e
		self.model = model
		self.api_key = api_key
		self.temperature = temperature
		self.max_tokens = max_tokens
		self.usage = {'input_tokens': 0, 'output_tokens': 0}

		self._client = self._initialize_client()
		self._senders = {
			LLMProvider.OPENROUTER: self._send_openrouter,
			LLMProvider.ANTHROPIC: self._send_anthropic,
		}
		logger.info(f'LLM client ready: {self.provider.value}/{model}')

	def _initialize_client(self):
		if self.provider == LLMProvider.ANTHROPIC:
			from anthropic import Anthropic

			return Anthropic(api_key=self.api_key)

		from openai import OpenAI

		return OpenAI(base_url=OPENROUTER_BASE_URL, api_key=self.api_key)

	@retry(stop=stop_after_attempt(3), wait=wait_exponential(multiplier=2, min=2, max=10), reraise=True)
	def generate(
		self,
		prompt: str,
		system_prompt: str | None = None,
		temperature: float | None = None,
		max_tokens: int | None = None,
	) -> str:
		options = {
			'temperature': self.temperature if temperature is None else temperature,
			'max_tokens': self.max_tokens if max_tokens is None else max_tokens,
		}
		logger.debug(f'Prompting {self.model} with {len(prompt)} chars')

		try:
			text = self._senders[self.provider](prompt, system_prompt, options)
		except Exception as e:
			logger.error(f'{self.provider.value} request failed: {e}')
			raise

		logger.info(f'Generated {len(text or "")} chars (running tokens: {self.usage_summary()})')
		return text or ''

	def _send_openrouter(self, prompt: str, system_prompt: str | None, options: dict[str, Any]) -> str:
		messages = [{'role': 'system', 'content': system_prompt}] if system_prompt else []
		messages.append({'role': 'user', 'content': prompt})

		response = self._client.chat.completions.create(
			model=self.model,
			messages=messages,
			extra_headers={'X-Title': settings.APP_NAME},
			**options,
		)
		usage = getattr(response, 'usage', None)
		if usage:
			self._record_usage(usage.prompt_tokens, usage.completion_tokens)
		return response.choices[0].message.content

	def _send_anthropic(self, prompt: str, system_prompt: str | None, options: dict[str, Any]) -> str:
		request = dict(options, model=self.model, messages=[{'role': 'user', 'content': prompt}])
		if system_prompt:
			request['system'] = system_prompt

		response = self._client.messages.create(**request)
		usage = getattr(response, 'usage', None)
		if usage:
			self._record_usage(usage.input_tokens, usage.output_tokens)
		return response.content[0].text

	def _record_usage(self, input_tokens: int | None, output_tokens: int | None) -> None:
		self.usage['input_tokens'] += input_tokens or 0
		self.usage['output_tokens'] += output_tokens or 0

	def usage_summary(self) -> str:
		return f'in={self.usage["input_tokens"]} out={self.usage["output_tokens"]}'

	def get_usage_stats(self) -> dict[str, int]:
		return {**self.usage, 'total_tokens': self.usage['input_tokens'] + self.usage['output_tokens']}


def create_llm_client_from_config(config: dict[str, Any]) -> LLMClient:
	"""Build the writing client from the ``llm`` config section, falling back to settings."""
	provider = config.get('provider', settings.LLM_PROVIDER)
	fallback_keys = {
		LLMProvider.ANTHROPIC.value: settings.ANTHROPIC_API_KEY,
		LLMProvider.OPENROUTER.value: settings.OPENROUTER_API_KEY,
	}
	api_key = config.get('api_key') or fallback_keys.get(provider)
	if not api_key:
		raise ConfigurationError(f'No API key configured for LLM provider: {provider}')

	return LLMClient(
		provider=provider,
		model=config.get('model', settings.WRITING_MODEL),
		api_key=api_key,
		temperature=config.get('temperature', 0.7),
		max_tokens=config.get('max_tokens', 8000),
	)
