import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from litreview.config.settings import settings
from litreview.errors import ConfigurationError
from litreview.models import YearPolicy


@dataclass
class KeywordPlanConfig:
	keyword_count: int = 10
	per_keyword_count: int = 20
	language: str = 'en'
	literature_source: str = 'semantic_scholar'
	recent_years: int = 5
	recent_percentage: int = 60

	def __post_init__(self):
		self.keyword_count = min(max(int(self.keyword_count), 1), 20)
		self.per_keyword_count = max(int(self.per_keyword_count), 1)

	@property
	def year_policy(self) -> YearPolicy | None:
		policy = YearPolicy(recent_years=self.recent_years, percentage=self.recent_percentage)
		return policy if policy.is_active() else None


@dataclass
class SearchConfig:
	pacing_min_seconds: float = 2.0
	pacing_max_seconds: float = 5.0

	def __post_init__(self):
		if self.pacing_min_seconds < 0 or self.pacing_max_seconds < self.pacing_min_seconds:
			raise ConfigurationError(
				f'Invalid pacing window: [{self.pacing_min_seconds}, {self.pacing_max_seconds}]'
			)


@dataclass
class CompletionConfig:
	search_limit: int = 3
	match_threshold: float = 30.0


@dataclass
class ReviewConfig:
	language: str = 'en'
	chapter_word_count: int | None = None
	extra_instructions: str = ''
	reconcile: bool = True


def _build(cls, data: dict[str, Any] | None):
	allowed = {f.name for f in fields(cls)}
	values = {key: value for key, value in (data or {}).items() if key in allowed}
	return cls(**values)


class ConfigLoader:
	def __init__(self, config_dir: str | Path | None = None):
		load_dotenv()
		self.config_dir = Path(config_dir) if config_dir else settings.CONFIG_DIR
		self.settings = self._load_settings()

	def _load_settings(self) -> dict[str, Any]:
		settings_path = self.config_dir / 'settings.yaml'

		if not settings_path.exists():
			raise FileNotFoundError(f'Settings file not found: {settings_path}')

		with open(settings_path) as f:
			loaded = yaml.safe_load(f) or {}

		return self._inject_env_vars(loaded)

	def _inject_env_vars(self, config: dict[str, Any]) -> dict[str, Any]:
		def replace_env(obj):
			if isinstance(obj, dict):
				new_obj = {}
				for key, value in obj.items():
					if key.endswith('_env') and isinstance(value, str):
						# Get env variable and create new key without _env suffix
						env_value = os.getenv(value)
						if not env_value:
							raise ConfigurationError(f'Environment variable {value} not found')
						new_key = key.removesuffix('_env')
						new_obj[new_key] = env_value
					else:
						new_obj[key] = replace_env(value)
				return new_obj
			elif isinstance(obj, list):
				return [replace_env(item) for item in obj]
			return obj

		return replace_env(config)  # type: ignore

	def get_keyword_config(self) -> KeywordPlanConfig:
		return _build(KeywordPlanConfig, self.settings.get('keywords'))

	def get_search_config(self) -> SearchConfig:
		return _build(SearchConfig, self.settings.get('search'))

	def get_completion_config(self) -> CompletionConfig:
		return _build(CompletionConfig, self.settings.get('completion'))

	def get_review_config(self) -> ReviewConfig:
		return _build(ReviewConfig, self.settings.get('review'))

	def get_llm_config(self) -> dict[str, Any]:
		llm = {
			'provider': settings.LLM_PROVIDER,
			'model': settings.WRITING_MODEL,
			'temperature': settings.LLM_TEMPERATURE,
			'max_tokens': settings.LLM_MAX_TOKENS,
		}
		llm.update(self.settings.get('llm') or {})
		return llm


# Singleton instance
_config = None


def get_config() -> ConfigLoader:
	global _config
	if _config is None:
		_config = ConfigLoader()
	return _config
