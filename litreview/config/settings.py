from enum import Enum
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class SearchBackend(Enum):
	SEMANTIC_SCHOLAR = 'semantic_scholar'
	ARXIV = 'arxiv'


class Settings(BaseSettings):
	OPENROUTER_API_KEY: str | None = None
	ANTHROPIC_API_KEY: str | None = None
	SEMANTIC_SCHOLAR_API_KEY: str | None = None

	# Research settings
	SEARCH_BACKEND: str = 'semantic_scholar'
	SEARCH_TIMEOUT_SECONDS: int = 30

	# LLM settings
	LLM_PROVIDER: str = 'openrouter'
	WRITING_MODEL: str = 'anthropic/claude-3.5-sonnet'
	LLM_TEMPERATURE: float = 0.7
	LLM_MAX_TOKENS: int = 8000

	# App Settings
	APP_NAME: str = 'LitReview'
	LOG_LEVEL: str = 'INFO'
	LOG_TO_FILE: bool = True

	# Paths
	BASE_DIR: Path = Path(__file__).parent.parent.parent
	CONFIG_DIR: Path = BASE_DIR / 'config'
	DATA_DIR: Path = BASE_DIR / 'data'
	OUTPUT_DIR: Path = DATA_DIR / 'outputs'
	LOG_DIR: Path = BASE_DIR / 'logs'

	model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='ignore')


settings = Settings()
