"""Configuration for app_locator, read lazily from the environment (and a .env file if present)."""

import os

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
	return os.getenv(name, default).strip().lower() in ('1', 'true', 't', 'yes', 'y')


def _env_int(name: str, default: int) -> int:
	try:
		return int(os.getenv(name, str(default)))
	except ValueError:
		return default


class Config:
	"""Environment-backed settings. Every property is re-read on access so tests can monkeypatch os.environ."""

	@property
	def APP_LOCATOR_LOGGING_LEVEL(self) -> str:
		return os.getenv('APP_LOCATOR_LOGGING_LEVEL', 'info').lower()

	@property
	def APP_LOCATOR_SETUP_LOGGING(self) -> bool:
		return _env_bool('APP_LOCATOR_SETUP_LOGGING', 'true')

	@property
	def APP_LOCATOR_BATCH_SIZE(self) -> int:
		return max(1, _env_int('APP_LOCATOR_BATCH_SIZE', 10))

	@property
	def APP_LOCATOR_MAX_ALTERNATES(self) -> int:
		return max(0, _env_int('APP_LOCATOR_MAX_ALTERNATES', 1))

	@property
	def APP_LOCATOR_MAX_TEXT_LENGTH(self) -> int:
		return _env_int('APP_LOCATOR_MAX_TEXT_LENGTH', 100)

	@property
	def APP_LOCATOR_VIEWPORT_FALLBACK(self) -> int:
		return _env_int('APP_LOCATOR_VIEWPORT_FALLBACK', 9999)


CONFIG = Config()

