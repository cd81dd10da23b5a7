from __future__ import annotations

import os
from typing import Dict, List, Mapping, Optional

from dotenv import dotenv_values

from companion.backend import constants


def _float_env(name: str, default: float, minimum: float = 0.0) -> float:
	raw = os.getenv(name, "").strip()
	if not raw:
		return default
	try:
		value = float(raw)
	except ValueError:
		return default
	return value if value > minimum else default


def env_file_path() -> str:
	return os.getenv("COMPANION_ENV_FILE", constants.DEFAULT_ENV_FILE).strip() or constants.DEFAULT_ENV_FILE


def config_sources() -> List[Mapping[str, Optional[str]]]:
	"""Ranked configuration sources: process environment first, then the .env file."""
	sources: List[Mapping[str, Optional[str]]] = [os.environ]
	path = env_file_path()
	if os.path.isfile(path):
		sources.append(dotenv_values(path))
	return sources


def deadline_seconds(capability: str) -> float:
	default = constants.DEADLINES[capability]
	return _float_env(f"COMPANION_DEADLINE_{capability.upper()}_S", default)


def all_deadlines() -> Dict[str, float]:
	return {name: deadline_seconds(name) for name in constants.DEADLINES}


def chat_temperature() -> float:
	raw = os.getenv("COMPANION_CHAT_TEMPERATURE", "").strip()
	if not raw:
		return constants.DEFAULT_CHAT_TEMPERATURE
	try:
		value = float(raw)
	except ValueError:
		return constants.DEFAULT_CHAT_TEMPERATURE
	if value < 0 or value > 2:
		return constants.DEFAULT_CHAT_TEMPERATURE
	return value


def log_level() -> str:
	value = os.getenv("COMPANION_LOG_LEVEL", constants.DEFAULT_LOG_LEVEL).strip().upper()
	if value not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
		return constants.DEFAULT_LOG_LEVEL
	return value
