from __future__ import annotations

import logging
from dataclasses import dataclass, field
from threading import Lock
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from openai import AsyncOpenAI

from companion.backend import config, constants
from companion.backend.ai.contracts import JsonSchema, schema_name
from companion.backend.ai.models import ConversationTurn
from companion.backend.ai.parsing import ModelClientError


logger = logging.getLogger(__name__)

_DEFAULT_REQUEST_TIMEOUT_S = 30.0


@dataclass(frozen=True)
class ModelConfig:
	api_key: str = field(default="", repr=False)
	fast_model: str = constants.DEFAULT_FAST_MODEL
	deep_model: str = constants.DEFAULT_DEEP_MODEL

	@property
	def has_credentials(self) -> bool:
		return bool(self.api_key)


def _clean_value(value: Any) -> str:
	if not isinstance(value, str):
		return ""
	cleaned = value.strip().strip('"').strip("'").strip()
	if not cleaned or cleaned.lower() in constants.API_KEY_PLACEHOLDERS:
		return ""
	return cleaned


def _first_value(sources: Sequence[Mapping[str, Optional[str]]], names: Iterable[str]) -> str:
	names = list(names)
	for source in sources:
		for name in names:
			value = _clean_value(source.get(name))
			if value:
				return value
	return ""


def resolve_model_config(sources: Optional[Sequence[Mapping[str, Optional[str]]]] = None) -> ModelConfig:
	ranked = list(sources) if sources is not None else config.config_sources()
	return ModelConfig(
		api_key=_first_value(ranked, constants.API_KEY_NAMES),
		fast_model=_first_value(ranked, ["COMPANION_FAST_MODEL"]) or constants.DEFAULT_FAST_MODEL,
		deep_model=_first_value(ranked, ["COMPANION_DEEP_MODEL"]) or constants.DEFAULT_DEEP_MODEL,
	)


def _build_openai_client(*, api_key: str, timeout_s: float) -> AsyncOpenAI:
	# Retries are disabled: every failure resolves to a local fallback.
	return AsyncOpenAI(api_key=api_key, timeout=timeout_s, max_retries=0)


def _extract_response_text(response: Any) -> str:
	output_text = getattr(response, "output_text", None)
	if isinstance(output_text, str) and output_text.strip():
		return output_text.strip()

	output = getattr(response, "output", None)
	if not isinstance(output, list):
		return ""
	parts: List[str] = []
	for item in output:
		content = getattr(item, "content", None)
		if content is None and isinstance(item, dict):
			content = item.get("content")
		if not isinstance(content, list):
			continue
		for chunk in content:
			text = getattr(chunk, "text", None)
			if text is None and isinstance(chunk, dict):
				text = chunk.get("text")
			if isinstance(text, str) and text.strip():
				parts.append(text.strip())
	return "\n".join(parts).strip()


def _provider_error(exc: Exception) -> ModelClientError:
	name = exc.__class__.__name__
	if isinstance(exc, TimeoutError) or name == "APITimeoutError":
		return ModelClientError(code="model_timeout", message="Model provider timed out.")
	return ModelClientError(code="model_provider_error", message="Model provider request failed.")


def _wire_role(turn: ConversationTurn) -> str:
	return "assistant" if turn.role == "model" else "user"


class Conversation:
	def __init__(
		self,
		*,
		client: AsyncOpenAI,
		model: str,
		system_instruction: str,
		history: Iterable[ConversationTurn],
		temperature: float,
	):
		self._client = client
		self._model = model
		self._system_instruction = system_instruction
		self._turns: List[ConversationTurn] = list(history)
		self._temperature = temperature

	@property
	def history(self) -> List[ConversationTurn]:
		return list(self._turns)

	def _input(self, message: str) -> List[Dict[str, str]]:
		turns = [*self._turns, ConversationTurn.user(message)]
		return [{"role": _wire_role(turn), "content": turn.text} for turn in turns if turn.text.strip()]

	async def send(self, message: str) -> str:
		try:
			response = await self._client.responses.create(
				model=self._model,
				instructions=self._system_instruction,
				input=self._input(message),
				temperature=self._temperature,
			)
		except Exception as exc:
			raise _provider_error(exc) from exc
		text = _extract_response_text(response)
		if not text:
			raise ModelClientError(code="model_empty_response", message="Model provider returned an empty response.")
		self._turns.append(ConversationTurn.user(message))
		self._turns.append(ConversationTurn.model(text))
		return text


class ModelClient:
	enabled = True

	def __init__(self, *, model_config: ModelConfig, client: AsyncOpenAI):
		self.config = model_config
		self._client = client

	async def generate_structured(
		self,
		prompt: str,
		schema: JsonSchema,
		system_instruction: str | None = None,
		*,
		model: str | None = None,
	) -> str:
		kwargs: Dict[str, Any] = {
			"model": model or self.config.fast_model,
			"input": prompt,
			"text": {
				"format": {
					"type": "json_schema",
					"name": schema_name(schema),
					"schema": schema,
					"strict": True,
				}
			},
		}
		if system_instruction:
			kwargs["instructions"] = system_instruction
		try:
			response = await self._client.responses.create(**kwargs)
		except Exception as exc:
			raise _provider_error(exc) from exc
		raw = _extract_response_text(response)
		if not raw:
			raise ModelClientError(code="model_empty_response", message="Model provider returned an empty response.")
		return raw

	def create_conversation(
		self,
		system_instruction: str,
		history: Iterable[ConversationTurn],
		*,
		model: str | None = None,
	) -> Conversation:
		return Conversation(
			client=self._client,
			model=model or self.config.deep_model,
			system_instruction=system_instruction,
			history=history,
			temperature=config.chat_temperature(),
		)


class DisabledModelClient:
	enabled = False

	def __init__(self, model_config: ModelConfig | None = None):
		self.config = model_config or ModelConfig()

	async def generate_structured(self, prompt: str, schema: JsonSchema, system_instruction: str | None = None, *, model: str | None = None) -> str:
		raise ModelClientError(code="model_client_disabled", message="Model client is offline.")

	def create_conversation(self, system_instruction: str, history: Iterable[ConversationTurn], *, model: str | None = None) -> Conversation:
		raise ModelClientError(code="model_client_disabled", message="Model client is offline.")


AnyModelClient = Union[ModelClient, DisabledModelClient]


def build_model_client(model_config: ModelConfig) -> AnyModelClient:
	if not model_config.has_credentials:
		logger.warning(
			"Model client offline: no API key found in %s.",
			", ".join(constants.API_KEY_NAMES),
		)
		return DisabledModelClient(model_config)
	try:
		client = _build_openai_client(api_key=model_config.api_key, timeout_s=_DEFAULT_REQUEST_TIMEOUT_S)
	except Exception:
		logger.exception("Model client initialization failed; running offline.")
		return DisabledModelClient(model_config)
	logger.info(
		"Model client initialized (fast=%s, deep=%s).",
		model_config.fast_model,
		model_config.deep_model,
	)
	return ModelClient(model_config=model_config, client=client)


_CLIENT: AnyModelClient | None = None
_CLIENT_LOCK = Lock()


def get_model_client() -> AnyModelClient:
	global _CLIENT
	with _CLIENT_LOCK:
		if _CLIENT is None:
			_CLIENT = build_model_client(resolve_model_config())
		return _CLIENT


def reset_model_client() -> None:
	global _CLIENT
	with _CLIENT_LOCK:
		_CLIENT = None
