from __future__ import annotations

import random
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from companion.backend import config, constants
from companion.backend.ai import fallbacks, prompts
from companion.backend.ai.client import AnyModelClient, get_model_client
from companion.backend.ai.contracts import (
	EMOTION_SCHEMA,
	GIFT_CONTENT_SCHEMA,
	GIFT_DECISION_SCHEMA,
	RISK_SCHEMA,
	WELLNESS_SCHEMA,
)
from companion.backend.ai.deadline import with_deadline
from companion.backend.ai.models import (
	ActionType,
	ChatMessage,
	ColorTheme,
	ConversationTurn,
	EmotionAnalysis,
	GiftContent,
	GiftDecision,
	MoodEntry,
	RiskAssessment,
	RiskLevel,
	UserProfile,
	WellnessAction,
)
from companion.backend.ai.parsing import ModelClientError, parse_json_payload, parse_structured, validate_payload
from companion.backend.ai.security import check_safety


HistoryItem = Union[ConversationTurn, ChatMessage]


class _ProviderPayload(BaseModel):
	model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)


class _RiskPayload(_ProviderPayload):
	risk_level: RiskLevel
	factors: List[str] = Field(default_factory=list)
	recommended_action: str = Field(..., min_length=1)


class _WellnessActionPayload(_ProviderPayload):
	title: str = Field(..., min_length=1)
	description: str
	duration: str
	type: ActionType
	color_theme: ColorTheme = "blue"


class _WellnessPayload(_ProviderPayload):
	actions: List[_WellnessActionPayload] = Field(default_factory=list)


def _now_iso() -> str:
	return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _client(client: AnyModelClient | None) -> AnyModelClient:
	return client if client is not None else get_model_client()


def _conversation_turns(history: Sequence[HistoryItem]) -> List[ConversationTurn]:
	turns: List[ConversationTurn] = []
	for item in history:
		turn = ConversationTurn.from_message(item) if isinstance(item, ChatMessage) else item
		if turn.text.strip():
			turns.append(turn)
	return turns


def _risk_logs(mood_history: Sequence[MoodEntry]) -> List[Dict[str, Any]]:
	recent = list(mood_history)[-constants.RISK_HISTORY_WINDOW :]
	return [
		{
			"date": entry.timestamp,
			"emotion": entry.mood,
			"intensity": entry.intensity,
			"note": entry.note,
		}
		for entry in recent
	]


async def analyze_emotion_and_ui(
	text: str,
	manual_mood_label: str,
	*,
	client: AnyModelClient | None = None,
) -> EmotionAnalysis:
	client = _client(client)
	if not client.enabled:
		return fallbacks.emotion_fallback(manual_mood_label)
	fallback = fallbacks.emotion_fallback(manual_mood_label, fallbacks.UNAVAILABLE_ANALYSIS_REASON)

	async def _analyze() -> EmotionAnalysis:
		if text and text.strip():
			verdict = await check_safety(text, client=client)
			if not verdict.is_safe:
				return fallbacks.blocked_emotion_fallback(manual_mood_label)
		raw = await client.generate_structured(
			prompts.emotion_prompt(text or manual_mood_label, manual_mood_label),
			EMOTION_SCHEMA,
			model=client.config.fast_model,
		)
		return parse_structured(raw, EmotionAnalysis)

	return await with_deadline(
		_analyze,
		config.deadline_seconds("emotion"),
		fallback,
		label="emotion analysis",
	)


async def send_chat_message(
	message: str,
	history: Sequence[HistoryItem],
	user_profile: UserProfile,
	*,
	client: AnyModelClient | None = None,
) -> str:
	client = _client(client)
	if not client.enabled:
		return fallbacks.OFFLINE_CHAT_MESSAGE

	async def _reply() -> str:
		verdict = await check_safety(message, client=client)
		if not verdict.is_safe:
			return fallbacks.SAFETY_REDIRECT_MESSAGE
		conversation = client.create_conversation(
			prompts.chat_system_instruction(user_profile),
			_conversation_turns(history),
			model=client.config.deep_model,
		)
		return await conversation.send(message)

	return await with_deadline(
		_reply,
		config.deadline_seconds("chat"),
		fallbacks.SLOW_CONNECTION_MESSAGE,
		label="chat reply",
	)


async def analyze_risk(
	mood_history: Sequence[MoodEntry],
	*,
	client: AnyModelClient | None = None,
) -> RiskAssessment:
	client = _client(client)
	if not client.enabled or not mood_history:
		return fallbacks.risk_fallback()
	logs = _risk_logs(mood_history)

	async def _assess() -> RiskAssessment:
		raw = await client.generate_structured(
			prompts.risk_prompt(logs),
			RISK_SCHEMA,
			model=client.config.deep_model,
		)
		payload = validate_payload(parse_json_payload(raw), _RiskPayload)
		return RiskAssessment(
			level=payload.risk_level,
			factors=[factor.strip() for factor in payload.factors if factor.strip()],
			recommended_action=payload.recommended_action.strip(),
			last_updated=_now_iso(),
		)

	return await with_deadline(
		_assess,
		config.deadline_seconds("risk"),
		fallbacks.risk_fallback,
		label="risk analysis",
	)


async def generate_wellness_actions(
	emotion: str,
	intensity: int,
	language: str = "English",
	*,
	client: AnyModelClient | None = None,
) -> List[WellnessAction]:
	client = _client(client)
	if not client.enabled:
		return fallbacks.default_wellness_actions()
	count = constants.WELLNESS_ACTION_COUNT

	async def _generate() -> List[WellnessAction]:
		raw = await client.generate_structured(
			prompts.wellness_prompt(emotion, intensity, language or "English", count),
			WELLNESS_SCHEMA,
			model=client.config.fast_model,
		)
		payload = validate_payload(parse_json_payload(raw), _WellnessPayload)
		if not payload.actions:
			raise ModelClientError(code="model_schema_mismatch", message="Model returned no wellness actions.")
		return [
			WellnessAction(id=str(index), **action.model_dump())
			for index, action in enumerate(payload.actions[:count])
		]

	return await with_deadline(
		_generate,
		config.deadline_seconds("wellness"),
		fallbacks.default_wellness_actions,
		label="wellness actions",
	)


async def check_gift_visibility(
	emotion: str,
	intensity: int,
	risk_level: str,
	*,
	client: AnyModelClient | None = None,
) -> GiftDecision:
	heuristic = fallbacks.gift_visibility_heuristic(emotion, intensity, risk_level)
	client = _client(client)
	if not client.enabled:
		return heuristic

	async def _decide() -> GiftDecision:
		raw = await client.generate_structured(
			prompts.gift_visibility_prompt(emotion, intensity, risk_level),
			GIFT_DECISION_SCHEMA,
			prompts.GIFT_ENGINE_PROMPT,
			model=client.config.fast_model,
		)
		return parse_structured(raw, GiftDecision)

	return await with_deadline(
		_decide,
		config.deadline_seconds("gift_visibility"),
		heuristic,
		label="gift visibility",
	)


async def generate_gift_content(
	emotion: str,
	risk_level: str,
	*,
	client: AnyModelClient | None = None,
	rng: Optional[random.Random] = None,
) -> GiftContent:
	fallback = fallbacks.random_gift_content(rng)
	client = _client(client)
	if not client.enabled:
		return fallback

	async def _generate() -> GiftContent:
		raw = await client.generate_structured(
			prompts.gift_content_prompt(emotion, risk_level),
			GIFT_CONTENT_SCHEMA,
			prompts.GIFT_ENGINE_PROMPT,
			model=client.config.fast_model,
		)
		return parse_structured(raw, GiftContent)

	return await with_deadline(
		_generate,
		config.deadline_seconds("gift_content"),
		fallback,
		label="gift content",
	)
