from __future__ import annotations

from typing import Any, Dict, List


JsonSchema = Dict[str, Any]


def _enum(values: List[str]) -> JsonSchema:
	return {"type": "string", "enum": values}


def _object(properties: Dict[str, JsonSchema]) -> JsonSchema:
	# Strict structured output needs every property listed as required.
	return {
		"type": "object",
		"properties": properties,
		"required": list(properties),
		"additionalProperties": False,
	}


UI_STATE_SCHEMA = _object(
	{
		"themeTone": _enum(["calm-cool", "warm-uplifting", "neutral-balanced"]),
		"backgroundAnimation": _enum(["slow-wave", "gentle-pulse", "static"]),
		"interactionDensity": _enum(["minimal", "normal", "high"]),
		"animationSpeed": _enum(["slow", "normal", "fast"]),
		"notificationStyle": _enum(["gentle", "standard"]),
	}
)

SECURITY_SCHEMA = _object(
	{
		"isSafe": {"type": "boolean"},
		"detectedThreats": {"type": "array", "items": {"type": "string"}},
		"sanitizedInput": {"type": ["string", "null"]},
	}
)

EMOTION_SCHEMA = _object(
	{
		"detectedLanguage": _enum(["English", "Hindi", "Hinglish"]),
		"emotion": {"type": "string"},
		"intensity": {"type": "integer"},
		"sentiment": _enum(["positive", "neutral", "negative"]),
		"riskLevel": _enum(["Low", "Medium", "High"]),
		"reason": {"type": "string"},
		"uiState": UI_STATE_SCHEMA,
	}
)

RISK_SCHEMA = _object(
	{
		"riskLevel": _enum(["Low", "Medium", "High"]),
		"factors": {"type": "array", "items": {"type": "string"}},
		"recommendedAction": {"type": "string"},
	}
)

WELLNESS_ACTION_SCHEMA = _object(
	{
		"title": {"type": "string"},
		"description": {"type": "string"},
		"duration": {"type": "string"},
		"type": _enum(["Breathing", "Journaling", "Focus", "Physical"]),
		"colorTheme": _enum(["blue", "green", "purple", "orange"]),
	}
)

# Top-level structured output must be an object, so the list is wrapped.
WELLNESS_SCHEMA = _object(
	{
		"actions": {"type": "array", "items": WELLNESS_ACTION_SCHEMA},
	}
)

GIFT_DECISION_SCHEMA = _object(
	{
		"showGift": {"type": "boolean"},
		"urgency": _enum(["low", "medium", "high"]),
	}
)

GIFT_CONTENT_SCHEMA = _object(
	{
		"type": _enum(["quote", "fact", "game"]),
		"text": {"type": "string"},
		"gameType": {"type": ["string", "null"], "enum": ["breathing", "bubble-pop", None]},
		"author": {"type": ["string", "null"]},
	}
)

SCHEMAS: Dict[str, JsonSchema] = {
	"security_verdict": SECURITY_SCHEMA,
	"emotion_analysis": EMOTION_SCHEMA,
	"risk_assessment": RISK_SCHEMA,
	"wellness_actions": WELLNESS_SCHEMA,
	"gift_decision": GIFT_DECISION_SCHEMA,
	"gift_content": GIFT_CONTENT_SCHEMA,
}


def schema_name(schema: JsonSchema) -> str:
	for name, candidate in SCHEMAS.items():
		if candidate is schema:
			return name
	return "structured_output"
