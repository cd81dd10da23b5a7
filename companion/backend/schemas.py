from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from companion.backend.ai.models import Language, MoodEntry, RiskLevel


class ApiError(BaseModel):
	model_config = ConfigDict(extra="forbid")

	code: str
	message: str
	evidence: List[str] = Field(default_factory=list)


class ApiEnvelope(BaseModel):
	model_config = ConfigDict(extra="allow")

	ok: bool
	generated_at: str
	ai_mode: Optional[Literal["online", "offline"]] = None
	request_id: Optional[str] = None
	data: Optional[Dict[str, Any]] = None
	error: Optional[ApiError] = None


class _Request(BaseModel):
	model_config = ConfigDict(
		extra="forbid",
		str_strip_whitespace=True,
		alias_generator=to_camel,
		populate_by_name=True,
	)


class OnboardingRequest(_Request):
	name: str = Field(..., min_length=1, max_length=80, description="What the companion should call the student.")
	stressors: List[str] = Field(default_factory=list, max_length=20)


class CheckInRequest(_Request):
	mood: str = Field(..., min_length=1, max_length=40, description="Mood label picked by the student.")
	note: str = Field(default="", max_length=2000, description="Typed note or voice transcript.")
	is_voice: bool = Field(default=False, description="True when the note came from speech recognition.")


class ChatRequest(_Request):
	message: str = Field(..., min_length=1, max_length=4000)


class SafetyRequest(_Request):
	text: str = Field(default="", max_length=4000)


class EmotionRequest(_Request):
	text: str = Field(default="", max_length=4000)
	mood: str = Field(..., min_length=1, max_length=40)


class RiskRequest(_Request):
	history: List[MoodEntry] = Field(default_factory=list, max_length=500)


class WellnessRequest(_Request):
	emotion: str = Field(..., min_length=1, max_length=40)
	intensity: int = Field(default=5, ge=1, le=10)
	language: Language = "English"


class GiftVisibilityRequest(_Request):
	emotion: str = Field(..., min_length=1, max_length=40)
	intensity: int = Field(default=5, ge=1, le=10)
	risk_level: RiskLevel = "Low"


class GiftContentRequest(_Request):
	emotion: str = Field(..., min_length=1, max_length=40)
	risk_level: RiskLevel = "Low"
