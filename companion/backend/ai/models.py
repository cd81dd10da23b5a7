from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


Language = Literal["English", "Hindi", "Hinglish"]
Sentiment = Literal["positive", "neutral", "negative"]
RiskLevel = Literal["Low", "Medium", "High"]
ThemeTone = Literal["calm-cool", "warm-uplifting", "neutral-balanced"]
BackgroundAnimation = Literal["slow-wave", "gentle-pulse", "static"]
InteractionDensity = Literal["minimal", "normal", "high"]
AnimationSpeed = Literal["slow", "normal", "fast"]
NotificationStyle = Literal["gentle", "standard"]
MoodSource = Literal["text", "voice", "emoji"]
ActionType = Literal["Breathing", "Journaling", "Focus", "Physical"]
ColorTheme = Literal["blue", "green", "purple", "orange"]
Urgency = Literal["low", "medium", "high"]
GiftType = Literal["quote", "fact", "game"]
GameType = Literal["breathing", "bubble-pop"]
ChatRole = Literal["user", "model"]


class _CamelModel(BaseModel):
	model_config = ConfigDict(
		extra="ignore",
		alias_generator=to_camel,
		populate_by_name=True,
	)

	def to_wire(self) -> dict:
		return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class UIState(_CamelModel):
	theme_tone: ThemeTone = "neutral-balanced"
	background_animation: BackgroundAnimation = "gentle-pulse"
	interaction_density: InteractionDensity = "normal"
	animation_speed: AnimationSpeed = "normal"
	notification_style: NotificationStyle = "standard"


class SecurityVerdict(_CamelModel):
	is_safe: bool
	detected_threats: List[str] = Field(default_factory=list)
	sanitized_input: Optional[str] = None

	@model_validator(mode="after")
	def _safe_has_no_threats(self) -> "SecurityVerdict":
		if self.is_safe and self.detected_threats:
			self.detected_threats = []
		return self


def _clamp_intensity(value: object) -> object:
	if isinstance(value, bool):
		return value
	if isinstance(value, float):
		value = round(value)
	if isinstance(value, int):
		return max(1, min(10, value))
	return value


class EmotionAnalysis(_CamelModel):
	detected_language: Language = "English"
	emotion: str = Field(..., min_length=1)
	intensity: int = Field(..., ge=1, le=10)
	sentiment: Sentiment = "neutral"
	risk_level: RiskLevel = "Low"
	reason: str = ""
	ui_state: UIState = Field(default_factory=UIState)

	@field_validator("intensity", mode="before")
	@classmethod
	def _clamp(cls, value: object) -> object:
		return _clamp_intensity(value)

	@field_validator("ui_state", mode="before")
	@classmethod
	def _missing_ui_state(cls, value: object) -> object:
		return UIState() if value is None else value


class MoodEntry(_CamelModel):
	id: str
	timestamp: str
	mood: str
	intensity: int = Field(..., ge=1, le=10)
	sentiment: Sentiment = "neutral"
	note: str = ""
	reason: Optional[str] = None
	source: MoodSource = "emoji"
	language: Language = "English"

	@field_validator("intensity", mode="before")
	@classmethod
	def _clamp(cls, value: object) -> object:
		return _clamp_intensity(value)


class RiskAssessment(_CamelModel):
	level: RiskLevel
	factors: List[str] = Field(default_factory=list)
	recommended_action: str
	last_updated: str


class WellnessAction(_CamelModel):
	id: str
	title: str
	description: str
	duration: str
	type: ActionType
	color_theme: ColorTheme = "blue"


class GiftDecision(_CamelModel):
	show_gift: bool
	urgency: Urgency = "low"


class GiftContent(_CamelModel):
	type: GiftType
	text: str = Field(..., min_length=1)
	game_type: Optional[GameType] = None
	author: Optional[str] = None

	@model_validator(mode="after")
	def _type_specific_fields(self) -> "GiftContent":
		if self.type == "game":
			if self.game_type is None:
				raise ValueError("game gifts require a gameType")
		else:
			self.game_type = None
		if self.type != "quote":
			self.author = None
		elif self.author is not None and not self.author.strip():
			self.author = None
		return self


class ChatMessage(_CamelModel):
	id: str
	role: ChatRole
	text: str
	timestamp: str


class UserProfile(_CamelModel):
	name: str = Field(..., min_length=1)
	stressors: List[str] = Field(default_factory=list)
	is_student: bool = True
	onboarding_completed: bool = False


@dataclass(frozen=True)
class ConversationTurn:
	role: ChatRole
	parts: Tuple[str, ...]

	def __post_init__(self) -> None:
		if self.role not in ("user", "model"):
			raise ValueError(f"Unsupported conversation role: {self.role!r}")

	@classmethod
	def user(cls, text: str) -> "ConversationTurn":
		return cls(role="user", parts=(text,))

	@classmethod
	def model(cls, text: str) -> "ConversationTurn":
		return cls(role="model", parts=(text,))

	@classmethod
	def from_message(cls, message: ChatMessage) -> "ConversationTurn":
		return cls(role=message.role, parts=(message.text,))

	@property
	def text(self) -> str:
		return "\n".join(self.parts)
