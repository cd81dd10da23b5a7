from __future__ import annotations

import random
from datetime import datetime, timezone
from typing import List, Optional

from companion.backend.ai.models import (
	EmotionAnalysis,
	GiftContent,
	GiftDecision,
	RiskAssessment,
	UIState,
	WellnessAction,
)


OFFLINE_CHAT_MESSAGE = (
	"I am currently in offline mode because the AI service is not configured. "
	"Add an API key (COMPANION_API_KEY or OPENAI_API_KEY) to enable conversations."
)
SLOW_CONNECTION_MESSAGE = "I'm listening. Sometimes the connection is slow, but I am still here."
SAFETY_REDIRECT_MESSAGE = "I'm here to support your well-being. Let's focus on how you're feeling right now."
OFFLINE_ANALYSIS_REASON = "Analysis unavailable (Offline Mode)"
UNAVAILABLE_ANALYSIS_REASON = "Analysis unavailable right now."

NEGATIVE_EMOTIONS = (
	"Sad",
	"Anxious",
	"Stressed",
	"Lonely",
	"Burnout",
	"Tired",
	"Angry",
	"Fear",
	"Panic",
)

FALLBACK_QUOTES = (
	("You don't have to figure it all out today.", "NoDepression AI"),
	("Breathe. You are doing better than you think.", "NoDepression AI"),
	("It's okay to take a break. You are allowed to rest.", "NoDepression AI"),
	("Your worth is not measured by your productivity.", "NoDepression AI"),
)

FALLBACK_FACTS = (
	"Did you know? Deep breathing activates your vagus nerve, physically nudging your body to relax.",
	"Psychology fact: naming your emotions ('I feel anxious') reduces their intensity in the brain.",
	"Science says: looking at fractals like clouds or leaves can lower stress.",
)

BUBBLE_POP_TEXT = "Pop the stress away."


def _now_iso() -> str:
	return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def default_ui_state() -> UIState:
	return UIState()


def emotion_fallback(manual_mood: str, reason: str = OFFLINE_ANALYSIS_REASON) -> EmotionAnalysis:
	return EmotionAnalysis(
		detected_language="English",
		emotion=manual_mood.strip() or "Neutral",
		intensity=5,
		sentiment="neutral",
		risk_level="Low",
		reason=reason,
		ui_state=default_ui_state(),
	)


def blocked_emotion_fallback(manual_mood: str) -> EmotionAnalysis:
	analysis = emotion_fallback(manual_mood)
	return analysis.model_copy(
		update={
			"reason": SAFETY_REDIRECT_MESSAGE,
			"ui_state": analysis.ui_state.model_copy(update={"background_animation": "static"}),
		}
	)


def risk_fallback(now: Optional[str] = None) -> RiskAssessment:
	return RiskAssessment(
		level="Low",
		factors=["Data processing unavailable"],
		recommended_action="Keep checking in.",
		last_updated=now or _now_iso(),
	)


def default_wellness_actions() -> List[WellnessAction]:
	return [
		WellnessAction(
			id="1",
			title="Box Breathing",
			duration="2 min",
			type="Breathing",
			description="Inhale 4s, hold 4s, exhale 4s, hold 4s.",
			color_theme="blue",
		),
		WellnessAction(
			id="2",
			title="Shoulder Drop",
			duration="30 sec",
			type="Physical",
			description="Release the tension in your shoulders.",
			color_theme="green",
		),
		WellnessAction(
			id="3",
			title="One Good Thing",
			duration="1 min",
			type="Journaling",
			description="Write one small win from today.",
			color_theme="purple",
		),
	]


def is_negative_emotion(emotion: str) -> bool:
	return any(label in emotion for label in NEGATIVE_EMOTIONS)


def gift_visibility_heuristic(emotion: str, intensity: int, risk_level: str) -> GiftDecision:
	should_show = is_negative_emotion(emotion) or intensity > 3 or risk_level != "Low"
	return GiftDecision(show_gift=should_show, urgency="medium" if should_show else "low")


def random_gift_content(rng: Optional[random.Random] = None) -> GiftContent:
	source = rng or random
	roll = source.random()
	if roll > 0.6:
		return GiftContent(type="fact", text=source.choice(FALLBACK_FACTS))
	if roll > 0.3:
		text, author = source.choice(FALLBACK_QUOTES)
		return GiftContent(type="quote", text=text, author=author)
	return GiftContent(type="game", text=BUBBLE_POP_TEXT, game_type="bubble-pop")
