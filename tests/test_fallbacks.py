import random
from unittest import TestCase

from pydantic import ValidationError

from companion.backend.ai import fallbacks
from companion.backend.ai.models import EmotionAnalysis, GiftContent, SecurityVerdict


class _FixedRandom(random.Random):
	def __init__(self, roll: float):
		super().__init__(7)
		self._roll = roll

	def random(self) -> float:
		return self._roll


class GiftVisibilityHeuristicTests(TestCase):
	def test_negative_emotion_shows_gift(self) -> None:
		decision = fallbacks.gift_visibility_heuristic("Anxious", 2, "Low")
		self.assertTrue(decision.show_gift)
		self.assertEqual(decision.urgency, "medium")

	def test_calm_low_risk_hides_gift(self) -> None:
		decision = fallbacks.gift_visibility_heuristic("Happy", 1, "Low")
		self.assertFalse(decision.show_gift)
		self.assertEqual(decision.urgency, "low")

	def test_intensity_or_risk_alone_shows_gift(self) -> None:
		self.assertTrue(fallbacks.gift_visibility_heuristic("Happy", 4, "Low").show_gift)
		self.assertTrue(fallbacks.gift_visibility_heuristic("Happy", 1, "Medium").show_gift)

	def test_negative_label_matches_inside_longer_emotion(self) -> None:
		self.assertTrue(fallbacks.is_negative_emotion("Very Stressed"))
		self.assertFalse(fallbacks.is_negative_emotion("Calm"))


class LocalDefaultsTests(TestCase):
	def test_emotion_fallback_uses_manual_mood(self) -> None:
		analysis = fallbacks.emotion_fallback("Stressed")
		self.assertEqual(analysis.emotion, "Stressed")
		self.assertEqual(analysis.intensity, 5)
		self.assertEqual(analysis.sentiment, "neutral")
		self.assertEqual(analysis.risk_level, "Low")
		self.assertEqual(analysis.detected_language, "English")
		self.assertEqual(analysis.ui_state, fallbacks.default_ui_state())

	def test_emotion_fallback_without_mood_is_neutral(self) -> None:
		self.assertEqual(fallbacks.emotion_fallback("  ").emotion, "Neutral")

	def test_blocked_fallback_carries_redirect_reason(self) -> None:
		analysis = fallbacks.blocked_emotion_fallback("Sad")
		self.assertEqual(analysis.reason, fallbacks.SAFETY_REDIRECT_MESSAGE)
		self.assertEqual(analysis.ui_state.background_animation, "static")

	def test_default_actions_are_three_with_stable_ids(self) -> None:
		actions = fallbacks.default_wellness_actions()
		self.assertEqual([action.id for action in actions], ["1", "2", "3"])
		self.assertEqual([action.title for action in actions], ["Box Breathing", "Shoulder Drop", "One Good Thing"])

	def test_risk_fallback(self) -> None:
		risk = fallbacks.risk_fallback(now="2026-01-01T00:00:00Z")
		self.assertEqual(risk.level, "Low")
		self.assertEqual(risk.factors, ["Data processing unavailable"])
		self.assertEqual(risk.recommended_action, "Keep checking in.")
		self.assertEqual(risk.last_updated, "2026-01-01T00:00:00Z")


class RandomGiftContentTests(TestCase):
	def test_high_roll_gives_fact(self) -> None:
		gift = fallbacks.random_gift_content(_FixedRandom(0.9))
		self.assertEqual(gift.type, "fact")
		self.assertIn(gift.text, fallbacks.FALLBACK_FACTS)
		self.assertIsNone(gift.author)
		self.assertIsNone(gift.game_type)

	def test_middle_roll_gives_quote_with_author(self) -> None:
		gift = fallbacks.random_gift_content(_FixedRandom(0.5))
		self.assertEqual(gift.type, "quote")
		self.assertEqual(gift.author, "NoDepression AI")

	def test_low_roll_gives_bubble_pop(self) -> None:
		gift = fallbacks.random_gift_content(_FixedRandom(0.1))
		self.assertEqual(gift.type, "game")
		self.assertEqual(gift.game_type, "bubble-pop")
		self.assertEqual(gift.text, fallbacks.BUBBLE_POP_TEXT)


class ModelInvariantTests(TestCase):
	def test_game_gift_requires_game_type(self) -> None:
		with self.assertRaises(ValidationError):
			GiftContent(type="game", text="Play")

	def test_non_game_gift_drops_game_type_and_author(self) -> None:
		gift = GiftContent.model_validate({"type": "fact", "text": "x", "gameType": "breathing", "author": "Someone"})
		self.assertIsNone(gift.game_type)
		self.assertIsNone(gift.author)
		self.assertEqual(gift.to_wire(), {"type": "fact", "text": "x"})

	def test_safe_verdict_never_lists_threats(self) -> None:
		verdict = SecurityVerdict.model_validate({"isSafe": True, "detectedThreats": ["noise"]})
		self.assertEqual(verdict.detected_threats, [])

	def test_emotion_intensity_is_clamped_and_ui_state_defaulted(self) -> None:
		analysis = EmotionAnalysis.model_validate({"emotion": "Sad", "intensity": 14, "uiState": None})
		self.assertEqual(analysis.intensity, 10)
		self.assertEqual(analysis.ui_state, fallbacks.default_ui_state())
