from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from companion.backend.ai import orchestrator
from companion.backend.ai.models import (
	EmotionAnalysis,
	GiftDecision,
	MoodEntry,
	RiskAssessment,
	UIState,
	WellnessAction,
)
from companion.backend.services import storage_service
from companion.backend.services.ui_state_service import UIStateContext


@dataclass
class CheckInResult:
	entry: MoodEntry
	analysis: EmotionAnalysis
	ui_state: UIState
	risk: RiskAssessment
	actions: List[WellnessAction] = field(default_factory=list)
	gift: Optional[GiftDecision] = None

	def as_dict(self) -> Dict[str, Any]:
		return {
			"entry": self.entry.to_wire(),
			"analysis": self.analysis.to_wire(),
			"uiState": self.ui_state.to_wire(),
			"risk": self.risk.to_wire(),
			"actions": [action.to_wire() for action in self.actions],
			"gift": self.gift.to_wire() if self.gift else None,
		}


def _now_iso() -> str:
	return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _source(note: str, is_voice: bool) -> str:
	if is_voice:
		return "voice"
	return "text" if note.strip() else "emoji"


def build_mood_entry(
	analysis: EmotionAnalysis,
	*,
	selected_mood: str,
	note: str = "",
	is_voice: bool = False,
	entry_id: str | None = None,
	timestamp: str | None = None,
) -> MoodEntry:
	return MoodEntry(
		id=entry_id or storage_service.next_record_id(),
		timestamp=timestamp or _now_iso(),
		mood=analysis.emotion.strip() or selected_mood,
		intensity=analysis.intensity or 5,
		sentiment=analysis.sentiment or "neutral",
		note=note,
		reason=analysis.reason or None,
		source=_source(note, is_voice),
		language=analysis.detected_language or "English",
	)


async def submit_check_in(
	user_id: str,
	*,
	selected_mood: str,
	note: str = "",
	is_voice: bool = False,
	ui_state: UIStateContext,
) -> CheckInResult:
	analysis = await orchestrator.analyze_emotion_and_ui(note.strip() or selected_mood, selected_mood)
	current_ui = ui_state.apply_analysis(analysis)

	existing_ids = [entry.id for entry in storage_service.get_mood_history(user_id)]
	entry = build_mood_entry(
		analysis,
		selected_mood=selected_mood,
		note=note,
		is_voice=is_voice,
		entry_id=storage_service.next_record_id(existing_ids),
	)
	history = storage_service.save_mood(user_id, entry)

	risk, actions = await asyncio.gather(
		orchestrator.analyze_risk(history),
		orchestrator.generate_wellness_actions(entry.mood, entry.intensity, entry.language),
	)
	storage_service.save_risk(user_id, risk)

	gift = await orchestrator.check_gift_visibility(entry.mood, entry.intensity, risk.level)
	return CheckInResult(
		entry=entry,
		analysis=analysis,
		ui_state=current_ui,
		risk=risk,
		actions=actions,
		gift=gift,
	)
