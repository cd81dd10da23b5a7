from __future__ import annotations

import time
from dataclasses import dataclass, field
from threading import Lock
from typing import Dict, Iterable, List, Optional, Set

from companion.backend.ai.models import ChatMessage, MoodEntry, RiskAssessment, UserProfile


@dataclass
class UserRecords:
	user: Optional[UserProfile] = None
	mood_history: List[MoodEntry] = field(default_factory=list)
	chat_history: List[ChatMessage] = field(default_factory=list)
	latest_risk: Optional[RiskAssessment] = None


_STORE: Dict[str, UserRecords] = {}
_LOCK = Lock()


def _records_locked(user_id: str) -> UserRecords:
	records = _STORE.get(user_id)
	if records is None:
		records = UserRecords()
		_STORE[user_id] = records
	return records


def next_record_id(existing: Iterable[str] = ()) -> str:
	taken = set(existing)
	candidate = int(time.time() * 1000)
	while str(candidate) in taken:
		candidate += 1
	return str(candidate)


def save_user(user_id: str, profile: UserProfile) -> UserProfile:
	with _LOCK:
		_records_locked(user_id).user = profile
	return profile


def get_user(user_id: str) -> Optional[UserProfile]:
	with _LOCK:
		records = _STORE.get(user_id)
		return records.user if records else None


def save_mood(user_id: str, entry: MoodEntry) -> List[MoodEntry]:
	with _LOCK:
		records = _records_locked(user_id)
		records.mood_history.append(entry)
		return list(records.mood_history)


def get_mood_history(user_id: str) -> List[MoodEntry]:
	with _LOCK:
		records = _STORE.get(user_id)
		return list(records.mood_history) if records else []


def _with_free_id(message: ChatMessage, taken: Set[str]) -> ChatMessage:
	if message.id not in taken:
		return message
	return message.model_copy(update={"id": next_record_id(taken)})


def append_chat(user_id: str, *messages: ChatMessage) -> List[ChatMessage]:
	with _LOCK:
		history = _records_locked(user_id).chat_history
		taken = {message.id for message in history}
		for message in messages:
			stored = _with_free_id(message, taken)
			history.append(stored)
			taken.add(stored.id)
		return list(history)


def seed_chat(user_id: str, message: ChatMessage) -> List[ChatMessage]:
	with _LOCK:
		history = _records_locked(user_id).chat_history
		if not history:
			history.append(message)
		return list(history)


def get_chat_history(user_id: str) -> List[ChatMessage]:
	with _LOCK:
		records = _STORE.get(user_id)
		return list(records.chat_history) if records else []


def save_risk(user_id: str, assessment: RiskAssessment) -> RiskAssessment:
	with _LOCK:
		_records_locked(user_id).latest_risk = assessment
	return assessment


def get_latest_risk(user_id: str) -> Optional[RiskAssessment]:
	with _LOCK:
		records = _STORE.get(user_id)
		return records.latest_risk if records else None


def clear_all(user_id: str | None = None) -> None:
	with _LOCK:
		if user_id is None:
			_STORE.clear()
		else:
			_STORE.pop(user_id, None)
