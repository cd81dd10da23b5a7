from __future__ import annotations

from typing import Iterable, List, Optional

from companion.backend import constants
from companion.backend.ai.models import UserProfile
from companion.backend.services import storage_service


class ProfileNotFoundError(Exception):
	def __init__(self, user_id: str):
		super().__init__(f"No profile for user '{user_id}'.")
		self.user_id = user_id


def _clean_stressors(stressors: Iterable[str]) -> List[str]:
	cleaned: List[str] = []
	for item in stressors:
		value = " ".join(str(item).split()).strip()
		if value and value not in cleaned:
			cleaned.append(value)
	return cleaned


def complete_onboarding(user_id: str, *, name: str, stressors: Iterable[str] = ()) -> UserProfile:
	profile = UserProfile(
		name=" ".join(name.split()),
		stressors=_clean_stressors(stressors),
		is_student=True,
		onboarding_completed=True,
	)
	return storage_service.save_user(user_id, profile)


def get_profile(user_id: str) -> Optional[UserProfile]:
	return storage_service.get_user(user_id)


def require_profile(user_id: str) -> UserProfile:
	profile = storage_service.get_user(user_id)
	if profile is None:
		raise ProfileNotFoundError(user_id)
	return profile


def common_stressors() -> List[str]:
	return list(constants.COMMON_STRESSORS)


def forget_user(user_id: str) -> None:
	storage_service.clear_all(user_id)
