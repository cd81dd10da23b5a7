from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List

from companion.backend.ai import orchestrator
from companion.backend.ai.fallbacks import OFFLINE_CHAT_MESSAGE
from companion.backend.ai.models import ChatMessage, UserProfile
from companion.backend.services import storage_service


GREETING_ID = "welcome"
_GREETING_TEMPLATE = (
	"Hi {name}. I'm here to listen. No judgment, just a safe space. How are you feeling right now?"
)


@dataclass
class ChatExchange:
	reply: ChatMessage
	online: bool
	history: List[ChatMessage] = field(default_factory=list)

	def as_dict(self) -> Dict[str, Any]:
		return {
			"reply": self.reply.to_wire(),
			"online": self.online,
			"history": [message.to_wire() for message in self.history],
		}


def _now_iso() -> str:
	return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def greeting(profile: UserProfile) -> ChatMessage:
	return ChatMessage(
		id=GREETING_ID,
		role="model",
		text=_GREETING_TEMPLATE.format(name=profile.name),
		timestamp=_now_iso(),
	)


def load_history(user_id: str, profile: UserProfile | None) -> List[ChatMessage]:
	history = storage_service.get_chat_history(user_id)
	if history or profile is None:
		return history
	return storage_service.seed_chat(user_id, greeting(profile))


def _message(role: str, text: str) -> ChatMessage:
	return ChatMessage(
		id=storage_service.next_record_id(),
		role=role,
		text=text,
		timestamp=_now_iso(),
	)


async def send(user_id: str, profile: UserProfile, text: str) -> ChatExchange:
	history = load_history(user_id, profile)
	storage_service.append_chat(user_id, _message("user", text))

	reply_text = await orchestrator.send_chat_message(text, history, profile)

	# Appended as the last item under the store lock.
	messages = storage_service.append_chat(user_id, _message("model", reply_text))
	return ChatExchange(
		reply=messages[-1],
		online=reply_text != OFFLINE_CHAT_MESSAGE,
		history=messages,
	)
