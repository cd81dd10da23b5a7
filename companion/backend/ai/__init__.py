from companion.backend.ai.client import get_model_client, reset_model_client
from companion.backend.ai.deadline import with_deadline
from companion.backend.ai.orchestrator import (
	analyze_emotion_and_ui,
	analyze_risk,
	check_gift_visibility,
	generate_gift_content,
	generate_wellness_actions,
	send_chat_message,
)
from companion.backend.ai.security import check_safety

__all__ = [
	"analyze_emotion_and_ui",
	"analyze_risk",
	"check_gift_visibility",
	"check_safety",
	"generate_gift_content",
	"generate_wellness_actions",
	"get_model_client",
	"reset_model_client",
	"send_chat_message",
	"with_deadline",
]
