from __future__ import annotations

import logging

from companion.backend import config
from companion.backend.ai.client import AnyModelClient, get_model_client
from companion.backend.ai.contracts import SECURITY_SCHEMA
from companion.backend.ai.deadline import with_deadline
from companion.backend.ai.fallbacks import SAFETY_REDIRECT_MESSAGE
from companion.backend.ai.models import SecurityVerdict
from companion.backend.ai.parsing import parse_structured
from companion.backend.ai.prompts import SECURITY_CLASSIFIER_PROMPT, security_prompt


logger = logging.getLogger(__name__)

__all__ = ["SAFETY_REDIRECT_MESSAGE", "check_safety"]


def _validation_failed() -> SecurityVerdict:
	return SecurityVerdict(is_safe=False, detected_threats=["security_validation_error"])


async def check_safety(free_text: str | None, *, client: AnyModelClient | None = None) -> SecurityVerdict:
	"""Screen free text before it is forwarded into a generative prompt.

	Offline means nothing to screen with, so the text passes. An active
	classifier that errors, times out or returns garbage blocks the text.
	"""
	client = client if client is not None else get_model_client()
	if not client.enabled:
		return SecurityVerdict(is_safe=True)
	if not free_text or not free_text.strip():
		return SecurityVerdict(is_safe=True)

	async def _classify() -> SecurityVerdict:
		raw = await client.generate_structured(
			security_prompt(free_text),
			SECURITY_SCHEMA,
			SECURITY_CLASSIFIER_PROMPT,
			model=client.config.fast_model,
		)
		return parse_structured(raw, SecurityVerdict)

	verdict = await with_deadline(
		_classify,
		config.deadline_seconds("security"),
		_validation_failed,
		label="security check",
	)
	if not verdict.is_safe:
		logger.warning("Input blocked by security gate: threats=%s", verdict.detected_threats)
	return verdict
