from __future__ import annotations

import json
import re
from typing import Any, Dict, Type, TypeVar

from pydantic import BaseModel, ValidationError


ModelT = TypeVar("ModelT", bound=BaseModel)

_FENCE_RE = re.compile(r"```(?:[a-zA-Z]+)?")


class ModelClientError(Exception):
	def __init__(self, *, code: str, message: str):
		super().__init__(message)
		self.code = code
		self.message = message


def strip_code_fences(raw: str | None) -> str:
	if not raw:
		return ""
	return _FENCE_RE.sub("", raw).strip()


def parse_json_payload(raw: str | None) -> Dict[str, Any]:
	candidate = strip_code_fences(raw)
	start = candidate.find("{")
	end = candidate.rfind("}")
	if start == -1 or end == -1 or end <= start:
		raise ModelClientError(
			code="model_invalid_json",
			message="Model returned invalid JSON content.",
		)
	try:
		parsed = json.loads(candidate[start : end + 1])
	except json.JSONDecodeError as exc:
		raise ModelClientError(
			code="model_invalid_json",
			message="Model returned invalid JSON content.",
		) from exc
	if not isinstance(parsed, dict):
		raise ModelClientError(
			code="model_invalid_shape",
			message="Model returned an unexpected payload shape.",
		)
	return parsed


def parse_structured(raw: str | None, model_type: Type[ModelT]) -> ModelT:
	payload = parse_json_payload(raw)
	return validate_payload(payload, model_type)


def validate_payload(payload: Dict[str, Any], model_type: Type[ModelT]) -> ModelT:
	try:
		return model_type.model_validate(payload)
	except ValidationError as exc:
		raise ModelClientError(
			code="model_schema_mismatch",
			message=f"Model returned {model_type.__name__}-incompatible content.",
		) from exc
