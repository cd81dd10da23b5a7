from __future__ import annotations

from fastapi import APIRouter, Request

from companion.backend import config
from companion.backend.ai.client import get_model_client
from companion.backend.response import success_response
from companion.backend.schemas import ApiEnvelope


router = APIRouter(prefix="/api", tags=["status"])


@router.get("/status", response_model=ApiEnvelope)
def status(request: Request):
	client = get_model_client()
	return success_response(
		request=request,
		data={
			"online": client.enabled,
			"fast_model": client.config.fast_model,
			"deep_model": client.config.deep_model,
			"deadlines_s": config.all_deadlines(),
		},
	)


@router.get("/ui-state", response_model=ApiEnvelope)
def ui_state(request: Request):
	return success_response(
		request=request,
		data={"uiState": request.app.state.ui_state.current.to_wire()},
	)
