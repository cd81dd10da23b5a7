from __future__ import annotations

from fastapi import APIRouter, Request

from companion.backend import constants
from companion.backend.response import success_response
from companion.backend.schemas import ApiEnvelope, CheckInRequest
from companion.backend.services import checkin_service, storage_service


router = APIRouter(prefix="/api", tags=["checkins"])


def _user_id(request: Request) -> str:
	return getattr(request.state, "user_id", constants.DEFAULT_USER_ID)


@router.post("/checkins", response_model=ApiEnvelope)
async def submit_check_in(request: Request, payload: CheckInRequest):
	result = await checkin_service.submit_check_in(
		_user_id(request),
		selected_mood=payload.mood,
		note=payload.note,
		is_voice=payload.is_voice,
		ui_state=request.app.state.ui_state,
	)
	return success_response(request=request, data=result.as_dict())


@router.get("/checkins", response_model=ApiEnvelope)
def mood_history(request: Request):
	history = storage_service.get_mood_history(_user_id(request))
	return success_response(
		request=request,
		data={"history": [entry.to_wire() for entry in history]},
	)


@router.get("/risk", response_model=ApiEnvelope)
def latest_risk(request: Request):
	risk = storage_service.get_latest_risk(_user_id(request))
	return success_response(
		request=request,
		data={"risk": risk.to_wire() if risk else None},
	)
