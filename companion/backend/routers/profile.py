from __future__ import annotations

from fastapi import APIRouter, Request

from companion.backend import constants
from companion.backend.response import success_response
from companion.backend.schemas import ApiEnvelope, OnboardingRequest
from companion.backend.services import profile_service


router = APIRouter(prefix="/api/profile", tags=["profile"])


def _user_id(request: Request) -> str:
	return getattr(request.state, "user_id", constants.DEFAULT_USER_ID)


@router.get("", response_model=ApiEnvelope)
def get_profile(request: Request):
	profile = profile_service.get_profile(_user_id(request))
	return success_response(
		request=request,
		data={"profile": profile.to_wire() if profile else None},
	)


@router.post("", response_model=ApiEnvelope)
def complete_onboarding(request: Request, payload: OnboardingRequest):
	profile = profile_service.complete_onboarding(
		_user_id(request),
		name=payload.name,
		stressors=payload.stressors,
	)
	return success_response(request=request, data={"profile": profile.to_wire()})


@router.delete("", response_model=ApiEnvelope)
def forget_profile(request: Request):
	profile_service.forget_user(_user_id(request))
	return success_response(request=request, data={"cleared": True})


@router.get("/stressors", response_model=ApiEnvelope)
def stressors(request: Request):
	return success_response(
		request=request,
		data={"stressors": profile_service.common_stressors()},
	)
