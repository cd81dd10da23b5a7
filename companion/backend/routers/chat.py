from __future__ import annotations

from fastapi import APIRouter, Request

from companion.backend import constants
from companion.backend.response import success_response
from companion.backend.schemas import ApiEnvelope, ChatRequest
from companion.backend.services import chat_service, profile_service


router = APIRouter(prefix="/api/chat", tags=["chat"])


def _user_id(request: Request) -> str:
	return getattr(request.state, "user_id", constants.DEFAULT_USER_ID)


@router.get("", response_model=ApiEnvelope)
def history(request: Request):
	user_id = _user_id(request)
	messages = chat_service.load_history(user_id, profile_service.get_profile(user_id))
	return success_response(
		request=request,
		data={"history": [message.to_wire() for message in messages]},
	)


@router.post("", response_model=ApiEnvelope)
async def send_message(request: Request, payload: ChatRequest):
	user_id = _user_id(request)
	profile = profile_service.require_profile(user_id)
	exchange = await chat_service.send(user_id, profile, payload.message)
	return success_response(request=request, data=exchange.as_dict())
