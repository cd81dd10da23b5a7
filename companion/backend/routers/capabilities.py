from __future__ import annotations

from fastapi import APIRouter, Request

from companion.backend.ai import orchestrator
from companion.backend.ai.security import check_safety
from companion.backend.response import success_response
from companion.backend.schemas import (
	ApiEnvelope,
	EmotionRequest,
	GiftContentRequest,
	GiftVisibilityRequest,
	RiskRequest,
	SafetyRequest,
	WellnessRequest,
)


router = APIRouter(prefix="/api/ai", tags=["ai"])


@router.post("/safety", response_model=ApiEnvelope)
async def safety(request: Request, payload: SafetyRequest):
	verdict = await check_safety(payload.text)
	# Threat labels stay server-side.
	return success_response(request=request, data={"isSafe": verdict.is_safe})


@router.post("/emotion", response_model=ApiEnvelope)
async def emotion(request: Request, payload: EmotionRequest):
	analysis = await orchestrator.analyze_emotion_and_ui(payload.text, payload.mood)
	return success_response(request=request, data={"analysis": analysis.to_wire()})


@router.post("/risk", response_model=ApiEnvelope)
async def risk(request: Request, payload: RiskRequest):
	assessment = await orchestrator.analyze_risk(payload.history)
	return success_response(request=request, data={"risk": assessment.to_wire()})


@router.post("/wellness", response_model=ApiEnvelope)
async def wellness(request: Request, payload: WellnessRequest):
	actions = await orchestrator.generate_wellness_actions(payload.emotion, payload.intensity, payload.language)
	return success_response(
		request=request,
		data={"actions": [action.to_wire() for action in actions]},
	)


@router.post("/gift/visibility", response_model=ApiEnvelope)
async def gift_visibility(request: Request, payload: GiftVisibilityRequest):
	decision = await orchestrator.check_gift_visibility(payload.emotion, payload.intensity, payload.risk_level)
	return success_response(request=request, data={"gift": decision.to_wire()})


@router.post("/gift/content", response_model=ApiEnvelope)
async def gift_content(request: Request, payload: GiftContentRequest):
	content = await orchestrator.generate_gift_content(payload.emotion, payload.risk_level)
	return success_response(request=request, data={"gift": content.to_wire()})
