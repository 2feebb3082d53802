from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from catering.application.dto.activity import ActivityDTO
from catering.application.use_cases.handle_turn import HandleTurnUseCase
from catering.wiring.dependencies import get_handle_turn_use_case


router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/api/messages")
async def messages(
    request: Request,
    use_case: HandleTurnUseCase = Depends(get_handle_turn_use_case),
) -> Response:
    body = await request.body()
    try:
        payload = json.loads(body.decode("utf-8")) if body else {}
    except (UnicodeDecodeError, json.JSONDecodeError):
        logger.exception("Failed to parse activity body")
        return Response(status_code=400)

    try:
        activity = ActivityDTO.model_validate(payload)
    except ValidationError as e:
        logger.warning("Invalid activity", extra={"reason": str(e)})
        return Response(status_code=400)

    try:
        result = await run_in_threadpool(use_case.handle, activity)
    except Exception:
        logger.exception("Turn failed", extra={"activity_id": activity.id, "reason": activity.type})
        return Response(status_code=500)

    logger.info("Turn handled", extra={"activity_id": activity.id, "status": result.status})
    if result.body is None:
        return Response(status_code=result.status)
    return JSONResponse(status_code=result.status, content=result.body)
