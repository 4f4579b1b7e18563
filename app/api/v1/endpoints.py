from contextlib import aclosing
from fastapi import APIRouter, Depends, Form, HTTPException, Query
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response, StreamingResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session
from typing import List
from app.models.db import init_db, SessionLocal
from app.schemas.api import FightRequest, ImageRequest, ImageResponse, JudgmentResponse
from app.services import svc
from app.services.fight_judge.envelope_decoder import EnvelopeDecodeError
from app.services.fight_judge.manager import FightJudge
from app.services.fight_judge.openai_client import UpstreamHTTPError
import logging

init_db()
def get_db() -> Session:
    """Get a database session generator for FastAPI dependency injection."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
logger = logging.getLogger("services")
router = APIRouter()

def get_judge() -> FightJudge:
    """FastAPI dependency providing a judge for one request."""
    return FightJudge(logger)

def _validation_failed(e: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"errors": jsonable_encoder(e.errors(include_url=False))},
    )

@router.post("/judge")
async def judge_fight(
    opponent1: str | None = Form(None),
    opponent2: str | None = Form(None),
    judge: FightJudge = Depends(get_judge),
):
    """Stream the judge's verdict as plain text.

    An upstream error status is passed through with an empty body; its reason
    phrase and error body are only logged.
    """
    try:
        fight = FightRequest(opponent1=opponent1, opponent2=opponent2)
    except ValidationError as e:
        return _validation_failed(e)

    try:
        upstream = await svc.open_judgment(judge, fight)
    except UpstreamHTTPError as e:
        return Response(status_code=e.status_code)

    if not upstream.has_body:
        await upstream.aclose()
        return Response(status_code=200, content="")

    async def delta_generator():
        transcript = []
        try:
            async with aclosing(upstream.deltas()) as deltas:
                async for delta in deltas:
                    transcript.append(delta)
                    yield delta
        except EnvelopeDecodeError:
            logger.exception("Aborting judgment stream for %s vs %s", fight.opponent1, fight.opponent2)
            raise
        svc.record_judgment(fight, "".join(transcript), logger)

    return StreamingResponse(
        delta_generator(),
        media_type="text/plain; charset=utf-8",
        headers={
            'Cache-Control': 'no-cache',
            'X-Accel-Buffering': 'no'  # Disable buffering for nginx
        }
    )

@router.post("/ai-image", response_model=ImageResponse)
def ai_image(
    opponent1: str | None = Form(None),
    opponent2: str | None = Form(None),
    winner: str | None = Form(None),
    judge: FightJudge = Depends(get_judge),
):
    try:
        req = ImageRequest(opponent1=opponent1, opponent2=opponent2, winner=winner)
    except ValidationError as e:
        return _validation_failed(e)
    try:
        url = svc.illustrate(judge, req)
    except Exception as e:
        logger.exception(f"Image generation failed: {e}")
        raise HTTPException(status_code=502, detail="Image generation failed")
    return ImageResponse(url=url)

@router.get("/judgments", response_model=List[JudgmentResponse])
def list_judgments(limit: int = Query(20, ge=1, le=100), db: Session = Depends(get_db)):
    return svc.recent_judgments(db, limit)
