from __future__ import annotations
from typing import List
from sqlalchemy.orm import Session
from app.models.db import FightJudgment, SessionLocal
from app.schemas.api import FightRequest, ImageRequest
from app.services.fight_judge.accumulator import extract_winner
from app.services.fight_judge.manager import FightJudge
from app.services.fight_judge.openai_client import ChatCompletionStream
import logging


async def open_judgment(judge: FightJudge, fight: FightRequest) -> ChatCompletionStream:
    """Start streaming the judge's verdict for a fight."""
    return await judge.open_stream(fight.opponent1, fight.opponent2)

def illustrate(judge: FightJudge, req: ImageRequest) -> str:
    """Generate an image of the fight outcome."""
    return judge.illustrate(req.opponent1, req.opponent2, req.winner)

def record_judgment(fight: FightRequest, transcript: str, logger: logging.Logger) -> FightJudgment:
    """Persist a finished transcript together with the winner it resolves to."""
    winner = extract_winner(transcript)
    with SessionLocal() as db:
        entry = FightJudgment(
            opponent1=fight.opponent1,
            opponent2=fight.opponent2,
            transcript=transcript,
            winner=winner,
        )
        db.add(entry)
        db.commit()
        db.refresh(entry)
    logger.info(f"Recorded judgment {entry.id}: {fight.opponent1} vs {fight.opponent2}, winner={winner or 'unresolved'}")
    return entry

def recent_judgments(db: Session, limit: int = 20) -> List[FightJudgment]:
    return (
        db.query(FightJudgment)
        .order_by(FightJudgment.date_judged.desc(), FightJudgment.id.desc())
        .limit(limit)
        .all()
    )
