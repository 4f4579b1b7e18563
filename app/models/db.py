from __future__ import annotations

from sqlalchemy import Column, Integer, String, Text, DateTime, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from app.core.config import settings
from datetime import datetime

connect_args = {}
if settings.database_url.startswith("sqlite"):
    connect_args["check_same_thread"] = False

engine = create_engine(settings.database_url, future=True, connect_args=connect_args)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
Base = declarative_base()


class FightJudgment(Base):
    """Stores each completed judgment: who fought, what the judge said, who won."""

    __tablename__ = "fight_judgment"

    id = Column(Integer, primary_key=True, index=True)
    opponent1 = Column(String(60), nullable=False)
    opponent2 = Column(String(60), nullable=False)
    transcript = Column(Text, nullable=False)
    winner = Column(String(10), nullable=False, default="")  # opponent1, opponent2 or empty
    date_judged = Column(DateTime, default=datetime.utcnow, nullable=False)


def init_db() -> None:
    Base.metadata.create_all(bind=engine)
