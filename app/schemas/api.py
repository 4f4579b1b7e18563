from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class FightRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    opponent1: str = Field(
        min_length=1,
        max_length=60,
        examples=["Bruce Lee"],
        description="The first fighter",
    )
    opponent2: str = Field(
        min_length=1,
        max_length=60,
        examples=["Winnie the Pooh"],
        description="The second fighter",
    )


class ImageRequest(FightRequest):
    winner: Literal["opponent1", "opponent2"] = Field(
        description="Label of the fighter who won the judgment",
    )


class ImageResponse(BaseModel):
    url: str


class JudgmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    opponent1: str
    opponent2: str
    transcript: str
    winner: str
    date_judged: datetime
