"""Utilities for constructing prompts for the fight judge."""

from __future__ import annotations

from langchain_core.prompts import PromptTemplate

from app.core.config import IMAGE_TEMPLATE, JUDGE_TEMPLATE


class PromptBuilder:
    """Builds the judge and image prompts from the configured templates."""

    def __init__(self, judge_template: str = JUDGE_TEMPLATE, image_template: str = IMAGE_TEMPLATE) -> None:
        self._judge_prompt = PromptTemplate(
            template=judge_template,
            input_variables=["opponent1", "opponent2"],
        )
        self._image_prompt = PromptTemplate(
            template=image_template,
            input_variables=["opponent1", "opponent2", "winner_name"],
        )

    def build_prompt(self, opponent1: str, opponent2: str) -> str:
        return self._judge_prompt.format(opponent1=opponent1, opponent2=opponent2)

    def build_image_prompt(self, opponent1: str, opponent2: str, winner: str) -> str:
        """Describe the fight scene; ``winner`` is a label, not a name."""
        winner_name = opponent1 if winner == "opponent1" else opponent2
        return self._image_prompt.format(
            opponent1=opponent1, opponent2=opponent2, winner_name=winner_name
        )
