"""Fight judge orchestration that coordinates prompts and LLM calls."""

from __future__ import annotations

import logging

import httpx

from .openai_client import ChatCompletionStream, OpenAIChatClient
from .prompt_builder import PromptBuilder


class FightJudge:
    """Asks the language model who wins a fight, streaming its answer."""

    def __init__(self, logger: logging.Logger, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.logger = logger
        self.prompt_builder = PromptBuilder()
        self.openai_client = OpenAIChatClient(logger, transport=transport)

    async def open_stream(self, opponent1: str, opponent2: str) -> ChatCompletionStream:
        self.logger.info("Judging %r vs %r", opponent1, opponent2)
        prompt = self.prompt_builder.build_prompt(opponent1, opponent2)
        return await self.openai_client.open_stream(prompt)

    def illustrate(self, opponent1: str, opponent2: str, winner: str) -> str:
        """Return the URL of an image showing ``winner`` beating the other opponent."""
        prompt = self.prompt_builder.build_image_prompt(opponent1, opponent2, winner)
        self.logger.debug("Image prompt: %s", prompt)
        return self.openai_client.generate_image(prompt)
