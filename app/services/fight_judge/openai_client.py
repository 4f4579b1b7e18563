"""Client wrapper for the OpenAI chat-completion stream and image generation."""

from __future__ import annotations

import logging
from typing import AsyncIterator

import httpx
from dotenv import load_dotenv
from openai import OpenAI

from app.core.config import settings, MODEL
from .envelope_decoder import decode_envelope


class UpstreamHTTPError(Exception):
    """The chat-completion endpoint answered with a non-success status."""

    def __init__(self, status_code: int, reason: str) -> None:
        super().__init__(f"Upstream returned {status_code} {reason}")
        self.status_code = status_code
        self.reason = reason


class ChatCompletionStream:
    """An open upstream response whose body is decoded into plain-text deltas."""

    def __init__(self, response: httpx.Response, http: httpx.AsyncClient, logger: logging.Logger) -> None:
        self._response = response
        self._http = http
        self.logger = logger

    @property
    def has_body(self) -> bool:
        if self._response.status_code == 204:
            return False
        return self._response.headers.get("content-length") != "0"

    async def deltas(self) -> AsyncIterator[str]:
        """Yield delta strings in arrival order; the upstream is closed afterwards."""
        try:
            async for delta in decode_envelope(self._response.aiter_bytes()):
                yield delta
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        await self._response.aclose()
        await self._http.aclose()


class OpenAIChatClient:
    """Encapsulates the streaming chat call and the image generation call."""

    def __init__(self, logger: logging.Logger, transport: httpx.AsyncBaseTransport | None = None) -> None:
        load_dotenv()
        self.logger = logger
        self._api_key = settings.openai_api_key
        if self._api_key:
            self.logger.info("OPENAI_API_KEY loaded successfully.")
        else:
            self.logger.warning("WARNING: OPENAI_API_KEY not found in settings or environment.")
        self._transport = transport

    async def open_stream(self, prompt: str, *, model: str = MODEL) -> ChatCompletionStream:
        """Start a streaming chat completion and return it once headers arrive.

        Raises :class:`UpstreamHTTPError` before any body is read if the
        upstream status is not a success.
        """
        body = {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": settings.max_tokens,
            "temperature": settings.temperature,
            "stream": True,
        }
        http = httpx.AsyncClient(
            base_url=settings.openai_base_url,
            transport=self._transport,
            timeout=None,
        )
        request = http.build_request(
            "POST",
            "/chat/completions",
            json=body,
            headers={"Authorization": f"Bearer {self._api_key}"},
        )
        try:
            response = await http.send(request, stream=True)
        except httpx.HTTPError:
            await http.aclose()
            raise

        if not response.is_success:
            try:
                detail = (await response.aread()).decode("utf-8", errors="replace")
            finally:
                await response.aclose()
                await http.aclose()
            self.logger.error(
                "Chat completion failed with %s %s: %s",
                response.status_code,
                response.reason_phrase,
                detail,
            )
            raise UpstreamHTTPError(response.status_code, response.reason_phrase)

        self.logger.debug("Chat completion stream opened (%s)", response.status_code)
        return ChatCompletionStream(response, http, self.logger)

    def generate_image(self, prompt: str) -> str:
        """Generate one image and return its URL."""
        client = OpenAI(api_key=self._api_key)
        response = client.images.generate(
            model=settings.image_model,
            prompt=prompt,
            n=1,
            size=settings.image_size,
        )
        return response.data[0].url
