"""HTTP client for the fight judge service."""

from __future__ import annotations

import logging
from typing import Callable

import httpx

from app.services.fight_judge.accumulator import Judgment, accumulate


class ClientRequestFailure(Exception):
    """The service rejected a submission; nothing was accumulated."""

    def __init__(self, status_code: int, detail: str = "") -> None:
        super().__init__(f"The request experienced an issue ({status_code}).")
        self.status_code = status_code
        self.detail = detail


class FightJudgeClient:
    """Submits fights to the service and reads back the streamed judgment."""

    def __init__(
        self,
        base_url: str,
        logger: logging.Logger,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.logger = logger
        self._http = http_client or httpx.Client(base_url=base_url, timeout=None)

    def judge(
        self,
        opponent1: str,
        opponent2: str,
        on_text: Callable[[str], None] | None = None,
    ) -> Judgment:
        """Stream the judgment for one fight and return the finished transcript and winner."""
        form = {"opponent1": opponent1, "opponent2": opponent2}
        with self._http.stream("POST", "/api/v1/judge", data=form) as response:
            if not response.is_success:
                detail = response.read().decode("utf-8", errors="replace")
                self.logger.error("Judge request failed with %s: %s", response.status_code, detail)
                raise ClientRequestFailure(response.status_code, detail)
            judgment = accumulate(response.iter_bytes(), on_text=on_text)
        self.logger.info("Judgment finished, winner=%s", judgment.winner or "unresolved")
        return judgment

    def request_image(self, opponent1: str, opponent2: str, winner: str) -> str:
        form = {"opponent1": opponent1, "opponent2": opponent2, "winner": winner}
        response = self._http.post("/api/v1/ai-image", data=form)
        if not response.is_success:
            raise ClientRequestFailure(response.status_code, response.text)
        return response.json()["url"]

    def close(self) -> None:
        self._http.close()
