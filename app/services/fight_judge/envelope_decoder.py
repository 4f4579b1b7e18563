"""Decoder for the upstream chat-completion stream envelope.

The upstream body is a sequence of lines of the form ``data: <payload>``
where the payload is either a JSON chat-completion chunk or the literal
``[DONE]``. Transport chunks carry no alignment with those lines, so the
scanner keeps the trailing partial line between feeds and only parses
complete ones.
"""

from __future__ import annotations

import codecs
import json
import logging
import re
from dataclasses import dataclass
from typing import AsyncIterable, AsyncIterator, Iterator, Union

logger = logging.getLogger("services")

EVENT_PATTERN = re.compile(r"data:\s*(.*)")
SENTINEL = "[DONE]"


@dataclass(frozen=True)
class Sentinel:
    """Final event of the upstream stream."""


@dataclass(frozen=True)
class Delta:
    text: str


@dataclass(frozen=True)
class Malformed:
    payload: str
    reason: str


Event = Union[Sentinel, Delta, Malformed]


class EnvelopeDecodeError(ValueError):
    """Raised when an event payload cannot be turned into a delta."""

    def __init__(self, payload: str, reason: str) -> None:
        super().__init__(f"Malformed stream payload ({reason}): {payload[:200]}")
        self.payload = payload
        self.reason = reason


def parse_payload(payload: str) -> Event:
    if payload == SENTINEL:
        return Sentinel()
    try:
        chunk = json.loads(payload)
        delta = chunk["choices"][0]["delta"]
    except json.JSONDecodeError as e:
        return Malformed(payload, f"invalid JSON: {e.msg}")
    except (KeyError, IndexError, TypeError) as e:
        return Malformed(payload, f"missing choices[0].delta: {e!r}")
    if not isinstance(delta, dict):
        return Malformed(payload, "choices[0].delta is not an object")
    return Delta(delta.get("content") or "")


def parse_event(line: str) -> Event | None:
    """Return the event carried by one line, or None if it holds no ``data:`` field."""
    match = EVENT_PATTERN.search(line)
    if match is None:
        return None
    return parse_payload(match.group(1).strip())


class EnvelopeScanner:
    """Buffered line scanner turning arbitrary text fragments into events."""

    def __init__(self) -> None:
        self._buffer = ""
        self.finished = False

    def feed(self, text: str) -> Iterator[Event]:
        if self.finished:
            return
        self._buffer += text
        while not self.finished:
            newline = self._buffer.find("\n")
            if newline == -1:
                break
            line = self._buffer[:newline]
            self._buffer = self._buffer[newline + 1:]
            yield from self._emit(line)

    def flush(self) -> Iterator[Event]:
        """Treat whatever is left in the buffer as the last line."""
        line, self._buffer = self._buffer, ""
        if not self.finished and line:
            yield from self._emit(line)

    def _emit(self, line: str) -> Iterator[Event]:
        event = parse_event(line.rstrip("\r"))
        if event is None:
            return
        if isinstance(event, Sentinel):
            self.finished = True
        yield event


async def decode_envelope(chunks: AsyncIterable[bytes]) -> AsyncIterator[str]:
    """Yield the delta text of every event in ``chunks``, in arrival order.

    Stops at the ``[DONE]`` sentinel without reading further, or when the
    transport runs out. A malformed payload raises :class:`EnvelopeDecodeError`.
    """
    text_decoder = codecs.getincrementaldecoder("utf-8")()
    scanner = EnvelopeScanner()
    delta_count = 0

    async for chunk in chunks:
        for event in scanner.feed(text_decoder.decode(chunk)):
            if isinstance(event, Sentinel):
                logger.debug("Upstream sent %s after %d deltas", SENTINEL, delta_count)
                return
            delta_count += 1
            yield _delta_text(event)

    # Transport ended without a sentinel
    for event in scanner.feed(text_decoder.decode(b"", final=True)):
        if isinstance(event, Sentinel):
            return
        yield _delta_text(event)
    for event in scanner.flush():
        if isinstance(event, Sentinel):
            return
        yield _delta_text(event)


def _delta_text(event: Event) -> str:
    if isinstance(event, Malformed):
        raise EnvelopeDecodeError(event.payload, event.reason)
    return event.text
