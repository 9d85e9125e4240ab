"""
Extraction of recommendation cards from streamed chat text.

The chat model writes plain text with recommendations embedded inline as
``[REC]Title###Year###Type###Reason[/REC]``. Text arrives in chunks, so the
parser is always run over the whole accumulated buffer and only complete
blocks become cards. Whatever follows the last complete block is returned as
the remainder because it may be a block that is still streaming in.
"""

import re

from app.core.constants import (
    REC_CLOSE,
    REC_DEFAULT_REASON,
    REC_DEFAULT_YEAR,
    REC_FIELD_SEPARATOR,
    REC_OPEN,
)
from app.models.chat import DisplaySegment, ParsedContent, RecCard, RecSegment, StreamFrame, TextSegment

REC_PATTERN = re.compile(re.escape(REC_OPEN) + r"(.+?)" + re.escape(REC_CLOSE), re.DOTALL)


def parse_rec_card(inner: str) -> RecCard:
    """Build a card from the content between the markers, filling defaults."""
    # only the first three separators are structural, the reason may contain "###"
    parts = inner.split(REC_FIELD_SEPARATOR, 3)
    fields = [part.strip() for part in parts] + [""] * (4 - len(parts))
    title, year, raw_type, reason = fields

    card_type = raw_type.lower()
    if card_type not in ("tv", "anime"):
        card_type = "movie"

    return RecCard(
        title=title,
        year=year or REC_DEFAULT_YEAR,
        type=card_type,
        reason=reason or REC_DEFAULT_REASON,
    )


def parse_streamed_content(buffer: str) -> ParsedContent:
    """
    Split an accumulated chat buffer into display segments and a remainder.

    Text between complete blocks is emitted trimmed, and only when it is not
    blank. The remainder is returned untrimmed and is never emitted as a
    segment; an unterminated ``[REC]`` therefore stays in the remainder.
    """
    segments: list[DisplaySegment] = []
    last_index = 0
    for match in REC_PATTERN.finditer(buffer):
        text_before = buffer[last_index : match.start()].strip()
        if text_before:
            segments.append(TextSegment(content=text_before))
        segments.append(RecSegment(card=parse_rec_card(match.group(1))))
        last_index = match.end()
    return ParsedContent(segments=segments, remainder=buffer[last_index:])


class StreamedCardParser:
    """
    Turns a chunked chat stream into structured frames.

    Text is forwarded as it arrives, so a reply without cards streams as a
    series of ``text`` frames whose contents concatenate to the reply. Only
    text that could still turn into a ``[REC]`` block is held back: a trailing
    partial opener, or an opener whose closing marker has not arrived. A block
    becomes a single ``card`` frame once it is complete. Whitespace around a
    run of text is dropped. ``finish`` flushes whatever was held back.
    """

    def __init__(self):
        self.buffer = ""
        self._cursor = 0
        self._in_run = False
        self._pending_space = ""

    def feed(self, chunk: str) -> list[StreamFrame]:
        self.buffer += chunk
        frames: list[StreamFrame] = []
        for match in REC_PATTERN.finditer(self.buffer, self._cursor):
            frames.extend(self._text(self.buffer[self._cursor : match.start()]))
            frames.append(StreamFrame(kind="card", card=parse_rec_card(match.group(1))))
            self._in_run = False
            self._pending_space = ""
            self._cursor = match.end()

        tail = self.buffer[self._cursor :]
        safe = _safe_length(tail)
        frames.extend(self._text(tail[:safe]))
        self._cursor += safe
        return frames

    def finish(self) -> list[StreamFrame]:
        tail = self.buffer[self._cursor :]
        self._cursor = len(self.buffer)
        return self._text(tail)

    def _text(self, text: str) -> list[StreamFrame]:
        if not self._in_run:
            text = text.lstrip()
        body = text.rstrip()
        if not body:
            if self._in_run:
                self._pending_space += text
            return []
        content = self._pending_space + body
        self._pending_space = text[len(body) :]
        self._in_run = True
        return [StreamFrame(kind="text", content=content)]


def _safe_length(tail: str) -> int:
    """Length of the prefix of ``tail`` that can no longer become part of a block."""
    opener = tail.find(REC_OPEN)
    if opener >= 0:
        return opener
    for size in range(min(len(REC_OPEN) - 1, len(tail)), 0, -1):
        if tail.endswith(REC_OPEN[:size]):
            return len(tail) - size
    return len(tail)
