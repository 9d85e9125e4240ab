from typing import Literal

from pydantic import BaseModel, Field

ChatRole = Literal["user", "assistant"]


class ChatMessage(BaseModel):
    role: ChatRole
    content: str


class ChatRequest(BaseModel):
    messages: list[ChatMessage] = Field(default_factory=list)
    userMessage: str


class RecCard(BaseModel):
    """Recommendation extracted from a ``[REC]...[/REC]`` block of chat text."""

    title: str
    year: str  # "N/A" when the model did not know it
    type: Literal["movie", "tv", "anime"]
    reason: str


class TextSegment(BaseModel):
    type: Literal["text"] = "text"
    content: str


class RecSegment(BaseModel):
    type: Literal["rec"] = "rec"
    card: RecCard


DisplaySegment = TextSegment | RecSegment


class ParsedContent(BaseModel):
    segments: list[DisplaySegment] = Field(default_factory=list)
    remainder: str = ""


class StreamFrame(BaseModel):
    """One structured unit of the chat event stream."""

    kind: Literal["text", "card", "error"]
    content: str | None = None
    card: RecCard | None = None
    error: str | None = None
