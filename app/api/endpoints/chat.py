import json
from collections.abc import AsyncGenerator
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, StreamingResponse
from loguru import logger
from pydantic import ValidationError
from starlette.background import BackgroundTask

from app.api.dependencies import get_gemini_service
from app.core.config import MissingAPIKeyError
from app.core.constants import ERROR_CLOSE, ERROR_OPEN
from app.models.chat import ChatMessage, ChatRequest, StreamFrame
from app.services.chat_parser import StreamedCardParser
from app.services.gemini import GeminiService

router = APIRouter(prefix="/api", tags=["chat"])


class ChatRequestError(ValueError):
    pass


async def _read_chat_request(request: Request) -> tuple[list[ChatMessage], str]:
    try:
        body: Any = await request.json()
    except ValueError:
        raise ChatRequestError("Request body must be JSON")
    if not isinstance(body, dict):
        raise ChatRequestError("Request body must be a JSON object")

    user_message = body.get("userMessage")
    if not user_message or not isinstance(user_message, str):
        raise ChatRequestError("userMessage is required")

    try:
        chat_request = ChatRequest.model_validate({"messages": body.get("messages", []), "userMessage": user_message})
    except ValidationError:
        raise ChatRequestError("messages must be a list of {role, content} objects")
    return chat_request.messages, chat_request.userMessage


async def _open_chat(request: Request, gemini: GeminiService) -> AsyncGenerator[str, None] | JSONResponse:
    """Validate the request and start the model stream, or return the error response."""
    try:
        messages, user_message = await _read_chat_request(request)
    except ChatRequestError as e:
        return JSONResponse({"error": str(e)}, status_code=400)

    try:
        return await gemini.open_stream(messages, user_message)
    except MissingAPIKeyError as e:
        logger.error(f"Chat unavailable: {e}")
        return JSONResponse({"error": str(e)}, status_code=503)
    except Exception as e:
        logger.exception(f"Failed to start chat stream: {e}")
        return JSONResponse({"error": str(e) or "Internal server error"}, status_code=500)


def _error_message(exc: Exception) -> str:
    return str(exc) or "Stream error"


async def _text_stream(stream: AsyncGenerator[str, None]) -> AsyncGenerator[str, None]:
    try:
        async for chunk in stream:
            yield chunk
    except Exception as e:
        logger.error(f"Chat stream failed mid-way: {e}")
        yield f"{ERROR_OPEN}{json.dumps({'error': _error_message(e)})}{ERROR_CLOSE}"
    finally:
        await stream.aclose()


async def _frame_stream(stream: AsyncGenerator[str, None]) -> AsyncGenerator[str, None]:
    parser = StreamedCardParser()
    try:
        async for chunk in stream:
            for frame in parser.feed(chunk):
                yield _ndjson(frame)
        for frame in parser.finish():
            yield _ndjson(frame)
    except Exception as e:
        logger.error(f"Chat event stream failed mid-way: {e}")
        for frame in parser.finish():
            yield _ndjson(frame)
        yield _ndjson(StreamFrame(kind="error", error=_error_message(e)))
    finally:
        await stream.aclose()


def _ndjson(frame: StreamFrame) -> str:
    return frame.model_dump_json(exclude_none=True) + "\n"


async def _close_stream(stream: AsyncGenerator[str, None]) -> None:
    await stream.aclose()


def _stream_response(
    stream: AsyncGenerator[str, None], body: AsyncGenerator[str, None], media_type: str
) -> StreamingResponse:
    # the body never runs if the client leaves before the first send, so the
    # upstream stream is also closed once the response is done
    return StreamingResponse(body, media_type=media_type, background=BackgroundTask(_close_stream, stream))


@router.post("/chat")
async def chat(request: Request, gemini: GeminiService = Depends(get_gemini_service)):
    """
    Stream the raw model reply as plain text.

    Recommendation cards stay inline as [REC]...[/REC] for the client to parse;
    a failure after streaming started is appended as [ERROR]{json}[/ERROR].
    """
    opened = await _open_chat(request, gemini)
    if isinstance(opened, JSONResponse):
        return opened
    return _stream_response(opened, _text_stream(opened), "text/plain; charset=utf-8")


@router.post("/chat/events")
async def chat_events(request: Request, gemini: GeminiService = Depends(get_gemini_service)):
    """Stream the reply as newline-delimited JSON frames of kind text, card or error."""
    opened = await _open_chat(request, gemini)
    if isinstance(opened, JSONResponse):
        return opened
    return _stream_response(opened, _frame_stream(opened), "application/x-ndjson")
