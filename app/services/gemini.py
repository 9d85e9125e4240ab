from collections.abc import AsyncGenerator, Sequence

from google import genai
from google.genai import types
from loguru import logger

from app.core.config import MissingAPIKeyError, Settings
from app.models.chat import ChatMessage

SYSTEM_PROMPT = """
You are a movie and anime recommendation expert. Based on the user's mood, preferences, and conversation,
suggest specific titles with brief reasons why they'd enjoy each one. Always include a mix of popular
and hidden gems. Ask follow-up questions to refine recommendations.

When recommending titles, use this exact format for each recommendation (one per line):
[REC]Title###Year###Type###Reason[/REC]
- Title: exact movie/TV/anime name
- Year: release year (e.g. 2024) or N/A if unknown
- Type: exactly one of movie, tv, or anime
- Reason: 1-2 sentences why they'd enjoy it

Example:
[REC]Spirited Away###2001###anime###A beautiful Studio Ghibli film about a girl lost in a spirit world,
perfect for when you want something magical and heartfelt.[/REC]

You may recommend multiple titles in one response. Use [REC]...[/REC] only for actual recommendations.
Keep your tone friendly and conversational.
""".strip()


class GeminiService:
    """
    Chat provider: streams recommendation conversations from Google Gemini.
    """

    def __init__(self, api_key: str | None, model: str = "gemini-2.5-flash", client: genai.Client | None = None):
        self.model = model
        self.api_key = api_key
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiService":
        return cls(api_key=settings.GEMINI_API_KEY, model=settings.GEMINI_MODEL)

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            if not self.api_key:
                raise MissingAPIKeyError("GEMINI_API_KEY")
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    @staticmethod
    def build_contents(messages: Sequence[ChatMessage], user_message: str) -> list[types.Content]:
        """Conversation history plus the new message, in Gemini's role vocabulary."""
        contents = [
            types.Content(
                role="model" if message.role == "assistant" else "user",
                parts=[types.Part(text=message.content)],
            )
            for message in messages
        ]
        contents.append(types.Content(role="user", parts=[types.Part(text=user_message)]))
        return contents

    async def stream_chat(self, messages: Sequence[ChatMessage], user_message: str) -> AsyncGenerator[str, None]:
        """Yield text fragments of the model's reply as they arrive."""
        response = await self.client.aio.models.generate_content_stream(
            model=self.model,
            contents=self.build_contents(messages, user_message),
            config=types.GenerateContentConfig(system_instruction=SYSTEM_PROMPT),
        )
        async for chunk in response:
            if chunk.text:
                yield chunk.text

    async def open_stream(self, messages: Sequence[ChatMessage], user_message: str) -> AsyncGenerator[str, None]:
        """
        Start a chat stream and wait for its first fragment.

        Errors raised before any text arrives (missing key, rejected request)
        propagate from here, so the caller can still answer with an error status.
        Everything after the first fragment is left to the returned iterator.
        """
        stream = self.stream_chat(messages, user_message)
        try:
            first = await anext(stream)
        except StopAsyncIteration:
            logger.warning("Gemini returned an empty response")
            return _replay([], stream)
        return _replay([first], stream)


async def _replay(head: list[str], rest: AsyncGenerator[str, None]) -> AsyncGenerator[str, None]:
    try:
        for text in head:
            yield text
        async for text in rest:
            yield text
    finally:
        await rest.aclose()
