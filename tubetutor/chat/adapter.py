"""Gemini-powered answers to questions about video transcripts."""

from __future__ import annotations

import inspect
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions
from google.generativeai.types import (
    BlockedPromptException,
    HarmBlockThreshold,
    HarmCategory,
    StopCandidateException,
)

from tubetutor.chat.selection import PROBE_PROMPT, ModelSelection, select_model
from tubetutor.config import Settings, get_settings, load_settings
from tubetutor.errors import (
    CredentialMissingError,
    MalformedResponseError,
    ProviderError,
    TranscriptServiceError,
    UnknownError,
)

logger = logging.getLogger(__name__)

SAFETY_SETTINGS = {
    HarmCategory.HARM_CATEGORY_HARASSMENT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    HarmCategory.HARM_CATEGORY_HATE_SPEECH: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
    HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT: HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE,
}

_PREAMBLE = """\
You are a helpful data analyst and content expert. You are analyzing YouTube video transcripts.

Your task is to answer questions about the videos based on the transcripts provided below.
Provide insights, summaries, and analysis based solely on the information in the transcripts.
If the information needed to answer a question is not available in the transcripts, say so clearly.
Do not make up information that is not present in the transcripts."""

_SUMMARY_PREAMBLE = """\
You are a helpful content summarizer. Summarize the following YouTube video transcript.

Provide a concise summary of the main points discussed in the video.
Focus on the key topics, insights, and conclusions. Format the summary with bullet points for main sections."""

_QUOTA_MARKERS = ("quota", "rate limit", "resource has been exhausted", "too many requests")

ModelFactory = Callable[[str, str], Any]
FragmentCallback = Callable[["ChatFragment"], Awaitable[None] | None]


def build_prompt(context: str, question: str) -> str:
    """Preamble, transcript context and question as one single-turn prompt."""
    return (
        f"{_PREAMBLE}\n\n"
        f"Here are the transcripts:\n\n{context}"
        "Now, please answer the following query based on these transcripts:\n\n"
        f"Query: {question}"
    )


def build_summary_prompt(context: str) -> str:
    return f"{_SUMMARY_PREAMBLE}\n\nHere is the transcript:\n\n{context}Summary:"


@dataclass(frozen=True)
class ChatFragment:
    """One streamed piece of an answer: either text or a terminal error."""

    text: str = ""
    error: TranscriptServiceError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        if self.error is not None:
            return {"error": self.error.to_dict()}
        return {"text": self.text}


def classify_provider_error(exc: Exception) -> TranscriptServiceError:
    """Map an exception raised by the Gemini SDK onto the error taxonomy."""
    if isinstance(exc, TranscriptServiceError):
        return exc

    message = str(exc) or type(exc).__name__
    lowered = message.lower()
    if isinstance(exc, google_exceptions.ResourceExhausted) or any(
        marker in lowered for marker in _QUOTA_MARKERS
    ):
        return ProviderError(f"Gemini quota exceeded: {message}", retryable=True)
    if isinstance(exc, (BlockedPromptException, StopCandidateException)):
        return ProviderError(f"Gemini blocked the response: {message}")
    if isinstance(exc, google_exceptions.GoogleAPIError):
        if "api key" in lowered:
            return ProviderError(f"Your Gemini API key appears to be invalid. Details: {message}")
        if isinstance(exc, google_exceptions.NotFound) or "not found" in lowered:
            return ProviderError(
                f"The Gemini model was not found or your API key has no access to it. "
                f"Details: {message}"
            )
        return ProviderError(f"Gemini request failed: {message}")
    return UnknownError(message)


def _response_text(response: Any) -> str:
    try:
        text = response.text
    except ValueError as exc:
        # .text raises when the candidate has no text parts (e.g. safety block)
        raise MalformedResponseError(f"Gemini response has no text: {exc}") from exc
    if not isinstance(text, str):
        raise MalformedResponseError(f"Expected text from Gemini, got {type(text).__name__}")
    return text


def _chunk_text(chunk: Any) -> str:
    """Text of one streamed chunk; chunks without text parts contribute nothing."""
    try:
        text = chunk.text
    except ValueError:
        feedback = getattr(chunk, "prompt_feedback", None)
        if getattr(feedback, "block_reason", None):
            raise MalformedResponseError(
                f"Gemini blocked the prompt: {feedback.block_reason}"
            ) from None
        return ""
    if not isinstance(text, str):
        raise MalformedResponseError(f"Expected text from Gemini, got {type(text).__name__}")
    return text


class GeminiChatAdapter:
    """Answers questions grounded in transcript context via Gemini.

    Construct one adapter at startup and share it: the model chosen by the
    first successful probe is kept on the instance for later calls. Pass
    ``selection`` to skip probing entirely.

    Args:
        settings: Generation parameters and candidate models. Defaults to the
            application settings.
        api_key: Fixed Gemini key. When omitted the key is read from the
            environment on every call.
        model_factory: ``(model_name, api_key) -> model`` returning an object
            with ``generate_content_async``. Defaults to the Gemini SDK.
        selection: A model already known to work.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        api_key: str | None = None,
        model_factory: ModelFactory | None = None,
        selection: ModelSelection | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._api_key = api_key
        self._model_factory = model_factory or self._gemini_model
        self.selection = selection

    def _gemini_model(self, model_name: str, api_key: str) -> Any:
        genai.configure(api_key=api_key)
        return genai.GenerativeModel(
            model_name,
            generation_config=genai.GenerationConfig(
                temperature=self._settings.gemini_temperature,
                top_k=self._settings.gemini_top_k,
                top_p=self._settings.gemini_top_p,
                max_output_tokens=self._settings.gemini_max_output_tokens,
            ),
            safety_settings=SAFETY_SETTINGS,
        )

    def _require_key(self) -> str:
        api_key = self._api_key if self._api_key is not None else load_settings().gemini_api_key
        if not api_key.strip():
            raise CredentialMissingError(
                "Gemini API key is not configured. Please add GEMINI_API_KEY to your .env file."
            )
        return api_key

    async def _active_model(self) -> Any:
        api_key = self._require_key()
        if self.selection is None:

            async def probe(name: str) -> object:
                return await self._model_factory(name, api_key).generate_content_async(
                    PROBE_PROMPT
                )

            self.selection = await select_model(self._settings.gemini_models, probe)
        return self._model_factory(self.selection.selected, api_key)

    async def _generate(self, prompt: str) -> str:
        try:
            model = await self._active_model()
            response = await model.generate_content_async(prompt)
        except TranscriptServiceError:
            raise
        except Exception as exc:
            logger.exception("Error getting Gemini response")
            raise classify_provider_error(exc) from exc
        return _response_text(response)

    async def answer(self, context: str, question: str) -> str:
        """Return the complete answer to ``question`` about ``context``."""
        return await self._generate(build_prompt(context, question))

    async def summarize(self, context: str) -> str:
        """Return a bullet-point summary of ``context``."""
        return await self._generate(build_summary_prompt(context))

    async def iter_answer(self, context: str, question: str) -> AsyncIterator[ChatFragment]:
        """Yield answer fragments in provider order.

        Failures end the stream with a single error fragment rather than
        raising, so the caller can tell answer text from error text.
        """
        prompt = build_prompt(context, question)
        try:
            model = await self._active_model()
            response = await model.generate_content_async(prompt, stream=True)
            async for chunk in response:
                text = _chunk_text(chunk)
                if text:
                    yield ChatFragment(text=text)
        except Exception as exc:
            if not isinstance(exc, TranscriptServiceError):
                logger.exception("Error streaming Gemini response")
            yield ChatFragment(error=classify_provider_error(exc))

    async def stream_answer(
        self,
        context: str,
        question: str,
        on_fragment: FragmentCallback,
    ) -> str:
        """Deliver fragments to ``on_fragment`` as they arrive.

        Returns the concatenated answer text (without any error fragment).
        """
        parts: list[str] = []
        async for fragment in self.iter_answer(context, question):
            result = on_fragment(fragment)
            if inspect.isawaitable(result):
                await result
            if fragment.ok:
                parts.append(fragment.text)
        return "".join(parts)
