"""LLM text-completion call used by the conversation orchestrator."""
import logging
import os
import typing as t

from openai import AsyncOpenAI

from orchestrator.errors import AssistantUnavailableError, LLMCallError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = os.getenv("ASSISTANT_MODEL", "gpt-4o")

UNAVAILABLE_MESSAGE = (
    "The AI assistant is currently unavailable. Please ensure the API key is "
    "configured correctly by the administrator."
)
PERMISSION_MESSAGE = (
    "The AI assistant was denied access by the model provider. The administrator "
    "must verify the API key and its permissions."
)
GENERIC_FAILURE_MESSAGE = "Sorry, I encountered an error. Please try again later."


class LLMClient:
    """Chat-completion client for the assistant model.

    The OpenAI client is created on first use so a missing key only
    disables the assistant instead of failing at import time.
    """

    def __init__(self, api_key: t.Optional[str] = None, model: str = DEFAULT_MODEL) -> None:
        self.api_key = api_key
        self.model = model
        self._client: t.Optional[AsyncOpenAI] = None

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            api_key = self.api_key or os.getenv("OPENAI_API_KEY")
            if not api_key:
                logger.error("OPENAI_API_KEY is not set; assistant features are disabled")
                raise AssistantUnavailableError("No API key configured for the assistant model")
            self._client = AsyncOpenAI(api_key=api_key)
        return self._client

    async def complete(self, system_instruction: str, history: t.Sequence[dict[str, str]]) -> str:
        """Run one completion over the system instruction and chat history.

        Args:
            system_instruction: Full system prompt, schedule snapshot included
            history: Ordered ``{"role": "user" | "assistant", "text": ...}`` items

        Returns:
            The raw text of the model's reply

        Raises:
            AssistantUnavailableError: If no API key is configured
            LLMCallError: If the request fails
        """
        client = self._get_client()
        messages = [{"role": "system", "content": system_instruction}]
        messages.extend({"role": item["role"], "content": item["text"]} for item in history)
        logger.debug("Requesting completion: %d messages, %d prompt chars",
                     len(messages), len(system_instruction))

        try:
            completion = await client.chat.completions.create(
                model=self.model,
                messages=messages,
            )
        except Exception as e:
            raise LLMCallError(e) from e

        return completion.choices[0].message.content or ""


def describe_llm_failure(error: Exception) -> str:
    """Map an LLM call failure to the message shown to the administrator."""
    if isinstance(error, AssistantUnavailableError):
        return UNAVAILABLE_MESSAGE
    if isinstance(error, LLMCallError) and error.is_permission_error:
        return PERMISSION_MESSAGE
    if "403" in str(error):
        return PERMISSION_MESSAGE
    return GENERIC_FAILURE_MESSAGE
