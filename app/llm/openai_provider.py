"""
OpenAI SDK providers.

OpenAIProvider handles chat completions against any OpenAI-compatible endpoint
(Gemini is reached through its OpenAI-compatible base URL).
OpenAIImageEditor uses the images edit API for object removal.
"""
import base64
import logging
from typing import Optional, Dict
from openai import OpenAI, OpenAIError

from app.core.config import (
    GEMINI_API_KEY,
    GEMINI_BASE_URL,
    TEXT_MODEL,
    OPENAI_API_KEY,
    IMAGE_EDIT_MODEL,
    PROVIDER_TIMEOUT_SECONDS,
)
from app.core.errors import ProviderError
from app.llm.provider import ImageEditor, LLMProvider, LLMResponse

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """Chat completions through the official OpenAI SDK."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        default_model: Optional[str] = None,
        client: Optional[OpenAI] = None,
    ):
        """Initialize the client. Defaults target Gemini's OpenAI-compatible endpoint."""
        self.default_model = default_model or TEXT_MODEL
        if client is not None:
            self.client = client
        else:
            self.api_key = api_key or GEMINI_API_KEY
            if not self.api_key:
                raise ValueError("GEMINI_API_KEY not configured")
            self.client = OpenAI(
                api_key=self.api_key,
                base_url=base_url or GEMINI_BASE_URL,
                timeout=PROVIDER_TIMEOUT_SECONDS,
            )
        logger.info(f"Text provider initialized: model={self.default_model}")

    def chat(
        self,
        messages: list[Dict[str, str]],
        model: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LLMResponse:
        """Generate a chat completion."""
        model = model or self.default_model
        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens or 2000,
                **kwargs
            )
        except OpenAIError as e:
            logger.error(f"Text provider error: {e}", exc_info=True)
            raise ProviderError() from e

        if not response.choices:
            raise ProviderError("AI service returned no content")

        content = response.choices[0].message.content or ""
        usage = getattr(response, "usage", None)
        return LLMResponse(
            content=content,
            tokens_in=getattr(usage, "prompt_tokens", 0) or 0,
            tokens_out=getattr(usage, "completion_tokens", 0) or 0,
            model=model,
            metadata={
                "finish_reason": response.choices[0].finish_reason,
            }
        )


class OpenAIImageEditor(ImageEditor):
    """Object removal through the images edit endpoint."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None, client: Optional[OpenAI] = None):
        self.model = model or IMAGE_EDIT_MODEL
        if client is not None:
            self.client = client
        else:
            self.api_key = api_key or OPENAI_API_KEY
            if not self.api_key:
                raise ValueError("OPENAI_API_KEY not configured")
            self.client = OpenAI(api_key=self.api_key, timeout=PROVIDER_TIMEOUT_SECONDS)
        logger.info(f"Image editor initialized: model={self.model}")

    def remove_object(self, image: bytes, object_name: str, filename: str = "image.png") -> bytes:
        prompt = (
            f"Remove the {object_name} from this image. Fill the area naturally so it "
            f"matches the surrounding background. Keep everything else unchanged."
        )
        try:
            response = self.client.images.edit(
                model=self.model,
                image=(filename, image),
                prompt=prompt,
            )
        except OpenAIError as e:
            logger.error(f"Image edit error: {e}", exc_info=True)
            raise ProviderError() from e

        if not response.data or not response.data[0].b64_json:
            raise ProviderError("AI service returned no image")
        return base64.b64decode(response.data[0].b64_json)
