"""
Capability invoker.

Adapter between the gateway and the generative providers. Every Capability is
dispatched through one exhaustive handler table; each handler returns the
content to hand back to the user (text, or the public URL of a stored image)
and the prompt to record in the ledger.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from app.core.capabilities import Capability
from app.core.config import MAX_RESUME_BYTES
from app.core.errors import ProviderError, ValidationError
from app.llm.provider import ImageEditor, LLMProvider
from app.services.image_provider import ImageProvider
from app.services.object_storage import ObjectStorage
from app.services.resume_parser import parse_resume

logger = logging.getLogger(__name__)

BLOG_TITLE_MAX_TOKENS = 100
RESUME_REVIEW_MAX_TOKENS = 1000
DEFAULT_ARTICLE_LENGTH = 800
MAX_PROMPT_CHARS = 20000

RESUME_REVIEW_PROMPT = (
    "Review the following resume and provide constructive and critical feedback on its "
    "strengths, weaknesses, and areas for improvement. Resume Content:\n\n{resume_text}"
)


@dataclass
class CapabilityRequest:
    """Inputs for one capability call. Which fields are required depends on the capability."""
    prompt: Optional[str] = None
    length: Optional[int] = None
    publish: bool = False
    file_bytes: Optional[bytes] = None
    filename: Optional[str] = None
    content_type: Optional[str] = None
    object_name: Optional[str] = None


@dataclass(frozen=True)
class CapabilityResult:
    content: str
    prompt: str
    publish: bool = False


class CapabilityInvoker:

    def __init__(
        self,
        text_llm: Optional[LLMProvider] = None,
        image_provider: Optional[ImageProvider] = None,
        image_editor: Optional[ImageEditor] = None,
        storage: Optional[ObjectStorage] = None,
        max_resume_bytes: int = MAX_RESUME_BYTES,
    ):
        self.text_llm = text_llm
        self.image_provider = image_provider
        self.image_editor = image_editor
        self.storage = storage
        self.max_resume_bytes = max_resume_bytes

        self._handlers: Dict[Capability, Callable[[CapabilityRequest], CapabilityResult]] = {
            Capability.ARTICLE: self._article,
            Capability.BLOG_TITLE: self._blog_title,
            Capability.IMAGE: self._image,
            Capability.REMOVE_BACKGROUND: self._remove_background,
            Capability.REMOVE_OBJECT: self._remove_object,
            Capability.RESUME_REVIEW: self._resume_review,
        }
        missing = set(Capability) - set(self._handlers)
        if missing:
            raise RuntimeError(f"No handler for capabilities: {sorted(c.value for c in missing)}")

    # ------------------------------------------------------------------
    # Validation (no side effects)
    # ------------------------------------------------------------------

    def validate(self, capability: Capability, request: CapabilityRequest) -> None:
        """Reject malformed input before anything is invoked."""
        capability = Capability(capability)
        if capability in (Capability.ARTICLE, Capability.BLOG_TITLE, Capability.IMAGE):
            if not request.prompt or not request.prompt.strip():
                raise ValidationError("Prompt is required")
            if len(request.prompt) > MAX_PROMPT_CHARS:
                raise ValidationError(f"Prompt too long. Maximum {MAX_PROMPT_CHARS:,} characters allowed.")
        if capability == Capability.ARTICLE and request.length is not None and request.length <= 0:
            raise ValidationError("Length must be positive")
        if capability in (Capability.REMOVE_BACKGROUND, Capability.REMOVE_OBJECT, Capability.RESUME_REVIEW):
            if not request.file_bytes:
                raise ValidationError("A file upload is required")
        if capability == Capability.REMOVE_OBJECT:
            object_name = (request.object_name or "").strip()
            if not object_name:
                raise ValidationError("Object name is required")
            if len(object_name.split()) > 1:
                raise ValidationError("Please enter only one object name")
        if capability == Capability.RESUME_REVIEW and len(request.file_bytes) > self.max_resume_bytes:
            raise ValidationError(f"Resume file size exceeds {self.max_resume_bytes // (1024 * 1024)}MB limit.")

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def invoke(self, capability: Capability, request: CapabilityRequest) -> CapabilityResult:
        capability = Capability(capability)
        self.validate(capability, request)
        logger.debug(f"Invoking capability={capability.value}")
        return self._handlers[capability](request)

    def _require(self, dependency, name: str):
        if dependency is None:
            raise ProviderError(f"{name} is not configured")
        return dependency

    def _complete(self, prompt: str, max_tokens: int) -> str:
        llm = self._require(self.text_llm, "Text generation")
        response = llm.chat(
            messages=[{"role": "user", "content": prompt}],
            temperature=0.7,
            max_tokens=max_tokens,
        )
        if not response.content:
            raise ProviderError("AI service returned no content")
        return response.content

    def _store_image(self, data: bytes) -> str:
        storage = self._require(self.storage, "Asset storage")
        return storage.store(data, content_type="image/png")

    def _article(self, request: CapabilityRequest) -> CapabilityResult:
        content = self._complete(request.prompt, request.length or DEFAULT_ARTICLE_LENGTH)
        return CapabilityResult(content=content, prompt=request.prompt, publish=request.publish)

    def _blog_title(self, request: CapabilityRequest) -> CapabilityResult:
        content = self._complete(request.prompt, BLOG_TITLE_MAX_TOKENS)
        return CapabilityResult(content=content, prompt=request.prompt, publish=request.publish)

    def _image(self, request: CapabilityRequest) -> CapabilityResult:
        provider = self._require(self.image_provider, "Image generation")
        url = self._store_image(provider.text_to_image(request.prompt))
        return CapabilityResult(content=url, prompt=request.prompt, publish=request.publish)

    def _remove_background(self, request: CapabilityRequest) -> CapabilityResult:
        provider = self._require(self.image_provider, "Background removal")
        image = provider.remove_background(
            request.file_bytes,
            filename=request.filename or "image.png",
            content_type=request.content_type or "image/png",
        )
        url = self._store_image(image)
        return CapabilityResult(content=url, prompt="Remove background from image", publish=request.publish)

    def _remove_object(self, request: CapabilityRequest) -> CapabilityResult:
        editor = self._require(self.image_editor, "Object removal")
        object_name = request.object_name.strip()
        image = editor.remove_object(request.file_bytes, object_name, filename=request.filename or "image.png")
        url = self._store_image(image)
        return CapabilityResult(content=url, prompt=f"Removed {object_name} from image", publish=request.publish)

    def _resume_review(self, request: CapabilityRequest) -> CapabilityResult:
        resume_text = parse_resume(request.file_bytes)
        if not resume_text.strip():
            raise ValidationError("Could not extract any text from the resume")
        prompt = RESUME_REVIEW_PROMPT.format(resume_text=resume_text)
        content = self._complete(prompt, RESUME_REVIEW_MAX_TOKENS)
        return CapabilityResult(content=content, prompt="Review the uploaded resume", publish=request.publish)
