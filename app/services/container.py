"""
Service container.

Provider clients are constructed once by the application lifespan and handed to
request handlers through FastAPI dependencies; tests build a container with fakes.
Providers whose credentials are missing are left unset and the matching
capabilities fail with a ProviderError at call time.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from sqlalchemy.orm import Session

from app.core import config
from app.llm.openai_provider import OpenAIImageEditor, OpenAIProvider
from app.services.capability_service import CapabilityInvoker
from app.services.creation_ledger import CreationLedger
from app.services.generation_service import GenerationService
from app.services.identity_provider import IdentityProvider, SqlIdentityProvider
from app.services.image_provider import ClipDropImageProvider
from app.services.object_storage import S3ObjectStorage

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    identity: IdentityProvider
    ledger: CreationLedger
    invoker: CapabilityInvoker
    generation: GenerationService

    @classmethod
    def create(
        cls,
        identity: IdentityProvider,
        ledger: CreationLedger,
        invoker: CapabilityInvoker,
        free_limit: Optional[int] = None,
    ) -> "ServiceContainer":
        return cls(
            identity=identity,
            ledger=ledger,
            invoker=invoker,
            generation=GenerationService(identity, invoker, ledger, free_limit=free_limit),
        )

    def close(self) -> None:
        image_provider = self.invoker.image_provider
        if isinstance(image_provider, ClipDropImageProvider):
            image_provider.close()


def _optional(factory: Callable, name: str):
    try:
        return factory()
    except ValueError as e:
        logger.warning(f"{name} disabled: {e}")
        return None


def build_services(session_factory: Callable[[], Session]) -> ServiceContainer:
    """Construct production clients from configuration."""
    invoker = CapabilityInvoker(
        text_llm=_optional(OpenAIProvider, "Text generation"),
        image_provider=_optional(ClipDropImageProvider, "Image generation"),
        image_editor=_optional(OpenAIImageEditor, "Object removal"),
        storage=_optional(S3ObjectStorage, "Asset storage"),
        max_resume_bytes=config.MAX_RESUME_BYTES,
    )
    return ServiceContainer.create(
        identity=SqlIdentityProvider(session_factory),
        ledger=CreationLedger(session_factory),
        invoker=invoker,
        free_limit=config.FREE_USAGE_LIMIT,
    )
