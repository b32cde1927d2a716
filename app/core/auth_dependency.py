from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.errors import AuthenticationError
from app.services.container import ServiceContainer
from app.services.identity_service import UserEntitlement, resolve

# auto_error=False so a missing header becomes an AuthenticationError outcome
bearer_scheme = HTTPBearer(auto_error=False)


def get_services(request: Request) -> ServiceContainer:
    """Service container built by the application lifespan."""
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise RuntimeError("Services not initialized")
    return services


def get_credential(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Not authenticated")
    return credentials.credentials


def get_current_entitlement(
    credential: str = Depends(get_credential),
    services: ServiceContainer = Depends(get_services),
) -> UserEntitlement:
    """Resolve the caller's identity snapshot (user id, premium flag, free usage)."""
    return resolve(services.identity, credential)
