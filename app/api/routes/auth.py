from fastapi import APIRouter, Depends, Body
from fastapi.security import OAuth2PasswordRequestForm

from app.core.auth_dependency import get_services
from app.core.errors import ValidationError
from app.schemas.auth import SignupRequest, SignupResponse, TokenResponse
from app.services.container import ServiceContainer
from app.services.identity_provider import SqlIdentityProvider

router = APIRouter(prefix="/auth", tags=["Auth"])


def get_local_identity(services: ServiceContainer = Depends(get_services)) -> SqlIdentityProvider:
    if not isinstance(services.identity, SqlIdentityProvider):
        raise ValidationError("Local sign-up is not available")
    return services.identity


# ✅ USER SIGNUP
@router.post("/signup", response_model=SignupResponse)
def signup(
    request: SignupRequest = Body(...),
    identity: SqlIdentityProvider = Depends(get_local_identity),
):
    user = identity.create_user(
        email=request.email,
        full_name=request.full_name,
        password=request.password,
    )
    return SignupResponse(user_id=user.id)


# ✅ OAUTH2 LOGIN (Swagger sends "username", treated as email)
@router.post("/login", response_model=TokenResponse)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    identity: SqlIdentityProvider = Depends(get_local_identity),
):
    token = identity.authenticate(form_data.username, form_data.password)
    return TokenResponse(access_token=token)
