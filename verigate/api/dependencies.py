"""
FastAPI dependencies - Dependency injection factories and request guards.

This module provides Depends() factories for injecting domain services and
infrastructure adapters into routes, plus the two guards:

- ``authenticate_credentials``: validates the login body before the route runs
- ``require_identity``: resolves the ``Authorization: Bearer`` token and
  short-circuits with 401 when resolution fails
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from verigate.adapters.smtp.console import ConsoleEmailSender
from verigate.adapters.smtp.smtp import SmtpEmailSender
from verigate.adapters.tokens.jose_jwt import JoseTokenCodec
from verigate.api.models import LoginRequest
from verigate.config.settings import get_settings
from verigate.domain.authentication import AuthenticationService
from verigate.domain.models import Identity
from verigate.domain.passwords import PasswordHasher
from verigate.domain.ports import EmailSender, TokenCodec, UserRepository
from verigate.domain.registration import RegistrationService
from verigate.domain.result import Err, ErrorKind

_STATUS_BY_KIND = {
    ErrorKind.ACCOUNT_EXISTS: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def to_http_exception(error: Err) -> HTTPException:
    """Map a domain error onto the HTTP status for its kind."""
    headers = None
    if error.kind is ErrorKind.UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return HTTPException(
        status_code=_STATUS_BY_KIND[error.kind],
        detail=error.message,
        headers=headers,
    )


def get_repository(request: Request) -> UserRepository:
    """
    Get the account repository from app state.

    The repository is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.repository


@lru_cache
def get_email_sender() -> EmailSender:
    """Build the configured email sender (singleton, stateless)."""
    settings = get_settings()
    if settings.email_backend == "smtp":
        password = settings.smtp_password.get_secret_value() if settings.smtp_password else None
        return SmtpEmailSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            sender=settings.mail_from,
            username=settings.smtp_username,
            password=password,
            use_tls=settings.smtp_use_tls,
            timeout=settings.smtp_timeout_seconds,
        )
    return ConsoleEmailSender()


@lru_cache
def get_password_hasher() -> PasswordHasher:
    """Get bcrypt hasher (singleton, the dummy hash is computed once)."""
    return PasswordHasher(cost=get_settings().bcrypt_cost)


@lru_cache
def get_token_codec() -> TokenCodec:
    """Get JWT codec bound to the process-wide signing secret."""
    settings = get_settings()
    return JoseTokenCodec(
        secret=settings.jwt_secret.get_secret_value(),
        algorithm=settings.jwt_algorithm,
        expires_seconds=settings.jwt_expires_seconds,
    )


def get_registration_service(
    repository: UserRepository = Depends(get_repository),
    email_sender: EmailSender = Depends(get_email_sender),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires together the repository, email sender and hasher for the domain service.
    """
    return RegistrationService(
        repository=repository,
        email_sender=email_sender,
        hasher=hasher,
        frontend_url=get_settings().frontend_url,
    )


def get_authentication_service(
    repository: UserRepository = Depends(get_repository),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenCodec = Depends(get_token_codec),
) -> AuthenticationService:
    return AuthenticationService(repository=repository, hasher=hasher, tokens=tokens)


def authenticate_credentials(
    credentials: LoginRequest,
    service: AuthenticationService = Depends(get_authentication_service),
) -> Identity:
    """
    Validate the email/password body before the login route runs.

    Raises:
        HTTPException: 401 for any credential failure
    """
    result = service.validate_credentials(credentials.email, credentials.password)
    if isinstance(result, Err):
        raise to_http_exception(result)
    return result.value


# HTTP Bearer token security scheme for OpenAPI documentation
bearer_scheme = HTTPBearer(
    scheme_name="Bearer",
    description="Session token returned by /v1/auth/login",
    auto_error=False,
)


def require_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    service: AuthenticationService = Depends(get_authentication_service),
) -> Identity:
    """
    Route guard: resolve the bearer token to a live identity.

    HTTPBearer with auto_error=False returns None for a missing header or a
    non-Bearer scheme, so every failure produces the same 401 shape.

    Returns:
        Identity of the account the token was issued to

    Raises:
        HTTPException: 401 if the token is absent, invalid, expired, or its
            account no longer exists
    """
    if credentials is None or not credentials.credentials.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    result = service.resolve_session(credentials.credentials.strip())
    if isinstance(result, Err):
        raise to_http_exception(result)
    return result.value
