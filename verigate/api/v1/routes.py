"""
API v1 routes.

Defines REST endpoints for the authentication API:
- POST /v1/auth/register - Create or refresh an unverified account
- POST /v1/auth/verify - Consume an emailed verification code
- POST /v1/auth/login - Exchange credentials for a session token
- GET /v1/auth/protected - Example bearer-token protected route

Handlers are plain ``def`` so FastAPI runs the blocking store and mail I/O
in its threadpool, one request per worker.
"""

from fastapi import APIRouter, Depends, status

from verigate.api.dependencies import (
    authenticate_credentials,
    get_authentication_service,
    get_registration_service,
    require_identity,
    to_http_exception,
)
from verigate.api.models import (
    ErrorResponse,
    LoginResponse,
    ProtectedResponse,
    RegisterRequest,
    RegisterResponse,
    UserResponse,
    VerifyRequest,
    VerifyResponse,
)
from verigate.domain.authentication import AuthenticationService
from verigate.domain.models import Identity
from verigate.domain.registration import RegistrationService
from verigate.domain.result import Err

router = APIRouter(prefix="/auth", tags=["v1"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"model": ErrorResponse, "description": "Email already belongs to a verified account"},
        422: {"description": "Validation error"},
        500: {"model": ErrorResponse, "description": "Internal error"},
    },
    summary="Register a new user",
    description="Submit name, email and password. A verification link is emailed; "
    "repeating the call before verifying replaces the previous link.",
)
def register(
    request_data: RegisterRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> RegisterResponse:
    """
    Register a user and send a verification link.

    - **name**: Display name
    - **email**: Valid email address to register
    - **password**: Password (6-20 characters)
    """
    result = service.register(request_data.name, request_data.email, request_data.password)
    if isinstance(result, Err):
        raise to_http_exception(result)

    receipt = result.value
    return RegisterResponse(
        id=receipt.user.id,
        name=receipt.user.name,
        email=receipt.user.email,
        verified=receipt.user.verified,
        message=receipt.message,
    )


@router.post(
    "/verify",
    response_model=VerifyResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing or malformed code"},
        404: {"model": ErrorResponse, "description": "Code matches no account"},
        500: {"model": ErrorResponse, "description": "Internal error"},
    },
    summary="Verify email address",
    description="Submit the 64-character code from the verification link. "
    "Re-submitting a code for an already verified account succeeds without changes.",
)
def verify(
    request_data: VerifyRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> VerifyResponse:
    result = service.verify_email(request_data.code)
    if isinstance(result, Err):
        raise to_http_exception(result)

    outcome = result.value
    return VerifyResponse(
        success=True,
        message=outcome.message,
        user=UserResponse(
            id=outcome.user.id,
            name=outcome.user.name,
            email=outcome.user.email,
            verified=outcome.user.verified,
        ),
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid credentials or unverified email"},
        422: {"description": "Validation error"},
    },
    summary="Log in",
    description="Exchange email and password for a signed bearer token.",
)
def login(
    identity: Identity = Depends(authenticate_credentials),
    service: AuthenticationService = Depends(get_authentication_service),
) -> LoginResponse:
    """
    Issue a session token for credentials already validated by the guard.
    """
    return LoginResponse(
        id=identity.id,
        name=identity.name,
        email=identity.email,
        access_token=service.issue_token(identity),
    )


@router.get(
    "/protected",
    response_model=ProtectedResponse,
    responses={401: {"model": ErrorResponse, "description": "Missing, invalid or revoked token"}},
    summary="Example protected route",
)
def protected(identity: Identity = Depends(require_identity)) -> ProtectedResponse:
    return ProtectedResponse(message="Protected 123")
