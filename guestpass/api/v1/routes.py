"""
API v1 routes.

Defines REST endpoints for the guest network access API:
- GET  /api/v1/captcha  - Issue an admission challenge
- GET  /api/v1/captcha/{id}.png - Render a challenge image
- POST /api/v1/register - Register for a tier
- GET  /api/v1/approve  - Approve a pending privileged request (admin link)

Handlers are plain functions: the service performs blocking DNS, store
and SMTP calls, so FastAPI runs them in its worker threadpool.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import JSONResponse

from guestpass.adapters.challenge import ChallengeImageRenderer
from guestpass.api.dependencies import (
    get_challenge_renderer,
    get_challenge_verifier,
    get_registration_service,
)
from guestpass.api.models import (
    ApproveResponse,
    CaptchaResponse,
    ErrorResponse,
    RegisterRequest,
    RegisterResponse,
)
from guestpass.domain.exceptions import IdentityVerificationError, InvalidApprovalRequest, StoreError
from guestpass.domain.ports import ChallengeVerifier
from guestpass.domain.registration import RegistrationRequest, RegistrationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["v1"])

REGISTER_FAILED = "Internal server error, please try again."
APPROVE_FAILED = "Internal server error."
INVALID_REQUEST_ID = "Invalid request ID."
INVALID_REQUEST = "Invalid request."
UNKNOWN_CHALLENGE = "Unknown or expired challenge."


@router.get(
    "/captcha",
    response_model=CaptchaResponse,
    responses={500: {"model": ErrorResponse, "description": "Store unavailable"}},
    summary="Issue an admission challenge",
)
def new_captcha(
    service: RegistrationService = Depends(get_registration_service),
) -> CaptchaResponse:
    """Create a single-use challenge and return its id."""
    try:
        challenge = service.issue_challenge()
    except StoreError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=REGISTER_FAILED,
        ) from None
    return CaptchaResponse(captcha_id=challenge.challenge_id)


@router.get(
    "/captcha/{captcha_id}.png",
    response_class=Response,
    responses={
        200: {"content": {"image/png": {}}, "description": "Challenge image"},
        404: {"model": ErrorResponse, "description": "Unknown, expired or used challenge"},
        500: {"model": ErrorResponse, "description": "Store unavailable"},
    },
    summary="Render an admission challenge",
)
def captcha_image(
    captcha_id: str,
    verifier: ChallengeVerifier = Depends(get_challenge_verifier),
    renderer: ChallengeImageRenderer = Depends(get_challenge_renderer),
) -> Response:
    """Draw the challenge answer as a PNG. Viewing does not consume the challenge."""
    try:
        answer = verifier.peek(captcha_id)
    except StoreError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=REGISTER_FAILED,
        ) from None
    if answer is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=UNKNOWN_CHALLENGE)

    return Response(
        content=renderer.render(answer),
        media_type="image/png",
        headers={"Cache-Control": "no-store"},
    )


@router.post(
    "/register",
    response_model=RegisterResponse,
    responses={
        400: {"model": RegisterResponse, "description": "One or more fields rejected"},
        500: {"model": ErrorResponse, "description": "Store or verifier failure"},
    },
    summary="Register for network access",
    description="Submit an email address and a solved challenge. Self-service "
    "guests receive their credentials by email; privileged requests are "
    "held for administrator approval.",
)
def register(
    request_data: RegisterRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> RegisterResponse | JSONResponse:
    """
    Register a guest.

    - **email**: Guest email address
    - **captcha_id** / **captcha_answer**: Solved challenge
    - **tier**: `self-service` (default) or `privileged`

    Every rejected field is reported at once in `input_errors`.
    """
    try:
        result = service.register(
            RegistrationRequest(
                email=request_data.email,
                challenge_id=request_data.captcha_id,
                challenge_answer=request_data.captcha_answer,
                tier=request_data.tier,
            )
        )
    except (StoreError, IdentityVerificationError):
        logger.error("Registration failed for %s", request_data.email, exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=REGISTER_FAILED,
        ) from None

    response = RegisterResponse(
        success=result.accepted,
        message=result.message,
        input_errors=result.field_errors,
        email=result.email,
        valid_for_days=result.valid_for_days,
        tier=result.tier,
        notified=result.notified,
    )
    if not result.accepted:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=response.model_dump(mode="json"),
        )
    return response


@router.get(
    "/approve",
    response_model=ApproveResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing request id"},
        404: {"model": ErrorResponse, "description": "Unknown, expired or used request"},
        500: {"model": ErrorResponse, "description": "Store failure"},
    },
    summary="Approve a pending privileged request",
    description="Target of the link mailed to the administrator. Each link works once.",
)
def approve(
    request_id: str = Query("", alias="id", max_length=128),
    service: RegistrationService = Depends(get_registration_service),
) -> ApproveResponse:
    """Activate the pending credential behind an approval token."""
    if not request_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_REQUEST_ID)

    try:
        result = service.approve(request_id)
    except InvalidApprovalRequest:
        # Unknown, expired and consumed tokens are indistinguishable on purpose
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=INVALID_REQUEST) from None
    except StoreError:
        logger.error("Approval failed", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=APPROVE_FAILED,
        ) from None

    return ApproveResponse(
        success=True,
        message=result.message,
        email=result.email,
        notified=result.notified,
    )
