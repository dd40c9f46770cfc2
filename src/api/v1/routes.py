"""
API v1 routes.

Defines REST endpoints for the verification-code document delivery API.
Domain exceptions propagate to the handlers in src.api.errors.
"""

from fastapi import APIRouter, Depends

from src.api.dependencies import get_verification_service
from src.api.models import ErrorResponse, MessageResponse, SendCodeRequest, VerifyRequest
from src.api.rate_limit import enforce_rate_limit
from src.domain.verification import VerificationService

router = APIRouter(tags=["v1"], dependencies=[Depends(enforce_rate_limit)])

_COMMON_ERRORS = {
    400: {"model": ErrorResponse, "description": "Validation error"},
    429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
    502: {"model": ErrorResponse, "description": "Email delivery failed"},
}


@router.post(
    "/send-code",
    response_model=MessageResponse,
    responses=_COMMON_ERRORS,
    summary="Send a verification code",
    description="Email a 6-digit verification code valid for 10 minutes. "
    "Requesting a new code replaces any code sent earlier.",
)
async def send_code(
    request_data: SendCodeRequest,
    service: VerificationService = Depends(get_verification_service),
) -> MessageResponse:
    """
    Send a verification code to the given address.

    - **email**: Address to send the code to

    The code itself is never included in the response.
    """
    await service.request_code(request_data.email)
    return MessageResponse(message="We sent you a 6-digit code.")


@router.post(
    "/verify-and-send",
    response_model=MessageResponse,
    responses={
        **_COMMON_ERRORS,
        400: {"model": ErrorResponse, "description": "Validation error or invalid/expired code"},
        404: {"model": ErrorResponse, "description": "No user or no document for this email"},
    },
    summary="Verify code and send the PDF",
    description="Submit the 6-digit code received via email. On success the stored "
    "PDF is emailed to the same address as an attachment.",
)
async def verify_and_send(
    request_data: VerifyRequest,
    service: VerificationService = Depends(get_verification_service),
) -> MessageResponse:
    """
    Redeem a verification code and email the stored document.

    - **email**: Address the code was sent to
    - **code**: 6-digit verification code from email

    A code can be redeemed once. It is spent even if delivery fails.
    """
    await service.redeem_code(request_data.email, request_data.code)
    return MessageResponse(message="PDF sent! Check your inbox.")
