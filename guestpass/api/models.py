"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Email syntax is deliberately accepted as a plain string here: the
domain's validation pipeline reports it alongside the other field
errors in a single 400 response.
"""

from pydantic import BaseModel, Field, model_validator

from guestpass.domain.ports import Tier


class CaptchaResponse(BaseModel):
    """Response model for a newly issued challenge."""

    captcha_id: str


class RegisterRequest(BaseModel):
    """Request model for guest registration."""

    email: str = Field(..., max_length=320, description="Guest email address")
    captcha_id: str = Field("", max_length=128, description="Challenge id from GET /captcha")
    captcha_answer: str = Field("", max_length=32, description="Claimed challenge solution")
    tier: Tier = Field(Tier.SELF_SERVICE, description="Requested access tier")
    corp_access: bool = Field(False, description="Legacy flag, same as tier=privileged")

    @model_validator(mode="after")
    def _apply_corp_access(self) -> "RegisterRequest":
        if self.corp_access:
            self.tier = Tier.PRIVILEGED
        return self


class RegisterResponse(BaseModel):
    """Response model for registration, accepted or rejected."""

    success: bool
    message: str = ""
    input_errors: dict[str, str] = Field(default_factory=dict)
    email: str
    valid_for_days: int = 0
    tier: Tier
    notified: bool = False


class ApproveResponse(BaseModel):
    """Response model for a successful approval."""

    success: bool
    message: str
    email: str
    notified: bool


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
