"""Request body validation."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError

from estatedesk.errors import ValidationError


class RequestSchema(BaseModel):
    """Base for request bodies. Unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid")


class RequestPaymentSchema(RequestSchema):
    # Only SMALL and LARGE are purchasable; TRIAL is granted at registration
    plan: Literal["SMALL", "LARGE"]


class UpdateSubscriptionSchema(RequestSchema):
    plan: Optional[Literal["TRIAL", "SMALL", "LARGE"]] = None
    status: Optional[Literal["ACTIVE", "GRACE", "LOCKED", "CANCELLED"]] = None
    extend_days: Optional[int] = Field(default=None, ge=1, le=365, strict=True)


class SetAssignmentsSchema(RequestSchema):
    office_ids: list[str] = Field(max_length=100)


class UpdateOfficeProfileSchema(RequestSchema):
    name: str = Field(min_length=1, max_length=100)
    # Iranian landline or mobile, optionally +98 prefixed; blank clears it
    phone: Optional[str] = Field(default=None, pattern=r"^((\+98|0)?[0-9]{9,11})?$")
    email: Optional[str] = Field(default=None, max_length=255, pattern=r"^([^@\s]+@[^@\s]+\.[^@\s]+)?$")
    address: Optional[str] = Field(default=None, max_length=500)
    city: Optional[str] = Field(default=None, max_length=100)


def parse_body(schema, data):
    """
    Validate ``data`` against ``schema``.

    Raises:
        ValidationError: with the first problem as its message.
    """
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()))
        message = f"{field}: {first['msg']}" if field else first["msg"]
        raise ValidationError(message, payload={"errors": e.errors(include_url=False, include_context=False)})
