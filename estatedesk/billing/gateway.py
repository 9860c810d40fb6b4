from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class PaymentRequestResult:
    success: bool
    authority: str | None = None
    pay_url: str | None = None
    error: str | None = None

    @classmethod
    def failed(cls, error: str) -> "PaymentRequestResult":
        return cls(success=False, error=error)


@dataclass(frozen=True)
class VerificationResult:
    success: bool
    ref_id: str | None = None
    # Gateway reports it had already confirmed this authority earlier
    already_verified: bool = False
    error: str | None = None

    @classmethod
    def failed(cls, error: str) -> "VerificationResult":
        return cls(success=False, error=error)


class PaymentGateway(Protocol):
    """
    An external payment gateway.

    Implementations never raise: every transport or gateway-side problem
    is reported through a failed result. They do not deduplicate calls.
    """

    def request_payment(self, plan, callback_url: str) -> PaymentRequestResult:
        ...

    def verify_payment(self, plan, authority: str) -> VerificationResult:
        ...
