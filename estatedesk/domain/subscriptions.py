from dataclasses import dataclass
from enum import Enum


class Plan(str, Enum):
    TRIAL = "TRIAL"
    SMALL = "SMALL"
    LARGE = "LARGE"


class SubscriptionStatus(str, Enum):
    ACTIVE = "ACTIVE"
    GRACE = "GRACE"
    LOCKED = "LOCKED"
    CANCELLED = "CANCELLED"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    VERIFIED = "VERIFIED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class PlanPrice:
    plan: Plan
    label: str
    price_toman: int

    @property
    def price_rials(self) -> int:
        # 1 Toman = 10 Rials; the gateway charges in Rials
        return self.price_toman * 10


# TRIAL is granted at registration and never purchased
PURCHASABLE_PLANS = {
    Plan.SMALL: PlanPrice(Plan.SMALL, "Basic", 490_000),
    Plan.LARGE: PlanPrice(Plan.LARGE, "Professional", 990_000),
}

PLAN_LABELS = {
    Plan.TRIAL: "Trial",
    Plan.SMALL: PURCHASABLE_PLANS[Plan.SMALL].label,
    Plan.LARGE: PURCHASABLE_PLANS[Plan.LARGE].label,
}

TRIAL_DAYS = 30


def get_plan_price(plan) -> PlanPrice:
    """Look up the price entry for a purchasable plan.

    Raises:
        ValueError: if the plan is unknown or not purchasable (TRIAL).
    """
    try:
        return PURCHASABLE_PLANS[Plan(plan)]
    except (KeyError, ValueError):
        raise ValueError(f"Plan {plan!r} cannot be purchased")


def price_in_rials(plan) -> int:
    return get_plan_price(plan).price_rials
