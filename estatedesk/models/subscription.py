from sqlalchemy import CheckConstraint

from estatedesk.domain.subscriptions import PLAN_LABELS, Plan, SubscriptionStatus
from estatedesk.extensions import db
from estatedesk.models._base import generate_id, isoformat, utcnow


class Subscription(db.Model):
    __tablename__ = "subscriptions"

    id = db.Column(db.String(32), primary_key=True, default=generate_id)

    # One subscription per office
    office_id = db.Column(
        db.String(32),
        db.ForeignKey("offices.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )

    plan = db.Column(db.String(20), nullable=False, default=Plan.TRIAL.value)
    status = db.Column(
        db.String(20), nullable=False, default=SubscriptionStatus.ACTIVE.value, index=True
    )

    # Only meaningful while plan is TRIAL
    trial_ends_at = db.Column(db.DateTime(timezone=True), nullable=True)
    # Only meaningful for paid plans
    current_period_end = db.Column(db.DateTime(timezone=True), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    office = db.relationship("Office", back_populates="subscription")

    __table_args__ = (
        CheckConstraint(
            "plan IN ('TRIAL', 'SMALL', 'LARGE')",
            name="valid_subscription_plan",
        ),
        CheckConstraint(
            "status IN ('ACTIVE', 'GRACE', 'LOCKED', 'CANCELLED')",
            name="valid_subscription_status",
        ),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "office_id": self.office_id,
            "plan": self.plan,
            "plan_label": PLAN_LABELS.get(self.plan),
            "status": self.status,
            "trial_ends_at": isoformat(self.trial_ends_at),
            "current_period_end": isoformat(self.current_period_end),
        }

    def __repr__(self):
        return f"<Subscription office={self.office_id} {self.plan}/{self.status}>"
