from sqlalchemy import CheckConstraint

from estatedesk.domain.subscriptions import PaymentStatus
from estatedesk.extensions import db
from estatedesk.models._base import generate_id, isoformat, utcnow


class PaymentRecord(db.Model):
    __tablename__ = "payment_records"

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    office_id = db.Column(
        db.String(32),
        db.ForeignKey("offices.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    plan = db.Column(db.String(20), nullable=False)
    # Rials
    amount = db.Column(db.BigInteger, nullable=False)

    # Gateway correlation token, the only key trusted on callback
    authority = db.Column(db.String(64), unique=True, nullable=False, index=True)
    status = db.Column(
        db.String(20), nullable=False, default=PaymentStatus.PENDING.value, index=True
    )
    ref_id = db.Column(db.String(64), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    office = db.relationship("Office", back_populates="payment_records")

    __table_args__ = (
        CheckConstraint("plan IN ('SMALL', 'LARGE')", name="purchasable_plan"),
        CheckConstraint(
            "status IN ('PENDING', 'VERIFIED', 'FAILED')",
            name="valid_payment_status",
        ),
        CheckConstraint("amount > 0", name="positive_amount"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "office_id": self.office_id,
            "plan": self.plan,
            "amount": self.amount,
            "authority": self.authority,
            "status": self.status,
            "ref_id": self.ref_id,
            "created_at": isoformat(self.created_at),
        }

    def __repr__(self):
        return f"<PaymentRecord {self.authority} {self.status}>"
