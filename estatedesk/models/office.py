from estatedesk.extensions import db
from estatedesk.models._base import generate_id, isoformat, utcnow


class Office(db.Model):
    __tablename__ = "offices"

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    name = db.Column(db.String(100), nullable=False, index=True)
    phone = db.Column(db.String(20), nullable=True)
    email = db.Column(db.String(255), nullable=True)
    address = db.Column(db.String(500), nullable=True)
    city = db.Column(db.String(100), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), default=utcnow, nullable=False)

    subscription = db.relationship(
        "Subscription", back_populates="office", uselist=False
    )
    users = db.relationship("User", back_populates="office", lazy="dynamic")
    payment_records = db.relationship(
        "PaymentRecord",
        back_populates="office",
        lazy="dynamic",
        order_by="desc(PaymentRecord.created_at)",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "address": self.address,
            "city": self.city,
            "created_at": isoformat(self.created_at),
        }

    def __repr__(self):
        return f"<Office {self.id} {self.name!r}>"
