from estatedesk.extensions import db
from estatedesk.models._base import generate_id, isoformat, utcnow


class AdminOfficeAssignment(db.Model):
    """Grants a MID_ADMIN access to one office."""

    __tablename__ = "admin_office_assignments"

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    admin_user_id = db.Column(
        db.String(32), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    office_id = db.Column(
        db.String(32), db.ForeignKey("offices.id", ondelete="CASCADE"), nullable=False
    )
    assigned_at = db.Column(db.DateTime(timezone=True), default=utcnow, nullable=False)

    admin_user = db.relationship("User", back_populates="office_assignments")
    office = db.relationship("Office")

    __table_args__ = (
        db.UniqueConstraint("admin_user_id", "office_id", name="uq_admin_office"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "office_id": self.office_id,
            "assigned_at": isoformat(self.assigned_at),
            "office": {
                "id": self.office.id,
                "name": self.office.name,
                "city": self.office.city,
            } if self.office else None,
        }
