from estatedesk.extensions import db
from estatedesk.models._base import generate_id, isoformat, utcnow
from estatedesk.security.roles import Role


class User(db.Model):
    """
    Local profile of a user authenticated by the external auth provider.

    Credentials never live here; tokens carry the id and role.
    """

    __tablename__ = "users"

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    # Null for platform admins
    office_id = db.Column(
        db.String(32), db.ForeignKey("offices.id", ondelete="CASCADE"), nullable=True, index=True
    )
    username = db.Column(db.String(32), unique=True, nullable=False)
    display_name = db.Column(db.String(64), nullable=False)
    email = db.Column(db.String(255), nullable=True)
    role = db.Column(db.String(20), nullable=False, default=Role.AGENT.value)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), default=utcnow, nullable=False)

    office = db.relationship("Office", back_populates="users")
    office_assignments = db.relationship(
        "AdminOfficeAssignment",
        back_populates="admin_user",
        lazy="dynamic",
        cascade="all, delete-orphan",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "office_id": self.office_id,
            "username": self.username,
            "display_name": self.display_name,
            "email": self.email,
            "role": self.role,
            "is_active": self.is_active,
            "created_at": isoformat(self.created_at),
        }

    def __repr__(self):
        return f"<User {self.username} {self.role}>"
