# --- models/admin.py ---
from models import db, BIGINT, utcnow


class AdminAccount(db.Model):
    __tablename__ = "admin_account"

    id = db.Column(BIGINT, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    # Cache of the last role resolution; never used for access decisions
    role = db.Column(db.String(20), nullable=False, default="SUB_ADMIN")
    status = db.Column(db.String(20), nullable=False, default="Active")  # Active, Disabled
    created_by = db.Column(BIGINT, db.ForeignKey("admin_account.id", ondelete="SET NULL"), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "status": self.status,
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<AdminAccount id={self.id} role={self.role}>"
