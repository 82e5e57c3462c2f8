# --- models/customer.py ---
from models import db, BIGINT, utcnow


class CustomerAccount(db.Model):
    __tablename__ = "customer_account"
    __table_args__ = (
        db.Index("ix_customer_account_status", "status"),
    )

    id = db.Column(BIGINT, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    phone = db.Column(db.String(20), nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)

    # Stored status; the effective status is always computed by app.auth.status
    status = db.Column(db.String(20), nullable=False, default="ACTIVE")
    status_reason = db.Column(db.String(500), nullable=True)
    status_changed_at = db.Column(db.DateTime, default=utcnow)
    status_changed_by = db.Column(db.String(255), nullable=True)
    suspension_until = db.Column(db.DateTime, nullable=True)  # only while SUSPENDED

    last_login_at = db.Column(db.DateTime, default=utcnow)
    login_attempts = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<CustomerAccount id={self.id} status={self.status}>"
