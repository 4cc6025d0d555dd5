from datetime import datetime
from payroll_api.extensions import db
from werkzeug.security import generate_password_hash, check_password_hash

ROLES = ("super_admin", "admin", "hr", "employee")
MANAGEMENT_ROLES = ("super_admin", "admin", "hr")
USER_STATUSES = ("active", "inactive", "suspended")


class User(db.Model):
    __tablename__ = "users"

    id           = db.Column(db.Integer, primary_key=True)
    email        = db.Column(db.String(255), unique=True, index=True, nullable=False)
    password_hash= db.Column(db.String(255), nullable=False)
    full_name    = db.Column(db.String(255), nullable=False)
    role         = db.Column(db.String(20), nullable=False, default="employee")
    status       = db.Column(db.String(20), nullable=False, default="active")
    created_at   = db.Column(db.DateTime, default=datetime.utcnow)

    # --- helpers ---
    def set_password(self, raw: str):
        self.password_hash = generate_password_hash(raw)

    def check_password(self, raw: str) -> bool:
        return check_password_hash(self.password_hash, raw)

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    @property
    def is_management(self) -> bool:
        return self.role in MANAGEMENT_ROLES

    def role_codes(self):
        return [self.role] if self.role else []
