from datetime import datetime
from payroll_api.extensions import db

EMPLOYMENT_TYPES = ("full-time", "part-time", "contract", "intern")


class Employee(db.Model):
    __tablename__ = "employees"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, unique=True)

    code        = db.Column(db.String(32), unique=True, nullable=False)   # HTEMP001 etc.
    department  = db.Column(db.String(120), nullable=True)
    designation = db.Column(db.String(120), nullable=True)
    employment_type = db.Column(db.String(20), default="full-time", nullable=False)
    doj = db.Column(db.Date, nullable=True)   # date of joining

    # salary structure; NULL means the component is not set
    ctc        = db.Column(db.Numeric(14, 2), nullable=True)   # yearly
    basic      = db.Column(db.Numeric(14, 2), nullable=True)
    hra        = db.Column(db.Numeric(14, 2), nullable=True)
    allowances = db.Column(db.Numeric(14, 2), nullable=True)
    deductions = db.Column(db.Numeric(14, 2), nullable=True)

    is_active = db.Column(db.Boolean, default=True, nullable=False)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.Index("ix_emp_is_active", "is_active"),
    )

    user = db.relationship("User", lazy="joined", backref=db.backref("employee", uselist=False))
