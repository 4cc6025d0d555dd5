from datetime import datetime
from payroll_api.extensions import db

RUN_STATUSES = ("DRAFT", "PROCESSED", "LOCKED")


class PayrollRun(db.Model):
    __tablename__ = "payroll_runs"

    id = db.Column(db.Integer, primary_key=True)
    month = db.Column(db.Integer, nullable=False)   # 1-12
    year = db.Column(db.Integer, nullable=False)
    status = db.Column(db.Enum(*RUN_STATUSES, name="payroll_run_status_enum"),
                       nullable=False, default="PROCESSED")

    # summary
    employee_count = db.Column(db.Integer, nullable=False, default=0)
    total_net = db.Column(db.Numeric(14, 2), nullable=False, default=0)

    processed_by = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        # one run per period; concurrent attempts are serialised here
        db.UniqueConstraint("month", "year", name="uq_payroll_run_period"),
        db.CheckConstraint("month BETWEEN 1 AND 12", name="ck_payroll_run_month"),
    )

    processor = db.relationship("User", lazy="joined")
    payslips = db.relationship("Payslip", back_populates="payroll_run", lazy="dynamic")
