from datetime import datetime

from sqlalchemy import event

from payroll_api.extensions import db
from payroll_api.common.errors import PayslipImmutableError


class Payslip(db.Model):
    """
    Per-employee, per-period snapshot. Identity and salary fields are
    copied at run time and never re-read from the employee record.
    """
    __tablename__ = "payslips"

    id = db.Column(db.Integer, primary_key=True)
    payroll_run_id = db.Column(db.Integer, db.ForeignKey("payroll_runs.id", ondelete="RESTRICT"),
                               nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="RESTRICT"),
                        nullable=False, index=True)

    month = db.Column(db.Integer, nullable=False)
    year = db.Column(db.Integer, nullable=False)

    # identity snapshot
    employee_code = db.Column(db.String(32))
    full_name = db.Column(db.String(255))
    department = db.Column(db.String(120))
    designation = db.Column(db.String(120))

    # salary snapshot; NULL keeps "absent" distinct from an explicit 0
    ctc = db.Column(db.Numeric(14, 2))
    basic = db.Column(db.Numeric(14, 2))
    hra = db.Column(db.Numeric(14, 2))
    allowances = db.Column(db.Numeric(14, 2))
    deductions = db.Column(db.Numeric(14, 2))

    gross = db.Column(db.Numeric(14, 2), nullable=False)     # basic + hra + allowances
    net_pay = db.Column(db.Numeric(14, 2), nullable=False)   # gross - deductions

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("user_id", "month", "year", name="uq_payslip_user_period"),
        db.Index("ix_payslip_period", "year", "month"),
    )

    payroll_run = db.relationship("PayrollRun", back_populates="payslips")
    user = db.relationship("User", lazy="joined")


@event.listens_for(Payslip, "before_update")
def _prevent_payslip_update(mapper, connection, target):
    raise PayslipImmutableError(f"Payslip {target.id} is immutable and cannot be modified")


@event.listens_for(Payslip, "before_delete")
def _prevent_payslip_delete(mapper, connection, target):
    raise PayslipImmutableError(f"Payslip {target.id} is immutable and cannot be deleted")
