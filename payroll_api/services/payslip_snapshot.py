from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Any, Optional

from payroll_api.common.money import Amount
from payroll_api.models.payroll.payslip import Payslip

SALARY_COMPONENTS = ("ctc", "basic", "hra", "allowances", "deductions")


@dataclass(frozen=True)
class PayslipSnapshot:
    user_id: int
    month: int
    year: int
    employee_code: Optional[str]
    full_name: Optional[str]
    department: Optional[str]
    designation: Optional[str]
    salary: Dict[str, Amount] = field(default_factory=dict)

    def component(self, name: str) -> Amount:
        return self.salary.get(name) or Amount.absent()

    @property
    def gross(self) -> Decimal:
        return (self.component("basic").or_zero()
                + self.component("hra").or_zero()
                + self.component("allowances").or_zero())

    @property
    def net_pay(self) -> Decimal:
        return self.gross - self.component("deductions").or_zero()

    def columns(self) -> Dict[str, Any]:
        cols: Dict[str, Any] = {
            "user_id": self.user_id,
            "month": self.month,
            "year": self.year,
            "employee_code": self.employee_code,
            "full_name": self.full_name,
            "department": self.department,
            "designation": self.designation,
            "gross": self.gross,
            "net_pay": self.net_pay,
        }
        for name in SALARY_COMPONENTS:
            cols[name] = self.component(name).value
        return cols

    def to_payslip(self, run) -> Payslip:
        return Payslip(payroll_run=run, **self.columns())


def build_snapshot(employee, user, month: int, year: int) -> PayslipSnapshot:
    """
    Copy identity and salary fields off the live records. Missing
    components stay absent here and count as 0 in gross/net.
    """
    return PayslipSnapshot(
        user_id=user.id,
        month=month,
        year=year,
        employee_code=employee.code,
        full_name=user.full_name,
        department=employee.department,
        designation=employee.designation,
        salary={name: Amount.of(getattr(employee, name, None)) for name in SALARY_COMPONENTS},
    )
