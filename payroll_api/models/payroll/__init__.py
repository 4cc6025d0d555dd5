from .pay_run import PayrollRun, RUN_STATUSES
from .payslip import Payslip

__all__ = ["PayrollRun", "Payslip", "RUN_STATUSES"]
