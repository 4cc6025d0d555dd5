import os

from payroll_api import create_app

app = create_app(os.getenv("PAYROLL_CONFIG"))
