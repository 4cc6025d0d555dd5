"""payroll core tables: users, employees, payroll_runs, payslips

Revision ID: 4f1a2b3c5d6e
Revises:
Create Date: 2025-11-02 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4f1a2b3c5d6e'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

run_status = sa.Enum('DRAFT', 'PROCESSED', 'LOCKED', name='payroll_run_status_enum')


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='employee'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='active'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'employees',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True, unique=True),
        sa.Column('code', sa.String(length=32), nullable=False, unique=True),
        sa.Column('department', sa.String(length=120), nullable=True),
        sa.Column('designation', sa.String(length=120), nullable=True),
        sa.Column('employment_type', sa.String(length=20), nullable=False, server_default='full-time'),
        sa.Column('doj', sa.Date(), nullable=True),
        sa.Column('ctc', sa.Numeric(14, 2), nullable=True),
        sa.Column('basic', sa.Numeric(14, 2), nullable=True),
        sa.Column('hra', sa.Numeric(14, 2), nullable=True),
        sa.Column('allowances', sa.Numeric(14, 2), nullable=True),
        sa.Column('deductions', sa.Numeric(14, 2), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_emp_is_active', 'employees', ['is_active'])

    op.create_table(
        'payroll_runs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('month', sa.Integer(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('status', run_status, nullable=False, server_default='PROCESSED'),
        sa.Column('employee_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_net', sa.Numeric(14, 2), nullable=False, server_default='0'),
        sa.Column('processed_by', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('month', 'year', name='uq_payroll_run_period'),
        sa.CheckConstraint('month BETWEEN 1 AND 12', name='ck_payroll_run_month'),
    )

    op.create_table(
        'payslips',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('payroll_run_id', sa.Integer(), sa.ForeignKey('payroll_runs.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('month', sa.Integer(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('employee_code', sa.String(length=32), nullable=True),
        sa.Column('full_name', sa.String(length=255), nullable=True),
        sa.Column('department', sa.String(length=120), nullable=True),
        sa.Column('designation', sa.String(length=120), nullable=True),
        sa.Column('ctc', sa.Numeric(14, 2), nullable=True),
        sa.Column('basic', sa.Numeric(14, 2), nullable=True),
        sa.Column('hra', sa.Numeric(14, 2), nullable=True),
        sa.Column('allowances', sa.Numeric(14, 2), nullable=True),
        sa.Column('deductions', sa.Numeric(14, 2), nullable=True),
        sa.Column('gross', sa.Numeric(14, 2), nullable=False),
        sa.Column('net_pay', sa.Numeric(14, 2), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('user_id', 'month', 'year', name='uq_payslip_user_period'),
    )
    op.create_index('ix_payslips_payroll_run_id', 'payslips', ['payroll_run_id'])
    op.create_index('ix_payslips_user_id', 'payslips', ['user_id'])
    op.create_index('ix_payslip_period', 'payslips', ['year', 'month'])


def downgrade() -> None:
    op.drop_index('ix_payslip_period', table_name='payslips')
    op.drop_index('ix_payslips_user_id', table_name='payslips')
    op.drop_index('ix_payslips_payroll_run_id', table_name='payslips')
    op.drop_table('payslips')
    op.drop_table('payroll_runs')
    run_status.drop(op.get_bind(), checkfirst=True)
    op.drop_index('ix_emp_is_active', table_name='employees')
    op.drop_table('employees')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
