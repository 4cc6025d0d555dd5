from flask import Blueprint, request, current_app, make_response

from payroll_api.common.auth import token_required, management_required
from payroll_api.common.http import ok
from payroll_api.services.payroll_engine import run_payroll
from payroll_api.services import payslip_query as q
from payroll_api.services.payslip_pdf import render_payslip_pdf, payslip_filename

bp = Blueprint("payroll", __name__, url_prefix="/api/v1/payroll")


# ---------- management ----------
@bp.get("/runs")
@token_required
@management_required
def list_runs(current_user):
    runs = q.list_runs()
    return ok([q.row_run(r) for r in runs], total=len(runs))


@bp.post("/runs")
@token_required
@management_required
def create_run(current_user):
    """
    Run payroll for {month, year}. Errors (bad period, already processed,
    nothing to process) surface through the registered APIError handler.
    """
    j = request.get_json(silent=True) or {}
    run = run_payroll(j.get("month"), j.get("year"), initiator_id=current_user.id)
    return ok(q.row_run(run), 201,
              message=f"Payroll processed for {run.employee_count} employee(s)")


@bp.get("/runs/<run_id>")
@token_required
@management_required
def get_run(current_user, run_id):
    return ok(q.row_run(q.get_run(run_id)))


@bp.get("/runs/<run_id>/payslips")
@token_required
@management_required
def list_run_payslips(current_user, run_id):
    slips = q.list_payslips_for_run(run_id)
    totals = q.payslip_totals(slips)
    return ok([q.row_payslip(p) for p in slips], total=len(slips),
              employee_count=totals["employee_count"],
              total_gross=float(totals["total_gross"]),
              total_net=float(totals["total_net"]))


# ---------- self service ----------
@bp.get("/my-payslips")
@token_required
def list_my_payslips(current_user):
    slips = q.list_my_payslips(current_user.id)
    return ok([q.row_payslip(p) for p in slips], total=len(slips))


@bp.get("/my-payslips/<payslip_id>/pdf")
@token_required
def download_my_payslip(current_user, payslip_id):
    # load + ownership check and full render happen before any header is set
    slip = q.get_my_payslip(current_user.id, payslip_id)
    body = render_payslip_pdf(slip, current_user,
                              current_app.config.get("PAYSLIP_ORG_NAME"),
                              current_app.config.get("PAYSLIP_CURRENCY_PREFIX"))

    response = make_response(body)
    response.headers["Content-Type"] = "application/pdf"
    response.headers["Content-Disposition"] = f'attachment; filename="{payslip_filename(slip)}"'
    response.headers["Content-Length"] = str(len(body))
    return response
