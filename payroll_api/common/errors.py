# payroll_api/common/errors.py
from werkzeug.exceptions import HTTPException
from sqlalchemy.exc import IntegrityError
from payroll_api.common.http import fail


class APIError(Exception):
    """Custom API Error class."""
    code = "API_ERROR"
    status_code = 400

    def __init__(self, message, code=None, status_code=None, payload=None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.payload = payload


class InvalidPeriod(APIError):
    code = "INVALID_PERIOD"
    status_code = 422


class DuplicateRun(APIError):
    code = "DUPLICATE_RUN"
    status_code = 409


class NoEligibleEmployees(APIError):
    code = "NO_ELIGIBLE_EMPLOYEES"
    status_code = 422


class NotFound(APIError):
    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, message="Not found", **kw):
        super().__init__(message, **kw)


class PersistenceFailure(APIError):
    code = "PERSISTENCE_FAILURE"
    status_code = 500


class PayslipImmutableError(Exception):
    """Raised when a flush would modify or delete a stored payslip."""


def register_error_handlers(app):
    @app.errorhandler(APIError)
    def _api_error(e: APIError):
        return fail(message=e.message, status=e.status_code, code=e.code, detail=e.payload)

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        return fail(e.description or e.name, status=e.code or 500)

    @app.errorhandler(IntegrityError)
    def _integrity(e: IntegrityError):
        # 409 for unique/FK violations
        return fail("Duplicate or FK constraint failed", status=409, code="CONSTRAINT_ERROR")

    @app.errorhandler(Exception)
    def _500(e: Exception):
        app.logger.exception(e)
        return fail("Internal server error", status=500)
