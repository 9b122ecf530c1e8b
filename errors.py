# errors.py
"""
Domain errors raised by the services layer.

Routers never build HTTP responses for these themselves; the handlers
registered in main.py map each class to its status code.
"""


class ReportingError(Exception):
    """Base class for every error the service reports to clients"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ReportingError):
    status_code = 400


class ConflictError(ReportingError):
    status_code = 400


class AuthError(ReportingError):
    status_code = 401


class NotFoundError(ReportingError):
    status_code = 404


class InternalError(ReportingError):
    status_code = 500


class StoreCorruptedError(InternalError):
    """The report file does not match the expected layout"""


class PredictionError(InternalError):
    """The prediction service failed or answered with something unusable"""
