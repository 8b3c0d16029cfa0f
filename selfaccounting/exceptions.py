"""
Domain exceptions for the report engine.

Renderers raise these instead of framework-specific HTTP errors so the
engine can be embedded in any service layer. Callers translate
``status_code`` into a transport response.
"""


class AppError(Exception):
    """Base application error with an HTTP-equivalent status code."""

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ValidationError(AppError):
    """Input validation failure (400)."""

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class ReportRenderError(AppError):
    """A backend failed while producing a document (500)."""

    def __init__(self, message: str, report_type: str = None, fmt: str = None):
        self.report_type = report_type
        self.fmt = fmt
        super().__init__(message, status_code=500)
