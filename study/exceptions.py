# study/exceptions.py
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler


class StudyError(Exception):
    """Base for errors raised by the study engine; the API maps them to responses."""
    status_code = 400
    code = "study_error"
    default_detail = "Study request failed."

    def __init__(self, detail=None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class NotFound(StudyError):
    status_code = 404
    code = "not_found"
    default_detail = "Not found."


class InvalidRequest(StudyError):
    status_code = 400
    code = "invalid_request"
    default_detail = "Invalid request."


class Unauthenticated(StudyError):
    status_code = 401
    code = "unauthenticated"
    default_detail = "No user identity on the request."


class Conflict(StudyError):
    status_code = 409
    code = "conflict"
    default_detail = "Concurrent update, please retry."


def exception_handler(exc, context):
    """REST_FRAMEWORK['EXCEPTION_HANDLER']: study errors first, DRF defaults for the rest."""
    if isinstance(exc, StudyError):
        return Response({"detail": exc.detail, "code": exc.code}, status=exc.status_code)
    return drf_exception_handler(exc, context)
