"""
Error Handling Decorator

Turns domain errors raised by application services into structured
error responses for Flask routes.
"""

from functools import wraps

from flask import current_app

from domain.errors import DomainError, ErrorCategory, create_error_response


def handle_domain_errors(f):
    """
    Decorator mapping exceptions to error responses.

    Domain errors become their category's response and status. Anything
    else is logged with its traceback and answered with a system error.

    Usage:
        @handle_domain_errors
        def post(self):
            pass
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except DomainError as e:
            current_app.logger.info(
                f"{type(e).__name__} in {f.__qualname__}: {str(e)}"
            )
            return create_error_response(e.category, str(e))
        except Exception as e:
            current_app.logger.exception(
                f"Unexpected error in {f.__qualname__}: {str(e)}"
            )
            return create_error_response(
                ErrorCategory.SYSTEM_ERROR,
                "Unexpected error",
                status_code=500,
            )

    return decorated_function
