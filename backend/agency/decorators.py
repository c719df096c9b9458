# Overview: Route decorators mapping service errors onto JSON responses.

from functools import wraps
from flask import jsonify, current_app

from .validation import ConflictError, NotFoundError, TransactionAbortError, ValidationError


def _expose_detail() -> bool:
    return bool(current_app.debug or current_app.config.get("EXPOSE_ERROR_DETAIL"))


def server_error(message: str, exc: Exception):
    """500 body with a generic message; exception text only in development."""
    body = {"error": message}
    if _expose_detail():
        body["detail"] = str(exc)
    return jsonify(body), 500


def service_errors(failure_message: str):
    """
    Translate the service error taxonomy into HTTP responses.

    - ValidationError -> 400
    - NotFoundError -> 404
    - ConflictError -> 409
    - TransactionAbortError / anything unexpected -> 500 (logged)
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except ValidationError as e:
                return jsonify({"error": str(e)}), 400
            except NotFoundError as e:
                return jsonify({"error": str(e)}), 404
            except ConflictError as e:
                return jsonify({"error": str(e)}), 409
            except TransactionAbortError as e:
                current_app.logger.exception(failure_message)
                return server_error(failure_message, e.__cause__ or e)
            except Exception as e:
                current_app.logger.exception(failure_message)
                return server_error(failure_message, e)
        return decorated_function
    return decorator
