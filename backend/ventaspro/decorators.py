# Overview: Request decorators for API routes.

from functools import wraps
from flask import jsonify, current_app

from .validation import ValidationError, NotFoundError
from .services.concurrency import StorageError
from .services.inventory_service import InsufficientStockError


def ledger_errors(action: str):
    """
    Translate typed engine errors into JSON responses.

    - ValidationError -> 400
    - NotFoundError -> 404
    - InsufficientStockError -> 409 (with product, requested, available)
    - StorageError -> 503 (caller may retry)

    Anything else is logged and reported as a 500. `action` names the
    operation in log lines ("create product", "close session", ...).
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except ValidationError as e:
                current_app.logger.info("Rejected %s: %s", action, e)
                return jsonify({"error": str(e)}), 400
            except NotFoundError as e:
                current_app.logger.info("Rejected %s: %s", action, e)
                return jsonify({"error": str(e)}), 404
            except InsufficientStockError as e:
                current_app.logger.info("Rejected %s: %s", action, e)
                return jsonify(e.to_dict()), 409
            except StorageError:
                current_app.logger.exception("Storage failure during %s", action)
                return jsonify({"error": f"Failed to {action}"}), 503
            except Exception:
                current_app.logger.exception("Failed to %s", action)
                return jsonify({"error": "Internal server error"}), 500

        return decorated_function
    return decorator
