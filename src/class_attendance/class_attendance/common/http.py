from __future__ import annotations

from functools import wraps

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    DeniedError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from ..directory.repository import DirectoryRepository
from .logging import get_logger

log = get_logger(__name__)


def error_body(code: str, message: str, **extra) -> dict:
    body = {"success": False, "error": code, "message": message}
    body.update(extra)
    return body


def api_errors(view):
    """Translate domain exceptions raised by a view into JSON error responses."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except ConflictError as e:
            return jsonify(error_body("conflict", str(e), slot=e.slot.to_dict())), 409
        except DeniedError as e:
            return jsonify(error_body("denied", str(e), reason=e.reason.value)), 403
        except AuthorizationError as e:
            return jsonify(error_body("forbidden", str(e))), 403
        except NotFoundError as e:
            return jsonify(error_body("not-found", str(e))), 404
        except ValidationError as e:
            return jsonify(error_body("invalid", str(e))), 400
        except DomainError as e:
            return jsonify(error_body("rejected", str(e))), 400
        except Exception:
            log.exception("unhandled_api_error", path=request.path)
            return jsonify(error_body("internal", "Internal error")), 500

    return wrapper


def roles_required(*roles: Role):
    """Allow the view only for the given session roles.

    The host application owns login; it is expected to put ``role`` and
    ``user_id`` into the Flask session.
    """

    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if session.get("role") not in allowed:
                raise AuthorizationError("You do not have permission for this action")
            return view(*args, **kwargs)

        return wrapper

    return decorator


def require_class_scope(directory: DirectoryRepository, class_id: str) -> None:
    """Admins act on every class; a class representative only on their own."""
    role = session.get("role")
    if role == Role.ADMIN.value:
        return
    if role == Role.CR.value:
        member = directory.get_member(str(session.get("user_id") or ""))
        if member is not None and member.role == Role.CR and member.class_id == class_id:
            return
    raise AuthorizationError(f"You do not manage class {class_id}")


def json_payload() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Expected a JSON object body")
    return data
