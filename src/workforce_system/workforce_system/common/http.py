from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Any, Mapping, Optional

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)


def current_role() -> Role:
    try:
        return Role(session.get("role"))
    except ValueError:
        raise AuthorizationError("Unknown role")


def payload() -> Mapping[str, Any]:
    if request.method == "GET":
        return request.args
    return request.get_json(silent=True) or request.form


def date_arg(data: Mapping[str, Any], key: str, default: Optional[date] = None) -> date:
    raw = data.get(key)
    if not raw:
        if default is None:
            raise ValidationError(f"{key} is required (YYYY-MM-DD)")
        return default
    try:
        return parse_iso_date(str(raw))
    except ValueError:
        raise ValidationError(f"{key} is not a valid date (YYYY-MM-DD)")


def optional_date_arg(data: Mapping[str, Any], key: str) -> Optional[date]:
    return date_arg(data, key) if data.get(key) else None


def optional_int_arg(data: Mapping[str, Any], key: str) -> Optional[int]:
    raw = data.get(key)
    if raw in (None, ""):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be a number")


def bool_arg(data: Mapping[str, Any], key: str) -> bool:
    raw = data.get(key)
    if isinstance(raw, bool):
        return raw
    return str(raw or "").strip().lower() in {"1", "true", "yes", "on"}


def json_endpoint(view):
    """Login check plus the JSON error contract shared by every admin endpoint."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "message": "Login required"}), 401
        try:
            return view(*args, **kwargs)
        except AuthorizationError as e:
            return jsonify({"success": False, "message": str(e)}), 403
        except NotFoundError as e:
            return jsonify({"success": False, "message": str(e)}), 404
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            logger.exception("Unhandled error in %s", view.__name__)
            return jsonify({"success": False, "message": "Internal error"}), 500

    return wrapper
