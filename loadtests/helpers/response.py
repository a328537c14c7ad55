"""Turns storefront error responses into one-line failure messages.

Bodies come in three shapes:

- FastAPI request validation (422): {"detail": [{"loc": [...], "msg": "..."}]}
- field errors (400): {"error": {"field": ["msg", ...]}}
- everything else: {"error": "msg", ...extra keys such as correct_amount}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response

_MAX_DETAIL = 300


def _field_errors(errors: dict) -> str:
    parts = []
    for field_name, messages in errors.items():
        text = "; ".join(messages) if isinstance(messages, list) else str(messages)
        parts.append(f"{field_name}: {text}")
    return " | ".join(parts)


def extract_error_detail(response: Response) -> str:
    """Compact, human-readable reason for a failed request."""
    try:
        body = response.json()
    except ValueError:
        return (getattr(response, "text", "") or "(empty response body)")[:_MAX_DETAIL]

    if not isinstance(body, dict):
        return str(body)[:_MAX_DETAIL]

    if isinstance(body.get("detail"), list):
        return " | ".join(
            f"{'.'.join(str(p) for p in err.get('loc', []))}: {err.get('msg', err)}" for err in body["detail"]
        )

    error = body.get("error")
    if isinstance(error, dict):
        return _field_errors(error)
    if error is not None:
        extras = {k: v for k, v in body.items() if k != "error"}
        return f"{error} {extras}" if extras else str(error)

    return str(body)[:_MAX_DETAIL]
