"""Web API Handler - HTTP endpoints for the notification service.

This module turns Flask requests into notifier calls and notifier
results or errors into JSON responses with CORS headers.
Part of the imperative shell - handles HTTP I/O.
"""

import json
import logging
from typing import Any, Protocol

from flask import Request, Response

from safezone.core.errors import NotifierError, ValidationError
from safezone.core.formatter import format_notify_message
from safezone.core.subscriptions import NotificationIntent
from safezone.core.validation import form_error, parse_notify_request, parse_scores_request
from safezone.core.votes import aggregate_scores, parse_votes, rank_by_score
from safezone.notifier import NotificationResult, SubscriberNotifier

logger = logging.getLogger(__name__)

# Headers browsers send with backend-as-a-service client calls
ALLOWED_HEADERS = "authorization, x-client-info, apikey, content-type"

NOTIFY_METHODS = "POST, OPTIONS"
SCORES_METHODS = "GET, OPTIONS"


class VoteStore(Protocol):
    """Anything that can list vote rows."""

    def list_votes(self, report_ids: list[int] | None = None) -> list[dict[str, Any]]: ...


def _cors_headers(allow_origin: str, methods: str) -> dict[str, str]:
    """Generate CORS headers for the response."""
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Headers": ALLOWED_HEADERS,
        "Access-Control-Allow-Methods": methods,
    }


def _preflight_response(allow_origin: str, methods: str) -> Response:
    """Answer a CORS preflight request."""
    response = Response("ok", status=200)
    for key, value in _cors_headers(allow_origin, methods).items():
        response.headers[key] = value
    return response


def _json_response(
    data: dict[str, Any],
    status: int = 200,
    allow_origin: str = "*",
    methods: str = "POST, OPTIONS",
) -> Response:
    """Create a JSON response with CORS headers."""
    response = Response(
        json.dumps(data, default=str),
        status=status,
        mimetype="application/json",
    )
    for key, value in _cors_headers(allow_origin, methods).items():
        response.headers[key] = value
    return response


def _intent_to_dict(intent: NotificationIntent) -> dict[str, Any]:
    """Convert NotificationIntent to the public JSON shape."""
    data: dict[str, Any] = {"userId": intent.user_id, "status": intent.status}
    if intent.error:
        data["error"] = intent.error
    return data


def _result_to_dict(result: NotificationResult) -> dict[str, Any]:
    """Convert NotificationResult to the success response body."""
    data: dict[str, Any] = {
        "message": format_notify_message(
            result.report_id,
            result.notified_count,
            result.subscriptions_found,
        ),
        "notified_users": [_intent_to_dict(i) for i in result.notifications],
    }
    if result.failures:
        data["failed_users"] = [_intent_to_dict(i) for i in result.failures]
    return data


def _method_not_allowed(request: Request, allow_origin: str, methods: str) -> Response:
    """Reject a method the endpoint does not serve."""
    return _json_response(
        {"error": f"Method {request.method} not allowed"},
        status=405,
        allow_origin=allow_origin,
        methods=methods,
    )


def _log_failure(context: str, error: NotifierError) -> None:
    """Log an expected failure, naming the offending fields for bad input."""
    if isinstance(error, ValidationError):
        logger.warning(
            "%s: %s (fields: %s)",
            context,
            error.message,
            ", ".join(error.fields) or "-",
        )
    else:
        logger.warning("%s: %s", context, error.message)


def _error_response(error: Exception, allow_origin: str, methods: str) -> Response:
    """Map an exception to a JSON error response."""
    if isinstance(error, ValidationError):
        return _json_response(
            {"error": error.message, "details": error.details},
            status=400,
            allow_origin=allow_origin,
            methods=methods,
        )

    if isinstance(error, NotifierError):
        message = error.message
    else:
        message = str(error)

    return _json_response(
        {"error": message},
        status=500,
        allow_origin=allow_origin,
        methods=methods,
    )


def handle_config_error(
    request: Request,
    error: Exception,
    methods: str,
    allow_origin: str = "*",
) -> Response:
    """Respond when configuration could not be loaded.

    Preflight requests are still answered so the browser can read the
    JSON error of the actual request.
    """
    if request.method == "OPTIONS":
        return _preflight_response(allow_origin, methods)

    return _json_response(
        {"error": f"Configuration error: {error}"},
        status=500,
        allow_origin=allow_origin,
        methods=methods,
    )


def handle_notify_subscribers(
    request: Request,
    notifier: SubscriberNotifier,
    allow_origin: str = "*",
) -> Response:
    """API endpoint: Notify subscribers about a newly created report.

    Body:
        {"report_id": <positive integer>}

    Returns:
        200 with message and notified_users, 400 on invalid input,
        500 on any other failure
    """
    methods = NOTIFY_METHODS

    # Handle CORS preflight
    if request.method == "OPTIONS":
        return _preflight_response(allow_origin, methods)

    if request.method != "POST":
        return _method_not_allowed(request, allow_origin, methods)

    try:
        body = request.get_json(force=True, silent=True)
        if body is None:
            raise form_error("Request body must be valid JSON")

        report_id = parse_notify_request(body)
        result = notifier.notify(report_id)

    except NotifierError as e:
        _log_failure("Notify request failed", e)
        return _error_response(e, allow_origin, methods)
    except Exception as e:
        logger.exception("Unexpected error while notifying subscribers")
        return _error_response(e, allow_origin, methods)

    logger.info("Completed: %s", result.summary)

    return _json_response(
        _result_to_dict(result),
        allow_origin=allow_origin,
        methods=methods,
    )


def handle_report_scores(
    request: Request,
    vote_store: VoteStore,
    allow_origin: str = "*",
) -> Response:
    """API endpoint: Vote scores for reports, highest first.

    Query params:
        report_ids: Comma-separated report ids (optional, default all)

    Returns:
        JSON with ranked scores and their count
    """
    methods = SCORES_METHODS

    if request.method == "OPTIONS":
        return _preflight_response(allow_origin, methods)

    if request.method != "GET":
        return _method_not_allowed(request, allow_origin, methods)

    try:
        report_ids = parse_scores_request(request.args.get("report_ids"))
        votes = parse_votes(vote_store.list_votes(report_ids))
    except NotifierError as e:
        _log_failure("Scores request failed", e)
        return _error_response(e, allow_origin, methods)
    except Exception as e:
        logger.exception("Unexpected error while aggregating scores")
        return _error_response(e, allow_origin, methods)

    ranked = rank_by_score(aggregate_scores(votes, report_ids))

    return _json_response(
        {
            "scores": [s.to_dict() for s in ranked],
            "count": len(ranked),
        },
        allow_origin=allow_origin,
        methods=methods,
    )
