from __future__ import annotations

import logging

from flask import Blueprint, jsonify, request

from ..app_utils import make_error, make_ok
from ..composition.providers import get_wiring
from ..constants import DEFAULT_TRANSFERS_LIMIT
from ..errors import InvalidInputError
from ..utils import iso_utc, utc_now
from ..validators import validate_days, validate_language, validate_limit, validate_match_type

bp = Blueprint("api", __name__)
log = logging.getLogger(__name__)


def _get_service():
    return get_wiring()


@bp.get("/matches")
async def matches():
    match_type, warnings = validate_match_type(request.args.get("type"))
    srv = _get_service().matches
    try:
        if match_type == "latest":
            limit, lw = validate_limit(request.args.get("limit"))
            warnings += lw
            data = await srv.latest(limit)
        elif match_type == "upcoming":
            days, dw = validate_days(request.args.get("days"))
            warnings += dw
            data = await srv.upcoming(days)
        else:
            data = await srv.weekly()
    except Exception as exc:
        log.exception("matches_failed type=%s", match_type)
        return jsonify({"success": False, "error": type(exc).__name__, "message": "Failed to load matches"}), 500

    payload = {
        "success": True,
        "type": match_type,
        "data": data,
        "timestamp": iso_utc(utc_now()),
    }
    if warnings:
        payload["warnings"] = [str(w) for w in warnings]
    return jsonify(payload), 200


@bp.get("/football-data")
async def football_data():
    body, status = await _get_service().proxy.fetch(request.args.get("endpoint"))
    return jsonify(body), status


@bp.get("/search")
async def search():
    language, _ = validate_language(request.args.get("lang"))
    forced = (request.args.get("type") or "").strip().lower() or None
    try:
        result = await _get_service().lookup.search(request.args.get("q", ""), language=language, forced_kind=forced)
    except InvalidInputError as exc:
        return make_error(exc, exc.message, status_code=400)
    log.info("search source=%s error=%s cached=%s", result.source, result.error, result.cached)
    return make_ok(result.to_dict(), "success" if result.ok else "no data")


@bp.get("/transfers")
async def transfers():
    limit, warnings = validate_limit(request.args.get("limit"), default=DEFAULT_TRANSFERS_LIMIT)
    language, lw = validate_language(request.args.get("lang"))
    warnings += lw
    result = await _get_service().lookup.transfers(request.args.get("q"), limit=limit, language=language)
    payload = result.to_dict()
    if warnings:
        payload["warnings"] = [str(w) for w in warnings]
    return make_ok(payload, "success" if result.ok else "no data")


@bp.get("/player-image")
async def player_image():
    try:
        data = await _get_service().lookup.player_image(request.args.get("name", ""))
    except InvalidInputError as exc:
        return make_error(exc, exc.message, status_code=400)
    return make_ok(data, "success" if data["url"] else "no image")


@bp.get("/fact")
async def fact():
    data = await _get_service().matches.daily_fact()
    return make_ok(data)


@bp.get("/stats")
def stats():
    wiring = _get_service()
    return make_ok(
        {
            "telemetry": wiring.telemetry.report(),
            "cache": wiring.cache.stats(),
            "pacing": wiring.pacer.snapshot(),
            "chains": wiring.router.describe(),
        }
    )


@bp.post("/stats/clear")
def clear_stats():
    _get_service().telemetry.clear()
    return make_ok(None, "telemetry cleared")


@bp.post("/clear-cache")
def clear_cache():
    prefix = request.args.get("prefix") or "search:"
    removed = _get_service().lookup.clear_cache(prefix)
    log.info("cache_cleared prefix=%s removed=%d", prefix, removed)
    return make_ok({"prefix": prefix, "removed": removed}, "cache cleared")
