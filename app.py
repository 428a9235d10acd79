from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from flask import Flask, jsonify, request

from game import (
    EVENT_NAMES,
    IllegalMove,
    Mark,
    Match,
    Move,
    SessionStore,
    Settings,
    UndoUnavailable,
    best_move,
    classify,
    configure_logging,
    new_match,
    score_moves,
    to_symbols,
    validate_cells,
)

logger = logging.getLogger(__name__)

SETTINGS = Settings.from_env()

app = Flask(__name__)


def _make_match() -> Match:
    return new_match(SETTINGS.first_player, SETTINGS.think_delay_ms)


STORE = SessionStore(_make_match, max_sessions=SETTINGS.max_sessions)

_FIRST: Dict[str, Optional[Mark]] = {
    "human": Mark.HUMAN, "computer": Mark.COMPUTER, "x": Mark.HUMAN, "o": Mark.COMPUTER,
    "alternate": None,
}


def _move_to_json(m: Move) -> Dict[str, Any]:
    return {"index": int(m.index), "player": m.player.value}


def _event_to_json(name: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {"event": name}
    for key, value in payload.items():
        if isinstance(value, Move):
            out.update(_move_to_json(value))
        elif isinstance(value, Mark):
            out["player" if key == "player" else "firstPlayer"] = value.value
        elif key == "outcome":
            out["outcome"] = value.value
        elif key == "line":
            out["line"] = list(value) if value else None
    return out


@contextmanager
def _recording(match: Match) -> Iterator[List[Dict[str, Any]]]:
    """Collects the events a match emits while the block runs."""
    recorded: List[Dict[str, Any]] = []
    unsubscribers = []
    for name in EVENT_NAMES:
        def listener(_name: str = name, **payload: Any) -> None:
            recorded.append(_event_to_json(_name, payload))
        unsubscribers.append(match.events.subscribe(name, listener))
    try:
        yield recorded
    finally:
        for unsubscribe in unsubscribers:
            unsubscribe()


def _json_body() -> Dict[str, Any]:
    """The request's JSON object; an absent or unparsable body counts as empty."""
    body = request.get_json(force=True, silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValueError("JSON object required")
    return body


def _parse_first(value: Any) -> Optional[str]:
    if value is None:
        return None
    key = str(value).strip().lower()
    if key not in _FIRST:
        raise ValueError(f"first must be 'human', 'computer' or 'alternate', got {value!r}")
    return key


def _opener(choice: Optional[str], previous: Optional[Mark] = None) -> Optional[Mark]:
    """Maps a parsed `first` to a Mark; None leaves the pick to the match policy."""
    if choice == "alternate" and previous is not None:
        return previous.opponent()
    return _FIRST.get(choice) if choice else None


def _session_id(body: Dict[str, Any]) -> str:
    sid = body.get("session")
    if not isinstance(sid, str) or not sid:
        raise ValueError("session required")
    return sid


def _match_payload(sid: str, match: Match, events: Optional[List[Dict[str, Any]]] = None,
                   moves: Optional[List[Move]] = None) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "ok": True,
        "session": sid,
        "state": match.to_dict(),
        "legalMoves": match.session.legal_moves(),
    }
    if events is not None:
        out["events"] = events
    if moves is not None:
        out["moves"] = [_move_to_json(m) for m in moves]
    return out


def _not_found(sid: str) -> Any:
    logger.warning("unknown session %s", sid)
    return jsonify({"ok": False, "error": "unknown session"}), 404


# ---------- Game API ----------

@app.get("/")
def index() -> Any:
    return jsonify({"ok": True, "service": "tictactoe", "sessions": len(STORE)})


@app.post("/api/new")
def api_new() -> Any:
    try:
        first = _opener(_parse_first(_json_body().get("first")))
    except ValueError as e:
        return jsonify({"ok": False, "error": str(e)}), 400
    with STORE.created() as (sid, match):
        with _recording(match) as events:
            moves = match.start(first)
        return jsonify(_match_payload(sid, match, events, moves))


@app.get("/api/state/<sid>")
def api_state(sid: str) -> Any:
    try:
        with STORE.locked(sid) as match:
            return jsonify(_match_payload(sid, match))
    except KeyError:
        return _not_found(sid)


@app.post("/api/move")
def api_move() -> Any:
    try:
        body = _json_body()
        sid = _session_id(body)
        cell = body.get("cell")
        if isinstance(cell, bool) or not isinstance(cell, int):
            raise ValueError("cell must be an integer 0-8")
    except ValueError as e:
        return jsonify({"ok": False, "error": str(e)}), 400
    try:
        with STORE.locked(sid) as match:
            try:
                with _recording(match) as events:
                    moves = match.play_human_turn(cell)
            except IllegalMove as e:
                logger.warning("session %s: illegal move %r: %s", sid, cell, e)
                return jsonify({"ok": False, "error": f"Illegal move: {e}",
                                "legalMoves": match.session.legal_moves()}), 400
            return jsonify(_match_payload(sid, match, events, moves))
    except KeyError:
        return _not_found(sid)


@app.post("/api/undo")
def api_undo() -> Any:
    try:
        sid = _session_id(_json_body())
    except ValueError as e:
        return jsonify({"ok": False, "error": str(e)}), 400
    try:
        with STORE.locked(sid) as match:
            try:
                with _recording(match) as events:
                    undone = match.undo()
            except UndoUnavailable as e:
                logger.warning("session %s: undo rejected: %s", sid, e)
                return jsonify({"ok": False, "error": f"Undo unavailable: {e}"}), 409
            payload = _match_payload(sid, match, events)
            payload["undone"] = [_move_to_json(m) for m in undone]
            return jsonify(payload)
    except KeyError:
        return _not_found(sid)


@app.post("/api/restart")
def api_restart() -> Any:
    try:
        body = _json_body()
        sid = _session_id(body)
        choice = _parse_first(body.get("first"))
    except ValueError as e:
        return jsonify({"ok": False, "error": str(e)}), 400
    try:
        with STORE.locked(sid) as match:
            first = _opener(choice, match.session.first_player)
            with _recording(match) as events:
                moves = match.restart(first)
            return jsonify(_match_payload(sid, match, events, moves))
    except KeyError:
        return _not_found(sid)


@app.post("/api/analyze")
def api_analyze() -> Any:
    try:
        cells_in = _json_body().get("cells")
    except ValueError as e:
        return jsonify({"ok": False, "error": str(e)}), 400
    if not isinstance(cells_in, (list, str)):
        return jsonify({"ok": False, "error": "cells required"}), 400
    try:
        cells = validate_cells(cells_in)
    except ValueError as e:
        return jsonify({"ok": False, "error": f"bad board: {e}"}), 400
    status = classify(cells)
    out: Dict[str, Any] = {
        "ok": True,
        "cells": to_symbols(cells),
        "status": status.kind,
        "winner": status.winner.value if status.winner else None,
        "line": list(status.line) if status.line else None,
    }
    if status.is_terminal:
        out["ok"] = False
        out["error"] = "board is terminal"
        return jsonify(out), 422
    scores = score_moves(cells)
    out["scores"] = {str(i): s for i, s in scores.items()}
    out["best"] = best_move(cells)
    return jsonify(out)


# Entrypoint for "python app.py"
if __name__ == "__main__":
    configure_logging(SETTINGS.log_level)
    app.run(host="0.0.0.0", port=SETTINGS.port, debug=SETTINGS.debug)
