from __future__ import annotations

import logging
import math
import os
import threading
import time
import uuid
from typing import Any, Callable, Dict, Optional, Tuple

from flask import Flask, current_app, jsonify, request

from bubble_core.aim import aim_from_drag
from bubble_core.config import GameConfig, config_from_env, log_level_from_env, seed_from_env
from bubble_core.entities import Bubble, PopAnimation, Projectile
from bubble_core.session import GameSession, Snapshot

logger = logging.getLogger(__name__)

STORE_KEY = "bubble_sessions"
DEFAULT_SESSION_TTL = float(os.getenv("BUBBLE_SESSION_TTL", "3600"))


class _Entry:
    """A session plus the lock and wall-clock mark used to advance it lazily."""

    def __init__(self, session: GameSession, now: float) -> None:
        self.session = session
        self.lock = threading.Lock()
        self.last = now

    def sync(self, now: float) -> int:
        elapsed = now - self.last
        self.last = now
        return self.session.advance(elapsed)


class SessionStore:
    """
    Owns every live session. Simulation time is caught up from `clock` at the
    start of each request, so no background timer ever touches a session.
    """

    def __init__(self, config: GameConfig, clock: Callable[[], float] = time.monotonic,
                 default_seed: Optional[int] = None, ttl: float = DEFAULT_SESSION_TTL) -> None:
        self.config = config
        self.clock = clock
        self.default_seed = default_seed
        self.ttl = ttl
        self._lock = threading.Lock()
        self._entries: Dict[str, _Entry] = {}

    def create(self, seed: Optional[int] = None) -> Tuple[str, _Entry]:
        sid = uuid.uuid4().hex
        if seed is None:
            seed = self.default_seed
        now = self.clock()
        self.evict_idle(now)
        entry = _Entry(GameSession(config=self.config, seed=seed), now)
        with self._lock:
            self._entries[sid] = entry
        logger.info("created session %s (seed=%s)", sid, seed)
        return sid, entry

    def get(self, sid: str) -> Optional[_Entry]:
        with self._lock:
            return self._entries.get(sid)

    def evict_idle(self, now: float) -> int:
        """Forgets sessions untouched for longer than ttl seconds. Returns how many were dropped."""
        with self._lock:
            stale = [sid for sid, e in self._entries.items() if now - e.last > self.ttl]
            for sid in stale:
                del self._entries[sid]
        if stale:
            logger.info("evicted %d idle sessions", len(stale))
        return len(stale)

    def drop(self, sid: str) -> bool:
        with self._lock:
            return self._entries.pop(sid, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def create_app(config: Optional[GameConfig] = None, clock: Callable[[], float] = time.monotonic) -> Flask:
    flask_app = Flask(__name__)
    flask_app.extensions[STORE_KEY] = SessionStore(config or config_from_env(), clock=clock,
                                                   default_seed=seed_from_env())
    _register_routes(flask_app)
    return flask_app


def _store() -> SessionStore:
    return current_app.extensions[STORE_KEY]


# ---------- JSON helpers ----------

def bubble_to_json(b: Bubble) -> Dict[str, Any]:
    return {"id": b.id, "row": int(b.row), "col": int(b.col), "x": b.x, "y": b.y,
            "color": b.color, "radius": b.radius}


def projectile_to_json(p: Optional[Projectile]) -> Optional[Dict[str, Any]]:
    if p is None:
        return None
    return {"x": p.x, "y": p.y, "vx": p.vx, "vy": p.vy, "color": p.color, "radius": p.radius}


def animation_to_json(a: PopAnimation) -> Dict[str, Any]:
    return {"x": a.x, "y": a.y, "color": a.color, "frame": int(a.frame)}


def snapshot_to_json(s: Snapshot) -> Dict[str, Any]:
    return {
        "status": s.status.value,
        "cause": s.cause.value if s.cause is not None else None,
        "bubbles": [bubble_to_json(b) for b in s.bubbles],
        "projectile": projectile_to_json(s.projectile),
        "animations": [animation_to_json(a) for a in s.animations],
        "score": int(s.score),
        "timeLeft": int(s.time_left),
        "timePlayed": int(s.time_played),
        "nextColor": s.next_color,
        "launcher": [s.launcher[0], s.launcher[1]],
        "ticks": int(s.ticks),
    }


def config_to_json(c: GameConfig) -> Dict[str, Any]:
    return {
        "boardWidth": c.board_width,
        "boardHeight": c.board_height,
        "bubbleRadius": c.bubble_radius,
        "rows": c.rows,
        "cols": c.cols,
        "palette": list(c.palette),
        "countdownSeconds": c.countdown_seconds,
        "tickRate": c.tick_rate,
        "popLifetime": c.pop_lifetime,
        "launcher": list(c.launcher),
        "aimArc": [c.aim_min_angle, c.aim_max_angle],
    }


def _error(message: str, status: int) -> Any:
    return jsonify({"ok": False, "error": message}), status


def _body() -> Dict[str, Any]:
    body = request.get_json(force=True, silent=True)
    return body if isinstance(body, dict) else {}


def _number(value: Any) -> float:
    out = float(value)
    if not math.isfinite(out):
        raise ValueError(f"expected a finite number, got {value!r}")
    return out


def _pair(value: Any) -> Tuple[float, float]:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValueError("expected a pair of numbers")
    return _number(value[0]), _number(value[1])


def _entry_for(body: Dict[str, Any]) -> Tuple[Optional[_Entry], Any]:
    sid = body.get("sessionId")
    if not sid:
        return None, _error("sessionId required", 404)
    entry = _store().get(str(sid))
    if entry is None:
        return None, _error("unknown session", 404)
    return entry, None


# ---------- Routes ----------

def _register_routes(flask_app: Flask) -> None:

    @flask_app.get("/api/config")
    def api_config() -> Any:
        return jsonify({"ok": True, "config": config_to_json(_store().config)})

    @flask_app.post("/api/new")
    def api_new() -> Any:
        body = _body()
        seed = body.get("seed", None)
        if seed is not None:
            try:
                seed = int(seed)
            except (TypeError, ValueError):
                return _error("seed must be an integer", 400)
        sid, entry = _store().create(seed=seed)
        with entry.lock:
            return jsonify({"ok": True, "sessionId": sid, "state": snapshot_to_json(entry.session.snapshot())})

    @flask_app.post("/api/start")
    def api_start() -> Any:
        entry, err = _entry_for(_body())
        if entry is None:
            return err
        with entry.lock:
            entry.sync(_store().clock())
            started = entry.session.start()
            return jsonify({"ok": True, "started": started, "state": snapshot_to_json(entry.session.snapshot())})

    @flask_app.post("/api/reset")
    def api_reset() -> Any:
        entry, err = _entry_for(_body())
        if entry is None:
            return err
        with entry.lock:
            entry.session.reset()
            entry.last = _store().clock()
            return jsonify({"ok": True, "state": snapshot_to_json(entry.session.snapshot())})

    @flask_app.post("/api/fire")
    def api_fire() -> Any:
        body = _body()
        entry, err = _entry_for(body)
        if entry is None:
            return err
        session = entry.session
        try:
            if "drag" in body:
                aim = aim_from_drag(*_pair(body["drag"]), config=session.config)
                shot: Optional[Tuple[str, Any, float]] = None if aim is None else ("angle", aim[0], aim[1])
            elif "direction" in body:
                shot = ("direction", _pair(body["direction"]), _number(body.get("power", 0.0)))
            elif "angle" in body:
                shot = ("angle", _number(body["angle"]), _number(body.get("power", 0.0)))
            else:
                return _error("angle, direction or drag required", 400)
        except (TypeError, ValueError) as e:
            return _error(f"bad shot: {e}", 400)

        with entry.lock:
            entry.sync(_store().clock())
            fired = False
            if shot is not None:
                kind, aim_value, power = shot
                if kind == "angle":
                    fired = session.fire_angle(aim_value, power)
                else:
                    fired = session.fire(aim_value, power)
            return jsonify({"ok": True, "fired": fired, "state": snapshot_to_json(session.snapshot())})

    @flask_app.post("/api/close")
    def api_close() -> Any:
        body = _body()
        sid = body.get("sessionId")
        if not sid or not _store().drop(str(sid)):
            return _error("unknown session", 404)
        return jsonify({"ok": True})

    @flask_app.post("/api/state")
    def api_state() -> Any:
        entry, err = _entry_for(_body())
        if entry is None:
            return err
        with entry.lock:
            entry.sync(_store().clock())
            return jsonify({"ok": True, "state": snapshot_to_json(entry.session.snapshot())})


app = create_app()


if __name__ == "__main__":
    logging.basicConfig(level=log_level_from_env("INFO"),
                        format="%(asctime)s %(name)s %(levelname)s %(message)s")
    debug = os.getenv("FLASK_DEBUG", os.getenv("DEBUG", "0")).lower() in ("1", "true", "yes", "on")
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=debug)
