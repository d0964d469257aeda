from __future__ import annotations

import functools
import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from ..errors import GameError, InternalError, InvalidRequestError, SessionNotFoundError
from ..game.core import GameService, GameSession
from .leaderboard import JsonFileLeaderboard, Leaderboard, MemoryLeaderboard
from .store import SessionStore


logger = logging.getLogger(__name__)

Response = Dict[str, Any]


@dataclass
class ServerConfig:
    leaderboard_path: Optional[Union[str, Path]] = None
    max_sessions: Optional[int] = None


def failure(error: GameError) -> Response:
    response: Response = {
        "success": False,
        "error": error.code,
        "message": str(error),
        "status": error.status,
    }
    response.update(error.details())
    return response


def _responds(method: Callable[..., Response]) -> Callable[..., Response]:
    """Turn raised errors into failure records instead of propagating them."""

    @functools.wraps(method)
    def wrapper(self: "GameAPI", *args: Any, **kwargs: Any) -> Response:
        try:
            response = method(self, *args, **kwargs)
        except GameError as exc:
            logger.debug("%s rejected: %s", method.__name__, exc)
            return failure(exc)
        except Exception as exc:
            logger.exception("Unexpected error in %s", method.__name__)
            return failure(InternalError(str(exc)))
        response.setdefault("success", True)
        return response

    return wrapper


def _require_str(request: Dict[str, Any], key: str) -> str:
    value = request.get(key)
    if not isinstance(value, str) or not value:
        raise InvalidRequestError(f"Missing or invalid field: {key}")
    return value


def _require_int(request: Dict[str, Any], key: str) -> int:
    value = request.get(key)
    # JSON decoders may hand back 3.0 for 3
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRequestError(f"Missing or non-integer field: {key}")
    return value


def _require_request(request: Any) -> Dict[str, Any]:
    if request is None:
        return {}
    if not isinstance(request, dict):
        raise InvalidRequestError("Request must be a mapping")
    return request


class GameAPI:
    """Transport-agnostic session API.

    Every method takes and returns plain dicts. Failures never raise; they
    come back as ``{"success": False, "error": code, "message": ...}``.
    """

    def __init__(
        self,
        service: Optional[GameService] = None,
        store: Optional[SessionStore] = None,
        leaderboard: Optional[Leaderboard] = None,
        config: Optional[ServerConfig] = None,
    ) -> None:
        self.config = config or ServerConfig()
        self.service = service or GameService()
        self.store = store or SessionStore(max_sessions=self.config.max_sessions)
        if leaderboard is None:
            if self.config.leaderboard_path is not None:
                leaderboard = JsonFileLeaderboard(self.config.leaderboard_path)
            else:
                leaderboard = MemoryLeaderboard()
        self.leaderboard = leaderboard

    def _check_live(self, session: GameSession) -> None:
        if not self.store.contains(session):
            raise SessionNotFoundError(session.session_id)

    @_responds
    def init(self, request: Optional[Dict[str, Any]] = None) -> Response:
        request = _require_request(request)
        session_id = request.get("sessionId")
        if session_id is None:
            session_id = f"session-{uuid.uuid4()}"
        elif not isinstance(session_id, str) or not session_id:
            raise InvalidRequestError("Invalid field: sessionId")
        session = self.service.new_session(session_id)
        with session.lock:
            self.store.add(session)
            state = self.service.snapshot(session)
        return {"sessionId": session_id, **state}

    @_responds
    def place(self, request: Dict[str, Any]) -> Response:
        request = _require_request(request)
        session_id = _require_str(request, "sessionId")
        piece = request.get("piece")
        if isinstance(piece, dict):
            piece = piece.get("matrix")
        if piece is None:
            raise InvalidRequestError("Missing or invalid field: piece")
        row = _require_int(request, "row")
        col = _require_int(request, "col")

        session = self.store.get(session_id)
        with session.lock:
            self._check_live(session)
            result = self.service.place_piece(session, piece, row, col)
            state = self.service.snapshot(session)
        return {
            "board": state["board"],
            "score": state["score"],
            "pieces": state["pieces"],
            "lineCleared": result.lines.to_dict(),
            "lineClearScore": result.line_clear_score,
            "isGameOver": result.game_over,
            "needsNewPieces": result.needs_new_pieces,
        }

    @_responds
    def request_new_pieces(self, request: Dict[str, Any]) -> Response:
        request = _require_request(request)
        session_id = _require_str(request, "sessionId")
        session = self.store.get(session_id)
        with session.lock:
            self._check_live(session)
            self.service.replenish(session)
            state = self.service.snapshot(session)
        return {"pieces": state["pieces"], "isGameOver": state["isGameOver"]}

    @_responds
    def get_state(self, session_id: str) -> Response:
        if not isinstance(session_id, str) or not session_id:
            raise InvalidRequestError("Missing or invalid field: sessionId")
        session = self.store.get(session_id)
        with session.lock:
            return self.service.snapshot(session)

    @_responds
    def get_top_record(self) -> Response:
        record = self.leaderboard.top()
        return {"rank": record.to_dict() if record is not None else None}

    @_responds
    def save_top_record(self, request: Dict[str, Any]) -> Response:
        request = _require_request(request)
        name = request.get("name")
        if not isinstance(name, str):
            raise InvalidRequestError("Missing or invalid field: name")
        score = _require_int(request, "score")
        if score < 0:
            raise InvalidRequestError("Score must be non-negative")
        record = self.leaderboard.save(name, score)
        return {"rank": record.to_dict()}
