"""Failures reported to callers of the game engine and session API.

Every error is local and recoverable: the engine raises one of these before
touching state (or after restoring it), and the API layer turns it into a
failure record using ``code`` and ``status``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class GameError(Exception):
    code = "error"
    status = 400

    def details(self) -> Dict[str, Any]:
        return {}


class SessionNotFoundError(GameError):
    code = "not_found"
    status = 404

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Game session not found: {session_id}")
        self.session_id = session_id


class InvalidRequestError(GameError):
    code = "invalid_request"


class GameOverError(InvalidRequestError):
    code = "game_over"

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Game session {session_id} is over")
        self.session_id = session_id


class InvalidPieceError(GameError):
    code = "invalid_piece"

    def __init__(self, message: str = "Invalid piece - not in current pieces or already used") -> None:
        super().__init__(message)


class InvalidPlacementError(GameError):
    code = "invalid_placement"

    def __init__(self, row: int, col: int, reason: str) -> None:
        super().__init__(f"Cannot place piece at ({row}, {col}): {reason}")
        self.row = row
        self.col = col
        self.reason = reason

    def details(self) -> Dict[str, Any]:
        return {"row": self.row, "col": self.col}


class PrematureReplenishError(GameError):
    code = "premature_replenish"

    def __init__(self, remaining: int) -> None:
        super().__init__(
            f"Cannot request new pieces - {remaining} current piece(s) not used yet"
        )
        self.remaining = remaining

    def details(self) -> Dict[str, Any]:
        return {"remainingPieces": self.remaining}


class RecordNotHigherError(GameError):
    code = "record_not_higher"

    def __init__(self, score: int, current: Optional[int]) -> None:
        super().__init__(f"Score {score} is not higher than current record {current}")
        self.score = score
        self.current = current

    def details(self) -> Dict[str, Any]:
        return {"currentScore": self.current}


class InternalError(GameError):
    code = "internal"
    status = 500
