from __future__ import annotations


class GateError(Exception):
    """A request the session core refuses.

    Carries the HTTP status and reply `status` it is rendered with.
    """

    kind: str = "Error"
    http_status: int = 400
    reply_status: str = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(GateError):
    kind = "NotFound"
    http_status = 404


class EliminatedError(GateError):
    kind = "Eliminated"
    http_status = 400
    reply_status = "lost"


class TurnViolationError(GateError):
    kind = "TurnViolation"
    http_status = 403

    def __init__(self, current_player_id: str) -> None:
        super().__init__(f"It is currently {current_player_id}'s turn. Please wait.")
        self.current_player_id = current_player_id


class InvalidInputError(GateError):
    kind = "InvalidInput"
    http_status = 400
