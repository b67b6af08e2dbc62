"""
Errors raised at the seams of the application (service, persistence, request validation).

The rules engine itself never raises for interactive misuse: illegal moves and malformed squares
are reported through False / None / empty return values.
"""


class ChessRoomError(Exception):
    """Base class for every error raised by this package."""


class GameError(ChessRoomError):
    """Something is wrong with a game as a whole (rather than with a single move attempt)."""


class GameStateError(GameError):
    """A stored game cannot be turned back into a playable Game."""


class RepositoryError(ChessRoomError):
    """Persistence layer could not find / store the requested record."""


# NOTE: not a ValueError on purpose. Pydantic wraps ValueErrors raised inside validators into a
# ValidationError, while this one propagates unchanged to the caller.
class InvalidRequestError(ChessRoomError):
    """Request data that can never be interpreted (ex. a square name like 'e44')."""
