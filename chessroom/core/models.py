"""
Boundary layer data model(s).

These objects are used to communicate with the Service.
Both the domain layer (Game) and the db layer (repository) convert to/from the model defined here.
(Decouples the data model specific to the DB layer or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field


@dataclass
class GameModel:
    """
    Transport-safe representation of a chess game used between Service, DB, and Game layers.

    The game is stored as the list of moves played (coordinate notation, ex. "e2e4", "e7e8q").
    Replaying them from the starting position rebuilds every piece with its original id.
    """

    moves_uci: list[str] = field(default_factory=list)
    settings: dict[str, bool] = field(default_factory=dict)
    status: str = "in progress"
