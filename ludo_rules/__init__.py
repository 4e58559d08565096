from .board import BoardModel
from .config import config
from .dice import Dice, LoadedDice
from .errors import (
    ConfigurationError,
    IllegalActionError,
    InvariantViolation,
    LudoRulesError,
)
from .game import Game, init_game
from .piece import Piece
from .player import Player
from .rules import MovementRules
from .simulator import SimulationSummary, Simulator
from .starting import ResolverState, StartingPlayerResolver
from .state import GameSnapshot, GameState
from .turn import TurnController
from .types import (
    HOME,
    Color,
    Lane,
    MoveOutcome,
    Phase,
    RollOutcome,
    SelectionOutcome,
    Tile,
    TurnState,
)
from .win import WinDetector

__all__ = [
    "HOME",
    "config",
    "BoardModel",
    "Color",
    "ConfigurationError",
    "Dice",
    "Game",
    "GameSnapshot",
    "GameState",
    "IllegalActionError",
    "init_game",
    "InvariantViolation",
    "Lane",
    "LoadedDice",
    "LudoRulesError",
    "MoveOutcome",
    "MovementRules",
    "Phase",
    "Piece",
    "Player",
    "ResolverState",
    "RollOutcome",
    "SelectionOutcome",
    "SimulationSummary",
    "Simulator",
    "StartingPlayerResolver",
    "Tile",
    "TurnController",
    "TurnState",
    "WinDetector",
]
