"""Min-conflicts local search for the N-Queens problem."""

from .board import ConflictBoard, DEFAULT_RESTART_FACTOR, INIT_POLICIES
from .errors import (
    BoardSolvedError,
    InvalidBoardSizeError,
    MinConflictsError,
    SearchLimitExceeded,
)
from .solver import MCResult, mc_nqueens
from .utils import (
    conflicts,
    conflicts_on2,
    ensure_solvable_size,
    has_solution,
    is_valid_solution,
    render_board,
)

__version__ = "0.1.0"

__all__ = [
    "ConflictBoard",
    "DEFAULT_RESTART_FACTOR",
    "INIT_POLICIES",
    "MCResult",
    "mc_nqueens",
    "MinConflictsError",
    "InvalidBoardSizeError",
    "SearchLimitExceeded",
    "BoardSolvedError",
    "conflicts",
    "conflicts_on2",
    "ensure_solvable_size",
    "has_solution",
    "is_valid_solution",
    "render_board",
]
