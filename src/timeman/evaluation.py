"""
Adapter between position evaluators and the time manager.
"""

from typing import Callable, Optional

import chess

# Evaluators score from white's perspective, in centipawns
Evaluator = Callable[[chess.Board], float]

PIECE_VALUES = {
    chess.PAWN: 100.0,
    chess.KNIGHT: 320.0,
    chess.BISHOP: 330.0,
    chess.ROOK: 500.0,
    chess.QUEEN: 900.0,
    chess.KING: 0.0,
}


def material_balance(board: chess.Board) -> float:
    """Plain material count, positive = white advantage."""
    score = 0.0
    for piece_type, value in PIECE_VALUES.items():
        score += value * len(board.pieces(piece_type, chess.WHITE))
        score -= value * len(board.pieces(piece_type, chess.BLACK))
    return score


def side_to_move_score(board: chess.Board, evaluator: Optional[Evaluator] = None) -> Optional[float]:
    """
    Evaluate a position from the side to move's point of view.

    Args:
        board: Current position
        evaluator: White-perspective evaluator (None disables the signal)

    Returns:
        Centipawns, positive when the side to move is ahead, or None
    """
    if evaluator is None or board.is_game_over():
        return None
    score = float(evaluator(board))
    return score if board.turn == chess.WHITE else -score
