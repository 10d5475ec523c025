"""Legality filter: does a pseudo-legal move leave the mover's king safe?

Moves are tried on a disposable copy of the board with an exact
:func:`simulate` / :func:`revert` pair; the position passed in is never
touched.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from gambit.core.board import Board
from gambit.core.errors import InvariantViolation
from gambit.core.move import Move
from gambit.core.move_generator import (
    castling_rook_move,
    is_castling,
    is_en_passant,
    is_in_check,
    is_square_attacked,
    pseudo_moves,
)
from gambit.core.piece import Piece
from gambit.core.types import Square

if TYPE_CHECKING:
    from gambit.core.position import Position


@dataclass(slots=True)
class Simulation:
    """Everything :func:`revert` needs to undo a :func:`simulate` call."""

    move: Move
    moved: Piece
    captured: Piece | None
    rook: Piece | None = None
    rook_to: Square | None = None


def simulate(board: Board, move: Move) -> Simulation:
    """Apply *move* to *board* in place without committing it.

    Handles the en passant capture and the castling rook. Move counts are
    left alone.
    """
    piece = board[move.from_sq]
    if piece is None:
        raise ValueError(f"No piece on {move.from_sq}")

    captured_sq = move.to_sq
    if is_en_passant(board, piece, move.to_sq):
        captured_sq = Square(move.to_sq.file, move.from_sq.rank)
    captured = board.remove(captured_sq)

    sim = Simulation(move=move, moved=piece, captured=captured)

    if is_castling(piece, move.to_sq):
        rook_from, rook_to = castling_rook_move(move.from_sq, move.to_sq)
        rook = board.remove(rook_from)
        if rook is None:
            raise InvariantViolation(f"Castling {move} without a rook on {rook_from}")
        board.put(rook.relocated(rook_to))
        sim.rook = rook
        sim.rook_to = rook_to

    board.remove(move.from_sq)
    placed = piece.relocated(move.to_sq)
    if move.promotion is not None:
        placed = placed.promoted(move.promotion)
    board.put(placed)
    return sim


def revert(board: Board, sim: Simulation) -> None:
    """Undo :func:`simulate`, restoring *board* exactly."""
    board.remove(sim.move.to_sq)
    if sim.rook is not None and sim.rook_to is not None:
        board.remove(sim.rook_to)
        board.put(sim.rook)
    board.put(sim.moved)
    if sim.captured is not None:
        board.put(sim.captured)


def king_safe_after(board: Board, move: Move, *, strict_castling: bool = True) -> bool:
    """Whether *move* keeps the mover's king unattacked.

    With *strict_castling* a castling king may not start in check nor pass
    over an attacked square.
    """
    piece = board[move.from_sq]
    if piece is None:
        return False

    if strict_castling and is_castling(piece, move.to_sq):
        opponent = piece.color.opposite
        step = 1 if move.to_sq.file > move.from_sq.file else -1
        passed = Square(move.from_sq.file + step, move.from_sq.rank)
        if is_square_attacked(board, move.from_sq, opponent):
            return False
        if is_square_attacked(board, passed, opponent):
            return False

    sim = simulate(board, move)
    try:
        return not is_in_check(board, piece.color)
    finally:
        revert(board, sim)


def is_legal(position: Position, move: Move) -> bool:
    """Whether pseudo-legal *move* leaves the mover's own king safe."""
    return king_safe_after(
        position.board.copy(), move, strict_castling=position.strict_castling
    )


def legal_destinations(
    position: Position,
    piece: Piece,
    *,
    scratch: Board | None = None,
) -> set[Square]:
    """Pseudo-moves of *piece* filtered by king safety.

    *scratch* is a disposable copy of ``position.board`` to simulate on; pass
    one to share it across several pieces.
    """
    board = scratch if scratch is not None else position.board.copy()
    last_move = position.last_move if piece.color == position.side_to_move else None
    return {
        to_sq
        for to_sq in pseudo_moves(board, piece, last_move)
        if king_safe_after(
            board,
            Move(piece.square, to_sq),
            strict_castling=position.strict_castling,
        )
    }
