"""Pseudo-legal move generation and attack detection.

Every generator is a pure function of ``(board, piece, last_move)`` and is
looked up by piece kind; pieces hold no reference back to the board.
"""

from __future__ import annotations

from collections.abc import Callable

from gambit.core.board import Board
from gambit.core.enums import Color, PieceType
from gambit.core.move import LastMove
from gambit.core.piece import Piece
from gambit.core.types import ALL_SQUARES, Square

KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

MoveGen = Callable[[Board, Piece, "LastMove | None"], set[Square]]


# -- Precomputed lookup tables ---------------------------------------------


def _build_targets(
    offsets: tuple[tuple[int, int], ...],
) -> tuple[tuple[Square, ...], ...]:
    targets: list[tuple[Square, ...]] = []
    for sq in ALL_SQUARES:
        moves: list[Square] = []
        for df, dr in offsets:
            to_sq = sq.offset(df, dr)
            if to_sq is not None:
                moves.append(to_sq)
        targets.append(tuple(moves))
    return tuple(targets)


def _build_rays(
    directions: tuple[tuple[int, int], ...],
) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    rays_per_square: list[tuple[tuple[Square, ...], ...]] = []
    for sq in ALL_SQUARES:
        square_rays: list[tuple[Square, ...]] = []
        for df, dr in directions:
            ray: list[Square] = []
            to_sq = sq.offset(df, dr)
            while to_sq is not None:
                ray.append(to_sq)
                to_sq = to_sq.offset(df, dr)
            square_rays.append(tuple(ray))
        rays_per_square.append(tuple(square_rays))
    return tuple(rays_per_square)


_KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
_KING_TARGETS = _build_targets(KING_OFFSETS)

_BISHOP_RAYS = _build_rays(BISHOP_DIRS)
_ROOK_RAYS = _build_rays(ROOK_DIRS)
_QUEEN_RAYS = _build_rays(QUEEN_DIRS)

_SLIDER_RAYS: dict[PieceType, tuple[tuple[tuple[Square, ...], ...], ...]] = {
    PieceType.BISHOP: _BISHOP_RAYS,
    PieceType.ROOK: _ROOK_RAYS,
    PieceType.QUEEN: _QUEEN_RAYS,
}


def king_zone(sq: Square) -> tuple[Square, ...]:
    """The (up to 8) squares adjacent to *sq*."""
    return _KING_TARGETS[sq.idx]


# -- Public API -------------------------------------------------------------


def pseudo_moves(
    board: Board,
    piece: Piece,
    last_move: LastMove | None = None,
) -> set[Square]:
    """Destinations *piece* may reach ignoring the safety of its own king."""
    return _GENERATORS[piece.kind](board, piece, last_move)


def en_passant_target(
    board: Board,
    pawn: Piece,
    last_move: LastMove | None,
) -> Square | None:
    """Square *pawn* may capture en passant onto, if any.

    Only available when the previous move was an enemy pawn's double step
    that landed beside *pawn*; the target is the square that pawn skipped.
    """
    if pawn.kind != PieceType.PAWN or last_move is None:
        return None
    if last_move.color == pawn.color or not last_move.is_pawn_double_step:
        return None

    landed = last_move.to_sq
    if landed.rank != pawn.square.rank or abs(landed.file - pawn.square.file) != 1:
        return None
    victim = board[landed]
    if victim is None or victim.kind != PieceType.PAWN or victim.color == pawn.color:
        return None

    behind = Square(landed.file, (last_move.from_sq.rank + landed.rank) // 2)
    if not board.is_empty(behind):
        return None
    return behind


def castling_rook_move(king_from: Square, king_to: Square) -> tuple[Square, Square]:
    """Rook origin and destination for a two-square king move."""
    step = 1 if king_to.file > king_from.file else -1
    rook_from = Square(7 if step > 0 else 0, king_from.rank)
    rook_to = Square(king_from.file + step, king_from.rank)
    return rook_from, rook_to


def is_castling(piece: Piece, to_sq: Square) -> bool:
    return (
        piece.kind == PieceType.KING
        and to_sq.rank == piece.square.rank
        and abs(to_sq.file - piece.square.file) == 2
    )


def is_en_passant(board: Board, piece: Piece, to_sq: Square) -> bool:
    """A pawn moving diagonally onto an empty square captures en passant."""
    return (
        piece.kind == PieceType.PAWN
        and to_sq.file != piece.square.file
        and board.is_empty(to_sq)
    )


def is_square_attacked(board: Board, sq: Square, by_color: Color) -> bool:
    """Is *sq* attacked by any piece of *by_color*?"""
    pawn_rank_offset = -by_color.forward
    for df in (-1, 1):
        src = sq.offset(df, pawn_rank_offset)
        if src is None:
            continue
        piece = board[src]
        if (
            piece is not None
            and piece.color == by_color
            and piece.kind == PieceType.PAWN
        ):
            return True

    for src in _KNIGHT_TARGETS[sq.idx]:
        piece = board[src]
        if (
            piece is not None
            and piece.color == by_color
            and piece.kind == PieceType.KNIGHT
        ):
            return True

    for src in _KING_TARGETS[sq.idx]:
        piece = board[src]
        if piece is not None and piece.color == by_color and piece.kind == PieceType.KING:
            return True

    for ray in _BISHOP_RAYS[sq.idx]:
        for src in ray:
            piece = board[src]
            if piece is None:
                continue
            if piece.color == by_color and piece.kind in (
                PieceType.BISHOP,
                PieceType.QUEEN,
            ):
                return True
            break

    for ray in _ROOK_RAYS[sq.idx]:
        for src in ray:
            piece = board[src]
            if piece is None:
                continue
            if piece.color == by_color and piece.kind in (
                PieceType.ROOK,
                PieceType.QUEEN,
            ):
                return True
            break

    return False


def is_in_check(board: Board, color: Color) -> bool:
    """Is *color*'s king attacked by the opponent?"""
    return is_square_attacked(board, board.king_square(color), color.opposite)


def attacked_squares(board: Board, piece: Piece) -> set[Square]:
    """Squares *piece* attacks or defends, whoever stands on them.

    Differs from :func:`pseudo_moves` in that pawns cover both forward
    diagonals, friendly-occupied squares count as covered, and castling is
    never included.
    """
    sq = piece.square
    if piece.kind == PieceType.PAWN:
        covered = set()
        for df in (-1, 1):
            to_sq = sq.offset(df, piece.color.forward)
            if to_sq is not None:
                covered.add(to_sq)
        return covered
    if piece.kind == PieceType.KNIGHT:
        return set(_KNIGHT_TARGETS[sq.idx])
    if piece.kind == PieceType.KING:
        return set(_KING_TARGETS[sq.idx])

    covered = set()
    for ray in _SLIDER_RAYS[piece.kind][sq.idx]:
        for to_sq in ray:
            covered.add(to_sq)
            if board[to_sq] is not None:
                break
    return covered


# -- Piece-specific generators (private) -----------------------------------


def _pawn_moves(board: Board, pawn: Piece, last_move: LastMove | None) -> set[Square]:
    moves: set[Square] = set()
    sq = pawn.square
    step = pawn.color.forward

    one_step = sq.offset(0, step)
    if one_step is not None and board.is_empty(one_step):
        moves.add(one_step)
        if sq.rank == pawn.color.pawn_rank:
            two_step = sq.offset(0, 2 * step)
            if two_step is not None and board.is_empty(two_step):
                moves.add(two_step)

    for df in (-1, 1):
        cap_sq = sq.offset(df, step)
        if cap_sq is None:
            continue
        target = board[cap_sq]
        if target is not None and target.color != pawn.color:
            moves.add(cap_sq)

    ep_sq = en_passant_target(board, pawn, last_move)
    if ep_sq is not None:
        moves.add(ep_sq)
    return moves


def _knight_moves(
    board: Board, knight: Piece, _last_move: LastMove | None
) -> set[Square]:
    moves: set[Square] = set()
    for to_sq in _KNIGHT_TARGETS[knight.square.idx]:
        target = board[to_sq]
        if target is None or target.color != knight.color:
            moves.add(to_sq)
    return moves


def _sliding_moves(
    board: Board, piece: Piece, _last_move: LastMove | None
) -> set[Square]:
    moves: set[Square] = set()
    for ray in _SLIDER_RAYS[piece.kind][piece.square.idx]:
        for to_sq in ray:
            target = board[to_sq]
            if target is None:
                moves.add(to_sq)
                continue
            if target.color != piece.color:
                moves.add(to_sq)
            break
    return moves


def _king_moves(board: Board, king: Piece, _last_move: LastMove | None) -> set[Square]:
    moves: set[Square] = set()
    for to_sq in _KING_TARGETS[king.square.idx]:
        target = board[to_sq]
        if target is None or target.color != king.color:
            moves.add(to_sq)
    moves |= castling_moves(board, king)
    return moves


def castling_moves(board: Board, king: Piece) -> set[Square]:
    """Castling destinations by occupancy alone.

    Requires an unmoved king on its back rank, an unmoved same-colour rook in
    the corner, and empty squares strictly between the two. Whether the
    king's path is attacked is left to the legality filter.
    """
    moves: set[Square] = set()
    if king.move_count != 0 or king.square.rank != king.color.back_rank:
        return moves

    rank = king.square.rank
    for rook_file in (7, 0):
        if abs(rook_file - king.square.file) <= 2:
            continue
        rook = board[Square(rook_file, rank)]
        if (
            rook is None
            or rook.kind != PieceType.ROOK
            or rook.color != king.color
            or rook.move_count != 0
        ):
            continue

        lo, hi = sorted((king.square.file, rook_file))
        if any(not board.is_empty(Square(f, rank)) for f in range(lo + 1, hi)):
            continue

        step = 1 if rook_file > king.square.file else -1
        moves.add(Square(king.square.file + 2 * step, rank))
    return moves


_GENERATORS: dict[PieceType, MoveGen] = {
    PieceType.PAWN: _pawn_moves,
    PieceType.KNIGHT: _knight_moves,
    PieceType.BISHOP: _sliding_moves,
    PieceType.ROOK: _sliding_moves,
    PieceType.QUEEN: _sliding_moves,
    PieceType.KING: _king_moves,
}
