"""Perft tests plus per-piece pseudo-move checks.

Reference values: https://www.chessprogramming.org/Perft_Results
"""

import pytest

from gambit.core.board import Board
from gambit.core.enums import Color, PieceType
from gambit.core.move import LastMove
from gambit.core.move_generator import (
    attacked_squares,
    castling_moves,
    en_passant_target,
    is_in_check,
    is_square_attacked,
    pseudo_moves,
)
from gambit.core.piece import Piece
from gambit.core.position import Position
from gambit.core.rules import Rules
from gambit.core.types import (
    A1, B1, C1, D1, E1, F1, G1, H1,
    D4, D5, D6, D7, E4, E5, E6, E7, F5,
    Square,
    parse_square,
)


def perft(position: Position, depth: int) -> int:
    """Count leaf nodes at *depth* using make/unmake."""
    if depth == 0:
        return 1
    nodes = 0
    for move in Rules.legal_move_list(position):
        position.make_move(move)
        nodes += perft(position, depth - 1)
        position.unmake_move()
    return nodes


def _position(diagram: str, side: Color = Color.WHITE) -> Position:
    return Position(Board.from_diagram(diagram), side)


def _squares(*names: str) -> set[Square]:
    return {parse_square(n) for n in names}


# ── Perft ────────────────────────────────────────────────────────────────────

KIWIPETE = """
r...k..r
p.ppqpb.
bn..pnp.
...PN...
.p..P...
..N..Q.p
PPPBBPPP
R...K..R
"""

POS3 = """
........
..p.....
...p....
KP.....r
.R...p.k
........
....P.P.
........
"""

POS4 = """
r...k..r
Pppp.ppp
.b...nbN
nP......
BBP.P...
q....N..
Pp.P..PP
R..Q.RK.
"""


class TestPerftStarting:
    def test_depth_1(self) -> None:
        assert perft(Position.initial(), 1) == 20

    def test_depth_2(self) -> None:
        assert perft(Position.initial(), 2) == 400

    @pytest.mark.slow
    def test_depth_3(self) -> None:
        assert perft(Position.initial(), 3) == 8_902


class TestPerftKiwipete:
    def test_depth_1(self) -> None:
        assert perft(_position(KIWIPETE), 1) == 48

    @pytest.mark.slow
    def test_depth_2(self) -> None:
        assert perft(_position(KIWIPETE), 2) == 2_039


class TestPerftPos3:
    def test_depth_1(self) -> None:
        assert perft(_position(POS3), 1) == 14

    def test_depth_2(self) -> None:
        assert perft(_position(POS3), 2) == 191


class TestPerftPos4:
    def test_depth_1(self) -> None:
        assert perft(_position(POS4), 1) == 6

    @pytest.mark.slow
    def test_depth_2(self) -> None:
        assert perft(_position(POS4), 2) == 264


# ── Pawns ────────────────────────────────────────────────────────────────────


class TestPawnMoves:
    def test_single_and_double_step_from_start(self) -> None:
        board = Board.initial()
        pawn = board.piece_at((4, 1))
        assert pawn is not None
        assert pseudo_moves(board, pawn) == _squares("e3", "e4")

    def test_double_step_only_from_start_rank(self) -> None:
        board = Board.initial()
        pawn = board.remove(parse_square("e2"))
        assert pawn is not None
        board.put(pawn.relocated(parse_square("e3")))
        moved = board[parse_square("e3")]
        assert moved is not None
        assert pseudo_moves(board, moved) == _squares("e4")

    def test_blocked_pawn_has_no_push(self) -> None:
        board = Board.initial()
        board.put(Piece(PieceType.KNIGHT, Color.BLACK, parse_square("e3")))
        pawn = board[parse_square("e2")]
        assert pawn is not None
        # Blocked on e3, so no double step either; both diagonals are empty.
        assert pseudo_moves(board, pawn) == set()

    def test_double_step_blocked_on_far_square(self) -> None:
        board = Board.initial()
        board.put(Piece(PieceType.KNIGHT, Color.BLACK, E4))
        pawn = board[parse_square("e2")]
        assert pawn is not None
        assert pseudo_moves(board, pawn) == _squares("e3")

    def test_diagonal_captures_only_enemies(self) -> None:
        board = Board.initial()
        board.put(Piece(PieceType.KNIGHT, Color.BLACK, parse_square("d3")))
        board.put(Piece(PieceType.KNIGHT, Color.WHITE, parse_square("f3")))
        pawn = board[parse_square("e2")]
        assert pawn is not None
        assert pseudo_moves(board, pawn) == _squares("e3", "e4", "d3")

    def test_black_pawn_moves_down(self) -> None:
        board = Board.initial()
        pawn = board[D7]
        assert pawn is not None
        assert pseudo_moves(board, pawn) == {D6, D5}

    def test_en_passant_after_double_step(self) -> None:
        board = Board.from_diagram(
            """
            ....k...
            ........
            ........
            ...pP...
            ........
            ........
            ........
            ....K...
            """
        )
        pawn = board[E5]
        assert pawn is not None
        last = LastMove(PieceType.PAWN, Color.BLACK, D7, D5)
        assert en_passant_target(board, pawn, last) == D6
        assert D6 in pseudo_moves(board, pawn, last)

    def test_no_en_passant_after_single_steps(self) -> None:
        board = Board.from_diagram(
            """
            ....k...
            ........
            ........
            ...pP...
            ........
            ........
            ........
            ....K...
            """
        )
        pawn = board[E5]
        assert pawn is not None
        last = LastMove(PieceType.PAWN, Color.BLACK, D6, D5)
        assert en_passant_target(board, pawn, last) is None
        assert pseudo_moves(board, pawn, last) == {E6}

    def test_no_en_passant_for_distant_pawn(self) -> None:
        board = Board.from_diagram(
            """
            ....k...
            ........
            ........
            ..p..P..
            ........
            ........
            ........
            ....K...
            """
        )
        pawn = board[F5]
        assert pawn is not None
        last = LastMove(PieceType.PAWN, Color.BLACK, parse_square("c7"), parse_square("c5"))
        assert en_passant_target(board, pawn, last) is None


# ── Knights, sliders, king ───────────────────────────────────────────────────


class TestPieceMoves:
    def test_knight_from_start(self) -> None:
        board = Board.initial()
        knight = board[G1]
        assert knight is not None
        assert pseudo_moves(board, knight) == _squares("f3", "h3")

    def test_knight_in_center(self) -> None:
        board = Board.from_pieces([Piece(PieceType.KNIGHT, Color.WHITE, D4)])
        knight = board[D4]
        assert knight is not None
        assert len(pseudo_moves(board, knight)) == 8

    def test_bishop_blocked_at_start(self) -> None:
        board = Board.initial()
        bishop = board[C1]
        assert bishop is not None
        assert pseudo_moves(board, bishop) == set()

    def test_rook_ray_stops_at_first_enemy(self) -> None:
        board = Board.from_pieces(
            [
                Piece(PieceType.ROOK, Color.WHITE, A1),
                Piece(PieceType.PAWN, Color.BLACK, D1),
                Piece(PieceType.PAWN, Color.WHITE, parse_square("a3")),
            ]
        )
        rook = board[A1]
        assert rook is not None
        assert pseudo_moves(board, rook) == _squares("b1", "c1", "d1", "a2")

    def test_queen_on_empty_board(self) -> None:
        board = Board.from_pieces([Piece(PieceType.QUEEN, Color.WHITE, D4)])
        queen = board[D4]
        assert queen is not None
        assert len(pseudo_moves(board, queen)) == 27

    def test_king_in_corner(self) -> None:
        board = Board.from_pieces([Piece(PieceType.KING, Color.WHITE, H1, 1)])
        king = board[H1]
        assert king is not None
        assert pseudo_moves(board, king) == _squares("g1", "g2", "h2")


class TestCastlingMoves:
    DIAGRAM = """
    r...k..r
    ........
    ........
    ........
    ........
    ........
    ........
    R...K..R
    """

    def test_both_sides_when_unmoved(self) -> None:
        board = Board.from_diagram(self.DIAGRAM)
        king = board[E1]
        assert king is not None
        assert castling_moves(board, king) == {C1, G1}

    def test_none_after_king_moved(self) -> None:
        board = Board.from_diagram(self.DIAGRAM)
        board.put(Piece(PieceType.KING, Color.WHITE, E1, 2))
        king = board[E1]
        assert king is not None
        assert castling_moves(board, king) == set()

    def test_one_side_after_rook_moved(self) -> None:
        board = Board.from_diagram(self.DIAGRAM)
        board.put(Piece(PieceType.ROOK, Color.WHITE, H1, 2))
        king = board[E1]
        assert king is not None
        assert castling_moves(board, king) == {C1}

    def test_blocked_by_piece_between(self) -> None:
        board = Board.from_diagram(self.DIAGRAM)
        board.put(Piece(PieceType.KNIGHT, Color.WHITE, B1))
        board.put(Piece(PieceType.BISHOP, Color.BLACK, F1))
        king = board[E1]
        assert king is not None
        assert castling_moves(board, king) == set()

    def test_occupancy_only_ignores_attacks(self) -> None:
        board = Board.from_diagram(self.DIAGRAM)
        board.put(Piece(PieceType.ROOK, Color.BLACK, parse_square("f5")))
        king = board[E1]
        assert king is not None
        assert G1 in castling_moves(board, king)

    def test_initial_position_has_no_castling(self) -> None:
        board = Board.initial()
        king = board[E1]
        assert king is not None
        assert castling_moves(board, king) == set()


# ── Attacks ──────────────────────────────────────────────────────────────────


class TestAttacks:
    def test_pawn_attacks_diagonals_only(self) -> None:
        board = Board.from_pieces([Piece(PieceType.PAWN, Color.WHITE, E4)])
        assert is_square_attacked(board, D5, Color.WHITE)
        assert is_square_attacked(board, F5, Color.WHITE)
        assert not is_square_attacked(board, E5, Color.WHITE)

    def test_slider_attack_blocked(self) -> None:
        board = Board.from_pieces(
            [
                Piece(PieceType.ROOK, Color.BLACK, E7),
                Piece(PieceType.PAWN, Color.WHITE, E4),
            ]
        )
        assert is_square_attacked(board, E5, Color.BLACK)
        assert not is_square_attacked(board, E1, Color.BLACK)

    def test_attacked_squares_include_friendly(self) -> None:
        board = Board.initial()
        knight = board[G1]
        assert knight is not None
        covered = attacked_squares(board, knight)
        assert parse_square("e2") in covered
        assert parse_square("f3") in covered

    def test_initial_position_not_in_check(self) -> None:
        board = Board.initial()
        assert not is_in_check(board, Color.WHITE)
        assert not is_in_check(board, Color.BLACK)

    def test_check_from_knight(self) -> None:
        board = Board.initial()
        board.put(Piece(PieceType.KNIGHT, Color.BLACK, parse_square("d3")))
        assert is_in_check(board, Color.WHITE)

    def test_check_detection_after_clear_line(self) -> None:
        board = Board.from_pieces(
            [
                Piece(PieceType.KING, Color.WHITE, E1),
                Piece(PieceType.KING, Color.BLACK, parse_square("a8")),
                Piece(PieceType.QUEEN, Color.BLACK, E6),
            ]
        )
        assert is_in_check(board, Color.WHITE)
        board.put(Piece(PieceType.PAWN, Color.WHITE, parse_square("e2")))
        assert not is_in_check(board, Color.WHITE)
