"""Tests for the core game engine."""

import random

from hexchess.game.board import BACK_RANK
from hexchess.game.engine import (
    GameEngine,
    GameEventType,
    PlacementMove,
    PlayMove,
    RejectReason,
)
from hexchess.game.pieces import PIECES, Color, PieceKind
from hexchess.game.state import GameState, Outcome, Phase, TurnRecord


def _setup_complete() -> GameState:
    """Game after both sides placed R N B Q K in order."""
    state = GameEngine.create_game(game_id="TESTGAME")
    GameEngine.place_all_fixed(state, Color.WHITE)
    GameEngine.place_all_fixed(state, Color.BLACK)
    return state


class TestCreateGame:
    """Tests for game creation."""

    def test_create_game(self):
        """Test a new game starts in setup with only pawns on the board."""
        state = GameEngine.create_game()

        assert state.phase == Phase.SETUP
        assert state.ply == 0
        assert state.side_to_move == Color.WHITE
        assert len(state.game_id) == 8
        assert len(state.board.get_pieces_for_color(Color.WHITE)) == 5
        assert len(state.board.get_pieces_for_color(Color.BLACK)) == 5
        assert state.setup_pools[Color.WHITE] == ["WR", "WN", "WB", "WQ", "WK"]
        assert state.move_log == []

    def test_create_game_custom_id(self):
        """Test creating a game with a custom ID."""
        state = GameEngine.create_game(game_id="TESTGAME")
        assert state.game_id == "TESTGAME"

    def test_create_game_custom_lineup(self):
        """Test creating a game with a custom setup lineup."""
        kinds = (
            PieceKind.DRAGON,
            PieceKind.CHARGER,
            PieceKind.KING,
            PieceKind.GUARDIAN,
            PieceKind.QUEEN,
        )
        state = GameEngine.create_game(setup_kinds=kinds)
        assert state.setup_pools[Color.BLACK] == ["BD", "BC", "BK", "BG", "BQ"]

    def test_games_do_not_share_pools(self):
        """Test placing in one game leaves other games' pools alone."""
        first = GameEngine.create_game()
        second = GameEngine.create_game()
        GameEngine.place_piece(first, Color.WHITE, 3, "WK")

        assert "WK" not in first.setup_pools[Color.WHITE]
        assert "WK" in second.setup_pools[Color.WHITE]

    def test_create_game_from_board(self, make_board):
        """Test creating a game from a custom position."""
        board = make_board({18: "WK", 36: "BK"})
        state = GameEngine.create_game_from_board(board, side_to_move=Color.BLACK)

        assert state.phase == Phase.PLAY
        assert state.side_to_move == Color.BLACK
        assert state.setup_pools == {Color.WHITE: [], Color.BLACK: []}


class TestPlacePiece:
    """Tests for single placements."""

    def test_place_piece(self):
        """Test a valid placement."""
        state = GameEngine.create_game()
        result = GameEngine.place_piece(state, Color.WHITE, 3, "WK")

        assert result.success
        assert state.board[3] == PIECES["WK"]
        assert state.setup_pools[Color.WHITE] == ["WR", "WN", "WB", "WQ"]
        assert state.move_log == [TurnRecord(turn=1, white="K@4")]
        assert state.side_to_move == Color.BLACK
        assert [e.type for e in result.events] == [GameEventType.PIECE_PLACED]
        assert result.events[0].data == {"color": "W", "target": 3, "code": "WK"}

    def test_sides_alternate(self):
        """Test placements alternate while both sides can place."""
        state = GameEngine.create_game()
        GameEngine.place_piece(state, Color.WHITE, 3, "WK")
        GameEngine.place_piece(state, Color.BLACK, 33, "BK")

        assert state.side_to_move == Color.WHITE
        assert state.move_log == [TurnRecord(turn=1, white="K@4", black="K@34")]

    def test_wrong_side(self):
        """Test placing out of turn."""
        state = GameEngine.create_game()
        result = GameEngine.place_piece(state, Color.BLACK, 33, "BK")

        assert not result.success
        assert result.error == RejectReason.WRONG_SIDE

    def test_not_back_rank(self):
        """Test placing off the mover's back rank."""
        state = GameEngine.create_game()
        for target in (9, 18, 99, -1):
            result = GameEngine.place_piece(state, Color.WHITE, target, "WK")
            assert result.error == RejectReason.NOT_BACK_RANK

    def test_cell_occupied(self):
        """Test placing on an occupied back-rank cell."""
        state = GameEngine.create_game()
        GameEngine.place_piece(state, Color.WHITE, 3, "WK")
        GameEngine.place_piece(state, Color.BLACK, 33, "BK")
        result = GameEngine.place_piece(state, Color.WHITE, 3, "WQ")

        assert result.error == RejectReason.CELL_OCCUPIED

    def test_not_in_pool(self):
        """Test placing a piece that is not in the pool."""
        state = GameEngine.create_game()
        GameEngine.place_piece(state, Color.WHITE, 3, "WK")
        GameEngine.place_piece(state, Color.BLACK, 33, "BK")

        assert GameEngine.place_piece(state, Color.WHITE, 10, "WK").error == (
            RejectReason.NOT_IN_POOL
        )
        assert GameEngine.place_piece(state, Color.WHITE, 10, "WP").error == (
            RejectReason.NOT_IN_POOL
        )

    def test_wrong_color(self):
        """Test a foreign code that somehow ended up in a pool."""
        state = GameEngine.create_game()
        state.setup_pools[Color.WHITE].append("BR")
        result = GameEngine.place_piece(state, Color.WHITE, 3, "BR")

        assert result.error == RejectReason.WRONG_COLOR

    def test_rejection_leaves_state_unchanged(self):
        """Test a rejected command mutates nothing."""
        state = GameEngine.create_game()
        GameEngine.place_piece(state, Color.WHITE, 3, "WK")
        before = state.to_dict()

        GameEngine.place_piece(state, Color.WHITE, 10, "WR")
        GameEngine.place_piece(state, Color.BLACK, 3, "BK")
        GameEngine.place_piece(state, Color.BLACK, 33, "BX")
        GameEngine.play(state, 8, 7)

        assert state.to_dict() == before


class TestPlaceAll:
    """Tests for bulk placement."""

    def test_place_all_fixed(self):
        """Test pool order fills the back rank in index order."""
        state = GameEngine.create_game()
        result = GameEngine.place_all_fixed(state, Color.WHITE)

        assert result.success
        assert [state.board[i].code for i in BACK_RANK[Color.WHITE]] == [
            "WR", "WN", "WB", "WQ", "WK",
        ]
        assert state.setup_pools[Color.WHITE] == []
        assert len(result.events) == 5
        assert state.move_log == [TurnRecord(turn=1, white="R@4 N@11 B@17 Q@22 K@28")]
        assert state.side_to_move == Color.BLACK

    def test_skip_side_that_cannot_place(self):
        """Test black places repeatedly once white is done."""
        state = GameEngine.create_game()
        GameEngine.place_all_fixed(state, Color.WHITE)

        for target, code in zip(BACK_RANK[Color.BLACK][:4], ["BR", "BN", "BB", "BQ"]):
            assert state.side_to_move == Color.BLACK
            result = GameEngine.place_piece(state, Color.BLACK, target, code)
            assert result.success
            assert state.phase == Phase.SETUP

        result = GameEngine.place_piece(state, Color.BLACK, 33, "BK")

        assert result.success
        assert result.events[-1].type == GameEventType.PHASE_CHANGED
        assert state.phase == Phase.PLAY
        assert state.ply == 0
        assert state.side_to_move == Color.WHITE
        assert state.move_log == [
            TurnRecord(turn=1, white="R@4 N@11 B@17 Q@22 K@28", black="R@10"),
            TurnRecord(turn=2, black="N@16"),
            TurnRecord(turn=3, black="B@21"),
            TurnRecord(turn=4, black="Q@27"),
            TurnRecord(turn=5, black="K@34"),
        ]

    def test_setup_completes(self):
        """Test both sides placing everything starts play with white."""
        state = _setup_complete()

        assert state.phase == Phase.PLAY
        assert state.side_to_move == Color.WHITE
        assert state.move_log == [
            TurnRecord(
                turn=1,
                white="R@4 N@11 B@17 Q@22 K@28",
                black="R@10 N@16 B@21 Q@27 K@34",
            )
        ]

    def test_place_all_random_uses_shuffle(self):
        """Test random placement follows the injected shuffle."""
        state = GameEngine.create_game()
        GameEngine.place_all_random(state, Color.WHITE, random.Random(7).shuffle)

        expected = ["WR", "WN", "WB", "WQ", "WK"]
        random.Random(7).shuffle(expected)
        assert [state.board[i].code for i in BACK_RANK[Color.WHITE]] == expected

    def test_place_all_random_deterministic(self):
        """Test equal seeds give equal boards."""
        first = GameEngine.create_game()
        second = GameEngine.create_game()
        GameEngine.place_all_random(first, Color.WHITE, random.Random(42).shuffle)
        GameEngine.place_all_random(second, Color.WHITE, random.Random(42).shuffle)

        assert first.board.codes() == second.board.codes()

    def test_place_all_fills_remaining_cells(self):
        """Test bulk placement after single placements."""
        state = GameEngine.create_game()
        GameEngine.place_piece(state, Color.WHITE, 16, "WK")
        GameEngine.place_piece(state, Color.BLACK, 33, "BK")
        result = GameEngine.place_all_fixed(state, Color.WHITE)

        assert result.success
        assert [state.board[i].code for i in BACK_RANK[Color.WHITE]] == [
            "WR", "WN", "WK", "WB", "WQ",
        ]
        assert state.move_log[-1] == TurnRecord(turn=2, white="R@4 N@11 B@22 Q@28")

    def test_pool_larger_than_empty_cells(self):
        """Test leftover pool pieces stay in the pool when the rank is full."""
        state = GameEngine.create_game()
        state.board[3] = PIECES["WR"]
        result = GameEngine.place_all_fixed(state, Color.WHITE)

        assert result.success
        assert [state.board[i].code for i in BACK_RANK[Color.WHITE]] == [
            "WR", "WR", "WN", "WB", "WQ",
        ]
        assert state.setup_pools[Color.WHITE] == ["WK"]
        assert state.side_to_move == Color.BLACK
        assert state.phase == Phase.SETUP

    def test_pool_smaller_than_empty_cells(self):
        """Test only as many cells as pool pieces are filled."""
        state = GameEngine.create_game()
        state.setup_pools[Color.WHITE] = ["WK"]
        result = GameEngine.place_all_random(state, Color.WHITE, random.Random(1).shuffle)

        assert result.success
        assert state.board[3] == PIECES["WK"]
        assert state.board.empty_back_rank(Color.WHITE) == [10, 16, 21, 27]
        assert state.setup_pools[Color.WHITE] == []
        assert state.side_to_move == Color.BLACK

        result = GameEngine.place_all_fixed(state, Color.BLACK)

        assert result.success
        assert state.phase == Phase.PLAY
        assert state.ply == 0
        assert result.events[-1].type == GameEventType.PHASE_CHANGED

    def test_nothing_to_place(self):
        """Test bulk placement with an empty pool."""
        state = GameEngine.create_game()
        state.setup_pools[Color.WHITE].clear()
        result = GameEngine.place_all_fixed(state, Color.WHITE)

        assert result.error == RejectReason.NOTHING_TO_PLACE

    def test_wrong_phase(self):
        """Test placing during play."""
        state = _setup_complete()
        assert GameEngine.place_all_fixed(state, Color.WHITE).error == RejectReason.WRONG_PHASE
        assert GameEngine.place_piece(state, Color.WHITE, 3, "WK").error == (
            RejectReason.WRONG_PHASE
        )


class TestPlay:
    """Tests for play-phase moves."""

    def test_play_move(self):
        """Test a valid opening move."""
        state = _setup_complete()
        result = GameEngine.play(state, 4, 6)

        assert result.success
        assert state.board[6] == PIECES["WP"]
        assert state.board.is_empty(4)
        assert state.side_to_move == Color.BLACK
        assert state.move_log[-1] == TurnRecord(turn=2, white="P5-7")
        assert result.events[0].type == GameEventType.MOVE
        assert result.events[0].data == {"code": "WP", "from": 4, "to": 6}

    def test_wrong_phase(self):
        """Test moving during setup."""
        state = GameEngine.create_game()
        assert GameEngine.play(state, 4, 5).error == RejectReason.WRONG_PHASE

    def test_rejections(self):
        """Test each rejection reason at the start of play."""
        state = _setup_complete()
        before = state.to_dict()

        assert GameEngine.play(state, 99, 4).error == RejectReason.INVALID_INDEX
        assert GameEngine.play(state, 4, 37).error == RejectReason.INVALID_INDEX
        assert GameEngine.play(state, 18, 19).error == RejectReason.EMPTY_CELL
        assert GameEngine.play(state, 8, 7).error == RejectReason.WRONG_SIDE
        assert GameEngine.play(state, 4, 18).error == RejectReason.ILLEGAL_DESTINATION
        assert GameEngine.play(state, 3, 4).error == RejectReason.ILLEGAL_DESTINATION
        assert state.to_dict() == before

    def test_full_game_to_king_capture(self):
        """Test a scripted game that ends with a king capture."""
        state = _setup_complete()
        moves = [(4, 5), (32, 30), (3, 4), (33, 32), (22, 24), (32, 31)]
        for from_index, to_index in moves:
            result = GameEngine.play(state, from_index, to_index)
            assert result.success, result.message
            assert GameEngine.check_outcome(state) is None

        result = GameEngine.play(state, 24, 31)

        assert result.success
        assert [e.type for e in result.events] == [
            GameEventType.MOVE,
            GameEventType.CAPTURE,
            GameEventType.GAME_OVER,
        ]
        assert result.events[1].data == {"captured": "BK", "position": 31}
        assert result.events[2].data == {"winner": "W"}
        assert GameEngine.check_outcome(state) == Outcome.WHITE_WINS
        assert state.move_log[1:] == [
            TurnRecord(turn=2, white="P5-6", black="P33-31"),
            TurnRecord(turn=3, white="R4-5", black="K34-33"),
            TurnRecord(turn=4, white="P23-25", black="K33-32"),
            TurnRecord(turn=5, white="P25x32"),
        ]

        before = state.to_dict()
        result = GameEngine.play(state, 30, 29)
        assert result.error == RejectReason.GAME_OVER
        assert state.to_dict() == before

    def test_king_may_be_left_attacked(self, make_board):
        """Test moves are not filtered by king safety."""
        board = make_board({18: "WK", 20: "BR", 36: "BK"})
        state = GameEngine.create_game_from_board(board)

        assert GameEngine.play(state, 18, 19).success

    def test_promotion_event(self, make_board):
        """Test a promoting move reports the promotion."""
        board = make_board({19: "WP", 3: "WK", 9: "BK"})
        state = GameEngine.create_game_from_board(board)
        result = GameEngine.play(state, 19, 20)

        assert [e.type for e in result.events] == [GameEventType.MOVE, GameEventType.PROMOTION]
        assert state.board[20] == PIECES["WQ"]
        assert state.last_move == "P20-21=Q"

    def test_collateral_event(self, make_board):
        """Test a dragon's two-step capture reports both captures."""
        board = make_board({18: "WD", 19: "BN", 20: "BP", 3: "WK", 36: "BK"})
        state = GameEngine.create_game_from_board(board)
        result = GameEngine.play(state, 18, 20)

        assert [e.type for e in result.events] == [
            GameEventType.MOVE,
            GameEventType.CAPTURE,
            GameEventType.COLLATERAL_CAPTURE,
        ]
        assert result.events[2].data == {"captured": "BN", "position": 19}
        assert state.last_move == "D19x21*20"

    def test_swap_event(self, make_board):
        """Test a guardian swap is reported."""
        board = make_board({18: "WG", 19: "WR", 3: "WK", 36: "BK"})
        state = GameEngine.create_game_from_board(board)
        result = GameEngine.play(state, 18, 19)

        assert [e.type for e in result.events] == [GameEventType.MOVE, GameEventType.SWAP]
        assert state.board[18] == PIECES["WR"]


class TestCheckOutcome:
    """Tests for end conditions."""

    def test_none_during_setup(self):
        """Test setup never ends the game, even without kings."""
        assert GameEngine.check_outcome(GameEngine.create_game()) is None

    def test_both_kings(self):
        """Test a normal position continues."""
        assert GameEngine.check_outcome(_setup_complete()) is None

    def test_one_king(self, make_board):
        """Test the side with the only king wins."""
        state = GameEngine.create_game_from_board(make_board({18: "BK", 3: "WR"}))
        assert GameEngine.check_outcome(state) == Outcome.BLACK_WINS

    def test_no_kings(self, make_board):
        """Test a board without kings is a draw."""
        state = GameEngine.create_game_from_board(make_board({18: "WR", 20: "BR"}))
        assert GameEngine.check_outcome(state) == Outcome.DRAW

    def test_no_legal_moves(self, make_board):
        """Test a side to move without moves draws."""
        board = make_board({0: "WK", 1: "WP", 2: "WP", 36: "BK"})
        state = GameEngine.create_game_from_board(board)

        assert GameEngine.get_legal_moves(state, Color.WHITE) == []
        assert GameEngine.check_outcome(state) == Outcome.DRAW
        assert GameEngine.play(state, 0, 1).error == RejectReason.GAME_OVER


class TestQueries:
    """Tests for read-only queries."""

    def test_legal_moves_for(self):
        """Test destinations for one piece."""
        state = _setup_complete()
        assert GameEngine.legal_moves_for(state, 4) == [5, 6]
        assert GameEngine.legal_moves_for(state, 18) == []
        assert GameEngine.legal_moves_for(state, 99) == []

    def test_get_legal_moves(self):
        """Test every opening move for white."""
        state = _setup_complete()
        moves = GameEngine.get_legal_moves(state, Color.WHITE)

        assert len(moves) == 13
        assert PlayMove(10, 18) in moves
        assert PlayMove(4, 6) in moves


class TestEnumerateAIMoves:
    """Tests for AI candidate enumeration."""

    def test_setup_candidates(self):
        """Test every (cell, code) pair is offered during setup."""
        state = GameEngine.create_game()
        candidates = GameEngine.enumerate_ai_moves(state)

        assert len(candidates) == 25
        assert all(isinstance(c, PlacementMove) for c in candidates)
        assert PlacementMove(color=Color.WHITE, target=27, code="WK") in candidates

    def test_captures_first(self, make_board):
        """Test moves onto occupied cells are listed first."""
        board = make_board({3: "WK", 18: "WR", 20: "BP", 36: "BK"})
        state = GameEngine.create_game_from_board(board)
        candidates = GameEngine.enumerate_ai_moves(state)

        assert candidates[0] == PlayMove(18, 20)
        assert all(state.board.is_empty(c.to_index) for c in candidates[1:])

    def test_unsafe_moves_dropped(self, make_board):
        """Test moves that leave the king attacked are filtered out."""
        board = make_board({18: "WK", 20: "BR", 36: "BK"})
        state = GameEngine.create_game_from_board(board)
        candidates = GameEngine.enumerate_ai_moves(state)

        assert {c.to_index for c in candidates} == {12, 13, 23, 24}

    def test_falls_back_to_all_moves(self, make_board):
        """Test all moves are offered when none is safe."""
        board = make_board({0: "WK", 1: "BR", 2: "BR", 36: "BK"})
        state = GameEngine.create_game_from_board(board)
        candidates = GameEngine.enumerate_ai_moves(state)

        assert set(candidates) == {PlayMove(0, 1), PlayMove(0, 2)}

    def test_game_over(self, make_board):
        """Test no candidates once the game has ended."""
        state = GameEngine.create_game_from_board(make_board({18: "WK"}))
        assert GameEngine.enumerate_ai_moves(state) == []

    def test_apply_ai_move(self):
        """Test enumerated candidates can be applied."""
        state = GameEngine.create_game()
        candidate = GameEngine.enumerate_ai_moves(state)[0]
        result = GameEngine.apply_ai_move(state, candidate)

        assert result.success
        assert state.side_to_move == Color.BLACK
