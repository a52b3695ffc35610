"""Chess board representation and move execution."""

import copy
import logging
from typing import Dict, List, Optional, Tuple

from .notation import BOARD_SIZE, FILES, all_squares
from .pieces import Piece, PieceType, Player

logger = logging.getLogger(__name__)

EMPTY_SQUARE = '##'

BACK_RANK = (
    PieceType.ROOK, PieceType.KNIGHT, PieceType.BISHOP, PieceType.QUEEN,
    PieceType.KING, PieceType.BISHOP, PieceType.KNIGHT, PieceType.ROOK
)


class Board:
    """Represents a chess board, its pieces and the check/checkmate state.

    The grid and the per-side active lists always agree: a piece is either on
    the grid and in its side's active list, or in its side's captured list.
    """

    def __init__(self, setup: bool = True):
        """
        Initialize an 8x8 chess board.

        Args:
            setup: Place the standard starting position when True
        """
        self.grid: List[List[Optional[Piece]]] = [
            [None for _ in range(BOARD_SIZE)] for _ in range(BOARD_SIZE)
        ]
        self.current_player = Player.WHITE
        self.white_in_check = False
        self.black_in_check = False
        self.checkmate = False
        self._active: Dict[Player, List[Piece]] = {Player.WHITE: [], Player.BLACK: []}
        self._captured: Dict[Player, List[Piece]] = {Player.WHITE: [], Player.BLACK: []}
        # Boards cloned for the checkmate search turn this off so the search
        # does not recurse.
        self.run_checkmate_search = True

        if setup:
            self._initialize_pieces()
            self.update_valid_moves()

    @classmethod
    def empty(cls) -> 'Board':
        """Create a board with no pieces, for custom set-ups."""
        return cls(setup=False)

    def _initialize_pieces(self) -> None:
        """Set up pieces in their starting positions."""
        for col, piece_type in enumerate(BACK_RANK):
            self._add_piece(Piece(piece_type, Player.BLACK, (0, col)))
            self._add_piece(Piece(piece_type, Player.WHITE, (7, col)))

        for col in range(BOARD_SIZE):
            self._add_piece(Piece(PieceType.PAWN, Player.BLACK, (1, col)))
            self._add_piece(Piece(PieceType.PAWN, Player.WHITE, (6, col)))

    def _add_piece(self, piece: Piece) -> None:
        row, col = piece.position
        self.grid[row][col] = piece
        self._active[piece.owner].append(piece)

    def place_piece(self, piece_type: PieceType, owner: Player, row: int, col: int) -> Piece:
        """
        Put a new piece on an empty square.

        Move sets and check flags are refreshed afterwards.

        Args:
            piece_type: Variant of the new piece
            owner: Side the piece belongs to
            row: Row index (0-7)
            col: Column index (0-7)

        Returns:
            The placed piece

        Raises:
            ValueError: If the square is already occupied
        """
        if self.grid[row][col] is not None:
            raise ValueError(f'Square {(row, col)} is already occupied')

        piece = Piece(piece_type, owner, (row, col))
        self._add_piece(piece)
        self.check_for_check()
        return piece

    # -- Queries -----------------------------------------------------------

    def get_piece(self, row: int, col: int) -> Optional[Piece]:
        """
        Get the piece at the given position.

        Args:
            row: Row index (0-7)
            col: Column index (0-7)

        Returns:
            Piece object or None if empty
        """
        if 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE:
            return self.grid[row][col]
        return None

    def has_piece_at(self, row: int, col: int) -> bool:
        return self.grid[row][col] is not None

    def get_piece_list(self, player: Player) -> Tuple[Piece, ...]:
        """Pieces of ``player`` still on the board."""
        return tuple(self._active[player])

    @property
    def white_pieces(self) -> Tuple[Piece, ...]:
        return tuple(self._active[Player.WHITE])

    @property
    def black_pieces(self) -> Tuple[Piece, ...]:
        return tuple(self._active[Player.BLACK])

    @property
    def captured_white(self) -> Tuple[Piece, ...]:
        """White pieces removed by capture, oldest first."""
        return tuple(self._captured[Player.WHITE])

    @property
    def captured_black(self) -> Tuple[Piece, ...]:
        """Black pieces removed by capture, oldest first."""
        return tuple(self._captured[Player.BLACK])

    def get_unicode(self, row: int, col: int) -> str:
        piece = self.grid[row][col]
        return piece.unicode if piece else ''

    def get_symbol(self, row: int, col: int) -> str:
        piece = self.grid[row][col]
        return piece.symbol if piece else EMPTY_SQUARE

    def is_in_check(self, player: Player) -> bool:
        return self.white_in_check if player is Player.WHITE else self.black_in_check

    def switch_player(self) -> None:
        """Hand the turn to the other side."""
        self.current_player = self.current_player.opponent

    def pieces(self):
        """Iterate over the pieces on the grid, row by row."""
        for row, col in all_squares():
            piece = self.grid[row][col]
            if piece is not None:
                yield piece

    # -- Move execution ----------------------------------------------------

    def move_piece_position(self, from_row: int, from_col: int, to_row: int, to_col: int) -> bool:
        """
        Move a piece, rejecting moves that leave the mover's king in check.

        A rejected move leaves the board exactly as it was, including the
        checkmate flag. Whatever the outcome, all move sets are recomputed;
        the checkmate search runs only after an accepted move.

        Args:
            from_row: Current row of the piece
            from_col: Current column of the piece
            to_row: Target row
            to_col: Target column

        Returns:
            True if the move was applied, False otherwise
        """
        was_moved = False
        piece = self.grid[from_row][from_col]

        if piece is not None and (from_row, from_col) != (to_row, to_col):
            target = self.grid[to_row][to_col]
            piece.possible_moves(self)
            if piece.is_potential_move(to_row, to_col) and not (
                    target is not None and target.owner is piece.owner):
                was_moved = self._apply_move(piece, target, (from_row, from_col), (to_row, to_col))

        self.update_valid_moves()
        # A rejected move keeps the verdict of the last accepted one.
        if was_moved:
            self._check_for_checkmate()
        return was_moved

    def _apply_move(self, piece: Piece, target: Optional[Piece], from_pos, to_pos) -> bool:
        from_row, from_col = from_pos
        to_row, to_col = to_pos

        # Capture logic
        target_index = None
        if target is not None:
            target_index = self._active[target.owner].index(target)
            self._active[target.owner].pop(target_index)
            self._captured[target.owner].append(target)

        self.grid[to_row][to_col] = piece
        self.grid[from_row][from_col] = None
        piece.position = to_pos

        self.check_for_check()
        if self.is_in_check(piece.owner):
            logger.debug('%s %s to %s rejected: own king left in check',
                         piece.owner.display_name, piece.name, to_pos)
            self.grid[from_row][from_col] = piece
            piece.position = from_pos
            self.grid[to_row][to_col] = target
            if target is not None:
                self._captured[target.owner].pop()
                self._active[target.owner].insert(target_index, target)
            self.check_for_check()
            return False

        piece.has_moved = True
        self.check_for_check()
        if self.white_in_check:
            logger.info('White king is in check')
        if self.black_in_check:
            logger.info('Black king is in check')
        return True

    def check_for_check(self) -> None:
        """Recompute both check flags from scratch."""
        self.white_in_check = False
        self.black_in_check = False

        for piece in list(self.pieces()):
            for row, col in piece.possible_moves(self):
                attacked = self.grid[row][col]
                if attacked is None or attacked.piece_type is not PieceType.KING:
                    continue
                if attacked.owner is not piece.owner:
                    if attacked.owner is Player.WHITE:
                        self.white_in_check = True
                    else:
                        self.black_in_check = True

    def _check_for_checkmate(self) -> None:
        """Search every reply of the side not to move for a check escape.

        Each candidate move is played on a clone whose own search is disabled.
        The side searched is the opponent of ``current_player``: the driver
        hands over the turn only after a move returns, so at this point that
        is the side that has just been put in check.
        """
        self.checkmate = False
        if not self.run_checkmate_search or not (self.white_in_check or self.black_in_check):
            return

        defender = self.current_player.opponent
        self.checkmate = True
        for piece in self.get_piece_list(defender):
            for to_row, to_col in list(piece.moves):
                cloned = self.clone()
                cloned.run_checkmate_search = False
                if (cloned.move_piece_position(piece.row, piece.col, to_row, to_col)
                        and not cloned.is_in_check(defender)):
                    self.checkmate = False
                    return

        logger.info('Checkmate: %s has no escape', defender.display_name)

    def update_valid_moves(self) -> None:
        """Recompute the move set of every piece on the board."""
        for piece in list(self.pieces()):
            piece.possible_moves(self)

    # -- End of game -------------------------------------------------------

    def _kings_present(self) -> Tuple[bool, bool]:
        white = black = False
        for piece in self.pieces():
            if piece.piece_type is PieceType.KING:
                if piece.owner is Player.WHITE:
                    white = True
                else:
                    black = True
        return white, black

    def is_king_captured(self) -> bool:
        """True if either king is missing from the board."""
        white, black = self._kings_present()
        return not (white and black)

    def get_winner(self) -> Optional[Player]:
        """The side whose king survives when the other's is gone, else None."""
        white, black = self._kings_present()
        if white and not black:
            return Player.WHITE
        if black and not white:
            return Player.BLACK
        return None

    # -- Copies and snapshots ---------------------------------------------

    def clone(self) -> 'Board':
        """Deep copy: fresh grid, fresh pieces, fresh active/captured lists."""
        return copy.deepcopy(self)

    def to_dict(self) -> dict:
        """
        Convert board state to dictionary for JSON serialization.

        Returns:
            Dictionary representation of the whole board
        """
        return {
            'board': [
                [piece.to_dict() if piece else None for piece in row]
                for row in self.grid
            ],
            'captured_white': [p.to_dict() for p in self._captured[Player.WHITE]],
            'captured_black': [p.to_dict() for p in self._captured[Player.BLACK]],
            'current_player': self.current_player.value,
            'white_in_check': self.white_in_check,
            'black_in_check': self.black_in_check,
            'checkmate': self.checkmate,
            'run_checkmate_search': self.run_checkmate_search
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Board':
        """
        Create a board from dictionary representation.

        Args:
            data: Dictionary containing board state

        Returns:
            Board instance with freshly computed move sets

        Raises:
            ValueError: If a piece or player entry is invalid
        """
        board = cls.empty()
        for row, cells in enumerate(data['board']):
            for col, piece_data in enumerate(cells):
                if piece_data:
                    piece = Piece.from_dict({**piece_data, 'position': (row, col)})
                    board._add_piece(piece)

        board._captured[Player.WHITE] = [Piece.from_dict(p) for p in data.get('captured_white', [])]
        board._captured[Player.BLACK] = [Piece.from_dict(p) for p in data.get('captured_black', [])]
        board.current_player = Player(data.get('current_player', Player.WHITE.value))
        board.white_in_check = bool(data.get('white_in_check', False))
        board.black_in_check = bool(data.get('black_in_check', False))
        board.checkmate = bool(data.get('checkmate', False))
        board.run_checkmate_search = bool(data.get('run_checkmate_search', True))
        board.update_valid_moves()
        return board

    # -- Text rendering ----------------------------------------------------

    def display(self) -> str:
        """
        Render the board as text.

        Columns are labelled A-H above and below, rows 8-1 on both sides.
        Occupied squares show their token ('wP', 'bK'), empty ones '##'.
        """
        header = '  ' + '  '.join(FILES)
        lines = [header]
        for row in range(BOARD_SIZE):
            label = str(BOARD_SIZE - row)
            cells = ''.join(f'{self.get_symbol(row, col)} ' for col in range(BOARD_SIZE))
            lines.append(f'{label} {cells} {label}')
        lines.append(header)
        return '\n'.join(lines)

    def __str__(self) -> str:
        return self.display()
