"""Chess piece types and pseudo-legal move generation."""

from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple

from .notation import Square, is_on_board

if TYPE_CHECKING:
    from .board import Board


class Player(Enum):
    """Side owning a piece."""

    WHITE = 'white'
    BLACK = 'black'

    @property
    def opponent(self) -> 'Player':
        return Player.BLACK if self is Player.WHITE else Player.WHITE

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    def __str__(self) -> str:
        return self.value


class PieceType(Enum):
    """The six piece variants."""

    PAWN = 'pawn'
    ROOK = 'rook'
    KNIGHT = 'knight'
    BISHOP = 'bishop'
    QUEEN = 'queen'
    KING = 'king'

    @property
    def initial(self) -> str:
        return _INITIALS[self]

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


_INITIALS: Dict[PieceType, str] = {
    PieceType.PAWN: 'P',
    PieceType.ROOK: 'R',
    PieceType.KNIGHT: 'N',
    PieceType.BISHOP: 'B',
    PieceType.QUEEN: 'Q',
    PieceType.KING: 'K',
}

_UNICODE: Dict[Tuple[Player, PieceType], str] = {
    (Player.WHITE, PieceType.PAWN): '♙',
    (Player.WHITE, PieceType.ROOK): '♖',
    (Player.WHITE, PieceType.KNIGHT): '♘',
    (Player.WHITE, PieceType.BISHOP): '♗',
    (Player.WHITE, PieceType.QUEEN): '♕',
    (Player.WHITE, PieceType.KING): '♔',
    (Player.BLACK, PieceType.PAWN): '♟',
    (Player.BLACK, PieceType.ROOK): '♜',
    (Player.BLACK, PieceType.KNIGHT): '♞',
    (Player.BLACK, PieceType.BISHOP): '♝',
    (Player.BLACK, PieceType.QUEEN): '♛',
    (Player.BLACK, PieceType.KING): '♚',
}

ROOK_DIRECTIONS = ((0, 1), (0, -1), (1, 0), (-1, 0))
BISHOP_DIRECTIONS = ((1, 1), (1, -1), (-1, 1), (-1, -1))
KNIGHT_OFFSETS = (
    (-2, -1), (-2, 1), (-1, -2), (-1, 2),
    (1, -2), (1, 2), (2, -1), (2, 1)
)
KING_OFFSETS = ROOK_DIRECTIONS + BISHOP_DIRECTIONS

# Row a pawn starts on; the double advance is only available from here.
PAWN_HOME_ROW = {Player.WHITE: 6, Player.BLACK: 1}
PAWN_DIRECTION = {Player.WHITE: -1, Player.BLACK: 1}


class Piece:
    """A piece on (or captured from) the board.

    Type and owner are fixed at creation. The square and the move set change
    as the board is mutated; ``moves`` always holds the result of the most
    recent :meth:`possible_moves` call.
    """

    def __init__(self, piece_type: PieceType, owner: Player, position: Square):
        """
        Initialize a chess piece.

        Args:
            piece_type: Which of the six variants this is
            owner: Player.WHITE or Player.BLACK
            position: (row, col) tuple where row and col are 0-7
        """
        self._piece_type = piece_type
        self._owner = owner
        self.position = position
        self.moves: List[Square] = []
        self.has_moved = False

    @property
    def piece_type(self) -> PieceType:
        return self._piece_type

    @property
    def owner(self) -> Player:
        return self._owner

    @property
    def color(self) -> str:
        return self._owner.value

    @property
    def row(self) -> int:
        return self.position[0]

    @property
    def col(self) -> int:
        return self.position[1]

    @property
    def name(self) -> str:
        return self._piece_type.display_name

    @property
    def symbol(self) -> str:
        """Two-character board token, e.g. 'wP' or 'bK'."""
        return f'{self.color[0]}{self._piece_type.initial}'

    @property
    def unicode(self) -> str:
        """Unicode chess glyph for the piece."""
        return _UNICODE[(self._owner, self._piece_type)]

    def possible_moves(self, board: 'Board') -> List[Square]:
        """
        Recompute the pseudo-legal destinations against the given board.

        Args:
            board: The current board state

        Returns:
            The refreshed move list (also stored on ``self.moves``)
        """
        self.moves = generate_moves(self, board)
        return self.moves

    def is_potential_move(self, row: int, col: int) -> bool:
        return (row, col) in self.moves

    def is_enemy(self, other: Optional['Piece']) -> bool:
        return other is not None and other.owner is not self._owner

    def to_dict(self) -> dict:
        """Convert piece to dictionary for JSON serialization."""
        return {
            'type': self._piece_type.value,
            'color': self.color,
            'position': list(self.position),
            'has_moved': self.has_moved
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Piece':
        """
        Create a piece from its dictionary representation.

        Raises:
            ValueError: If the type or color is unknown
        """
        piece = cls(
            PieceType(data['type']),
            Player(data['color']),
            tuple(data.get('position', (0, 0)))
        )
        piece.has_moved = bool(data.get('has_moved', False))
        return piece

    def __repr__(self) -> str:
        return f'Piece({self.symbol} at {self.position})'


def _slide(piece: Piece, board: 'Board', directions) -> List[Square]:
    """Cast rays until the edge or the first occupied square (included)."""
    moves = []
    row, col = piece.position

    for dr, dc in directions:
        new_row, new_col = row + dr, col + dc
        while is_on_board(new_row, new_col):
            moves.append((new_row, new_col))
            if board.get_piece(new_row, new_col) is not None:
                break
            new_row += dr
            new_col += dc

    return moves


def _step(piece: Piece, offsets) -> List[Square]:
    row, col = piece.position
    return [
        (row + dr, col + dc)
        for dr, dc in offsets
        if is_on_board(row + dr, col + dc)
    ]


def _pawn_moves(piece: Piece, board: 'Board') -> List[Square]:
    moves = []
    row, col = piece.position
    direction = PAWN_DIRECTION[piece.owner]

    new_row = row + direction
    if not is_on_board(new_row, col):
        return moves

    # Move forward one square
    if board.get_piece(new_row, col) is None:
        moves.append((new_row, col))

        # Move forward two squares from the home row
        two_row = row + 2 * direction
        if (not piece.has_moved and row == PAWN_HOME_ROW[piece.owner]
                and board.get_piece(two_row, col) is None):
            moves.append((two_row, col))

    # Capture diagonally
    for dc in (-1, 1):
        new_col = col + dc
        if is_on_board(new_row, new_col) and piece.is_enemy(board.get_piece(new_row, new_col)):
            moves.append((new_row, new_col))

    return moves


def _rook_moves(piece: Piece, board: 'Board') -> List[Square]:
    return _slide(piece, board, ROOK_DIRECTIONS)


def _bishop_moves(piece: Piece, board: 'Board') -> List[Square]:
    return _slide(piece, board, BISHOP_DIRECTIONS)


def _queen_moves(piece: Piece, board: 'Board') -> List[Square]:
    return _rook_moves(piece, board) + _bishop_moves(piece, board)


def _knight_moves(piece: Piece, board: 'Board') -> List[Square]:
    return _step(piece, KNIGHT_OFFSETS)


def _king_moves(piece: Piece, board: 'Board') -> List[Square]:
    return _step(piece, KING_OFFSETS)


_GENERATORS: Dict[PieceType, Callable[[Piece, 'Board'], List[Square]]] = {
    PieceType.PAWN: _pawn_moves,
    PieceType.ROOK: _rook_moves,
    PieceType.KNIGHT: _knight_moves,
    PieceType.BISHOP: _bishop_moves,
    PieceType.QUEEN: _queen_moves,
    PieceType.KING: _king_moves,
}


def generate_moves(piece: Piece, board: 'Board') -> List[Square]:
    """
    Get the pseudo-legal destinations for a piece.

    Whether the move would expose the owner's king, and whether the target
    holds one of the owner's own pieces (for sliders, knights and kings), is
    decided when the move is executed.

    Args:
        piece: The piece to generate for
        board: The current board state

    Returns:
        List of (row, col) destination squares
    """
    return _GENERATORS[piece.piece_type](piece, board)
