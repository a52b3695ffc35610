"""Square coordinates and algebraic notation.

Squares are ``(row, col)`` tuples. Row 0 is the top edge of the printed
board (rank 8) and row 7 the bottom edge (rank 1); column 0 is file A.
"""

from typing import Iterator, Tuple

Square = Tuple[int, int]

BOARD_SIZE = 8
FILES = 'ABCDEFGH'
RANKS = '12345678'


def is_on_board(row: int, col: int) -> bool:
    """Check if a (row, col) pair is within board bounds."""
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


def all_squares() -> Iterator[Square]:
    """Iterate over the 64 squares, row by row from the top edge."""
    for row in range(BOARD_SIZE):
        for col in range(BOARD_SIZE):
            yield (row, col)


def position_to_array(position: str) -> Square:
    """
    Convert algebraic notation to board indices.

    Args:
        position: Square name such as 'E2' (case-insensitive)

    Returns:
        (row, col) tuple, e.g. 'E2' -> (6, 4)

    Raises:
        ValueError: If the string is not a square name
    """
    if not isinstance(position, str) or len(position) != 2:
        raise ValueError(f'Invalid square name: {position!r}')

    file_char = position[0].upper()
    rank_char = position[1]
    if file_char not in FILES or rank_char not in RANKS:
        raise ValueError(f'Invalid square name: {position!r}')

    row = BOARD_SIZE - int(rank_char)
    col = ord(file_char) - ord('A')
    return (row, col)


def array_to_position(square: Square) -> str:
    """
    Convert board indices to algebraic notation.

    Args:
        square: (row, col) tuple

    Returns:
        Square name, e.g. (6, 4) -> 'E2'

    Raises:
        ValueError: If the indices are off the board
    """
    row, col = square
    if not is_on_board(row, col):
        raise ValueError(f'Square off the board: {square!r}')
    return f'{FILES[col]}{BOARD_SIZE - row}'
