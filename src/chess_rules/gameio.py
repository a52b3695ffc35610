"""Save and load whole-board snapshots as JSON files."""

import json
import logging
import os
from typing import Union

from .models import Board

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


class GameIOError(RuntimeError):
    """Raised when a snapshot cannot be written or read back."""


def save_game(board: Board, path: PathLike) -> None:
    """
    Write the full board state to a file.

    Args:
        board: Board to snapshot
        path: Destination file; overwritten if present
    """
    try:
        with open(path, 'w', encoding='utf-8') as fh:
            json.dump(board.to_dict(), fh, ensure_ascii=False, indent=2)
    except OSError as exc:
        raise GameIOError(f'Cannot save game to {path}: {exc}') from exc
    logger.info('Saved game to %s', path)


def load_game(path: PathLike) -> Board:
    """
    Read a board previously written by :func:`save_game`.

    Raises:
        GameIOError: If the file is missing or does not hold a board snapshot
    """
    try:
        with open(path, encoding='utf-8') as fh:
            data = json.load(fh)
        board = Board.from_dict(data)
    except OSError as exc:
        raise GameIOError(f'Cannot load game from {path}: {exc}') from exc
    except (ValueError, KeyError, TypeError, IndexError) as exc:
        raise GameIOError(f'Invalid game file {path}: {exc}') from exc
    logger.info('Loaded game from %s', path)
    return board
