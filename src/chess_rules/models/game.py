"""Turn-taking game driver around a Board."""

from typing import List, Optional, Tuple
from datetime import datetime, timezone
import copy
import logging
import uuid

from .board import Board
from .notation import Square, array_to_position
from .pieces import Player

logger = logging.getLogger(__name__)


class Game:
    """Manages turns, move history and the end-of-game state."""

    def __init__(self, board: Optional[Board] = None):
        """
        Initialize a new chess game.

        Args:
            board: Position to start from; the standard start when omitted
        """
        self.game_id = uuid.uuid4().hex
        self.board = board if board is not None else Board()
        self.start_position = self.board.to_dict()
        self.move_history = []
        self.game_over = False
        self.winner: Optional[Player] = None
        self.finished_at = None
        self.resigned_by: Optional[Player] = None
        self.status_message = f"{self.current_turn.display_name}'s turn"

    @property
    def current_turn(self) -> Player:
        return self.board.current_player

    def make_move(self, from_pos: Square, to_pos: Square) -> dict:
        """
        Attempt to make a move for the side to move.

        Args:
            from_pos: (row, col) of the piece to move
            to_pos: (row, col) of the destination

        Returns:
            Dictionary with success status and message
        """
        if self.game_over:
            return {
                'success': False,
                'message': 'Game is over',
                'game_over': True
            }

        piece = self.board.get_piece(*from_pos)
        if piece is None:
            return {'success': False, 'message': 'No piece at that position'}

        mover = piece.owner
        if mover is not self.current_turn:
            return {'success': False, 'message': f"It's {self.current_turn}'s turn"}

        captured = self.board.get_piece(*to_pos)
        if not self.board.move_piece_position(from_pos[0], from_pos[1], to_pos[0], to_pos[1]):
            return {'success': False, 'message': 'Illegal move'}

        self.move_history.append({
            'player': mover.value,
            'from': list(from_pos),
            'to': list(to_pos),
            'piece': piece.to_dict(),
            'captured': captured.to_dict() if captured else None,
            'notation': self._get_move_notation(piece.name, from_pos, to_pos)
        })

        in_check = self.board.is_in_check(mover.opponent)
        if self.board.is_king_captured():
            winner = self.board.get_winner()
            if winner is not None:
                self._set_game_over(f'{winner.display_name} has won the game!', winner)
        elif self.board.checkmate:
            self._set_game_over(f'Checkmate! {mover.display_name} has won the game!', mover)

        self.board.switch_player()

        if not self.game_over:
            if in_check:
                self.status_message = f'{self.current_turn.display_name} is in check!'
            else:
                self.status_message = f"{self.current_turn.display_name}'s turn"

        return {
            'success': True,
            'message': self.status_message,
            'in_check': in_check,
            'checkmate': self.board.checkmate,
            'game_over': self.game_over,
            'winner': self.winner.value if self.winner else None,
            'captured': captured is not None
        }

    def get_legal_moves(self, position: Square) -> List[Square]:
        """
        Get the destinations the board would accept for a piece.

        Args:
            position: (row, col) of the piece

        Returns:
            List of legal move positions; empty if it is not that piece's turn
        """
        piece = self.board.get_piece(*position)
        if piece is None or piece.owner is not self.current_turn or self.game_over:
            return []

        legal_moves = []
        for target in piece.moves:
            cloned = self.board.clone()
            cloned.run_checkmate_search = False
            if cloned.move_piece_position(position[0], position[1], target[0], target[1]):
                legal_moves.append(target)
        return legal_moves

    def resign(self, player: Player) -> dict:
        """
        Resign the game.

        Args:
            player: Side resigning

        Returns:
            Dictionary with game result
        """
        if self.game_over:
            return {
                'success': False,
                'message': 'Game is over',
                'game_over': True
            }

        winner = player.opponent
        self.resigned_by = player
        self._set_game_over(f'{player.display_name} resigned. {winner.display_name} wins!', winner)

        return {
            'success': True,
            'message': self.status_message,
            'game_over': True,
            'winner': winner.value
        }

    def undo_move(self) -> dict:
        """
        Undo the last action.

        A resignation is undone on its own; otherwise the last move is taken
        back by replaying the rest of the history.

        Returns:
            Dictionary with success status and message
        """
        if self.resigned_by is not None:
            self.resigned_by = None
            self._reopen()
            return {
                'success': True,
                'message': 'Resignation undone',
                'in_check': self.board.is_in_check(self.current_turn)
            }

        if not self.move_history:
            return {
                'success': False,
                'message': 'No moves to undo'
            }

        replayed = self.replay(self.start_position, self.move_history[:-1])
        self.board = replayed.board
        self.move_history = replayed.move_history
        self._reopen()

        return {
            'success': True,
            'message': 'Move undone',
            'in_check': self.board.is_in_check(self.current_turn)
        }

    def _reopen(self) -> None:
        """Clear the end-of-game state and restore the turn status."""
        self.game_over = False
        self.winner = None
        self.finished_at = None
        if self.board.is_in_check(self.current_turn):
            self.status_message = f'{self.current_turn.display_name} is in check!'
        else:
            self.status_message = f"{self.current_turn.display_name}'s turn"

    @classmethod
    def replay(cls, start_position: dict, move_history: List[dict]) -> 'Game':
        """
        Rebuild a game by playing recorded moves from a start position.

        Raises:
            ValueError: If a recorded move is rejected
        """
        game = cls(Board.from_dict(start_position))
        for move in move_history:
            result = game.make_move(tuple(move['from']), tuple(move['to']))
            if not result['success']:
                raise ValueError(f"Cannot replay move {move.get('notation')}: {result['message']}")
        return game

    @staticmethod
    def _get_move_notation(piece_name: str, from_pos: Tuple[int, int],
                           to_pos: Tuple[int, int]) -> str:
        """Describe a move, e.g. 'Pawn: E2 to E4'."""
        return f'{piece_name}: {array_to_position(from_pos)} to {array_to_position(to_pos)}'

    def to_dict(self) -> dict:
        """
        Convert game state to dictionary for JSON serialization.

        Returns:
            Dictionary representation of game state
        """
        return {
            'game_id': self.game_id,
            'board': self.board.to_dict(),
            'start_position': copy.deepcopy(self.start_position),
            'current_turn': self.current_turn.value,
            'move_history': copy.deepcopy(self.move_history),
            'captured_pieces': {
                'white': [p.to_dict() for p in self.board.captured_white],
                'black': [p.to_dict() for p in self.board.captured_black]
            },
            'in_check': self.board.is_in_check(self.current_turn),
            'checkmate': self.board.checkmate,
            'game_over': self.game_over,
            'winner': self.winner.value if self.winner else None,
            'resigned_by': self.resigned_by.value if self.resigned_by else None,
            'status_message': self.status_message,
            'finished_at': self.finished_at
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Game':
        """
        Create a game from dictionary representation.

        Args:
            data: Dictionary containing game state

        Returns:
            Game instance
        """
        game = cls.__new__(cls)
        game.game_id = data.get('game_id', uuid.uuid4().hex)
        game.board = Board.from_dict(data['board'])
        game.start_position = copy.deepcopy(data.get('start_position') or Board().to_dict())
        game.move_history = copy.deepcopy(data.get('move_history', []))
        game.game_over = bool(data.get('game_over', False))
        winner = data.get('winner')
        game.winner = Player(winner) if winner else None
        resigned_by = data.get('resigned_by')
        game.resigned_by = Player(resigned_by) if resigned_by else None
        game.finished_at = data.get('finished_at')
        game.status_message = data.get(
            'status_message', f"{game.current_turn.display_name}'s turn"
        )
        return game

    def _mark_finished(self) -> None:
        """Set finished timestamp if not already set."""
        if not self.finished_at:
            self.finished_at = datetime.now(timezone.utc).isoformat()

    def _set_game_over(self, message: str, winner: Optional[Player] = None) -> None:
        """Set game over state with message and timestamp."""
        self.game_over = True
        self.winner = winner
        self.status_message = message
        self._mark_finished()
        logger.info('Game %s over: %s', self.game_id, message)
