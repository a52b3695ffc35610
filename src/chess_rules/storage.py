"""Postgres persistence helpers for game snapshots."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional
import logging
import os

import psycopg
from psycopg import sql
from psycopg.rows import dict_row
from psycopg.types.json import Json

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    """Raised when database requests fail."""


@dataclass(frozen=True)
class DbConfig:
    dsn: str
    table: str = 'chess_rules_games'


def get_db_config() -> Optional[DbConfig]:
    """Load database configuration from environment."""
    dsn = os.environ.get('DATABASE_URL')
    if not dsn:
        return None
    table = os.environ.get('CHESS_GAMES_TABLE') or DbConfig.table
    return DbConfig(dsn=dsn, table=table)


def _require_config() -> DbConfig:
    config = get_db_config()
    if not config:
        raise StorageError('Database configuration missing')
    return config


def _connect(config: DbConfig) -> psycopg.Connection:
    return psycopg.connect(config.dsn, row_factory=dict_row)


def _serialize_row(row: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if row is None:
        return None
    result = dict(row)
    for key in ('finished_at', 'created_at', 'updated_at'):
        value = result.get(key)
        if isinstance(value, datetime):
            result[key] = value.isoformat()
    return result


def save_game_state(game_state: Dict[str, Any]) -> Dict[str, Any]:
    """Persist a game snapshot, replacing any earlier one with the same id."""
    config = _require_config()

    game_id = game_state.get('game_id')
    if not game_id:
        raise StorageError('Game id missing')

    params = {
        'game_id': game_id,
        'current_turn': game_state.get('current_turn'),
        'winner': game_state.get('winner'),
        'status_message': game_state.get('status_message'),
        'game_over': bool(game_state.get('game_over')),
        'checkmate': bool(game_state.get('checkmate')),
        'finished_at': game_state.get('finished_at'),
        'moves_count': len(game_state.get('move_history') or []),
        'game_state': Json(game_state),
    }

    query = sql.SQL(
        """
        insert into {table} (
            game_id,
            current_turn,
            winner,
            status_message,
            game_over,
            checkmate,
            finished_at,
            moves_count,
            game_state
        )
        values (
            %(game_id)s,
            %(current_turn)s,
            %(winner)s,
            %(status_message)s,
            %(game_over)s,
            %(checkmate)s,
            %(finished_at)s,
            %(moves_count)s,
            %(game_state)s
        )
        on conflict (game_id) do update
        set
            current_turn = excluded.current_turn,
            winner = excluded.winner,
            status_message = excluded.status_message,
            game_over = excluded.game_over,
            checkmate = excluded.checkmate,
            finished_at = excluded.finished_at,
            moves_count = excluded.moves_count,
            game_state = excluded.game_state
        returning game_id
        """
    ).format(table=sql.Identifier(config.table))

    try:
        with _connect(config) as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
                row = cur.fetchone()
    except psycopg.Error as exc:
        raise StorageError(str(exc)) from exc

    if not row:
        raise StorageError('Game update denied')

    logger.debug('Stored game %s (%d moves)', game_id, params['moves_count'])
    return {'game_id': row.get('game_id')}


def list_games(limit: int = 50) -> List[Dict[str, Any]]:
    """Return summaries of the most recently stored games."""
    config = _require_config()

    query = sql.SQL(
        """
        select
            game_id,
            current_turn,
            winner,
            status_message,
            game_over,
            checkmate,
            finished_at,
            moves_count
        from {table}
        order by finished_at desc nulls last, game_id
        limit %s
        """
    ).format(table=sql.Identifier(config.table))

    try:
        with _connect(config) as conn:
            with conn.cursor() as cur:
                cur.execute(query, (limit,))
                rows = cur.fetchall()
    except psycopg.Error as exc:
        raise StorageError(str(exc)) from exc

    return [_serialize_row(row) for row in rows]


def get_game(game_id: str) -> Optional[Dict[str, Any]]:
    """Return a single stored game, or None if the id is unknown."""
    config = _require_config()

    query = sql.SQL(
        "select * from {table} where game_id = %s limit 1"
    ).format(table=sql.Identifier(config.table))

    try:
        with _connect(config) as conn:
            with conn.cursor() as cur:
                cur.execute(query, (game_id,))
                row = cur.fetchone()
    except psycopg.Error as exc:
        raise StorageError(str(exc)) from exc

    return _serialize_row(row)
