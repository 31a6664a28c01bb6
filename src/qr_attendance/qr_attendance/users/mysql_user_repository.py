from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = "user_id, name, email, role, qr_token, is_active"


def _to_user(r: Dict[str, Any]) -> User:
    return User(
        user_id=int(r["user_id"]),
        name=r["name"],
        email=r["email"],
        role=Role(r["role"]),
        qr_token=r.get("qr_token"),
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            r = fetchone(cur)
            return _to_user(r) if r else None

    def get_by_qr_token(self, qr_token: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM users WHERE qr_token=%s AND is_active=1",
                (qr_token,),
            )
            r = fetchone(cur)
            return _to_user(r) if r else None

    def list_non_admin(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM users WHERE role<>%s AND is_active=1 ORDER BY user_id",
                (Role.ADMIN.value,),
            )
            return [_to_user(r) for r in fetchall(cur)]

    def list_without_qr_token(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE qr_token IS NULL ORDER BY user_id")
            return [_to_user(r) for r in fetchall(cur)]

    def set_qr_token(self, user_id: int, qr_token: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET qr_token=%s WHERE user_id=%s", (qr_token, int(user_id)))
            return cur.rowcount > 0
