from __future__ import annotations

from datetime import date
from typing import Sequence

from ..core.enums import HolidayType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Holiday
from .repository import HolidayRepository


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def exists_on(self, value: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT holiday_id
                FROM holidays
                WHERE holiday_date=%s
                   OR (is_recurring=1 AND MONTH(holiday_date)=%s AND DAY(holiday_date)=%s)
                LIMIT 1
                """,
                (value, value.month, value.day),
            )
            return fetchone(cur) is not None

    def list_all(self) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT holiday_id, name, holiday_date, holiday_type, is_recurring
                FROM holidays
                ORDER BY holiday_date
                """
            )
            return [
                Holiday(
                    holiday_id=int(r["holiday_id"]),
                    name=r["name"],
                    holiday_date=r["holiday_date"],
                    holiday_type=HolidayType(r["holiday_type"]),
                    is_recurring=bool(r["is_recurring"]),
                )
                for r in fetchall(cur)
            ]

    def create(self, *, name: str, holiday_date: date, holiday_type: HolidayType, is_recurring: bool) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO holidays(name, holiday_date, holiday_type, is_recurring)
                VALUES(%s,%s,%s,%s)
                """,
                (name, holiday_date, holiday_type.value, int(bool(is_recurring))),
            )
            return int(cur.lastrowid)

    def delete(self, *, holiday_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM holidays WHERE holiday_id=%s", (int(holiday_id),))
            return cur.rowcount > 0
