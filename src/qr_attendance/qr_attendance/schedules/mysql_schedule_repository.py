from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_hours, normalize_mysql_time
from .model import Schedule
from .repository import ScheduleRepository

_COLUMNS = "schedule_id, user_id, day_of_week, start_time, end_time, break_start, break_hours"


def _to_schedule(r: Dict[str, Any]) -> Schedule:
    return Schedule(
        schedule_id=int(r["schedule_id"]),
        user_id=int(r["user_id"]),
        day_of_week=int(r["day_of_week"]),
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        break_start=normalize_mysql_time(r.get("break_start")),
        break_hours=normalize_hours(r.get("break_hours")),
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_user_and_day(self, *, user_id: int, day_of_week: int) -> Optional[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM schedules WHERE user_id=%s AND day_of_week=%s",
                (int(user_id), int(day_of_week)),
            )
            r = fetchone(cur)
            return _to_schedule(r) if r else None

    def list_for_user(self, *, user_id: int) -> Sequence[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM schedules WHERE user_id=%s ORDER BY day_of_week",
                (int(user_id),),
            )
            return [_to_schedule(r) for r in fetchall(cur)]

    def replace_for_user(self, *, user_id: int, schedules: Sequence[Schedule]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM schedules WHERE user_id=%s", (int(user_id),))
            for sc in schedules:
                cur.execute(
                    """
                    INSERT INTO schedules(user_id, day_of_week, start_time, end_time, break_start, break_hours)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(user_id),
                        int(sc.day_of_week),
                        sc.start_time,
                        sc.end_time,
                        sc.break_start,
                        sc.break_hours,
                    ),
                )
            return len(schedules)
