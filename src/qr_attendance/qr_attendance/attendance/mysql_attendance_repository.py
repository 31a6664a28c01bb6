from __future__ import annotations

from contextlib import contextmanager
from dataclasses import replace
from datetime import date, tzinfo
from typing import Any, Dict, Iterator, Optional, Sequence

from ..common.datetime_utils import as_local
from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_db_datetime
from .model import AttendanceRecord
from .repository import AttendanceRepository, LockedAttendance

_COLUMNS = "attendance_id, user_id, work_date, time_in, time_out, status, notes"


class MySQLAttendanceRepository(AttendanceRepository):
    """DATETIME columns store local wall-clock time in the deployment timezone."""

    def __init__(self, conn_factory: DatabaseConnection, *, tz: tzinfo):
        self._conn_factory = conn_factory
        self._tz = tz

    def _to_record(self, r: Dict[str, Any]) -> AttendanceRecord:
        time_in = r.get("time_in")
        time_out = r.get("time_out")
        return AttendanceRecord(
            attendance_id=int(r["attendance_id"]),
            user_id=int(r["user_id"]),
            work_date=r["work_date"],
            time_in=as_local(time_in, self._tz) if time_in else None,
            time_out=as_local(time_out, self._tz) if time_out else None,
            status=AttendanceStatus(r["status"]),
            notes=r.get("notes"),
        )

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendances WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return self._to_record(r) if r else None

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendances WHERE user_id=%s AND work_date=%s",
                (int(user_id), work_date),
            )
            r = fetchone(cur)
            return self._to_record(r) if r else None

    @contextmanager
    def lock_for_update(
        self,
        *,
        user_id: int,
        work_date: date,
        create_status: Optional[AttendanceStatus] = None,
    ) -> Iterator[LockedAttendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            created = False
            if create_status is not None:
                # Concurrent creators block on the unique key until the first one commits.
                cur.execute(
                    "INSERT IGNORE INTO attendances(user_id, work_date, status) VALUES(%s,%s,%s)",
                    (int(user_id), work_date, create_status.value),
                )
                created = cur.rowcount == 1

            cur.execute(
                f"SELECT {_COLUMNS} FROM attendances WHERE user_id=%s AND work_date=%s FOR UPDATE",
                (int(user_id), work_date),
            )
            r = fetchone(cur)
            current = self._to_record(r) if r else None
            if create_status is not None and current is None:
                raise RuntimeError(f"Could not create attendance row for user {user_id} on {work_date}")

            def save(record: AttendanceRecord) -> AttendanceRecord:
                cur.execute(
                    """
                    INSERT INTO attendances(user_id, work_date, time_in, time_out, status, notes)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    ON DUPLICATE KEY UPDATE
                        time_in=VALUES(time_in),
                        time_out=VALUES(time_out),
                        status=VALUES(status),
                        notes=VALUES(notes)
                    """,
                    (
                        int(record.user_id),
                        record.work_date,
                        to_db_datetime(record.time_in),
                        to_db_datetime(record.time_out),
                        record.status.value,
                        record.notes,
                    ),
                )
                if record.attendance_id is not None:
                    return record

                cur.execute(
                    "SELECT attendance_id FROM attendances WHERE user_id=%s AND work_date=%s",
                    (int(record.user_id), record.work_date),
                )
                row = fetchone(cur)
                return replace(record, attendance_id=int(row["attendance_id"]) if row else None)

            yield LockedAttendance(record=current, created=created, _save=save)

    def last_work_date(self, user_id: int) -> Optional[date]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT MAX(work_date) AS last_date FROM attendances WHERE user_id=%s", (int(user_id),))
            r = fetchone(cur)
            return r["last_date"] if r and r.get("last_date") else None

    def list_range(
        self,
        *,
        start: date,
        end: date,
        user_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["work_date BETWEEN %s AND %s"]
        params: list[object] = [start, end]
        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendances WHERE {where} ORDER BY work_date ASC, user_id ASC",
                tuple(params),
            )
            return [self._to_record(r) for r in fetchall(cur)]

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendances WHERE user_id=%s ORDER BY work_date DESC LIMIT %s",
                (int(user_id), int(limit)),
            )
            return [self._to_record(r) for r in fetchall(cur)]
