"""QR Attendance package.

This package is organized by feature modules (attendance, schedules, holidays,
reconciliation, reminders, reports, ...) with a thin Flask controller layer and
service/repository layers underneath.
"""
