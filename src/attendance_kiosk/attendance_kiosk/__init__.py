"""Attendance Kiosk package.

Organized by feature modules (users, schedules, attendance, audit) with a thin
Flask controller layer over service/repository layers. The attendance module
holds the shift-classification engine that turns a kiosk scan into a punch.
"""
