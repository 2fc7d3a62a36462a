"""Shift Attendance package.

Geofenced clock-in/clock-out engine for scheduled shifts, organized by
feature modules (geo, geofence, shifts, attendance, payroll, ...) with
service/repository layers. HTTP and authorization live outside this package.
"""
