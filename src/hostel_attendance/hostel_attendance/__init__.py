"""Hostel Attendance package.

Feature modules (geofence, biometrics, subjects, attendance) each keep a thin
Flask controller on top of service and repository layers.
"""
