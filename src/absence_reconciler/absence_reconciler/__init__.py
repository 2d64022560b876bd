"""Absence reconciliation package.

Organized by feature modules (users, schedules, sessions, attendance, absences)
with a document-store repository layer, a service layer, and a thin Flask
controller layer on top.
"""
