"""
HealthSchedule

A FastAPI-based service for booking healthcare appointments, with
role-based access for patients, doctors and admins, doctor schedules,
and medical records written when a visit is completed.
"""

__version__ = "1.0.0"
