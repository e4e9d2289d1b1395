"""Data quality checks for the street sweeping schedule"""
from .schedule_validator import ScheduleValidator, ValidationResult

__all__ = ["ScheduleValidator", "ValidationResult"]
