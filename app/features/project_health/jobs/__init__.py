"""
Job runners for the project health feature.
"""

from .automation_job import start_project_automation_scheduler

__all__ = ["start_project_automation_scheduler"]
