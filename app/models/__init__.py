"""
Database models package.
"""

from app.models.company import Company
from app.models.job import Job, jobs_tech
from app.models.technology import Technology
from app.models.user import User, Application, AppState, users_tech

__all__ = ["Company", "Job", "jobs_tech", "Technology", "User", "Application", "AppState", "users_tech"]
