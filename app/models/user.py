"""
User model plus the tables hanging off it.

users_tech links users to technologies; applications records a user's
state for a job, at most one row per (username, job_id).
"""

import enum
from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey, Table, false
from app.core.database import Base


class AppState(str, enum.Enum):
    """
    Where a user stands with a job:

    interested -> applied -> accepted
                          -> rejected
    """
    INTERESTED = "interested"
    APPLIED = "applied"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


users_tech = Table(
    "users_tech",
    Base.metadata,
    Column("username", String(25), ForeignKey("users.username", ondelete="CASCADE"), primary_key=True),
    Column(
        "tech_name",
        String(25),
        ForeignKey("technologies.name", ondelete="CASCADE", onupdate="CASCADE"),
        primary_key=True,
    ),
)


class User(Base):
    __tablename__ = "users"

    username = Column(String(25), primary_key=True)

    # bcrypt hash, never returned to callers
    password = Column(Text, nullable=False)

    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False, server_default=false())

    def __repr__(self):
        return f"<User(username='{self.username}', is_admin={self.is_admin})>"


class Application(Base):
    __tablename__ = "applications"

    username = Column(String(25), ForeignKey("users.username", ondelete="CASCADE"), primary_key=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), primary_key=True)
    app_state = Column(String(25), nullable=False)

    def __repr__(self):
        return f"<Application(username='{self.username}', job_id={self.job_id}, app_state='{self.app_state}')>"
