from sqlalchemy import Column, Integer, String, Text, Numeric, ForeignKey, CheckConstraint, Table
from sqlalchemy.orm import relationship
from app.core.database import Base


# Job <-> Technology link; no payload
jobs_tech = Table(
    "jobs_tech",
    Base.metadata,
    Column("job_id", Integer, ForeignKey("jobs.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "tech_name",
        String(25),
        ForeignKey("technologies.name", ondelete="CASCADE", onupdate="CASCADE"),
        primary_key=True,
    ),
)


class Job(Base):
    """
    A job posting belonging to one company.

    salary is a non-negative whole number, equity a fraction no larger
    than 1.0; both may be null.
    """
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(Text, nullable=False, index=True)
    salary = Column(Integer, CheckConstraint("salary >= 0"), nullable=True)
    equity = Column(Numeric, CheckConstraint("equity <= 1.0"), nullable=True)
    company_handle = Column(
        String(25),
        ForeignKey("companies.handle", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Relationships
    company = relationship("Company", back_populates="jobs")

    def __repr__(self):
        return f"<Job(id={self.id}, title='{self.title}', company_handle='{self.company_handle}')>"
