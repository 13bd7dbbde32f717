from sqlalchemy import Column, String, CheckConstraint
from app.core.database import Base


class Technology(Base):
    """A technology tag; names are stored lowercase only."""
    __tablename__ = "technologies"
    __table_args__ = (
        CheckConstraint("name = lower(name)", name="technologies_name_lowercase"),
    )

    name = Column(String(25), primary_key=True)

    def __repr__(self):
        return f"<Technology(name='{self.name}')>"
