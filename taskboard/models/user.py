import enum
from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.sql import func
from taskboard.db.session import Base

class GlobalRole(str, enum.Enum):
    admin = "Admin"
    project_manager = "Project Manager"
    member = "Member"

class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(Enum(GlobalRole), default=GlobalRole.member, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
