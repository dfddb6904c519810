import enum
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum, Text, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from sqlalchemy.ext.orderinglist import ordering_list
from taskboard.db.session import Base

class ProjectStatus(str, enum.Enum):
    active = "active"
    archived = "archived"

class ProjectRole(str, enum.Enum):
    project_manager = "Project Manager"
    member = "Member"

class Project(Base):
    __tablename__ = "projects"
    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    status = Column(Enum(ProjectStatus), default=ProjectStatus.active, nullable=False, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    owner = relationship("User")
    members = relationship(
        "ProjectMember",
        back_populates="project",
        order_by="ProjectMember.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
    )

    # optimistic concurrency: a stale read-modify-write raises StaleDataError
    __mapper_args__ = {"version_id_col": version}

class ProjectMember(Base):
    __tablename__ = "project_members"
    id = Column(Integer, primary_key=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    role = Column(Enum(ProjectRole), default=ProjectRole.member, nullable=False)
    position = Column(Integer, nullable=False, default=0)
    project = relationship("Project", back_populates="members")
    user = relationship("User")
    __table_args__ = (UniqueConstraint('project_id','user_id', name='uq_project_user'),)
