from sqlalchemy import Column, Integer, String, DateTime
from taskboard.db.session import Base

class RevokedToken(Base):
    __tablename__ = "revoked_tokens"
    id = Column(Integer, primary_key=True)
    token = Column(String, unique=True, index=True, nullable=False)
    # naive UTC; compared against utcnow() when checking and purging
    expires_at = Column(DateTime, nullable=False, index=True)
