# hoaxify/models/token.py
from sqlalchemy import BigInteger, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from hoaxify.core.base import Base


class Token(Base):
    __tablename__ = "tokens"

    id = Column(Integer, primary_key=True, index=True)

    token = Column(String(64), nullable=False, index=True)

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    # Epoch millis of the last successful use; drives the sliding expiry.
    last_used_at = Column(BigInteger, nullable=False, index=True)

    user = relationship("User", back_populates="tokens")
