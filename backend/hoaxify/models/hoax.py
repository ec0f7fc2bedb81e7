# hoaxify/models/hoax.py
from sqlalchemy import BigInteger, Column, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from hoaxify.core.base import Base


class Hoax(Base):
    __tablename__ = "hoaxes"

    id = Column(Integer, primary_key=True, index=True)

    content = Column(Text, nullable=False)
    timestamp = Column(BigInteger, nullable=False, index=True)

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    user = relationship("User", back_populates="hoaxes")

    file_attachment = relationship(
        "FileAttachment",
        back_populates="hoax",
        uselist=False,
        cascade="all, delete-orphan",
    )
