# hoaxify/models/user.py
from sqlalchemy import Boolean, Column, Integer, String, Text, true
from sqlalchemy.orm import relationship

from hoaxify.core.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    username = Column(String(32), nullable=False)
    email = Column(String(255), index=True, nullable=False)
    password = Column(String(255), nullable=True)

    # Accounts start inactive until the activation token is redeemed.
    inactive = Column(Boolean, nullable=False, default=True, server_default=true())
    activation_token = Column(String(64), nullable=True, index=True)
    password_reset_token = Column(String(64), nullable=True, index=True)

    # Stored filename under UPLOAD_DIR/PROFILE_DIR
    image = Column(Text, nullable=True)

    hoaxes = relationship(
        "Hoax",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    tokens = relationship(
        "Token",
        back_populates="user",
        cascade="all, delete-orphan",
    )
