# hoaxify/models/file_attachment.py
from sqlalchemy import BigInteger, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from hoaxify.core.base import Base


class FileAttachment(Base):
    __tablename__ = "file_attachments"

    id = Column(Integer, primary_key=True, index=True)

    filename = Column(String(64), nullable=False)
    upload_date = Column(BigInteger, nullable=False, index=True)
    # Sniffed MIME type, or "non" when the content was not recognized
    file_type = Column(String(255), nullable=False)

    hoax_id = Column(
        Integer,
        ForeignKey("hoaxes.id", ondelete="CASCADE"),
        nullable=True,
        unique=True,
    )

    hoax = relationship("Hoax", back_populates="file_attachment")
