from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, false, func
from db import Base


class DemoRequest(Base):
    __tablename__ = "demo_requests"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String, nullable=True)
    email = Column(String, index=True, nullable=True)
    phone = Column(String, nullable=True)
    hotel_name = Column(String, nullable=True)
    position = Column(String, nullable=True)
    message = Column(Text, nullable=True)
    form_type = Column(String, nullable=True)

    data_processing_consent = Column(Boolean, nullable=False, server_default=false())
    marketing_consent = Column(Boolean, nullable=False, server_default=false())

    # Public demo form writes submitted_at, not created_at
    submitted_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
