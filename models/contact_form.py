from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, false, func
from db import Base


class ContactForm(Base):
    __tablename__ = "contact_forms"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String, nullable=True)
    email = Column(String, index=True, nullable=True)
    phone = Column(String, nullable=True)
    position = Column(String, nullable=True)
    hotel_name = Column(String, nullable=True)
    company = Column(String, nullable=True)
    subject = Column(String, nullable=True)
    message = Column(Text, nullable=True)
    integration_type = Column(String, nullable=True)

    # Set by staff from the dashboard; the only mutable column on a lead
    responded_at = Column(DateTime(timezone=True), nullable=True)

    data_processing_consent = Column(Boolean, nullable=False, server_default=false())
    marketing_consent = Column(Boolean, nullable=False, server_default=false())

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
