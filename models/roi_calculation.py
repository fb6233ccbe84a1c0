from sqlalchemy import Boolean, Column, DateTime, Integer, Numeric, String, false, func
from db import Base


class RoiCalculation(Base):
    __tablename__ = "roi_calculations"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String, nullable=True)
    email = Column(String, index=True, nullable=True)
    phone = Column(String, nullable=True)
    hotel_name = Column(String, nullable=True)
    hotel_size = Column(Integer, nullable=True)

    current_revenue = Column(Numeric(14, 2), nullable=True)
    calculated_roi = Column(Numeric(14, 2), nullable=True)
    monthly_savings = Column(Numeric(14, 2), nullable=True)
    annual_revenue = Column(Numeric(14, 2), nullable=True)

    data_processing_consent = Column(Boolean, nullable=False, server_default=false())
    marketing_consent = Column(Boolean, nullable=False, server_default=false())

    submitted_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
