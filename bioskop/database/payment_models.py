# bioskop/database/payment_models.py
"""
Payment-related database models
"""
from sqlalchemy import Column, Integer, String, DateTime, Float
from datetime import datetime
from bioskop.database.database import Base


class Payment(Base):
    """Payment transactions created through the gateway"""
    __tablename__ = "payments"

    payment_id = Column(String(100), primary_key=True, index=True)  # gateway order_id
    ticket_id = Column(Integer, nullable=False, index=True)  # ticket id, or the group id for group payments
    group_ticket_id = Column(Integer, nullable=True, index=True)  # set only for group payments
    payment_method = Column(String(50), nullable=False)  # e.g. bank_transfer:bca
    payment_status = Column(String(50), nullable=False, default="pending")  # pending, settlement, expire, cancel, deny
    amount = Column(Float, nullable=False)
    va_number = Column(String(50), nullable=True)
    payment_date = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
