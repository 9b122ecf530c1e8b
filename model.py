# model.py
from sqlalchemy import Column, Integer, String, Float, DateTime
from sqlalchemy.sql import func
from database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)  # Signup order
    mobile_number = Column(String, unique=True, index=True, nullable=False)
    name = Column(String)
    email = Column(String)
    password_hash = Column(String, nullable=False)  # SHA-256 hex digest
    mpin_hash = Column(String, nullable=False)  # pbkdf2_sha256, salted
    wallet_amount = Column(Float, default=0.0, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
