from sqlalchemy import Column, Integer, Float, ForeignKey, DateTime, Index, Enum as SQLEnum
from sqlalchemy.orm import relationship
from app.core.database import Base, utcnow
import enum


class LoanPurpose(str, enum.Enum):
    SEEDS = "Seeds"
    FERTILIZERS = "Fertilizers"
    EQUIPMENT = "Equipment"
    IRRIGATION = "Irrigation"
    LIVESTOCK = "Livestock"
    OTHER = "Other"


class LoanStatus(str, enum.Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    DISBURSED = "Disbursed"
    REJECTED = "Rejected"
    CLOSED = "Closed"


class Loan(Base):
    """Credit application tied to exactly one farmer"""
    __tablename__ = "loans"
    __table_args__ = (
        Index("ix_loans_farmer_status", "farmer_id", "status"),
    )

    id = Column(Integer, primary_key=True, index=True)
    farmer_id = Column(Integer, ForeignKey("farmers.id"), nullable=False)

    # Terms
    loan_amount = Column(Float, nullable=False)
    interest_rate = Column(Float, nullable=False)
    tenure = Column(Integer, nullable=False)  # months
    purpose = Column(SQLEnum(LoanPurpose), nullable=False)

    # Workflow
    status = Column(SQLEnum(LoanStatus), default=LoanStatus.PENDING, nullable=False)
    applied_date = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    approval_date = Column(DateTime(timezone=True), nullable=True)
    disbursement_date = Column(DateTime(timezone=True), nullable=True)
    ai_score = Column(Integer, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    # One-way: farmers do not keep a loan collection
    farmer = relationship("Farmer", lazy="selectin")

    def __repr__(self):
        return f"<Loan(id={self.id}, farmer_id={self.farmer_id}, status={self.status})>"
