from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime, Text, JSON, Enum as SQLEnum
from sqlalchemy.orm import relationship
from app.core.database import Base, utcnow
import enum


class CropType(str, enum.Enum):
    """Primary crop grown by the farmer"""
    RICE = "Rice"
    WHEAT = "Wheat"
    COTTON = "Cotton"
    SUGARCANE = "Sugarcane"
    VEGETABLES = "Vegetables"
    FRUITS = "Fruits"
    OTHER = "Other"


class FarmerLoanStatus(str, enum.Enum):
    """Summary loan status, maintained by the loan workflow only"""
    NONE = "None"
    APPLIED = "Applied"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    ACTIVE = "Active"
    CLOSED = "Closed"


class Farmer(Base):
    """Registered producer with an agronomic and credit profile"""
    __tablename__ = "farmers"

    id = Column(Integer, primary_key=True, index=True)

    # Identity
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(10), unique=True, index=True, nullable=False)
    address = Column(JSON, nullable=True)  # village, district, state, pincode

    # Agronomic profile
    land_size = Column(Float, nullable=False)
    crop_type = Column(SQLEnum(CropType), default=CropType.OTHER, nullable=False)

    # Credit
    loan_status = Column(SQLEnum(FarmerLoanStatus), default=FarmerLoanStatus.NONE, nullable=False)
    credit_score = Column(Integer, default=500, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    ai_recommendations = relationship(
        "FarmerRecommendation",
        back_populates="farmer",
        cascade="all, delete-orphan",
        order_by="[FarmerRecommendation.timestamp, FarmerRecommendation.id]",
        lazy="selectin"
    )

    def __repr__(self):
        return f"<Farmer(id={self.id}, email={self.email}, loan_status={self.loan_status})>"


class FarmerRecommendation(Base):
    """AI advisory note attached to a farmer"""
    __tablename__ = "farmer_recommendations"

    id = Column(Integer, primary_key=True, index=True)
    farmer_id = Column(Integer, ForeignKey("farmers.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    timestamp = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    farmer = relationship("Farmer", back_populates="ai_recommendations")
