from sqlalchemy import Column, Integer, String, Float, Boolean, ForeignKey, DateTime, Text, JSON, Index, Enum as SQLEnum
from sqlalchemy.orm import relationship
from app.core.database import Base, utcnow
import enum


class ProductCategory(str, enum.Enum):
    VEGETABLES = "Vegetables"
    FRUITS = "Fruits"
    GRAINS = "Grains"
    DAIRY = "Dairy"
    PULSES = "Pulses"
    SPICES = "Spices"
    OILS_SEEDS = "Oils & Seeds"
    OTHER = "Other"


class ProductUnit(str, enum.Enum):
    KG = "kg"
    QUINTAL = "quintal"
    TON = "ton"
    LITER = "liter"
    DOZEN = "dozen"
    PIECE = "piece"


class DeliveryOption(str, enum.Enum):
    FARM_PICKUP = "farm-pickup"
    LOCAL_DELIVERY = "local-delivery"
    REGIONAL_DELIVERY = "regional-delivery"
    NATIONWIDE = "nationwide"


class ProductStatus(str, enum.Enum):
    """Moderation status of a listing"""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    SOLD = "sold"


class Product(Base):
    """Marketplace listing"""
    __tablename__ = "products"
    __table_args__ = (
        Index("ix_products_category_status", "category", "status"),
        Index("ix_products_district_state", "district", "state"),
    )

    id = Column(Integer, primary_key=True, index=True)

    # Listing
    product_name = Column(String(200), nullable=False)
    category = Column(SQLEnum(ProductCategory), nullable=False)
    quantity = Column(Float, nullable=False)
    unit = Column(SQLEnum(ProductUnit), default=ProductUnit.KG, nullable=False)
    price = Column(Float, nullable=False, index=True)
    description = Column(Text, nullable=True)
    organic_certified = Column(Boolean, default=False, nullable=False)
    delivery_options = Column(JSON, default=list, nullable=False)
    images = Column(JSON, default=list, nullable=False)  # URLs or data URIs

    # Location
    location = Column(String(200), nullable=False)
    district = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    pincode = Column(String(6), nullable=False)

    # Contact
    contact_name = Column(String(100), nullable=False)
    contact_phone = Column(String(20), nullable=False)
    contact_email = Column(String(255), nullable=True)

    # Moderation and engagement
    status = Column(SQLEnum(ProductStatus), default=ProductStatus.PENDING, nullable=False)
    seller_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    views = Column(Integer, default=0, nullable=False)
    inquiries = Column(Integer, default=0, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    seller = relationship("User", lazy="selectin")

    def __repr__(self):
        return f"<Product(id={self.id}, name={self.product_name}, status={self.status})>"
