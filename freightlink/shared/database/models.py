# freightlink/shared/database/models.py
from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Date, Text, Float,
    Numeric, ForeignKey, UniqueConstraint, CheckConstraint, Index
)
from sqlalchemy.orm import relationship, declarative_base
from datetime import datetime

Base = declarative_base()

# =====================================================
# TIMESTAMP MIXIN
# =====================================================
class TimestampMixin:
    """Adds created_at and updated_at columns"""
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)


# =====================================================
# USERS
# =====================================================

class User(Base, TimestampMixin):
    """Driver or business account"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Shared contact data
    contact_number = Column(String(50))
    address = Column(Text)
    profile_picture = Column(String(500))

    # Driver
    vehicle_type = Column(String(100))
    vehicle_capacity = Column(String(100))
    license_number = Column(String(100))

    # Business
    business_name = Column(String(255))
    website = Column(String(255))
    description = Column(Text)

    __table_args__ = (
        CheckConstraint("role IN ('driver', 'business')", name="ck_users_role"),
    )

    @property
    def is_driver(self) -> bool:
        return self.role == "driver"

    @property
    def is_business(self) -> bool:
        return self.role == "business"


# =====================================================
# SHIPMENTS
# =====================================================

class Shipment(Base, TimestampMixin):
    """Freight job posted by a business"""
    __tablename__ = "shipments"

    id = Column(Integer, primary_key=True, index=True)
    business_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    driver_id = Column(Integer, ForeignKey("users.id"), index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text)
    from_city = Column(String(120), nullable=False)
    to_city = Column(String(120), nullable=False)
    weight = Column(Float, nullable=False)
    volume = Column(String(100), nullable=False)
    cost = Column(Numeric(12, 2), nullable=False, default=0)
    deadline = Column(Date, nullable=False)

    status = Column(String(20), nullable=False, default='pending')

    # Planned route and live position
    pickup_lat = Column(Float)
    pickup_lng = Column(Float)
    dropoff_lat = Column(Float)
    dropoff_lng = Column(Float)
    current_lat = Column(Float)
    current_lng = Column(Float)
    last_location_update = Column(DateTime)

    # Optimistic concurrency counter
    version = Column(Integer, nullable=False)

    # Relationships
    business = relationship("User", foreign_keys=[business_id])
    driver = relationship("User", foreign_keys=[driver_id])
    requests = relationship(
        "ShipmentRequest",
        back_populates="shipment",
        order_by="ShipmentRequest.id",
        cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint("weight > 0", name="ck_shipments_weight_positive"),
        CheckConstraint("cost >= 0", name="ck_shipments_cost_non_negative"),
        Index("ix_shipments_city_status", "from_city", "status"),
    )

    __mapper_args__ = {"version_id_col": version}


class ShipmentRequest(Base, TimestampMixin):
    """A driver's bid to carry a shipment"""
    __tablename__ = "shipment_requests"

    id = Column(Integer, primary_key=True, index=True)
    shipment_id = Column(Integer, ForeignKey("shipments.id", ondelete="CASCADE"), nullable=False, index=True)
    driver_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default='pending')

    # Relationships
    shipment = relationship("Shipment", back_populates="requests")
    driver = relationship("User", foreign_keys=[driver_id])

    __table_args__ = (
        UniqueConstraint("shipment_id", "driver_id", name="uq_shipment_requests_shipment_driver"),
    )
