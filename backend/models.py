# backend/models.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import relationship

from .db import Base


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"
    id = Column(String, primary_key=True, default=new_id)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)


class Artisan(Base):
    __tablename__ = "artisans"
    id = Column(String, primary_key=True, default=new_id)   # same as users.id when created via auth
    name = Column(String, index=True)
    name_hi = Column(String, default="")
    bio = Column(Text, default="")
    bio_hi = Column(Text, default="")
    craft = Column(String, default="")
    craft_hi = Column(String, default="")
    location = Column(String, index=True, default="")
    location_hi = Column(String, default="")
    profile_image = Column(String, default="")
    products = relationship("Product", back_populates="artisan")


class Product(Base):
    __tablename__ = "products"
    id = Column(String, primary_key=True, default=new_id)
    artisan_id = Column(String, ForeignKey("artisans.id"), index=True)
    name = Column(String, index=True)
    name_hi = Column(String, default="")
    description = Column(Text, default="")
    description_hi = Column(Text, default="")
    category = Column(String, index=True, default="")
    category_hi = Column(String, default="")
    materials = Column(JSON, default=list)
    materials_hi = Column(JSON, default=list)
    price = Column(Float, nullable=False)
    stock = Column(Integer, default=0)
    images = Column(JSON, default=list)                      # public URLs
    created_at = Column(DateTime(timezone=True), default=utcnow)
    artisan = relationship("Artisan", back_populates="products")


class Shipment(Base):
    __tablename__ = "shipments"
    id = Column(String, primary_key=True, default=new_id)
    artisan_id = Column(String, index=True)
    product_id = Column(String, index=True)
    destination = Column(String)
    package_weight_kg = Column(Float)
    package_dimensions_cm = Column(JSON)                     # {"length", "width", "height"}
    declared_value = Column(Float)
    selected_carrier = Column(String)
    service_type = Column(String)
    shipping_cost = Column(Float)
    estimated_delivery_date = Column(String)
    tracking_number = Column(String, unique=True, index=True)
    shipping_label_url = Column(String)
    ai_packaging_advice = Column(Text)
    ai_risk_advice = Column(Text)
    ai_carrier_choice_advice = Column(Text)
    ai_hs_code = Column(String, nullable=True)
    ai_customs_declaration = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)


class Translation(Base):
    __tablename__ = "translations"
    lang = Column(String, primary_key=True)
    data = Column(JSON, default=dict)
