# backend/crud.py
import logging
import secrets
import time
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from . import config
from .models import Artisan, Product, Shipment, Translation
from .schemas import ShipmentCreate

log = logging.getLogger(__name__)

DEFAULT_PROFILE_IMAGE = "https://placehold.co/100x100.png"


# -------- Products --------
def list_products(
    db: Session,
    q: str = "",
    category: str = "",
    max_price: Optional[float] = None,
    artisan_id: str = "",
) -> List[Product]:
    qs = db.query(Product)
    if q:
        like = f"%{q}%"
        qs = qs.filter(or_(Product.name.ilike(like), Product.description.ilike(like)))
    if category and category != "all":
        qs = qs.filter(Product.category == category)
    if max_price is not None:
        qs = qs.filter(Product.price <= max_price)
    if artisan_id:
        qs = qs.filter(Product.artisan_id == artisan_id)
    return qs.order_by(Product.name.asc()).all()


def list_categories(db: Session) -> List[str]:
    rows = db.query(Product.category).distinct().order_by(Product.category.asc()).all()
    return [r[0] for r in rows if r[0]]


def get_product(db: Session, product_id: str) -> Optional[Product]:
    return db.get(Product, product_id)


def create_product(db: Session, artisan_id: str, data: dict, images: List[str]) -> Product:
    product = Product(artisan_id=artisan_id, images=list(images), **data)
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def update_product(db: Session, product: Product, changes: dict, new_images: Optional[List[str]] = None) -> Product:
    for key, value in changes.items():
        setattr(product, key, value)
    if new_images:
        product.images = list(product.images or []) + list(new_images)
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def delete_product(db: Session, product: Product) -> None:
    db.delete(product)
    db.commit()


def search_products(db: Session, q: str = "", location: str = "", limit: int = 20) -> List[Product]:
    qs = db.query(Product).join(Artisan).filter(Product.name.ilike(f"%{q}%"))
    if location:
        qs = qs.filter(Artisan.location.ilike(f"%{location}%"))
    return qs.order_by(Product.name.asc()).limit(limit).all()


# -------- Artisans --------
def list_artisans(db: Session, name: str = "", location: str = "") -> List[Artisan]:
    qs = db.query(Artisan)
    if name:
        qs = qs.filter(Artisan.name.ilike(f"%{name}%"))
    if location:
        qs = qs.filter(Artisan.location.ilike(f"%{location}%"))
    return qs.order_by(Artisan.name.asc()).all()


def get_artisan(db: Session, artisan_id: str) -> Optional[Artisan]:
    return db.get(Artisan, artisan_id)


def default_profile(user_id: str, email: Optional[str]) -> dict:
    local_part = (email or "").split("@")[0]
    return {
        "id": user_id,
        "name": local_part or f"Artisan {user_id[:6]}",
        "name_hi": "नया कारीगर",
        "bio": "Welcome to Virasat! Please update your bio from the settings page.",
        "bio_hi": "विरासत में आपका स्वागत है! कृपया अपनी जीवनी सेटिंग्स पृष्ठ से अपडेट करें।",
        "craft": "Not specified",
        "craft_hi": "निर्दिष्ट नहीं है",
        "location": "Not specified",
        "location_hi": "निर्दिष्ट नहीं है",
        "profile_image": DEFAULT_PROFILE_IMAGE,
    }


def ensure_artisan_profile(db: Session, user_id: str, email: Optional[str]) -> bool:
    """Create the default profile if missing. Returns True when a row was inserted."""
    if db.get(Artisan, user_id):
        return False
    db.add(Artisan(**default_profile(user_id, email)))
    db.commit()
    log.info("Created artisan profile for user %s", user_id)
    return True


def update_artisan(db: Session, artisan: Artisan, changes: dict) -> Artisan:
    for key, value in changes.items():
        if value is not None:
            setattr(artisan, key, value)
    db.add(artisan)
    db.commit()
    db.refresh(artisan)
    return artisan


# -------- Shipments --------
def new_tracking_number() -> str:
    return f"VRST{int(time.time() * 1000)}{secrets.token_hex(2).upper()}"


def create_shipment(db: Session, artisan_id: str, data: ShipmentCreate) -> Shipment:
    tracking_number = new_tracking_number()
    carrier = data.selected_carrier
    shipment = Shipment(
        artisan_id=artisan_id,
        product_id=data.product_id,
        destination=data.destination,
        package_weight_kg=data.package_weight_kg,
        package_dimensions_cm=data.package_dimensions_cm.model_dump(),
        declared_value=data.declared_value,
        selected_carrier=carrier.carrier,
        service_type=carrier.service_type,
        shipping_cost=carrier.total_cost,
        estimated_delivery_date=carrier.estimated_delivery_date,
        tracking_number=tracking_number,
        shipping_label_url=f"{config.LABEL_BASE_URL}/{tracking_number}.pdf",
        ai_packaging_advice=data.ai_packaging_advice,
        ai_risk_advice=data.ai_risk_advice,
        ai_carrier_choice_advice=data.ai_carrier_choice_advice,
        ai_hs_code=data.ai_hs_code or None,
        ai_customs_declaration=data.ai_customs_declaration or None,
    )
    db.add(shipment)
    db.commit()
    db.refresh(shipment)
    log.info("Booked shipment %s for product %s", tracking_number, data.product_id)
    return shipment


def list_shipments(db: Session, artisan_id: str) -> List[Shipment]:
    if not artisan_id:
        return []
    return (
        db.query(Shipment)
        .filter(Shipment.artisan_id == artisan_id)
        .order_by(Shipment.created_at.desc())
        .all()
    )


def dashboard_summary(db: Session, artisan_id: str) -> dict:
    products = list_products(db, artisan_id=artisan_id)
    shipping_spend = (
        db.query(func.coalesce(func.sum(Shipment.shipping_cost), 0.0))
        .filter(Shipment.artisan_id == artisan_id)
        .scalar()
    )
    return {
        "product_count": len(products),
        "total_stock": sum(p.stock or 0 for p in products),
        "inventory_value": sum((p.price or 0) * (p.stock or 0) for p in products),
        "shipment_count": db.query(Shipment).filter(Shipment.artisan_id == artisan_id).count(),
        "shipping_spend": float(shipping_spend or 0.0),
    }


# -------- Translations --------
def get_translation(db: Session, lang: str) -> Optional[dict]:
    row = db.get(Translation, lang)
    return dict(row.data) if row else None


def upsert_translation(db: Session, lang: str, data: dict) -> None:
    row = db.get(Translation, lang)
    if row:
        row.data = data
    else:
        row = Translation(lang=lang, data=data)
    db.add(row)
    db.commit()
