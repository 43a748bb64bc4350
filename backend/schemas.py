# backend/schemas.py
"""
Request/response shapes shared by the API and the Streamlit forms.

Form models carry the same minimums the dashboard enforces client-side, so
the frontend can validate before submitting and FastAPI rejects anything that
slips through with a 422.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator


def split_list(value: str) -> List[str]:
    """'Cotton, Natural Dyes' -> ['Cotton', 'Natural Dyes']"""
    return [part.strip() for part in (value or "").split(",") if part.strip()]


# -------- Catalog --------
class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    artisan_id: str
    name: str
    name_hi: str = ""
    description: str = ""
    description_hi: str = ""
    category: str = ""
    category_hi: str = ""
    materials: List[str] = []
    materials_hi: List[str] = []
    price: float
    stock: int
    images: List[str] = []
    created_at: Optional[datetime] = None


class ArtisanOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    name_hi: str = ""
    bio: str = ""
    bio_hi: str = ""
    craft: str = ""
    craft_hi: str = ""
    location: str = ""
    location_hi: str = ""
    profile_image: str = ""


class ArtisanDetail(ArtisanOut):
    products: List[ProductOut] = []


# -------- Dashboard forms --------
class ProductForm(BaseModel):
    name: str = Field(min_length=3)
    description: str = Field(min_length=10)
    price: float = Field(ge=1)
    stock: int = Field(ge=0)
    category: str = Field(min_length=2)
    materials: str = Field(min_length=3)        # comma separated, as typed in the form
    name_hi: str = ""
    description_hi: str = ""
    category_hi: str = ""
    materials_hi: str = ""

    def to_record(self) -> dict:
        data = self.model_dump()
        data["materials"] = split_list(self.materials)
        data["materials_hi"] = split_list(self.materials_hi)
        return data


class ProductUpdateForm(BaseModel):
    name: Optional[str] = Field(default=None, min_length=3)
    description: Optional[str] = Field(default=None, min_length=10)
    price: Optional[float] = Field(default=None, ge=1)
    stock: Optional[int] = Field(default=None, ge=0)
    category: Optional[str] = Field(default=None, min_length=2)
    materials: Optional[str] = Field(default=None, min_length=3)
    name_hi: Optional[str] = None
    description_hi: Optional[str] = None
    category_hi: Optional[str] = None
    materials_hi: Optional[str] = None

    def to_changes(self) -> dict:
        data = self.model_dump(exclude_none=True)
        for key in ("materials", "materials_hi"):
            if key in data:
                data[key] = split_list(data[key])
        return data


class SettingsForm(BaseModel):
    name: str = Field(min_length=2)
    bio: str = Field(min_length=10)
    craft: str = Field(min_length=2)
    location: str = Field(min_length=2)
    name_hi: Optional[str] = None
    bio_hi: Optional[str] = None
    craft_hi: Optional[str] = None
    location_hi: Optional[str] = None


class DashboardSummary(BaseModel):
    product_count: int
    total_stock: int
    inventory_value: float
    shipment_count: int
    shipping_spend: float


# -------- Auth forms --------
class SignUpForm(BaseModel):
    email: EmailStr
    password: str


class LoginForm(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class ChangePasswordForm(BaseModel):
    password: str = Field(min_length=6)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match.")
        return self


class Session(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user_id: str
    email: str


class Message(BaseModel):
    message: str


# -------- Storefront forms (client side only) --------
class ContactArtisanForm(BaseModel):
    name: str = Field(min_length=2)
    email: EmailStr
    message: str = Field(min_length=10)


class CheckoutForm(BaseModel):
    full_name: str = Field(min_length=2)
    email: EmailStr
    address: str = Field(min_length=5)
    city: str = Field(min_length=2)
    postal_code: str = Field(min_length=4)


# -------- AI tool forms --------
class MarketingForm(BaseModel):
    product_id: str = Field(min_length=1)
    target_audience: str = Field(min_length=3)


class LogisticsForm(BaseModel):
    product_id: str = Field(min_length=1)
    package_weight_kg: float = Field(ge=0.1)
    length: float = Field(ge=1)
    width: float = Field(ge=1)
    height: float = Field(ge=1)
    destination: str = Field(min_length=3)
    declared_value: float = Field(ge=1)


# -------- Logistics / shipments --------
class ShippingRate(BaseModel):
    carrier: str
    service_type: str
    total_cost: float
    estimated_delivery_date: str


class PackageDimensions(BaseModel):
    length: float = Field(ge=1)
    width: float = Field(ge=1)
    height: float = Field(ge=1)


class ShipmentCreate(BaseModel):
    product_id: str = Field(min_length=1)
    destination: str = Field(min_length=3)
    package_weight_kg: float = Field(ge=0.1)
    package_dimensions_cm: PackageDimensions
    declared_value: float = Field(ge=1)
    selected_carrier: ShippingRate
    ai_packaging_advice: str = ""
    ai_risk_advice: str = ""
    ai_carrier_choice_advice: str = ""
    ai_hs_code: Optional[str] = None
    ai_customs_declaration: Optional[str] = None


class ShipmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    artisan_id: str
    product_id: str
    destination: str
    package_weight_kg: float
    package_dimensions_cm: PackageDimensions
    declared_value: float
    selected_carrier: str
    service_type: str
    shipping_cost: float
    estimated_delivery_date: str
    tracking_number: str
    shipping_label_url: str
    ai_packaging_advice: str = ""
    ai_risk_advice: str = ""
    ai_carrier_choice_advice: str = ""
    ai_hs_code: Optional[str] = None
    ai_customs_declaration: Optional[str] = None
    created_at: Optional[datetime] = None


# -------- Auth hook --------
class HookUser(BaseModel):
    id: str
    email: Optional[str] = None


class HookPayload(BaseModel):
    record: Optional[HookUser] = None
