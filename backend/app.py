import base64
import ipaddress
import logging
import secrets
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, File, Form, Header, HTTPException, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError
from sqlalchemy.orm import Session

from . import auth, config, crud, genai, storage
from .db import Base, SessionLocal, engine, get_db
from .flows import (
    DescriptionInput, DescriptionOutput, FlowError, LogisticsInput, LogisticsOutput,
    MarketingInput, MarketingOutput, MockupOutput, PricingInput, PricingOutput,
    TranslateInput, TranslateOutput, TrendsInput, TrendsOutput,
    description_flow, logistics_flow, marketing_flow, mockup_flow, pricing_flow,
    translate_flow, trends_flow,
)
from .i18n import LanguageDetector, TranslationManager
from .models import User
from .schemas import (
    ArtisanDetail, ArtisanOut, ChangePasswordForm, DashboardSummary, HookPayload, LoginForm,
    Message, ProductForm, ProductOut, ProductUpdateForm, Session as AuthSession, SettingsForm,
    ShipmentCreate, ShipmentOut, SignUpForm,
)
from .seed import seed_database

log = logging.getLogger(__name__)

MAX_PRODUCT_IMAGES = 5


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialize DB schema
    Base.metadata.create_all(bind=engine)
    if config.SEED_ON_STARTUP:
        db = SessionLocal()
        try:
            seed_database(db)
        finally:
            db.close()
    yield


app = FastAPI(title="Artisan Connect API", lifespan=lifespan)

# Expose stored images under /static so the browser can fetch them
app.mount("/static", StaticFiles(directory=str(storage.media_root())), name="static")

app.state.translation_manager = TranslationManager(SessionLocal)
app.state.language_detector = LanguageDetector()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# -------- Error handling --------
SIGN_UP_CODES = {"auth/email-already-in-use", "auth/weak-password"}


@app.exception_handler(auth.AuthError)
async def auth_error_handler(request: Request, exc: auth.AuthError):
    status = 400 if exc.code in SIGN_UP_CODES else 401
    return JSONResponse(status_code=status, content={"detail": exc.message, "code": exc.code})


@app.exception_handler(FlowError)
async def flow_error_handler(request: Request, exc: FlowError):
    return JSONResponse(status_code=502, content={"detail": str(exc)})


@app.exception_handler(storage.StorageError)
async def storage_error_handler(request: Request, exc: storage.StorageError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


# -------- Helpers --------
def validated(model, **data):
    """Build a form model from multipart fields, reporting failures like a JSON body would."""
    try:
        return model(**data)
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False))


def owned_product(db: Session, product_id: str, user: User):
    product = crud.get_product(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    if product.artisan_id != user.id:
        raise HTTPException(status_code=403, detail="You can only change your own products")
    return product


def client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for", "")
    host = forwarded.split(",")[0].strip() if forwarded else (request.client.host if request.client else "")
    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        return None
    return None if ip.is_private or ip.is_loopback else str(ip)


# -------- Routes --------
@app.get("/")
def read_root():
    return {
        "message": "🚀 Artisan Connect API is running",
        "gemini_loaded": bool(config.GEMINI_API_KEY),
        "static_mounted": True,
        "backend_origin": config.BACKEND_ORIGIN or None,
    }


@app.get("/check-gemini")
def check_gemini():
    return genai.check_client()


# ----- Auth -----
@app.post("/auth/signup", response_model=AuthSession)
def signup(form: SignUpForm, db: Session = Depends(get_db)):
    user = auth.sign_up(db, form.email, form.password)
    return auth.session_for(user)


@app.post("/auth/login", response_model=AuthSession)
def login(form: LoginForm, db: Session = Depends(get_db)):
    user = auth.sign_in(db, form.email, form.password)
    return auth.session_for(user)


@app.get("/auth/session")
def get_session(user: User = Depends(auth.current_user)):
    return {"user_id": user.id, "email": user.email}


@app.post("/auth/password", response_model=Message)
def change_password(form: ChangePasswordForm, user: User = Depends(auth.current_user), db: Session = Depends(get_db)):
    auth.update_password(db, user, form.password)
    return {"message": "Password updated."}


# ----- Catalog -----
@app.get("/products", response_model=List[ProductOut])
def list_products(
    q: str = "",
    category: str = "",
    max_price: Optional[float] = None,
    artisan_id: str = "",
    db: Session = Depends(get_db),
):
    return crud.list_products(db, q=q, category=category, max_price=max_price, artisan_id=artisan_id)


@app.get("/products/{product_id}", response_model=ProductOut)
def get_product(product_id: str, db: Session = Depends(get_db)):
    product = crud.get_product(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@app.get("/categories", response_model=List[str])
def list_categories(db: Session = Depends(get_db)):
    return crud.list_categories(db)


@app.get("/search")
def search(q: str = "", location: str = "", limit: int = 20, db: Session = Depends(get_db)):
    results = []
    for p in crud.search_products(db, q=q, location=location, limit=limit):
        results.append({
            "product_id": p.id,
            "name": p.name,
            "price": p.price,
            "image_url": (p.images or [""])[0],
            "artisan": {
                "id": p.artisan.id,
                "name": p.artisan.name,
                "location": p.artisan.location,
                "craft": p.artisan.craft,
            },
        })
    return results


@app.get("/artisans", response_model=List[ArtisanOut])
def list_artisans(name: str = "", location: str = "", db: Session = Depends(get_db)):
    return crud.list_artisans(db, name=name, location=location)


@app.get("/artisans/{artisan_id}", response_model=ArtisanDetail)
def get_artisan(artisan_id: str, db: Session = Depends(get_db)):
    artisan = crud.get_artisan(db, artisan_id)
    if not artisan:
        raise HTTPException(status_code=404, detail="Artisan not found")
    detail = ArtisanDetail.model_validate(artisan, from_attributes=True)
    detail.products = [ProductOut.model_validate(p) for p in crud.list_products(db, artisan_id=artisan_id)]
    return detail


# ----- Dashboard: products -----
@app.post("/products", response_model=ProductOut, status_code=201)
def create_product(
    name: str = Form(...),
    description: str = Form(...),
    price: float = Form(...),
    stock: int = Form(...),
    category: str = Form(...),
    materials: str = Form(...),
    name_hi: str = Form(""),
    description_hi: str = Form(""),
    category_hi: str = Form(""),
    materials_hi: str = Form(""),
    files: Optional[List[UploadFile]] = File(None),
    user: User = Depends(auth.current_user),
    db: Session = Depends(get_db),
):
    form = validated(
        ProductForm, name=name, description=description, price=price, stock=stock, category=category,
        materials=materials, name_hi=name_hi, description_hi=description_hi, category_hi=category_hi,
        materials_hi=materials_hi,
    )
    files = files or []
    if not files:
        raise HTTPException(status_code=400, detail="At least one image is required to add a product.")
    if len(files) > MAX_PRODUCT_IMAGES:
        raise HTTPException(status_code=400, detail="You can upload a maximum of 5 images.")

    crud.ensure_artisan_profile(db, user.id, user.email)
    image_urls = storage.upload_images(files, user.id)
    return crud.create_product(db, user.id, form.to_record(), image_urls)


@app.put("/products/{product_id}", response_model=ProductOut)
def update_product(
    product_id: str,
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    price: Optional[float] = Form(None),
    stock: Optional[int] = Form(None),
    category: Optional[str] = Form(None),
    materials: Optional[str] = Form(None),
    name_hi: Optional[str] = Form(None),
    description_hi: Optional[str] = Form(None),
    category_hi: Optional[str] = Form(None),
    materials_hi: Optional[str] = Form(None),
    files: Optional[List[UploadFile]] = File(None),
    user: User = Depends(auth.current_user),
    db: Session = Depends(get_db),
):
    product = owned_product(db, product_id, user)
    form = validated(
        ProductUpdateForm, name=name, description=description, price=price, stock=stock, category=category,
        materials=materials, name_hi=name_hi, description_hi=description_hi, category_hi=category_hi,
        materials_hi=materials_hi,
    )
    files = files or []
    if len(product.images or []) + len(files) > MAX_PRODUCT_IMAGES:
        raise HTTPException(status_code=400, detail="You can upload a maximum of 5 images.")
    new_images = storage.upload_images(files, user.id) if files else None
    return crud.update_product(db, product, form.to_changes(), new_images)


@app.delete("/products/{product_id}")
def delete_product(product_id: str, user: User = Depends(auth.current_user), db: Session = Depends(get_db)):
    product = owned_product(db, product_id, user)
    images = list(product.images or [])
    crud.delete_product(db, product)
    for url in images:
        storage.delete_image(url)
    return {"status": "deleted", "id": product_id}


@app.get("/dashboard/products", response_model=List[ProductOut])
def my_products(user: User = Depends(auth.current_user), db: Session = Depends(get_db)):
    return crud.list_products(db, artisan_id=user.id)


@app.get("/dashboard/summary", response_model=DashboardSummary)
def my_summary(user: User = Depends(auth.current_user), db: Session = Depends(get_db)):
    return crud.dashboard_summary(db, user.id)


@app.get("/dashboard/profile", response_model=ArtisanOut)
def my_profile(user: User = Depends(auth.current_user), db: Session = Depends(get_db)):
    crud.ensure_artisan_profile(db, user.id, user.email)
    return crud.get_artisan(db, user.id)


@app.put("/dashboard/settings", response_model=ArtisanOut)
def update_settings(
    name: str = Form(...),
    bio: str = Form(...),
    craft: str = Form(...),
    location: str = Form(...),
    name_hi: Optional[str] = Form(None),
    bio_hi: Optional[str] = Form(None),
    craft_hi: Optional[str] = Form(None),
    location_hi: Optional[str] = Form(None),
    profile_image: Optional[UploadFile] = File(None),
    user: User = Depends(auth.current_user),
    db: Session = Depends(get_db),
):
    form = validated(
        SettingsForm, name=name, bio=bio, craft=craft, location=location,
        name_hi=name_hi, bio_hi=bio_hi, craft_hi=craft_hi, location_hi=location_hi,
    )
    crud.ensure_artisan_profile(db, user.id, user.email)
    artisan = crud.get_artisan(db, user.id)
    changes = form.model_dump(exclude_none=True)
    if profile_image is not None and profile_image.filename:
        old_url = artisan.profile_image
        changes["profile_image"] = storage.upload_file(profile_image, "profiles", user.id)
        if old_url:
            storage.delete_image(old_url)
    return crud.update_artisan(db, artisan, changes)


# ----- Dashboard: shipments -----
@app.post("/shipments", response_model=ShipmentOut, status_code=201)
def book_shipment(data: ShipmentCreate, user: User = Depends(auth.current_user), db: Session = Depends(get_db)):
    owned_product(db, data.product_id, user)
    return crud.create_shipment(db, user.id, data)


@app.get("/shipments", response_model=List[ShipmentOut])
def my_shipments(user: User = Depends(auth.current_user), db: Session = Depends(get_db)):
    return crud.list_shipments(db, user.id)


# ----- AI tools -----
@app.post("/ai/marketing", response_model=MarketingOutput)
def ai_marketing(data: MarketingInput, user: User = Depends(auth.current_user)):
    return marketing_flow.run(data)


@app.post("/ai/pricing", response_model=PricingOutput)
def ai_pricing(data: PricingInput, user: User = Depends(auth.current_user)):
    return pricing_flow.run(data)


@app.post("/ai/trends", response_model=TrendsOutput)
def ai_trends(data: TrendsInput, user: User = Depends(auth.current_user)):
    return trends_flow.run(data)


@app.post("/ai/description", response_model=DescriptionOutput)
def ai_description(data: DescriptionInput, user: User = Depends(auth.current_user)):
    return description_flow.run(data)


@app.post("/ai/translate", response_model=TranslateOutput)
def ai_translate(data: TranslateInput, user: User = Depends(auth.current_user)):
    return translate_flow.run(data)


@app.post("/ai/logistics", response_model=LogisticsOutput)
def ai_logistics(data: LogisticsInput, user: User = Depends(auth.current_user)):
    return logistics_flow.run(data)


@app.post("/ai/mockup", response_model=MockupOutput)
async def ai_mockup(
    scene_description: str = Form(...),
    file: UploadFile = File(...),
    user: User = Depends(auth.current_user),
):
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Please upload an image.")
    mime_type = file.content_type or "image/jpeg"
    data_uri = f"data:{mime_type};base64,{base64.b64encode(content).decode()}"
    try:
        return mockup_flow.run({"product_image": data_uri, "scene_description": scene_description})
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False))


# ----- i18n -----
@app.get("/translations/{lang}")
def get_translations(lang: str, request: Request):
    return request.app.state.translation_manager.load(lang)


@app.get("/language/detect")
def detect_language(request: Request, saved: str = ""):
    language, source = request.app.state.language_detector.detect(
        saved=saved or None,
        accept_language=request.headers.get("accept-language", ""),
        client_ip=client_ip(request),
    )
    return {"language": language, "source": source}


# ----- Auth provider hook -----
@app.post("/hooks/create-artisan-profile", response_model=Message)
def create_artisan_profile_hook(
    payload: HookPayload,
    authorization: str = Header(default=""),
    db: Session = Depends(get_db),
):
    expected = f"Bearer {config.SERVICE_ROLE_KEY}"
    if not config.SERVICE_ROLE_KEY or not secrets.compare_digest(authorization.encode(), expected.encode()):
        raise HTTPException(status_code=401, detail="Unauthorized")
    if payload.record is None:
        raise HTTPException(status_code=400, detail="No user record found in the request body.")

    created = crud.ensure_artisan_profile(db, payload.record.id, payload.record.email)
    if not created:
        log.info("Profile for user %s already exists.", payload.record.id)
        return {"message": "Profile already exists."}
    return {"message": "Profile created successfully"}
