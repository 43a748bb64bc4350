# frontend/app.py
import io
import sys
import base64
from pathlib import Path
from typing import List, Optional

import streamlit as st
import streamlit.components.v1 as components
from pydantic import BaseModel, ValidationError

# Allow `streamlit run frontend/app.py` from a plain checkout
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from backend.flows import classify_destination
from backend.schemas import (
    ChangePasswordForm, CheckoutForm, ContactArtisanForm, LoginForm, LogisticsForm,
    MarketingForm, ProductForm, ProductUpdateForm, SettingsForm, SignUpForm,
)
from frontend.api import (
    api_delete, api_get, api_post, api_put, error_message, forwarded_headers, load_catalog, to_abs,
)
from frontend.cart import Cart, StockError
from frontend.i18n import LANGUAGES, localized, t

# -------------------------
# Page config & styling
# -------------------------
st.set_page_config(page_title="Artisan Connect", layout="wide", page_icon="🧵")

css_and_fonts = """
<link href="https://fonts.googleapis.com/css2?family=Playfair+Display:wght@600;700;800&family=Inter:wght@300;400;600&display=swap" rel="stylesheet">
<style>
:root{
  --bg:#faf6f0;
  --card:#fff;
  --accent:#b07a45;
  --muted:#6f6259;
  --text:#222;
}
html, body, [class*="css"]  {
  background: linear-gradient(180deg, var(--bg), #fff);
  color:var(--text);
  font-family: "Inter", system-ui, -apple-system, "Segoe UI", Roboto, "Helvetica Neue", Arial;
}
.muted { color:var(--muted); }
.topline { width:120px; height:3px; background:var(--accent); margin-bottom:16px; border-radius:2px; }
.product-card { background: var(--card); border-radius:10px; padding:12px; box-shadow: 0 8px 20px rgba(10,10,10,0.04); }
.stButton>button { border-radius:10px; }
</style>
"""
components.html(css_and_fonts, height=10)

SKILL_LEVELS = ["Beginner", "Intermediate", "Expert"]
QUALITY_LEVELS = ["Low", "Medium", "High"]
DEMAND_LEVELS = ["Low", "Moderate", "High"]

# -------------------------
# Session init
# -------------------------
defaults = {
    "page": "Home",
    "lang": None,
    "translations": {},
    "cart_json": "[]",
    "session": None,            # {"access_token", "user_id", "email"}
    "products": None,
    "artisans": None,
    "logistics_result": None,
    "logistics_request": None,
}
for key, value in defaults.items():
    if key not in st.session_state:
        st.session_state[key] = value


# -------------------------
# State helpers
# -------------------------
def token() -> Optional[str]:
    sess = st.session_state.get("session")
    return sess["access_token"] if sess else None


def get_cart() -> Cart:
    return Cart.loads(st.session_state["cart_json"])


def save_cart(cart: Cart):
    st.session_state["cart_json"] = cart.dumps()


def lang() -> str:
    return st.session_state["lang"] or "en"


def tr(key: str, **values) -> str:
    return t(st.session_state["translations"], key, **values)


def load_language(code: str):
    resp = api_get(f"/translations/{code}")
    st.session_state["lang"] = code
    st.session_state["translations"] = resp.json() if resp is not None and resp.ok else {}


def refresh_data():
    """Re-fetch products and artisans; called at start-up and after every write."""
    try:
        products, artisans = load_catalog()
    except RuntimeError as e:
        st.error(f"Failed to load catalog: {e}")
        return
    st.session_state["products"] = products
    st.session_state["artisans"] = artisans


def check_form(model: type, **data) -> Optional[BaseModel]:
    """Validate a form client-side; show the first problem and return None on failure."""
    try:
        return model(**data)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", []))
        st.error(f"{field}: {first['msg']}" if field else first["msg"])
        return None


def artisan_by_id(artisan_id: str) -> Optional[dict]:
    for a in st.session_state["artisans"] or []:
        if a["id"] == artisan_id:
            return a
    return None


def my_products() -> List[dict]:
    resp = api_get("/dashboard/products", token=token())
    if resp is not None and resp.ok:
        return resp.json()
    st.error(error_message(resp))
    return []


def upload_tuple(uploaded):
    return (uploaded.name, io.BytesIO(uploaded.getvalue()), uploaded.type)


if st.session_state["lang"] is None:
    resp = api_get("/language/detect", headers=forwarded_headers(st.context.headers))
    detected = resp.json().get("language") if resp is not None and resp.ok else "en"
    load_language(detected if detected in LANGUAGES else "en")

if st.session_state["products"] is None:
    refresh_data()


# -------------------------
# Sidebar navigation
# -------------------------
with st.sidebar:
    st.markdown("## 🧵 Artisan Connect")
    codes = list(LANGUAGES.keys())
    chosen = st.selectbox(
        "Language", options=codes, index=codes.index(lang()) if lang() in codes else 0,
        format_func=lambda c: LANGUAGES[c], key="lang_select",
    )
    if chosen != lang():
        load_language(chosen)
        st.rerun()

    cart = get_cart()
    storefront = ["Home", "Products", "Artisans", f"Cart ({cart.count})"]
    dashboard = ["Dashboard", "My Products", "Add Product", "Settings", "Shipments",
                 "Marketing Suite", "Pricing Optimizer", "Trend Harmonizer",
                 "Description Generator", "Visual Enhancer", "Logistics Hub"]
    pages = storefront + (dashboard if token() else ["Login", "Sign Up"])
    current = st.session_state["page"]
    if current.startswith("Cart"):
        current = f"Cart ({cart.count})"
    page = st.radio("Go to", pages, index=pages.index(current) if current in pages else 0)
    st.session_state["page"] = page

    if token():
        st.caption(f"Signed in as {st.session_state['session']['email']}")
        if st.button("Log out"):
            st.session_state["session"] = None
            st.session_state["page"] = "Home"
            st.rerun()
    if st.button("Refresh data"):
        refresh_data()


def product_card(p: dict, key_prefix: str):
    cols = st.columns([1, 2])
    with cols[0]:
        images = p.get("images") or []
        if images:
            st.image(to_abs(images[0]), width=200)
        else:
            st.text("Image unavailable")
    with cols[1]:
        st.markdown(f"### {localized(p, 'name', lang())} — ₹{p['price']:.2f}")
        artisan = artisan_by_id(p["artisan_id"])
        if artisan:
            st.markdown(f"{tr('common.by')} **{localized(artisan, 'name', lang())}**")
        st.caption(localized(p, "category", lang()))
        if st.button("View", key=f"{key_prefix}_view_{p['id']}"):
            st.session_state["selected_product"] = p["id"]
            st.session_state["page"] = "Products"
            st.rerun()


def add_to_cart(product: dict, quantity: int = 1):
    cart = get_cart()
    try:
        cart.add(product, quantity)
    except StockError as e:
        st.error(tr("cart.notEnoughStock", stock=e.stock))
        return
    save_cart(cart)
    st.success(tr("cart.added", name=localized(product, "name", lang())))


# -------------------------
# Storefront pages
# -------------------------
def home_page():
    st.markdown("<div class='topline'></div>", unsafe_allow_html=True)
    st.markdown("# Discover real makers. Preserve real craft.")
    st.markdown(
        "<p class='muted'>Handmade goods from artisans across India, with their stories in your language.</p>",
        unsafe_allow_html=True,
    )
    products = st.session_state["products"] or []
    st.subheader("Featured products")
    for p in products[:4]:
        product_card(p, "home")


def product_detail(product_id: str):
    resp = api_get(f"/products/{product_id}")
    if resp is None or not resp.ok:
        st.error(error_message(resp))
        return
    p = resp.json()
    if st.button("← Back to products"):
        st.session_state.pop("selected_product", None)
        st.rerun()
    cols = st.columns([1, 1])
    with cols[0]:
        for url in p.get("images") or []:
            st.image(to_abs(url), use_container_width=True)
    with cols[1]:
        st.markdown(f"## {localized(p, 'name', lang())}")
        st.markdown(f"### ₹{p['price']:.2f}")
        st.write(localized(p, "description", lang()))
        materials = localized(p, "materials", lang()) or []
        if materials:
            st.markdown("**Materials:** " + ", ".join(materials))
        st.caption(f"In stock: {p['stock']}")
        qty = st.number_input("Quantity", min_value=1, max_value=max(p["stock"], 1), value=1, step=1)
        if st.button("Add to cart", disabled=p["stock"] <= 0):
            add_to_cart(p, int(qty))


def products_page():
    selected = st.session_state.get("selected_product")
    if selected:
        product_detail(selected)
        return

    st.header(tr("nav.products"))
    cats_resp = api_get("/categories")
    categories = cats_resp.json() if cats_resp is not None and cats_resp.ok else []
    c1, c2, c3 = st.columns([2, 1, 1])
    q = c1.text_input(tr("common.search"), key="prod_q")
    category = c2.selectbox("Category", ["all"] + categories, key="prod_cat")
    max_price = c3.slider("Max price (₹)", min_value=0, max_value=10000, value=10000, step=100, key="prod_price")

    resp = api_get("/products", params={"q": q, "category": category, "max_price": max_price})
    if resp is None or not resp.ok:
        st.error(error_message(resp))
        return
    results = resp.json()
    if not results:
        st.info("No Products Found")
    for p in results:
        product_card(p, "list")
        st.write("---")


def artisans_page():
    st.header(tr("nav.artisans"))
    selected = st.session_state.get("selected_artisan")
    if selected:
        resp = api_get(f"/artisans/{selected}")
        if resp is None or not resp.ok:
            st.error(error_message(resp))
            return
        a = resp.json()
        if st.button("← All artisans"):
            st.session_state.pop("selected_artisan", None)
            st.rerun()
        cols = st.columns([1, 3])
        with cols[0]:
            if a.get("profile_image"):
                st.image(to_abs(a["profile_image"]), width=140)
        with cols[1]:
            st.markdown(f"## {localized(a, 'name', lang())}")
            st.markdown(f"**{localized(a, 'craft', lang())}** • {localized(a, 'location', lang())}")
            st.write(localized(a, "bio", lang()))

        st.subheader("Contact the artisan")
        with st.form("contact_artisan"):
            c_name = st.text_input("Your name")
            c_email = st.text_input("Email")
            c_msg = st.text_area("Message")
            if st.form_submit_button("Send message"):
                if check_form(ContactArtisanForm, name=c_name, email=c_email, message=c_msg):
                    st.success("Message Sent! The artisan has been notified and will get back to you soon.")

        st.subheader("Products")
        for p in a.get("products", []):
            product_card(p, "artisan")
        return

    for a in st.session_state["artisans"] or []:
        cols = st.columns([4, 1])
        with cols[0]:
            st.markdown(f"**{localized(a, 'name', lang())}** — {localized(a, 'location', lang())}")
            st.caption(localized(a, "craft", lang()))
        with cols[1]:
            if st.button("View", key=f"artisan_{a['id']}"):
                st.session_state["selected_artisan"] = a["id"]
                st.rerun()


def cart_page():
    st.header(tr("nav.shoppingCart"))
    cart = get_cart()
    if not cart.items:
        st.info(tr("cart.empty"))
        return

    for item in list(cart.items):
        cols = st.columns([3, 1, 1])
        cols[0].markdown(f"**{localized(item, 'name', lang())}** — ₹{item['price']:.2f}")
        qty = cols[1].number_input(
            "Qty", min_value=0, value=item["quantity"], step=1, key=f"qty_{item['id']}", label_visibility="collapsed",
        )
        if qty != item["quantity"]:
            try:
                cart.update_quantity(item["id"], int(qty))
                save_cart(cart)
                st.rerun()
            except StockError as e:
                st.error(tr("cart.notEnoughStock", stock=e.stock))
        if cols[2].button("Remove", key=f"rm_{item['id']}"):
            cart.remove(item["id"])
            save_cart(cart)
            st.rerun()

    st.markdown(f"### {tr('cart.total')}: ₹{cart.total:.2f}")

    st.subheader(tr("cart.checkout"))
    with st.form("checkout"):
        full_name = st.text_input("Full name")
        email = st.text_input("Email")
        address = st.text_area("Address")
        c1, c2 = st.columns(2)
        city = c1.text_input("City")
        postal_code = c2.text_input("Postal code")
        if st.form_submit_button("Place order"):
            if check_form(CheckoutForm, full_name=full_name, email=email, address=address, city=city, postal_code=postal_code):
                cart.clear()
                save_cart(cart)
                st.success(tr("checkout.placed"))


def login_page():
    st.header("Artisan login")
    with st.form("login"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        if st.form_submit_button("Log in"):
            form = check_form(LoginForm, email=email, password=password)
            if form:
                resp = api_post("/auth/login", json=form.model_dump())
                if resp is not None and resp.ok:
                    st.session_state["session"] = resp.json()
                    st.session_state["page"] = "Dashboard"
                    st.rerun()
                else:
                    st.error(error_message(resp))


def signup_page():
    st.header("Become a seller")
    with st.form("signup"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        if st.form_submit_button("Sign up"):
            form = check_form(SignUpForm, email=email, password=password)
            if form:
                resp = api_post("/auth/signup", json=form.model_dump())
                if resp is not None and resp.ok:
                    st.session_state["session"] = resp.json()
                    st.session_state["page"] = "Dashboard"
                    refresh_data()
                    st.rerun()
                else:
                    st.error(error_message(resp))


# -------------------------
# Dashboard pages
# -------------------------
def dashboard_page():
    st.header(tr("nav.artisanDashboard"))
    resp = api_get("/dashboard/summary", token=token())
    if resp is None or not resp.ok:
        st.error(error_message(resp))
        return
    s = resp.json()
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Products", s["product_count"])
    c2.metric("Units in stock", s["total_stock"])
    c3.metric("Inventory value", f"₹{s['inventory_value']:,.0f}")
    c4.metric("Shipments", s["shipment_count"])


def product_fields(prefix: str, p: Optional[dict] = None) -> dict:
    p = p or {}
    c1, c2 = st.columns(2)
    values = {
        "name": c1.text_input("Name (English)", value=p.get("name", ""), key=f"{prefix}_name"),
        "name_hi": c2.text_input("Name (Hindi)", value=p.get("name_hi", ""), key=f"{prefix}_name_hi"),
        "description": c1.text_area("Description (English)", value=p.get("description", ""), key=f"{prefix}_desc"),
        "description_hi": c2.text_area("Description (Hindi)", value=p.get("description_hi", ""), key=f"{prefix}_desc_hi"),
        "category": c1.text_input("Category (English)", value=p.get("category", ""), key=f"{prefix}_cat"),
        "category_hi": c2.text_input("Category (Hindi)", value=p.get("category_hi", ""), key=f"{prefix}_cat_hi"),
        "materials": c1.text_input("Materials, comma separated (English)", value=", ".join(p.get("materials", [])), key=f"{prefix}_mat"),
        "materials_hi": c2.text_input("Materials, comma separated (Hindi)", value=", ".join(p.get("materials_hi", [])), key=f"{prefix}_mat_hi"),
        "price": c1.number_input("Price (₹)", min_value=0.0, value=float(p.get("price", 0.0)), key=f"{prefix}_price"),
        "stock": c2.number_input("Stock", min_value=0, value=int(p.get("stock", 0)), step=1, key=f"{prefix}_stock"),
    }
    return values


def add_product_page():
    st.header("Add product")
    with st.form("add_product"):
        values = product_fields("new")
        files = st.file_uploader("Product images (1-5)", type=["jpg", "jpeg", "png", "webp"], accept_multiple_files=True)
        if st.form_submit_button(tr("common.save")):
            form = check_form(ProductForm, **values)
            if form is None:
                return
            if not files:
                st.error("Please upload at least one image.")
                return
            if len(files) > 5:
                st.error("You can upload a maximum of 5 images.")
                return
            upload = [("files", upload_tuple(f)) for f in files]
            resp = api_post("/products", data=form.model_dump(), files=upload, token=token(), timeout=60)
            if resp is not None and resp.ok:
                st.success("Product added.")
                refresh_data()
            else:
                st.error(error_message(resp))


def my_products_page():
    st.header("My products")
    products = my_products()
    if not products:
        st.info("No products yet.")
    for p in products:
        st.markdown(f"**{p['name']}** — ₹{p['price']:.2f} • stock {p['stock']}")
        with st.expander("Edit"):
            with st.form(f"edit_{p['id']}"):
                values = product_fields(f"edit_{p['id']}", p)
                files = st.file_uploader("Add images (optional)", type=["jpg", "jpeg", "png", "webp"],
                                         accept_multiple_files=True, key=f"files_{p['id']}")
                if st.form_submit_button("Save changes"):
                    form = check_form(ProductUpdateForm, **values)
                    if form:
                        upload = [("files", upload_tuple(f)) for f in files or []] or None
                        resp = api_put(f"/products/{p['id']}", data=form.model_dump(exclude_none=True),
                                       files=upload, token=token())
                        if resp is not None and resp.ok:
                            st.success("Product updated.")
                            refresh_data()
                        else:
                            st.error(error_message(resp))
        if st.button("Delete", key=f"delete_{p['id']}"):
            resp = api_delete(f"/products/{p['id']}", token=token())
            if resp is not None and resp.ok:
                st.success("Deleted.")
                refresh_data()
                st.rerun()
            else:
                st.error(error_message(resp))
        st.write("---")


def settings_page():
    st.header("Settings")
    resp = api_get("/dashboard/profile", token=token())
    if resp is None or not resp.ok:
        st.error(error_message(resp))
        return
    a = resp.json()
    if a.get("profile_image"):
        st.image(to_abs(a["profile_image"]), width=100)
    with st.form("settings"):
        c1, c2 = st.columns(2)
        values = {
            "name": c1.text_input("Artisan Name", value=a["name"]),
            "name_hi": c2.text_input("Artisan Name (Hindi)", value=a.get("name_hi", "")),
            "craft": c1.text_input("Primary Craft/Art Form", value=a["craft"]),
            "craft_hi": c2.text_input("Craft (Hindi)", value=a.get("craft_hi", "")),
            "location": c1.text_input("Location (City, State)", value=a["location"]),
            "location_hi": c2.text_input("Location (Hindi)", value=a.get("location_hi", "")),
            "bio": c1.text_area("Bio", value=a["bio"]),
            "bio_hi": c2.text_area("Bio (Hindi)", value=a.get("bio_hi", "")),
        }
        image = st.file_uploader("Profile image", type=["jpg", "jpeg", "png"])
        if st.form_submit_button("Save settings"):
            form = check_form(SettingsForm, **values)
            if form:
                files = {"profile_image": upload_tuple(image)} if image else None
                r = api_put("/dashboard/settings", data=form.model_dump(exclude_none=True), files=files, token=token())
                if r is not None and r.ok:
                    st.success("Profile updated.")
                    refresh_data()
                else:
                    st.error(error_message(r))

    if st.button("Translate bio to Hindi"):
        r = api_post("/ai/translate", json={"text": a["bio"], "target_language": "Hindi"}, token=token(), timeout=60)
        if r is not None and r.ok:
            st.info(r.json()["translated_text"])
        else:
            st.error(error_message(r))

    st.subheader("Change password")
    with st.form("password"):
        password = st.text_input("New password", type="password")
        confirm = st.text_input("Confirm password", type="password")
        if st.form_submit_button("Update password"):
            form = check_form(ChangePasswordForm, password=password, confirm_password=confirm)
            if form:
                r = api_post("/auth/password", json=form.model_dump(), token=token())
                if r is not None and r.ok:
                    st.success("Password changed.")
                else:
                    st.error(error_message(r))


def shipments_page():
    st.header("Shipments")
    resp = api_get("/shipments", token=token())
    if resp is None or not resp.ok:
        st.error(error_message(resp))
        return
    shipments = resp.json()
    if not shipments:
        st.info("No Shipments Yet. When you book a shipment, it will appear here.")
        return
    names = {p["id"]: p["name"] for p in st.session_state["products"] or []}
    for s in shipments:
        st.markdown(f"**{names.get(s['product_id'], 'Product not found')}** → {s['destination']}")
        st.markdown(f"{s['selected_carrier']} ({s['service_type']}) • ₹{s['shipping_cost']:.2f} • {s['estimated_delivery_date']}")
        st.code(s["tracking_number"])
        st.markdown(f"[Shipping label]({s['shipping_label_url']})")
        st.write("---")


def product_picker(key: str) -> Optional[dict]:
    products = my_products()
    if not products:
        st.info("Add a product first.")
        return None
    return st.selectbox("Product", products, format_func=lambda p: localized(p, "name", lang()), key=key)


def marketing_page():
    st.header("Marketing Suite")
    with st.form("marketing"):
        product = product_picker("mk_product")
        audience = st.text_input("Target audience", placeholder="e.g. eco-conscious buyers")
        submitted = st.form_submit_button("Generate content")
    if submitted and product:
        form = check_form(MarketingForm, product_id=product["id"], target_audience=audience)
        if form:
            payload = {
                "product_name": localized(product, "name", lang()),
                "product_description": localized(product, "description", lang()),
                "target_audience": form.target_audience,
            }
            with st.spinner("Generating..."):
                r = api_post("/ai/marketing", json=payload, token=token(), timeout=90)
            if r is not None and r.ok:
                out = r.json()
                for label, key in [("Instagram", "instagram_post"), ("Facebook", "facebook_post"),
                                   ("Twitter", "twitter_post"), ("TikTok", "tiktok_post"),
                                   ("Email newsletter", "email_newsletter"), ("Ad copy", "ad_copy")]:
                    st.markdown(f"**{label}**")
                    st.write(out[key])
            else:
                st.error(error_message(r))


def pricing_page():
    st.header("Pricing Optimizer")
    with st.form("pricing"):
        name = st.text_input("Product name")
        c1, c2 = st.columns(2)
        materials_cost = c1.number_input("Materials cost (₹)", min_value=0.0, value=500.0)
        labor_cost = c2.number_input("Labor cost (₹)", min_value=0.0, value=1200.0)
        demand = st.selectbox("Market demand", DEMAND_LEVELS)
        skill = st.selectbox("Skill level", SKILL_LEVELS)
        quality = st.selectbox("Product quality", QUALITY_LEVELS)
        submitted = st.form_submit_button("Suggest price")
    if submitted:
        payload = {"product_name": name, "materials_cost": materials_cost, "labor_cost": labor_cost,
                   "market_demand": demand, "artisan_skill_level": skill, "product_quality": quality}
        with st.spinner("Analyzing..."):
            r = api_post("/ai/pricing", json=payload, token=token(), timeout=90)
        if r is not None and r.ok:
            out = r.json()
            st.metric("Suggested price", f"₹{out['suggested_price']:,.2f}")
            st.write(out["reasoning"])
        else:
            st.error(error_message(r))


def trends_page():
    st.header("Trend Harmonizer")
    with st.form("trends"):
        category = st.text_input("Product category", placeholder="e.g. Ceramics")
        description = st.text_area("Product description")
        submitted = st.form_submit_button("Analyze trends")
    if submitted:
        with st.spinner("Analyzing..."):
            r = api_post("/ai/trends", json={"product_category": category, "product_description": description},
                         token=token(), timeout=90)
        if r is not None and r.ok:
            out = r.json()
            st.subheader("Trend analysis")
            st.write(out["trend_analysis"])
            st.subheader("Suggestions")
            st.write(out["suggestions"])
        else:
            st.error(error_message(r))


def description_page():
    st.header("Description Generator")
    with st.form("description"):
        keywords = st.text_area("Product details", placeholder="Materials, technique, size, story...")
        style = st.text_input("Style (optional)", placeholder="e.g. Elegant, Rustic, Modern, Playful")
        submitted = st.form_submit_button("Generate description")
    if submitted:
        with st.spinner("Generating..."):
            r = api_post("/ai/description", json={"keywords": keywords, "style": style or None}, token=token(), timeout=90)
        if r is not None and r.ok:
            st.write(r.json()["description"])
        else:
            st.error(error_message(r))


def visual_enhancer_page():
    st.header("Visual Enhancer")
    with st.form("mockup"):
        image = st.file_uploader("Product photo", type=["jpg", "jpeg", "png"])
        scene = st.text_area("Scene description", placeholder="On a coffee table in a cozy living room")
        submitted = st.form_submit_button("Generate mockup")
    if submitted:
        if not image:
            st.error("Please upload an image.")
            return
        with st.spinner("Generating..."):
            r = api_post("/ai/mockup", data={"scene_description": scene}, files={"file": upload_tuple(image)},
                         token=token(), timeout=120)
        if r is not None and r.ok:
            data_uri = r.json()["mockup_image"]
            raw = base64.b64decode(data_uri.split(",", 1)[1])
            st.image(raw)
            st.download_button("Download", data=raw, file_name="mockup.png")
        else:
            st.error(error_message(r))


def logistics_page():
    st.header("Logistics Hub")
    with st.form("logistics"):
        product = product_picker("lg_product")
        destination = st.text_input("Destination", placeholder="e.g. Mumbai, India")
        c1, c2 = st.columns(2)
        weight = c1.number_input("Package weight (kg)", min_value=0.0, value=1.0)
        declared = c2.number_input("Declared value (₹)", min_value=0.0, value=1000.0)
        d1, d2, d3 = st.columns(3)
        length = d1.number_input("Length (cm)", min_value=0.0, value=20.0)
        width = d2.number_input("Width (cm)", min_value=0.0, value=15.0)
        height = d3.number_input("Height (cm)", min_value=0.0, value=10.0)
        submitted = st.form_submit_button("Get advice")

    if submitted and product:
        form = check_form(LogisticsForm, product_id=product["id"], package_weight_kg=weight, length=length,
                          width=width, height=height, destination=destination, declared_value=declared)
        if form:
            request = {
                "product_name": localized(product, "name", lang()),
                "product_material": ", ".join(localized(product, "materials", lang()) or []),
                "package_weight_kg": form.package_weight_kg,
                "package_dimensions_cm": {"length": form.length, "width": form.width, "height": form.height},
                "destination": form.destination,
                "declared_value": form.declared_value,
            }
            with st.spinner("Analyzing market data..."):
                r = api_post("/ai/logistics", json=request, token=token(), timeout=120)
            if r is not None and r.ok:
                st.session_state["logistics_result"] = r.json()
                st.session_state["logistics_request"] = {**request, "product_id": form.product_id}
            else:
                st.session_state["logistics_result"] = None
                st.error(error_message(r))

    result = st.session_state.get("logistics_result")
    request = st.session_state.get("logistics_request")
    if not result or not request:
        return

    left, right = st.columns([1, 2])
    with left:
        st.subheader("AI logistics advisor")
        st.markdown("**Packaging advice**")
        st.write(result["packaging_advice"])
        st.markdown("**Risk & insurance**")
        st.write(result["risk_and_insurance_advice"])
        st.markdown("**Carrier choice**")
        st.write(result["carrier_choice_advice"])
        customs = result.get("customs_advice")
        if customs and classify_destination(request["destination"]) == "international":
            st.markdown("**Customs**")
            st.write(f"HS code: {customs['hs_code']}")
            st.write(customs["declaration_text"])
    with right:
        st.subheader("Shipping options")
        options = result["shipping_options"]
        cheapest = options[0]["total_cost"] if options else 0
        for i, option in enumerate(options):
            cols = st.columns([3, 1, 1])
            cols[0].markdown(f"**{option['carrier']}** ({option['service_type']}) • {option['estimated_delivery_date']}")
            extra = f" (+₹{option['total_cost'] - cheapest:.2f})" if i > 0 else ""
            cols[1].markdown(f"₹{option['total_cost']:.2f}{extra}")
            if cols[2].button("Book & label", key=f"book_{i}"):
                shipment = {
                    "product_id": request["product_id"],
                    "destination": request["destination"],
                    "package_weight_kg": request["package_weight_kg"],
                    "package_dimensions_cm": request["package_dimensions_cm"],
                    "declared_value": request["declared_value"],
                    "selected_carrier": option,
                    "ai_packaging_advice": result["packaging_advice"],
                    "ai_risk_advice": result["risk_and_insurance_advice"],
                    "ai_carrier_choice_advice": result["carrier_choice_advice"],
                    "ai_hs_code": customs["hs_code"] if customs else None,
                    "ai_customs_declaration": customs["declaration_text"] if customs else None,
                }
                r = api_post("/shipments", json=shipment, token=token())
                if r is not None and r.ok:
                    booked = r.json()
                    st.success(f"Shipment booked. Tracking number: {booked['tracking_number']}")
                    st.session_state["logistics_result"] = None
                else:
                    st.error(error_message(r))


# -------------------------
# Router
# -------------------------
PAGES = {
    "Home": home_page,
    "Products": products_page,
    "Artisans": artisans_page,
    "Login": login_page,
    "Sign Up": signup_page,
    "Dashboard": dashboard_page,
    "My Products": my_products_page,
    "Add Product": add_product_page,
    "Settings": settings_page,
    "Shipments": shipments_page,
    "Marketing Suite": marketing_page,
    "Pricing Optimizer": pricing_page,
    "Trend Harmonizer": trends_page,
    "Description Generator": description_page,
    "Visual Enhancer": visual_enhancer_page,
    "Logistics Hub": logistics_page,
}

if page.startswith("Cart"):
    cart_page()
else:
    PAGES.get(page, home_page)()
