from types import SimpleNamespace

import pytest

from frontend import api
from frontend.cart import Cart, StockError
from frontend.i18n import localized, t

VASE = {"id": "p1", "name": "Vase", "name_hi": "फूलदान", "price": 1500.0, "stock": 3}
SCARF = {"id": "p2", "name": "Scarf", "name_hi": "", "price": 800.0, "stock": 1}


# ----- Cart -----
def test_add_merges_quantities():
    cart = Cart()
    cart.add(VASE)
    cart.add(VASE, 2)
    assert cart.count == 3
    assert len(cart.items) == 1
    assert cart.total == 4500


def test_add_beyond_stock():
    cart = Cart()
    cart.add(VASE, 2)
    with pytest.raises(StockError) as exc:
        cart.add(VASE, 2)
    assert exc.value.stock == 3
    assert cart.count == 2


def test_update_quantity():
    cart = Cart()
    cart.add(VASE)
    cart.add(SCARF)

    cart.update_quantity("p1", 3)
    assert cart.count == 4

    with pytest.raises(StockError):
        cart.update_quantity("p2", 2)
    assert cart.count == 4

    cart.update_quantity("p2", 0)
    assert [i["id"] for i in cart.items] == ["p1"]

    cart.update_quantity("unknown", 5)
    assert cart.count == 3


def test_remove_and_clear():
    cart = Cart()
    cart.add(VASE)
    cart.add(SCARF)
    cart.remove("p1")
    assert cart.total == 800
    cart.clear()
    assert cart.count == 0 and cart.total == 0


def test_cart_persists_as_json():
    cart = Cart()
    cart.add(VASE, 2)
    restored = Cart.loads(cart.dumps())
    assert restored.items == cart.items


@pytest.mark.parametrize("raw", [None, "", "{not json", '{"id": "p1"}', '[{"name": "no id"}]'])
def test_corrupt_cart_starts_empty(raw):
    assert Cart.loads(raw).items == []


# ----- Localisation -----
def test_localized_prefers_hindi_when_present():
    assert localized(VASE, "name", "hi") == "फूलदान"
    assert localized(SCARF, "name", "hi") == "Scarf"
    assert localized(VASE, "name", "en") == "Vase"
    assert "quantity" not in VASE


def test_t_resolves_and_formats():
    strings = {"cart": {"empty": "Your Cart is Empty", "notEnoughStock": "Only {stock} left in stock."}}
    assert t(strings, "cart.empty") == "Your Cart is Empty"
    assert t(strings, "cart.notEnoughStock", stock=2) == "Only 2 left in stock."
    assert t(strings, "cart.missing") == "cart.missing"
    assert t(strings, "cart") == "cart"
    assert t(None, "nav.home") == "nav.home"


# ----- API helpers -----
def fake_response(status=400, body=None, ok=False):
    def json():
        if body is None:
            raise ValueError("no json")
        return body

    return SimpleNamespace(status_code=status, ok=ok, json=json)


def test_error_message():
    assert api.error_message(None).startswith("Error contacting backend")
    assert api.error_message(fake_response(body={"detail": "Invalid email or password."})) == "Invalid email or password."
    validation = {"detail": [{"loc": ["body", "name"], "msg": "String should have at least 3 characters"}]}
    assert api.error_message(fake_response(body=validation)) == "name: String should have at least 3 characters"
    assert api.error_message(fake_response(body=None)) == api.GENERIC_ERROR


def test_to_abs(monkeypatch):
    monkeypatch.setattr(api, "BACKEND", "http://backend:8000/")
    assert api.to_abs("/static/a.png") == "http://backend:8000/static/a.png"
    assert api.to_abs("https://cdn/x.png") == "https://cdn/x.png"
    assert api.to_abs("data:image/png;base64,AAA") == "data:image/png;base64,AAA"


def test_load_catalog(monkeypatch):
    payloads = {"/products": [VASE], "/artisans": [{"id": "a1"}]}
    monkeypatch.setattr(api, "api_get", lambda path: fake_response(200, payloads[path], ok=True))
    assert api.load_catalog() == ([VASE], [{"id": "a1"}])


def test_load_catalog_failure(monkeypatch):
    def api_get(path):
        if path == "/artisans":
            return None
        return fake_response(200, [], ok=True)

    monkeypatch.setattr(api, "api_get", api_get)
    with pytest.raises(RuntimeError):
        api.load_catalog()


def test_forwarded_headers():
    browser = {"Accept-Language": "hi-IN,hi;q=0.9", "X-Forwarded-For": "203.0.113.9", "Cookie": "secret"}
    assert api.forwarded_headers(browser) == {"Accept-Language": "hi-IN,hi;q=0.9", "X-Forwarded-For": "203.0.113.9"}
    assert api.forwarded_headers(None) == {}


def test_api_get_sends_forwarded_and_auth_headers(monkeypatch):
    seen = {}

    def fake_request(method, url, headers, timeout, **kwargs):
        seen.update(method=method, url=url, headers=headers)
        return fake_response(200, {}, ok=True)

    monkeypatch.setattr(api.requests, "request", fake_request)
    monkeypatch.setattr(api, "BACKEND", "http://backend:8000")
    api.api_get("/language/detect", token="tok", headers={"Accept-Language": "hi"})
    assert seen["url"] == "http://backend:8000/language/detect"
    assert seen["headers"] == {"Accept-Language": "hi", "Authorization": "Bearer tok"}
