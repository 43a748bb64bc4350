import re

from backend import config, crud
from conftest import create_product


def shipment_payload(product_id, **overrides):
    payload = {
        "product_id": product_id,
        "destination": "Mumbai, India",
        "package_weight_kg": 1.5,
        "package_dimensions_cm": {"length": 30, "width": 20, "height": 15},
        "declared_value": 1500,
        "selected_carrier": {
            "carrier": "India Post",
            "service_type": "Standard",
            "total_cost": 85,
            "estimated_delivery_date": "5-7 days",
        },
        "ai_packaging_advice": "Double box with corrugated inserts.",
        "ai_risk_advice": "Insure for the declared value.",
        "ai_carrier_choice_advice": "India Post is cheapest.",
    }
    payload.update(overrides)
    return payload


def test_book_and_list_shipments(client, artisan):
    headers, user_id = artisan
    product = create_product(client, headers).json()

    resp = client.post("/shipments", json=shipment_payload(product["id"]), headers=headers)
    assert resp.status_code == 201, resp.text
    shipment = resp.json()
    assert shipment["artisan_id"] == user_id
    assert shipment["selected_carrier"] == "India Post"
    assert shipment["service_type"] == "Standard"
    assert shipment["shipping_cost"] == 85
    assert shipment["tracking_number"].startswith("VRST")
    assert shipment["shipping_label_url"] == f"{config.LABEL_BASE_URL}/{shipment['tracking_number']}.pdf"
    assert shipment["ai_hs_code"] is None

    listed = client.get("/shipments", headers=headers).json()
    assert [s["id"] for s in listed] == [shipment["id"]]

    summary = client.get("/dashboard/summary", headers=headers).json()
    assert summary["shipment_count"] == 1
    assert summary["shipping_spend"] == 85


def test_shipments_newest_first(client, artisan):
    headers, _ = artisan
    product = create_product(client, headers).json()
    first = client.post("/shipments", json=shipment_payload(product["id"]), headers=headers).json()
    second = client.post("/shipments", json=shipment_payload(product["id"], destination="Delhi, India"), headers=headers).json()

    listed = client.get("/shipments", headers=headers).json()
    assert [s["id"] for s in listed] == [second["id"], first["id"]]


def test_shipment_for_foreign_product_rejected(client, artisan, other_artisan):
    headers, _ = artisan
    product = create_product(client, headers).json()
    other_headers, _ = other_artisan

    assert client.post("/shipments", json=shipment_payload(product["id"]), headers=other_headers).status_code == 403
    assert client.post("/shipments", json=shipment_payload("missing"), headers=headers).status_code == 404


def test_shipment_validation(client, artisan):
    headers, _ = artisan
    product = create_product(client, headers).json()
    resp = client.post("/shipments", json=shipment_payload(product["id"], package_weight_kg=0), headers=headers)
    assert resp.status_code == 422


def test_shipments_are_private(client, artisan, other_artisan):
    headers, _ = artisan
    product = create_product(client, headers).json()
    client.post("/shipments", json=shipment_payload(product["id"]), headers=headers)

    other_headers, _ = other_artisan
    assert client.get("/shipments", headers=other_headers).json() == []


def test_list_shipments_without_artisan(db):
    assert crud.list_shipments(db, "") == []


def test_tracking_number_format():
    number = crud.new_tracking_number()
    assert re.fullmatch(r"VRST\d{13}[0-9A-F]{4}", number)
