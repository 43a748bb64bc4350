from backend import crud
from backend.models import Artisan
from conftest import PRODUCT_FORM, create_product, png_bytes


def seed_catalog(db):
    a = Artisan(id="artisan-1", name="Ravi Kumar", location="Jaipur, Rajasthan", craft="Block Printing")
    b = Artisan(id="artisan-2", name="Meera Devi", location="Madhubani, Bihar", craft="Madhubani Painting")
    db.add_all([a, b])
    db.flush()
    crud.create_product(db, a.id, {"name": "Indigo Scarf", "description": "Block printed cotton scarf",
                                   "category": "Textiles", "price": 1200, "stock": 3}, ["https://img/1.png"])
    crud.create_product(db, a.id, {"name": "Block Print Quilt", "description": "Queen size quilt",
                                   "category": "Textiles", "price": 4800, "stock": 1}, ["https://img/2.png"])
    crud.create_product(db, b.id, {"name": "Fish Painting", "description": "Madhubani fish motif on paper",
                                   "category": "Paintings", "price": 2500, "stock": 2}, ["https://img/3.png"])


def test_create_product_stores_images(client, artisan, media_dir):
    headers, user_id = artisan
    resp = create_product(client, headers, n_images=2)
    assert resp.status_code == 201, resp.text
    body = resp.json()

    assert body["artisan_id"] == user_id
    assert body["materials"] == ["Clay", "Natural Glaze"]
    assert body["materials_hi"] == ["मिट्टी", "प्राकृतिक ग्लेज़"]
    assert len(body["images"]) == 2
    for url in body["images"]:
        assert url.startswith(f"/static/products/{user_id}/")
        assert (media_dir / url[len("/static/"):]).is_file()


def test_create_product_requires_an_image(client, artisan):
    headers, _ = artisan
    resp = create_product(client, headers, n_images=0)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "At least one image is required to add a product."


def test_create_product_rejects_more_than_five_images(client, artisan):
    headers, _ = artisan
    resp = create_product(client, headers, n_images=6)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "You can upload a maximum of 5 images."


def test_create_product_validates_fields(client, artisan):
    headers, _ = artisan
    resp = create_product(client, headers, name="ab", price="0")
    assert resp.status_code == 422
    fields = {err["loc"][-1] for err in resp.json()["detail"]}
    assert {"name", "price"} <= fields


def test_create_product_rejects_empty_file(client, artisan):
    headers, _ = artisan
    files = [("files", ("empty.png", b"", "image/png"))]
    resp = client.post("/products", data=PRODUCT_FORM, files=files, headers=headers)
    assert resp.status_code == 400
    assert "empty.png" in resp.json()["detail"]


def test_create_product_requires_login(client):
    resp = create_product(client, {})
    assert resp.status_code == 401


def test_product_listing_filters(client, db):
    seed_catalog(db)

    names = [p["name"] for p in client.get("/products").json()]
    assert names == ["Block Print Quilt", "Fish Painting", "Indigo Scarf"]

    textiles = client.get("/products", params={"category": "Textiles"}).json()
    assert {p["name"] for p in textiles} == {"Indigo Scarf", "Block Print Quilt"}

    assert len(client.get("/products", params={"category": "all"}).json()) == 3

    cheap = client.get("/products", params={"max_price": 2500}).json()
    assert {p["name"] for p in cheap} == {"Indigo Scarf", "Fish Painting"}

    by_text = client.get("/products", params={"q": "motif"}).json()
    assert [p["name"] for p in by_text] == ["Fish Painting"]

    by_artisan = client.get("/products", params={"artisan_id": "artisan-2"}).json()
    assert [p["name"] for p in by_artisan] == ["Fish Painting"]


def test_categories_are_distinct(client, db):
    seed_catalog(db)
    assert client.get("/categories").json() == ["Paintings", "Textiles"]


def test_get_product_not_found(client):
    resp = client.get("/products/missing")
    assert resp.status_code == 404


def test_search_joins_artisan(client, db):
    seed_catalog(db)
    results = client.get("/search", params={"q": "scarf"}).json()
    assert len(results) == 1
    assert results[0]["artisan"]["name"] == "Ravi Kumar"
    assert results[0]["image_url"] == "https://img/1.png"

    in_bihar = client.get("/search", params={"location": "bihar"}).json()
    assert [r["name"] for r in in_bihar] == ["Fish Painting"]


def test_update_product_appends_images(client, artisan):
    headers, _ = artisan
    product = create_product(client, headers).json()

    resp = client.put(
        f"/products/{product['id']}",
        data={"price": "1750", "materials": "Clay, Mica"},
        files=[("files", ("extra.png", png_bytes((10, 10, 10)), "image/png"))],
        headers=headers,
    )
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["price"] == 1750
    assert body["materials"] == ["Clay", "Mica"]
    assert body["name"] == PRODUCT_FORM["name"]
    assert len(body["images"]) == 2
    assert body["images"][0] == product["images"][0]


def test_update_product_image_limit(client, artisan):
    headers, _ = artisan
    product = create_product(client, headers, n_images=5).json()
    resp = client.put(
        f"/products/{product['id']}",
        files=[("files", ("extra.png", png_bytes(), "image/png"))],
        headers=headers,
    )
    assert resp.status_code == 400


def test_only_owner_can_change_product(client, artisan, other_artisan):
    headers, _ = artisan
    product = create_product(client, headers).json()
    intruder, _ = other_artisan

    assert client.put(f"/products/{product['id']}", data={"price": "1"}, headers=intruder).status_code == 403
    assert client.delete(f"/products/{product['id']}", headers=intruder).status_code == 403


def test_delete_product_removes_images(client, artisan, media_dir):
    headers, _ = artisan
    product = create_product(client, headers).json()
    stored = media_dir / product["images"][0][len("/static/"):]
    assert stored.is_file()

    resp = client.delete(f"/products/{product['id']}", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"status": "deleted", "id": product["id"]}
    assert not stored.exists()
    assert client.get(f"/products/{product['id']}").status_code == 404


def test_dashboard_lists_only_own_products(client, artisan, other_artisan):
    headers, _ = artisan
    other_headers, _ = other_artisan
    create_product(client, headers, name="Mine")
    create_product(client, other_headers, name="Theirs")

    mine = client.get("/dashboard/products", headers=headers).json()
    assert [p["name"] for p in mine] == ["Mine"]


def test_dashboard_summary(client, artisan):
    headers, _ = artisan
    create_product(client, headers, price="100", stock="3")
    create_product(client, headers, price="50", stock="2")

    summary = client.get("/dashboard/summary", headers=headers).json()
    assert summary["product_count"] == 2
    assert summary["total_stock"] == 5
    assert summary["inventory_value"] == 400
    assert summary["shipment_count"] == 0
