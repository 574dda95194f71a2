# tests/test_products.py

"""End-to-end tests for the /products pages: access rules, listing, create, edit, update, delete."""

import pytest
from sqlmodel import Session, select

from app.db.models.products import Product
from app.db.repositories.products import ProductRepository


def _count(session: Session) -> int:
    return ProductRepository(session).count()


# ---------------------------------------------------------------------------
# Access rules
# ---------------------------------------------------------------------------

class TestUnauthenticated:
    @pytest.mark.parametrize(
        "method, path",
        [
            ("GET", "/products"),
            ("GET", "/products/create"),
            ("POST", "/products"),
            ("GET", "/products/1/edit"),
            ("PUT", "/products/1"),
            ("POST", "/products/1"),
            ("DELETE", "/products/1"),
            ("POST", "/products/1/delete"),
        ],
    )
    def test_redirects_to_login(self, guest_client, method, path):
        response = guest_client.request(method, path)

        assert response.status_code == 302
        assert response.headers["location"] == "/login"

    def test_invalid_token_is_treated_as_guest(self, guest_client):
        guest_client.cookies.set("access_token", "not-a-jwt")

        response = guest_client.get("/products")

        assert response.status_code == 302
        assert response.headers["location"] == "/login"


class TestNonAdmin:
    def test_cannot_open_create_form(self, user_client):
        assert user_client.get("/products/create").status_code == 403

    def test_cannot_store(self, user_client, session):
        response = user_client.post("/products", data={"name": "nope", "price": "1"})

        assert response.status_code == 403
        assert _count(session) == 0

    def test_cannot_edit_update_or_delete(self, user_client, create_product, session):
        product = create_product(name="kept", price=10)

        assert user_client.get(f"/products/{product.id}/edit").status_code == 403
        assert user_client.put(f"/products/{product.id}", data={"name": "x", "price": "1"}).status_code == 403
        assert user_client.delete(f"/products/{product.id}").status_code == 403
        assert user_client.post(f"/products/{product.id}/delete").status_code == 403

        session.refresh(product)
        assert product.name == "kept"


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------

class TestListing:
    def test_empty_table_shows_placeholder(self, user_client):
        response = user_client.get("/products")

        assert response.status_code == 200
        assert "No products found" in response.text

    def test_non_empty_table_lists_products(self, user_client, create_product):
        product = create_product(name="product 1", price=100)

        response = user_client.get("/products")

        assert response.status_code == 200
        assert "No products found" not in response.text
        assert product.name in response.text
        assert product.id in [p.id for p in response.context["products"]]

    def test_non_admin_does_not_see_actions(self, user_client, create_products):
        create_products(3)

        response = user_client.get("/products")

        assert response.status_code == 200
        assert "Add new product" not in response.text
        assert "Edit" not in response.text
        assert "Delete" not in response.text

    def test_admin_sees_actions(self, admin_client, create_products):
        create_products(10)

        response = admin_client.get("/products")

        assert response.status_code == 200
        assert "Add new product" in response.text
        assert "Edit" in response.text
        assert "Delete" in response.text

    def test_first_page_holds_ten_oldest_products(self, user_client, create_products):
        products = create_products(11)
        last = products[-1]

        response = user_client.get("/products")

        assert response.status_code == 200
        ids = [p.id for p in response.context["products"]]
        assert ids == [p.id for p in products[:10]]
        assert last.id not in ids
        assert last.name not in response.text

    def test_second_page_holds_the_rest(self, user_client, create_products):
        products = create_products(11)

        response = user_client.get("/products", params={"page": 2})

        assert [p.id for p in response.context["products"]] == [products[-1].id]
        assert "Page 2 of 2" in response.text

    def test_page_below_one_is_clamped(self, user_client, create_products):
        create_products(2)

        response = user_client.get("/products", params={"page": 0})

        assert response.status_code == 200
        assert response.context["pagination"].page == 1
        assert len(response.context["products"]) == 2

    def test_non_numeric_page_falls_back_to_first(self, user_client, create_products):
        create_products(2)

        response = user_client.get("/products", params={"page": "abc"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert response.context["pagination"].page == 1
        assert len(response.context["products"]) == 2

    def test_huge_page_is_clamped_to_last(self, user_client, create_products):
        products = create_products(11)

        response = user_client.get("/products", params={"page": str(10**20)})

        assert response.status_code == 200
        assert response.context["pagination"].page == 2
        assert [p.id for p in response.context["products"]] == [products[-1].id]
        assert "Page 2 of 2" in response.text


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------

class TestCreate:
    def test_admin_can_open_create_form(self, admin_client):
        response = admin_client.get("/products/create")

        assert response.status_code == 200
        assert 'name="photo"' in response.text

    def test_admin_can_create_product(self, admin_client, session):
        payload = {"name": "admin product", "price": "101"}

        response = admin_client.post("/products", data=payload, follow_redirects=True)

        assert response.status_code == 200
        assert "admin product" in response.text

        stored = session.exec(
            select(Product).where(Product.name == "admin product").where(Product.price == 101)
        ).first()
        assert stored is not None

        latest = ProductRepository(session).latest()
        assert latest.name == "admin product"
        assert latest.price == 101
        assert latest.photo is None

    def test_successful_store_redirects_to_listing(self, admin_client):
        response = admin_client.post("/products", data={"name": "widget", "price": "3.5"})

        assert response.status_code == 302
        assert response.headers["location"] == "/products"

    def test_image_upload(self, admin_client, session, store, jpeg_bytes):
        response = admin_client.post(
            "/products",
            data={"name": "Product Sample", "price": "1234"},
            files={"photo": ("sample.jpg", jpeg_bytes, "image/jpeg")},
        )

        assert response.status_code == 302

        latest = ProductRepository(session).latest()
        assert latest.photo == "sample.jpg"
        assert store.exists("products/sample.jpg")
        assert store.path("products/sample.jpg").read_bytes() == jpeg_bytes

    def test_empty_fields_redirect_back_with_errors(self, admin_client, session):
        response = admin_client.post("/products", data={"name": "", "price": ""})

        assert response.status_code == 302
        assert response.headers["location"] == "/products/create"
        assert _count(session) == 0

        form = admin_client.get("/products/create")
        assert form.context["errors"].keys() == {"name", "price"}
        assert "The name field is required." in form.text
        assert "The price field is required." in form.text

    def test_errors_are_shown_only_once(self, admin_client):
        admin_client.post("/products", data={"name": "", "price": ""})
        admin_client.get("/products/create")

        again = admin_client.get("/products/create")

        assert again.context["errors"] == {}

    def test_non_numeric_price_keeps_old_input(self, admin_client, session):
        admin_client.post("/products", data={"name": "gizmo", "price": "cheap"})

        form = admin_client.get("/products/create")

        assert "The price field must be a number." in form.text
        assert 'value="gizmo"' in form.text
        assert "name" not in form.context["errors"]
        assert _count(session) == 0

    def test_long_old_input_is_truncated(self, admin_client, session):
        response = admin_client.post("/products", data={"name": "x" * 5000, "price": ""})

        assert response.status_code == 302
        assert _count(session) == 0

        form = admin_client.get("/products/create")
        assert len(form.context["old"]["name"]) == 255
        assert "The price field is required." in form.text
        assert "name" in form.context["errors"]

    def test_non_image_photo_is_rejected(self, admin_client, session, store):
        response = admin_client.post(
            "/products",
            data={"name": "bad photo", "price": "5"},
            files={"photo": ("notes.jpg", b"just some text", "image/jpeg")},
        )

        assert response.status_code == 302
        assert response.headers["location"] == "/products/create"
        assert _count(session) == 0
        assert not store.exists("products/notes.jpg")

        form = admin_client.get("/products/create")
        assert "The photo field must be an image." in form.text


# ---------------------------------------------------------------------------
# Edit / Update
# ---------------------------------------------------------------------------

class TestEdit:
    def test_edit_form_has_product_data(self, admin_client, create_product):
        product = create_product(name="blue mug", price=42)

        response = admin_client.get(f"/products/{product.id}/edit")

        assert response.status_code == 200
        assert "blue mug" in response.text
        assert 'value="42"' in response.text
        assert response.context["product"].id == product.id

    def test_edit_unknown_product_is_404(self, admin_client):
        assert admin_client.get("/products/999/edit").status_code == 404


class TestUpdate:
    def test_validation_fails_and_redirects_to_form(self, admin_client, create_product, session):
        product = create_product(name="original", price=10)

        response = admin_client.put(f"/products/{product.id}", data={"name": "", "price": ""})

        assert response.status_code == 302
        assert response.headers["location"] == f"/products/{product.id}/edit"

        session.refresh(product)
        assert product.name == "original"
        assert product.price == 10

        form = admin_client.get(f"/products/{product.id}/edit")
        assert form.context["errors"].keys() == {"name", "price"}
        assert "The name field is required." in form.text
        assert "The price field is required." in form.text

    def test_valid_update_keeps_identity(self, admin_client, create_product, session):
        product = create_product(name="old name", price=10)
        product_id = product.id

        response = admin_client.put(f"/products/{product_id}", data={"name": "new name", "price": "12.5"})

        assert response.status_code == 302
        assert response.headers["location"] == "/products"

        session.refresh(product)
        assert product.id == product_id
        assert product.name == "new name"
        assert product.price == 12.5
        assert _count(session) == 1

    def test_html_form_post_updates(self, admin_client, create_product, session):
        product = create_product(name="via form", price=1)

        response = admin_client.post(f"/products/{product.id}", data={"name": "posted", "price": "2"})

        assert response.status_code == 302
        session.refresh(product)
        assert product.name == "posted"

    def test_update_unknown_product_is_404(self, admin_client):
        assert admin_client.put("/products/999", data={"name": "x", "price": "1"}).status_code == 404


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------

class TestDelete:
    def test_delete_successful(self, admin_client, create_product, session):
        product = create_product()
        product_id = product.id

        response = admin_client.delete(f"/products/{product_id}")

        assert response.status_code == 302
        assert response.headers["location"] == "/products"
        repo = ProductRepository(session)
        assert not repo.exists(product_id)
        assert repo.get(product_id) is None
        assert repo.count() == 0

    def test_html_form_delete(self, admin_client, create_product, session):
        product = create_product()
        product_id = product.id

        response = admin_client.post(f"/products/{product_id}/delete")

        assert response.status_code == 302
        assert not ProductRepository(session).exists(product_id)

    def test_delete_removes_photo(self, admin_client, create_product, store):
        store.put("products/lonely.jpg", b"x")
        product = create_product(photo="lonely.jpg")

        admin_client.delete(f"/products/{product.id}")

        assert not store.exists("products/lonely.jpg")

    def test_delete_keeps_photo_shared_with_another_product(self, admin_client, create_product, store):
        store.put("products/shared.jpg", b"x")
        first = create_product(photo="shared.jpg")
        create_product(photo="shared.jpg")

        admin_client.delete(f"/products/{first.id}")

        assert store.exists("products/shared.jpg")

    def test_delete_unknown_product_is_404(self, admin_client):
        assert admin_client.delete("/products/999").status_code == 404
