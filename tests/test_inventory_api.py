from decimal import Decimal

from sqlalchemy import select

from app.models import AuditLog, Product


def _new_product(**overrides):
    payload = {
        "saree_name": "Banarasi Brocade",
        "saree_type": "Banarasi",
        "material": "Silk",
        "color": "Gold",
        "vendor_name": "Varanasi Weavers",
        "cost_price": "2500",
        "selling_price_a": "4200",
        "quantity": 2,
    }
    payload.update(overrides)
    return payload


class TestCreate:
    def test_generates_sku_and_defaults_tiers(self, client, founder_headers):
        resp = client.post("/inventory/products", json=_new_product(), headers=founder_headers)
        assert resp.status_code == 201
        body = resp.json()
        assert body["sku"].startswith("S-")
        assert len(body["sku"]) == 10
        assert body["selling_price_b"] == body["selling_price_a"]
        assert body["selling_price_c"] == body["selling_price_a"]
        assert body["status"] == "available"

    def test_zero_quantity_is_sold(self, client, founder_headers):
        resp = client.post("/inventory/products", json=_new_product(quantity=0), headers=founder_headers)
        assert resp.json()["status"] == "sold"

    def test_duplicate_sku(self, client, founder_headers, make_product):
        make_product(sku="S-TAKEN1")
        resp = client.post("/inventory/products", json=_new_product(sku="s-taken1"), headers=founder_headers)
        assert resp.status_code == 409

    def test_salesman_cannot_stock_in(self, client, salesman_headers):
        assert client.post("/inventory/products", json=_new_product(), headers=salesman_headers).status_code == 403


class TestList:
    def test_salesman_view_hides_cost_and_vendor(self, client, salesman_headers, make_product):
        make_product(sku="S-VIEW01")
        product = client.get("/inventory/products", headers=salesman_headers).json()[0]
        assert "cost_price" not in product
        assert "cost_code" not in product
        assert "vendor_name" not in product
        assert product["sku"] == "S-VIEW01"

    def test_founder_view_includes_cost(self, client, founder_headers, make_product):
        make_product(sku="S-VIEW02", cost="750")
        product = client.get("/inventory/products", headers=founder_headers).json()[0]
        assert product["cost_price"] == "750.00"
        assert product["vendor_name"] == "Sri Lakshmi Textiles"

    def test_filters(self, client, accountant_headers, make_product):
        make_product(sku="S-FLT001", color="Green", saree_type="Cotton", price="900")
        make_product(sku="S-FLT002", color="Red", saree_type="Silk", price="3000")
        make_product(sku="S-FLT003", quantity=0, color="Green")

        def skus(**params):
            resp = client.get("/inventory/products", params=params, headers=accountant_headers)
            return sorted(p["sku"] for p in resp.json())

        assert skus(color="green") == ["S-FLT001", "S-FLT003"]
        assert skus(status="sold") == ["S-FLT003"]
        assert skus(type="cotton") == ["S-FLT001"]
        assert skus(min_price="1500") == ["S-FLT002"]
        assert skus(max_price="950") == ["S-FLT001"]
        assert skus(search="flt002") == ["S-FLT002"]

    def test_lookup_by_sku(self, client, salesman_headers, make_product):
        make_product(sku="S-LOOK01")
        assert client.get("/inventory/products/sku/s-look01", headers=salesman_headers).status_code == 200
        assert client.get("/inventory/products/sku/S-NONE00", headers=salesman_headers).status_code == 404


class TestUpdateAndDelete:
    def test_quantity_edit_rederives_status(self, client, founder_headers, make_product):
        product = make_product(sku="S-RESTK1", quantity=0)
        resp = client.patch(f"/inventory/products/{product.id}", json={"quantity": 4}, headers=founder_headers)
        assert resp.status_code == 200
        assert (resp.json()["quantity"], resp.json()["status"]) == (4, "available")

        resp = client.patch(f"/inventory/products/{product.id}", json={"quantity": 0}, headers=founder_headers)
        assert resp.json()["status"] == "sold"

    def test_null_for_required_field_is_ignored(self, client, db_session, founder_headers, make_product):
        product = make_product(sku="S-NULLED1", quantity=3, color="Green")
        resp = client.patch(
            f"/inventory/products/{product.id}",
            json={"saree_name": None, "quantity": None, "selling_price_a": None, "color": None},
            headers=founder_headers,
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["saree_name"] == "Kanjivaram Silk"
        assert body["quantity"] == 3
        assert body["status"] == "available"
        assert body["color"] is None

        db_session.expire_all()
        stored = db_session.get(Product, product.id)
        assert stored.quantity == 3
        assert stored.selling_price_a == Decimal("1000")

    def test_update_missing_product(self, client, founder_headers):
        resp = client.patch("/inventory/products/999", json={"quantity": 1}, headers=founder_headers)
        assert resp.status_code == 404

    def test_only_founder_deletes(self, client, db_session, founder_headers, accountant_headers, make_product):
        product = make_product(sku="S-DEL001")
        assert client.delete(f"/inventory/products/{product.id}", headers=accountant_headers).status_code == 403

        assert client.delete(f"/inventory/products/{product.id}", headers=founder_headers).status_code == 200
        db_session.expire_all()
        assert db_session.scalar(select(Product).where(Product.sku == "S-DEL001")) is None
        assert "products.deleted" in db_session.scalars(select(AuditLog.event_type)).all()
