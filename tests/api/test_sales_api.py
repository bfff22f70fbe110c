"""
Tests for the sale, payment and sales return endpoints.

These test the HTTP layer: status codes, response format and
error mapping. Ledger behaviour is tested in tests/services/.
"""

from decimal import Decimal

from back_office.config import get_settings


def create_customer(client, name="Rahim Traders", opening="0"):
    response = client.post("/customers", json={"name": name, "opening_balance": opening})
    assert response.status_code == 201
    return response.json()


def create_product(client, name="GI Pipe", opening_stock=100):
    response = client.post("/products", json={
        "name": name,
        "pieces_per_bundle": 10,
        "opening_stock": opening_stock,
    })
    assert response.status_code == 201
    return response.json()


def sale_body(customer_id, product_id, pieces=5, amount="50.00", **extra):
    body = {
        "customer_id": customer_id,
        "items": [{"product_id": product_id, "total_pieces": pieces, "amount": amount}],
    }
    body.update(extra)
    return body


class TestSaleEndpoints:

    def test_create_sale_returns_201(self, client):
        customer = create_customer(client)
        product = create_product(client)

        response = client.post("/sales", json=sale_body(customer["id"], product["id"]))

        assert response.status_code == 201
        data = response.json()
        assert data["bill_no"].startswith("FS-")
        assert Decimal(data["due_amount"]) == Decimal("50")
        assert len(data["items"]) == 1

        assert Decimal(client.get(f"/customers/{customer['id']}").json()["total_due"]) == Decimal("50")
        assert client.get(f"/products/{product['id']}").json()["stock_pieces"] == 95

    def test_insufficient_stock_returns_400(self, client):
        customer = create_customer(client)
        product = create_product(client, opening_stock=3)

        response = client.post("/sales", json=sale_body(customer["id"], product["id"], pieces=5))

        assert response.status_code == 400
        assert "Insufficient stock" in response.json()["detail"]
        assert client.get(f"/products/{product['id']}").json()["stock_pieces"] == 3

    def test_negative_stock_allowed_when_configured(self, client, monkeypatch):
        monkeypatch.setattr(get_settings(), "ALLOW_NEGATIVE_STOCK", True)
        customer = create_customer(client)
        product = create_product(client, opening_stock=3)

        response = client.post("/sales", json=sale_body(customer["id"], product["id"], pieces=5))

        assert response.status_code == 201
        assert client.get(f"/products/{product['id']}").json()["stock_pieces"] == -2

    def test_unknown_customer_returns_404(self, client):
        product = create_product(client)

        response = client.post("/sales", json=sale_body(9999, product["id"]))

        assert response.status_code == 404

    def test_duplicate_bill_no_returns_409(self, client):
        customer = create_customer(client)
        product = create_product(client)
        body = sale_body(customer["id"], product["id"], bill_no="B-100")
        client.post("/sales", json=body)

        response = client.post("/sales", json=body)

        assert response.status_code == 409

    def test_unknown_field_returns_422(self, client):
        customer = create_customer(client)
        product = create_product(client)

        response = client.post(
            "/sales",
            json=sale_body(customer["id"], product["id"], total_due="0"),
        )

        assert response.status_code == 422

    def test_discount_over_total_returns_422(self, client):
        customer = create_customer(client)
        product = create_product(client)

        response = client.post(
            "/sales",
            json=sale_body(customer["id"], product["id"], discount="60.00"),
        )

        assert response.status_code == 422

    def test_update_and_delete(self, client):
        customer = create_customer(client)
        product = create_product(client)
        sale = client.post("/sales", json=sale_body(customer["id"], product["id"])).json()

        response = client.put(
            f"/sales/{sale['id']}",
            json=sale_body(customer["id"], product["id"], pieces=8, amount="80.00"),
        )
        assert response.status_code == 200
        assert client.get(f"/products/{product['id']}").json()["stock_pieces"] == 92

        response = client.delete(f"/sales/{sale['id']}")
        assert response.status_code == 204
        assert client.get(f"/sales/{sale['id']}").status_code == 404
        assert client.get(f"/products/{product['id']}").json()["stock_pieces"] == 100

    def test_list_is_paginated(self, client):
        customer = create_customer(client)
        product = create_product(client)
        for _ in range(3):
            client.post("/sales", json=sale_body(customer["id"], product["id"]))

        data = client.get("/sales", params={"per_page": 2, "page": 2}).json()

        assert data["total"] == 3
        assert data["page"] == 2
        assert data["per_page"] == 2
        assert len(data["items"]) == 1

    def test_next_bill_no(self, client):
        data = client.get("/sales/next-bill-no").json()
        assert data["bill_no"].endswith("-0001")


class TestPaymentEndpoints:

    def test_payment_against_sale(self, client):
        customer = create_customer(client)
        product = create_product(client)
        sale = client.post("/sales", json=sale_body(customer["id"], product["id"])).json()

        response = client.post("/payments", json={
            "customer_id": customer["id"],
            "sale_id": sale["id"],
            "amount": "50.00",
        })

        assert response.status_code == 201
        updated = client.get(f"/sales/{sale['id']}").json()
        assert Decimal(updated["paid_amount"]) == Decimal("50")
        assert Decimal(updated["due_amount"]) == Decimal("0")
        assert Decimal(client.get(f"/customers/{customer['id']}").json()["total_due"]) == Decimal("0")

    def test_zero_amount_returns_422(self, client):
        customer = create_customer(client)

        response = client.post("/payments", json={"customer_id": customer["id"], "amount": "0"})

        assert response.status_code == 422

    def test_foreign_sale_returns_400(self, client):
        owner = create_customer(client)
        other = create_customer(client, name="Other")
        product = create_product(client)
        sale = client.post("/sales", json=sale_body(owner["id"], product["id"])).json()

        response = client.post("/payments", json={
            "customer_id": other["id"],
            "sale_id": sale["id"],
            "amount": "10.00",
        })

        assert response.status_code == 400


class TestSalesReturnEndpoints:

    def test_return_round_trip(self, client):
        customer = create_customer(client)
        product = create_product(client)

        response = client.post("/sales-returns", json={
            "customer_id": customer["id"],
            "items": [{"product_id": product["id"], "total_pieces": 5, "sub_total": "50.00"}],
        })
        assert response.status_code == 201
        sales_return = response.json()
        assert sales_return["return_no"].startswith("SR-")
        assert client.get(f"/products/{product['id']}").json()["stock_pieces"] == 105

        assert client.delete(f"/sales-returns/{sales_return['id']}").status_code == 204
        assert client.get(f"/products/{product['id']}").json()["stock_pieces"] == 100
        assert Decimal(client.get(f"/customers/{customer['id']}").json()["total_due"]) == Decimal("0")
