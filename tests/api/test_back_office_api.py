"""
Tests for permissions, catalog, production, report and
activity endpoints.
"""

from decimal import Decimal


class TestAuthorization:

    def test_missing_user_returns_401(self, client):
        client.headers.pop("X-User-Id")

        response = client.get("/customers")

        assert response.status_code == 401

    def test_unknown_user_returns_401(self, client):
        response = client.get("/customers", headers={"X-User-Id": "9999"})

        assert response.status_code == 401

    def test_staff_cannot_delete_sales(self, client, staff_user):
        response = client.delete("/sales/1", headers={"X-User-Id": str(staff_user.id)})

        assert response.status_code == 403
        assert "sales.delete" in response.json()["detail"]

    def test_staff_can_record_production(self, client, staff_user):
        product = client.post("/products", json={"name": "GI Pipe", "opening_stock": 10}).json()

        response = client.post(
            "/productions",
            json={"product_id": product["id"], "pieces_produced": 5},
            headers={"X-User-Id": str(staff_user.id)},
        )

        assert response.status_code == 201

    def test_only_admin_manages_users(self, client, staff_user):
        response = client.get("/users", headers={"X-User-Id": str(staff_user.id)})
        assert response.status_code == 403

        response = client.post("/users", json={
            "name": "New Manager",
            "email": "manager@example.com",
            "role": "MANAGER",
        })
        assert response.status_code == 201
        assert response.json()["role"] == "MANAGER"


class TestCatalogEndpoints:

    def test_customer_opening_balance_and_reconcile(self, client):
        customer = client.post("/customers", json={
            "name": "Opening Co", "opening_balance": "500.00",
        }).json()
        assert Decimal(customer["total_due"]) == Decimal("500")

        response = client.put(f"/customers/{customer['id']}", json={
            "name": "Opening Co", "opening_balance": "350.00",
        })
        assert Decimal(response.json()["total_due"]) == Decimal("350")

        result = client.get(f"/customers/{customer['id']}/reconcile").json()
        assert result["is_consistent"] is True

    def test_unknown_product_returns_404(self, client):
        assert client.get("/products/9999").status_code == 404

    def test_product_reports_formatted_stock(self, client):
        product = client.post("/products", json={
            "name": "GI Pipe", "size": "1 inch", "pieces_per_bundle": 10, "opening_stock": 25,
        }).json()

        assert product["display_name"] == "GI Pipe (1 inch)"
        assert product["formatted_stock"] == "2 bdl + 5 pcs"

    def test_duplicate_payment_type_returns_409(self, client):
        client.post("/payment-types", json={"name": "Cash"})

        response = client.post("/payment-types", json={"name": "Cash"})

        assert response.status_code == 409


class TestProductionEndpoints:

    def test_production_edit_and_reconcile(self, client):
        product = client.post("/products", json={"name": "GI Pipe", "opening_stock": 100}).json()
        production = client.post("/productions", json={
            "product_id": product["id"], "pieces_produced": 20,
        }).json()

        response = client.put(f"/productions/{production['id']}", json={"pieces_produced": 10})

        assert response.status_code == 200
        assert client.get(f"/products/{product['id']}").json()["stock_pieces"] == 110
        result = client.get(f"/products/{product['id']}/reconcile").json()
        assert result["is_consistent"] is True


class TestReportEndpoints:

    def test_stock_report_filter(self, client):
        client.post("/products", json={"name": "Plenty", "opening_stock": 50, "min_stock_alert": 5})
        client.post("/products", json={"name": "Empty", "opening_stock": 0})

        data = client.get("/reports/stock", params={"filter": "out"}).json()

        assert [p["name"] for p in data["products"]] == ["Empty"]
        assert data["stats"]["total_products"] == 2

    def test_dashboard(self, client, staff_user):
        customer = client.post("/customers", json={"name": "Dashboard Co"}).json()
        product = client.post("/products", json={"name": "GI Pipe", "opening_stock": 40}).json()
        client.post("/sales", json={
            "customer_id": customer["id"],
            "items": [{"product_id": product["id"], "total_pieces": 4, "amount": "40.00"}],
        })

        response = client.get("/reports/dashboard", headers={"X-User-Id": str(staff_user.id)})

        assert response.status_code == 200
        data = response.json()
        assert data["sales"]["today_count"] == 1
        assert Decimal(data["sales"]["today_amount"]) == Decimal("40")
        assert Decimal(data["customers"]["total_outstanding"]) == Decimal("40")
        assert data["stock"]["total_stock_pieces"] == 36
        assert data["recent_sales"][0]["customer_name"] == "Dashboard Co"
        assert len(data["last_seven_days"]) == 7

    def test_bad_stock_filter_returns_400(self, client):
        assert client.get("/reports/stock", params={"filter": "nope"}).status_code == 400

    def test_statement(self, client):
        customer = client.post("/customers", json={"name": "Statement Co"}).json()
        client.post("/payments", json={"customer_id": customer["id"], "amount": "25.00"})

        data = client.get(f"/customers/{customer['id']}/statement").json()

        assert [line["type"] for line in data["lines"]] == ["payment"]
        assert Decimal(data["closing_balance"]) == Decimal("-25")


class TestActivityEndpoints:

    def test_mutations_are_logged(self, client, admin_user):
        client.post("/customers", json={"name": "Logged Co"})

        data = client.get("/activities", params={"subject_type": "customer"}).json()

        assert data["total"] == 1
        entry = data["items"][0]
        assert entry["event_type"] == "customer.created"
        assert entry["user_id"] == admin_user.id
        assert "Logged Co" in entry["details"]


class TestExpenseEndpoints:

    def test_expense_flow(self, client):
        category = client.post("/expense-categories", json={"name": "Transport"}).json()

        response = client.post("/expenses", json={
            "expense_category_id": category["id"], "amount": "120.00",
        })
        assert response.status_code == 201

        data = client.get("/expenses", params={"category_id": category["id"]}).json()
        assert data["total"] == 1
