"""
Unit tests for the customer directory endpoints.

Tests:
- Admin-only writes
- Listing and search
- Autocomplete suggestions
"""

import pytest

from delivery_hub.crud import customer as customer_crud
from delivery_hub.models.customer import Customer
from delivery_hub.schemas.customer import CustomerCreateRequest
from conftest import auth_headers


@pytest.fixture
def sample_customers(db_session):
    """A few customers spread over two routes"""
    rows = [
        {"customer_name": "Bayside Grocers", "address": "12 Harbor Rd", "route": "R7", "truck": "T12", "dock_location": "Dock A"},
        {"customer_name": "Baker Street Deli", "address": "221 Baker St", "route": "R7", "truck": "T12", "dock_location": "Rear"},
        {"customer_name": "Corner Market", "address": "5 Elm Ave", "route": "R9", "truck": "T3", "dock_location": None},
    ]
    return [customer_crud.create(db_session, CustomerCreateRequest(**row)) for row in rows]


class TestCustomerWrites:
    """Test create, update and delete"""

    def test_admin_creates_customer(self, client, admin):
        response = client.post(
            "/api/v1/customers",
            json={
                "customer_name": "Harbor Cafe",
                "address": "1 Pier Way",
                "phone_number": "555-0100",
                "route": "R2",
                "notes": "Deliver before 7am"
            },
            headers=auth_headers(admin)
        )

        assert response.status_code == 201
        data = response.json()
        assert data["customer_name"] == "Harbor Cafe"
        assert data["notes"] == "Deliver before 7am"
        assert data["id"]

    def test_driver_cannot_create(self, client, driver, db_session):
        response = client.post(
            "/api/v1/customers",
            json={"customer_name": "Harbor Cafe"},
            headers=auth_headers(driver)
        )

        assert response.status_code == 403
        assert db_session.query(Customer).count() == 0

    def test_name_is_required(self, client, admin):
        response = client.post(
            "/api/v1/customers",
            json={"address": "1 Pier Way"},
            headers=auth_headers(admin)
        )

        assert response.status_code == 422

    def test_update_only_sent_fields(self, client, admin, sample_customers):
        customer = sample_customers[0]
        response = client.put(
            f"/api/v1/customers/{customer.id}",
            json={"truck": "T99"},
            headers=auth_headers(admin)
        )

        assert response.status_code == 200
        data = response.json()
        assert data["truck"] == "T99"
        assert data["customer_name"] == "Bayside Grocers"
        assert data["route"] == "R7"

    def test_update_can_clear_optional_field(self, client, admin, sample_customers):
        customer = sample_customers[0]
        response = client.put(
            f"/api/v1/customers/{customer.id}",
            json={"dock_location": None},
            headers=auth_headers(admin)
        )

        assert response.status_code == 200
        assert response.json()["dock_location"] is None

    def test_driver_cannot_update(self, client, driver, sample_customers):
        response = client.put(
            f"/api/v1/customers/{sample_customers[0].id}",
            json={"truck": "T99"},
            headers=auth_headers(driver)
        )

        assert response.status_code == 403

    def test_delete_customer(self, client, admin, sample_customers, db_session):
        customer_id = sample_customers[0].id
        response = client.delete(f"/api/v1/customers/{customer_id}", headers=auth_headers(admin))

        assert response.status_code == 200
        assert db_session.query(Customer).count() == 2

    def test_delete_unknown_customer(self, client, admin):
        response = client.delete(
            "/api/v1/customers/00000000-0000-4000-8000-000000000000",
            headers=auth_headers(admin)
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Customer not found"


class TestCustomerReads:
    """Test listing, lookup and search"""

    def test_list_is_sorted_by_name(self, client, driver, sample_customers):
        response = client.get("/api/v1/customers", headers=auth_headers(driver))

        assert response.status_code == 200
        names = [row["customer_name"] for row in response.json()]
        assert names == ["Baker Street Deli", "Bayside Grocers", "Corner Market"]

    def test_list_requires_login(self, client, sample_customers):
        response = client.get("/api/v1/customers")

        assert response.status_code in (401, 403)

    def test_search_matches_several_fields(self, client, driver, sample_customers):
        by_route = client.get("/api/v1/customers?search=r9", headers=auth_headers(driver)).json()
        assert [row["customer_name"] for row in by_route] == ["Corner Market"]

        by_address = client.get("/api/v1/customers?search=baker st", headers=auth_headers(driver)).json()
        assert [row["customer_name"] for row in by_address] == ["Baker Street Deli"]

        by_dock = client.get("/api/v1/customers?search=dock a", headers=auth_headers(driver)).json()
        assert [row["customer_name"] for row in by_dock] == ["Bayside Grocers"]

    def test_get_customer(self, client, driver, sample_customers):
        customer = sample_customers[2]
        response = client.get(f"/api/v1/customers/{customer.id}", headers=auth_headers(driver))

        assert response.status_code == 200
        assert response.json()["address"] == "5 Elm Ave"

    def test_get_unknown_customer(self, client, driver):
        response = client.get(
            "/api/v1/customers/00000000-0000-4000-8000-000000000000",
            headers=auth_headers(driver)
        )

        assert response.status_code == 404


class TestSuggestions:
    """Test autocomplete suggestions"""

    def test_distinct_values_by_prefix(self, client, driver, sample_customers):
        response = client.get(
            "/api/v1/customers/suggestions?field=customer_name&q=ba",
            headers=auth_headers(driver)
        )

        assert response.status_code == 200
        data = response.json()
        assert data["field"] == "customer_name"
        assert data["suggestions"] == ["Baker Street Deli", "Bayside Grocers"]

    def test_values_are_deduplicated(self, client, driver, sample_customers):
        response = client.get(
            "/api/v1/customers/suggestions?field=route",
            headers=auth_headers(driver)
        )

        assert response.json()["suggestions"] == ["R7", "R9"]

    def test_empty_values_are_skipped(self, client, driver, sample_customers):
        response = client.get(
            "/api/v1/customers/suggestions?field=dock_location",
            headers=auth_headers(driver)
        )

        assert response.json()["suggestions"] == ["Dock A", "Rear"]

    def test_unsupported_field(self, client, driver):
        response = client.get(
            "/api/v1/customers/suggestions?field=phone_number",
            headers=auth_headers(driver)
        )

        assert response.status_code == 400

    def test_suggestions_are_capped(self, db_session):
        for n in range(15):
            customer_crud.create(db_session, CustomerCreateRequest(customer_name=f"Stop {n:02d}"))

        suggestions = customer_crud.get_suggestions(db_session, "customer_name", "stop")
        assert len(suggestions) == 10
        assert suggestions[0] == "Stop 00"

    def test_wildcards_are_matched_literally(self, client, driver, sample_customers, db_session):
        customer_crud.create(db_session, CustomerCreateRequest(customer_name="100% Produce", route="R_1"))

        by_percent = client.get("/api/v1/customers?search=%25", headers=auth_headers(driver)).json()
        assert [row["customer_name"] for row in by_percent] == ["100% Produce"]

        routes = customer_crud.get_suggestions(db_session, "route", "R_")
        assert routes == ["R_1"]
        assert customer_crud.get_suggestions(db_session, "customer_name", "_") == []
