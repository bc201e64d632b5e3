"""Integration tests for the customer, department, user and work record endpoints."""

import pytest

from conftest import auth_headers, make_customer, make_department, make_user

CUSTOMERS = "/api/v1/customers"
DEPARTMENTS = "/api/v1/departments"
USERS = "/api/v1/users"
WORK_RECORDS = "/api/v1/work_records"


@pytest.fixture
def staff_headers(services, staff):
    return auth_headers(services, staff)


@pytest.fixture
def manager_headers(services, manager):
    return auth_headers(services, manager)


@pytest.fixture
def admin_headers(services, admin):
    return auth_headers(services, admin)


def work_record_body(customer, department, **overrides):
    return {"work_record": {
        "customer_id": customer["id"],
        "department_id": department["id"],
        "content": "定期訪問",
        "work_date": "2025-06-20",
        "work_type": "consultation",
        **overrides,
    }}


class TestCustomerList:
    def test_requires_token(self, client):
        assert client.get(CUSTOMERS).status_code == 401

    def test_pagination(self, client, services, department, staff_headers):
        for i in range(25):
            make_customer(services, department, name=f"顧客{i}")

        response = client.get(CUSTOMERS, params={"page": 2, "per_page": 10}, headers=staff_headers)

        assert response.status_code == 200
        data = response.json()
        assert [c["name"] for c in data["customers"]] == [f"顧客{i}" for i in range(10, 20)]
        assert data["pagination"] == {"current_page": 2, "total_pages": 3, "total_count": 25}

    def test_default_page_size(self, client, services, department, staff_headers):
        for i in range(21):
            make_customer(services, department, name=f"顧客{i}")

        data = client.get(CUSTOMERS, headers=staff_headers).json()
        assert len(data["customers"]) == 20
        assert data["pagination"]["total_pages"] == 2

    def test_empty(self, client, staff_headers):
        data = client.get(CUSTOMERS, headers=staff_headers).json()
        assert data == {
            "customers": [],
            "pagination": {"current_page": 1, "total_pages": 0, "total_count": 0},
        }

    @pytest.mark.parametrize("params", [{"per_page": 101}, {"per_page": 0}, {"page": 0}])
    def test_invalid_paging(self, client, staff_headers, params):
        response = client.get(CUSTOMERS, params=params, headers=staff_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "Bad Request"

    def test_display_labels_and_department(self, client, services, department, staff_headers):
        make_customer(services, department, customer_type="premium", status="pending")

        customer = client.get(CUSTOMERS, headers=staff_headers).json()["customers"][0]

        assert customer["customer_type"] == "premium"
        assert customer["customer_type_display"] == "Premium"
        assert customer["status_display"] == "Pending"
        assert customer["department"] == {"id": department["id"], "name": "保護課"}


class TestCustomerWrites:
    def test_show(self, client, services, department, staff_headers):
        customer = make_customer(services, department)
        response = client.get(f"{CUSTOMERS}/{customer['id']}", headers=staff_headers)
        assert response.status_code == 200
        assert response.json()["customer"]["name"] == "山田太郎"

    def test_show_missing(self, client, staff_headers):
        response = client.get(f"{CUSTOMERS}/999", headers=staff_headers)
        assert response.status_code == 404
        assert response.json() == {"error": "Customer not found"}

    def test_create(self, client, department, staff_headers):
        body = {"customer": {"name": "佐藤花子", "customer_type": "corporate", "department_id": department["id"]}}
        response = client.post(CUSTOMERS, json=body, headers=staff_headers)

        assert response.status_code == 201
        customer = response.json()["customer"]
        assert customer["status"] == "pending"
        assert customer["customer_type_display"] == "Corporate"

    def test_create_invalid_values(self, client, department, staff_headers):
        body = {"customer": {
            "name": "山田@太郎",
            "customer_type": "vip",
            "department_id": 999,
        }}
        response = client.post(CUSTOMERS, json=body, headers=staff_headers)

        assert response.status_code == 422
        assert response.json()["errors"] == [
            "Name may only contain Japanese characters, letters, digits, spaces and hyphens",
            "Customer type is not a valid value (choices: regular, premium, corporate)",
            "Department must exist",
        ]

    def test_create_blank(self, client, staff_headers):
        response = client.post(CUSTOMERS, json={"customer": {"status": None}}, headers=staff_headers)
        assert response.status_code == 422
        assert response.json()["errors"] == [
            "Name can't be blank",
            "Customer type can't be blank",
            "Department can't be blank",
        ]

    def test_create_missing_wrapper(self, client, staff_headers):
        response = client.post(CUSTOMERS, json={"name": "山田太郎"}, headers=staff_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "param is missing or the value is empty: customer"

    @pytest.mark.parametrize("method", ["patch", "put"])
    def test_update(self, client, services, department, staff_headers, method):
        customer = make_customer(services, department)
        response = getattr(client, method)(
            f"{CUSTOMERS}/{customer['id']}",
            json={"customer": {"status": "inactive"}},
            headers=staff_headers,
        )
        assert response.status_code == 200
        updated = response.json()["customer"]
        assert updated["status"] == "inactive"
        assert updated["name"] == "山田太郎"

    def test_update_validates_merged_record(self, client, services, department, staff_headers):
        customer = make_customer(services, department)
        response = client.patch(
            f"{CUSTOMERS}/{customer['id']}",
            json={"customer": {"name": ""}},
            headers=staff_headers,
        )
        assert response.status_code == 422
        assert response.json()["errors"] == ["Name can't be blank"]
        assert services.store.get("customer", customer["id"])["name"] == "山田太郎"

    def test_update_missing(self, client, staff_headers):
        response = client.patch(f"{CUSTOMERS}/999", json={"customer": {"status": "active"}}, headers=staff_headers)
        assert response.status_code == 404


class TestCustomerDelete:
    def test_staff_cannot_delete(self, client, services, department, staff_headers):
        customer = make_customer(services, department)
        response = client.delete(f"{CUSTOMERS}/{customer['id']}", headers=staff_headers)

        assert response.status_code == 403
        assert response.json() == {"error": "Forbidden Insufficient privileges"}
        assert services.store.get("customer", customer["id"]) is not None

    @pytest.mark.parametrize("role", ["manager", "admin"])
    def test_manager_and_admin_delete(self, client, services, department, staff, role):
        user = make_user(services, f"{role}@example.com", role)
        customer = make_customer(services, department)
        client.post(WORK_RECORDS, json=work_record_body(customer, department), headers=auth_headers(services, staff))

        response = client.delete(f"{CUSTOMERS}/{customer['id']}", headers=auth_headers(services, user))

        assert response.status_code == 204
        assert services.store.get("customer", customer["id"]) is None
        assert services.store.all("work_record", customer_id=customer["id"]) == []

    def test_delete_missing(self, client, manager_headers):
        assert client.delete(f"{CUSTOMERS}/999", headers=manager_headers).status_code == 404


class TestDepartments:
    def test_list(self, client, services, staff_headers):
        make_department(services, "保護課", department_type="support")
        make_department(services, "福祉課")

        departments = client.get(DEPARTMENTS, headers=staff_headers).json()["departments"]

        assert [d["name"] for d in departments] == ["保護課", "福祉課"]
        assert departments[0]["department_type_display"] == "Support"
        assert departments[0]["status_display"] == "Active"

    def test_show(self, client, department, staff_headers):
        response = client.get(f"{DEPARTMENTS}/{department['id']}", headers=staff_headers)
        assert response.json()["department"]["name"] == "保護課"

    @pytest.mark.parametrize("user_fixture", ["staff_headers", "manager_headers"])
    def test_create_requires_admin(self, client, request, user_fixture):
        headers = request.getfixturevalue(user_fixture)
        response = client.post(DEPARTMENTS, json={"department": {"name": "福祉課"}}, headers=headers)
        assert response.status_code == 403

    def test_admin_creates_with_default_status(self, client, admin_headers):
        body = {"department": {"name": "福祉課", "address": "東京都千代田区1-1"}}
        response = client.post(DEPARTMENTS, json=body, headers=admin_headers)

        assert response.status_code == 201
        department = response.json()["department"]
        assert department["status"] == "active"
        assert department["address"] == "東京都千代田区1-1"

    def test_name_taken(self, client, department, admin_headers):
        response = client.post(DEPARTMENTS, json={"department": {"name": "保護課"}}, headers=admin_headers)
        assert response.status_code == 422
        assert response.json()["errors"] == ["Department name has already been taken"]

    def test_update_keeps_own_name(self, client, department, admin_headers):
        response = client.patch(
            f"{DEPARTMENTS}/{department['id']}",
            json={"department": {"name": "保護課", "status": "archived"}},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["department"]["status_display"] == "Archived"

    def test_update_requires_admin(self, client, department, manager_headers):
        response = client.patch(
            f"{DEPARTMENTS}/{department['id']}",
            json={"department": {"status": "inactive"}},
            headers=manager_headers,
        )
        assert response.status_code == 403


class TestUsers:
    def test_list_requires_manager(self, client, staff_headers):
        assert client.get(USERS, headers=staff_headers).status_code == 403

    def test_list(self, client, staff, manager_headers):
        data = client.get(USERS, headers=manager_headers).json()
        assert [u["email"] for u in data["users"]] == ["staff@example.com", "manager@example.com"]
        assert data["pagination"]["total_count"] == 2
        assert "password_digest" not in data["users"][0]

    def test_staff_sees_self(self, client, staff, staff_headers):
        response = client.get(f"{USERS}/{staff['id']}", headers=staff_headers)
        assert response.status_code == 200
        assert response.json()["user"]["email"] == "staff@example.com"

    def test_staff_cannot_see_others(self, client, manager, staff_headers):
        assert client.get(f"{USERS}/{manager['id']}", headers=staff_headers).status_code == 403

    def test_manager_sees_others(self, client, staff, manager_headers):
        assert client.get(f"{USERS}/{staff['id']}", headers=manager_headers).status_code == 200


class TestWorkRecords:
    def test_create_records_caller_as_staff_user(self, client, services, department, staff, staff_headers):
        customer = make_customer(services, department)
        response = client.post(WORK_RECORDS, json=work_record_body(customer, department), headers=staff_headers)

        assert response.status_code == 201
        record = response.json()["work_record"]
        assert record["staff_user"] == {"id": staff["id"], "email": "staff@example.com"}
        assert record["customer"] == {"id": customer["id"], "name": "山田太郎"}
        assert record["department"] == {"id": department["id"], "name": "保護課"}
        assert record["work_date"] == "2025-06-20"
        assert record["status"] == "in_progress"
        assert record["status_display"] == "In progress"
        assert record["work_type_display"] == "Consultation"

    def test_create_invalid(self, client, services, department, staff_headers):
        customer = make_customer(services, department)
        body = work_record_body(customer, department, content="", work_date=None, work_type="party")
        response = client.post(WORK_RECORDS, json=body, headers=staff_headers)

        assert response.status_code == 422
        assert response.json()["errors"] == [
            "Content can't be blank",
            "Work date can't be blank",
            "Work type is not a valid value (choices: consultation, support, maintenance, emergency)",
        ]

    def test_unknown_customer(self, client, department, staff_headers):
        body = work_record_body({"id": 999}, department)
        response = client.post(WORK_RECORDS, json=body, headers=staff_headers)
        assert response.json()["errors"] == ["Customer must exist"]

    def test_list_and_show(self, client, services, department, staff_headers):
        customer = make_customer(services, department)
        created = client.post(
            WORK_RECORDS, json=work_record_body(customer, department), headers=staff_headers
        ).json()["work_record"]

        listed = client.get(WORK_RECORDS, headers=staff_headers).json()
        assert [w["id"] for w in listed["work_records"]] == [created["id"]]
        assert listed["pagination"]["total_count"] == 1

        shown = client.get(f"{WORK_RECORDS}/{created['id']}", headers=staff_headers).json()
        assert shown["work_record"] == created
