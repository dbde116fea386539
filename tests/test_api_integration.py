"""
Integration tests for the Guarantee Tracker API
Tests end-to-end workflows using FastAPI TestClient
"""

import pytest
from datetime import date, timedelta
from fastapi.testclient import TestClient

from guarantee_tracker.api import create_app
from guarantee_tracker.storage import InMemoryStorage
from guarantee_tracker.system import TrackerSystem, set_tracker_system


@pytest.fixture
def system():
    return TrackerSystem(InMemoryStorage())


@pytest.fixture
def client(system):
    """Test client over an in-memory tracker system"""
    app = create_app(system)
    with TestClient(app) as client:
        yield client
    set_tracker_system(None)


@pytest.fixture
def bank_id(client):
    r = client.post("/api/banks", json={"name": "Is Bankasi", "code": "ISB", "branchName": "Levent"})
    assert r.status_code == 201
    return r.json()["id"]


@pytest.fixture
def project_id(client):
    r = client.post("/api/projects", json={"name": "Ring Road"})
    assert r.status_code == 201
    return r.json()["id"]


def letter_payload(bank_id, project_id, **overrides):
    payload = {
        "bankId": bank_id,
        "projectId": project_id,
        "letterType": "advance",
        "contractAmount": "1000000",
        "letterPercentage": "10",
        "letterAmount": "100000",
        "commissionRate": "2",
        "bsmvAndOtherCosts": "500",
        "currency": "TRY",
        "purchaseDate": "2024-01-10",
        "letterDate": "2024-01-12",
    }
    payload.update(overrides)
    return payload


def credit_payload(bank_id, project_id, **overrides):
    payload = {
        "bankId": bank_id,
        "projectId": project_id,
        "principalAmount": 50000,
        "interestAmount": 5000,
        "currency": "USD",
        "creditDate": "2024-02-01",
        "maturityDate": "2025-02-01",
    }
    payload.update(overrides)
    return payload


class TestHealthEndpoints:
    """Test basic health and root endpoints"""

    def test_health(self, client):
        """Test health endpoint"""
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "healthy"

    def test_root(self, client):
        """Test root endpoint"""
        r = client.get("/")
        assert r.status_code == 200
        data = r.json()
        assert data["name"] == "Guarantee Tracker API"
        assert data["endpoints"]["guarantee-letters"] == "/api/guarantee-letters"


class TestProjectFlow:
    """Project CRUD"""

    def test_create_project_defaults(self, client):
        """Omitted optional fields take their defaults"""
        r = client.post("/api/projects", json={"name": "Dam"})
        assert r.status_code == 201
        data = r.json()
        assert data["name"] == "Dam"
        assert data["status"] == "active"
        assert data["description"] is None
        assert "createdAt" in data and "updatedAt" in data

    def test_create_project_missing_name(self, client):
        """Validation failures return the field-level error list"""
        r = client.post("/api/projects", json={"description": "no name"})
        assert r.status_code == 400
        data = r.json()
        assert data["message"] == "Invalid data"
        assert data["errors"][0]["path"] == ["name"]

    def test_create_project_unknown_field(self, client):
        r = client.post("/api/projects", json={"name": "Dam", "budget": 5})
        assert r.status_code == 400

    def test_get_unknown_project(self, client):
        r = client.get("/api/projects/missing")
        assert r.status_code == 404
        assert r.json() == {"message": "Project not found"}

    def test_update_project(self, client, project_id):
        """Only the provided fields change"""
        r = client.patch(f"/api/projects/{project_id}", json={"status": "inactive"})
        assert r.status_code == 200
        data = r.json()
        assert data["status"] == "inactive"
        assert data["name"] == "Ring Road"

    def test_update_project_invalid_status(self, client, project_id):
        r = client.patch(f"/api/projects/{project_id}", json={"status": "paused"})
        assert r.status_code == 400

    def test_update_unknown_project(self, client):
        r = client.patch("/api/projects/missing", json={"name": "x"})
        assert r.status_code == 404

    def test_delete_project(self, client, project_id):
        r = client.delete(f"/api/projects/{project_id}")
        assert r.status_code == 204
        assert client.get(f"/api/projects/{project_id}").status_code == 404
        assert client.delete(f"/api/projects/{project_id}").status_code == 404

    def test_list_newest_first(self, client):
        for name in ("one", "two", "three"):
            client.post("/api/projects", json={"name": name})
        names = [p["name"] for p in client.get("/api/projects").json()]
        assert names == ["three", "two", "one"]


class TestBankFlow:
    """Bank CRUD"""

    def test_create_and_get_bank(self, client, bank_id):
        r = client.get(f"/api/banks/{bank_id}")
        assert r.status_code == 200
        data = r.json()
        assert data["code"] == "ISB"
        assert data["branchName"] == "Levent"
        assert data["contactPerson"] is None
        assert data["status"] == "active"

    def test_update_bank(self, client, bank_id):
        r = client.patch(f"/api/banks/{bank_id}", json={"phone": "+90 212 000 00 00"})
        assert r.status_code == 200
        assert r.json()["phone"] == "+90 212 000 00 00"
        assert r.json()["name"] == "Is Bankasi"


class TestCurrencyFlow:
    """Currencies and exchange rates"""

    def test_default_currencies_seeded(self, client):
        codes = [c["code"] for c in client.get("/api/currencies").json()]
        assert sorted(codes) == ["EUR", "GBP", "IQD", "TRY", "USD"]

    def test_inactive_currency_hidden(self, client):
        r = client.post("/api/currencies", json={"code": "chf", "name": "Swiss Franc", "isActive": False})
        assert r.status_code == 201
        assert r.json()["code"] == "CHF"
        codes = [c["code"] for c in client.get("/api/currencies").json()]
        assert "CHF" not in codes

    def test_duplicate_currency_fails(self, client):
        r = client.post("/api/currencies", json={"code": "USD", "name": "Dollar"})
        assert r.status_code == 500
        assert r.json() == {"message": "Failed to create currency"}

    def test_exchange_rate_upsert(self, client):
        r = client.post("/api/exchange-rates", json={"fromCurrency": "usd", "toCurrency": "try", "rate": "30"})
        assert r.status_code == 200
        first = r.json()
        assert first["fromCurrency"] == "USD"

        r = client.post("/api/exchange-rates", json={"fromCurrency": "USD", "toCurrency": "TRY", "rate": "32.5"})
        assert r.json()["id"] == first["id"]
        assert r.json()["rate"] == "32.5"
        assert len(client.get("/api/exchange-rates").json()) == 1

    def test_exchange_rate_must_be_positive(self, client):
        r = client.post("/api/exchange-rates", json={"fromCurrency": "USD", "toCurrency": "TRY", "rate": 0})
        assert r.status_code == 400

    def test_convert(self, client):
        client.post("/api/exchange-rates", json={"fromCurrency": "USD", "toCurrency": "TRY", "rate": "32"})

        r = client.get("/api/exchange-rates/convert", params={"amount": "100", "from": "usd", "to": "try"})
        assert r.status_code == 200
        assert r.json()["convertedAmount"] == "3200.00"
        assert r.json()["rate"] == "32"

        r = client.get("/api/exchange-rates/convert", params={"amount": "3200", "from": "TRY", "to": "USD"})
        assert r.json()["convertedAmount"] == "100.00"

        r = client.get("/api/exchange-rates/convert", params={"amount": "5", "from": "GBP", "to": "IQD"})
        assert r.json()["convertedAmount"] == "5.00"
        assert r.json()["rate"] is None

    def test_delete_currency(self, client):
        currency_id = client.post("/api/currencies", json={"code": "CHF", "name": "Swiss Franc"}).json()["id"]

        assert client.delete(f"/api/currencies/{currency_id}").status_code == 204
        assert client.get(f"/api/currencies/{currency_id}").status_code == 404
        r = client.delete(f"/api/currencies/{currency_id}")
        assert r.status_code == 404
        assert r.json() == {"message": "Currency not found"}

    def test_exchange_rate_get_update_delete(self, client):
        rate_id = client.post("/api/exchange-rates", json={
            "fromCurrency": "EUR", "toCurrency": "TRY", "rate": "35"
        }).json()["id"]

        r = client.get(f"/api/exchange-rates/{rate_id}")
        assert r.status_code == 200
        assert r.json()["fromCurrency"] == "EUR"

        r = client.patch(f"/api/exchange-rates/{rate_id}", json={"rate": "36.25"})
        assert r.status_code == 200
        assert r.json()["rate"] == "36.25"
        assert r.json()["toCurrency"] == "TRY"

        assert client.delete(f"/api/exchange-rates/{rate_id}").status_code == 204
        assert client.get(f"/api/exchange-rates/{rate_id}").status_code == 404
        assert client.get("/api/exchange-rates").json() == []

    def test_exchange_rate_unknown_id(self, client):
        assert client.get("/api/exchange-rates/missing").status_code == 404
        assert client.patch("/api/exchange-rates/missing", json={"rate": "2"}).status_code == 404
        r = client.delete("/api/exchange-rates/missing")
        assert r.status_code == 404
        assert r.json() == {"message": "Exchange rate not found"}

    def test_exchange_rate_update_invalid(self, client):
        rate_id = client.post("/api/exchange-rates", json={
            "fromCurrency": "EUR", "toCurrency": "TRY", "rate": "35"
        }).json()["id"]
        assert client.patch(f"/api/exchange-rates/{rate_id}", json={"rate": 0}).status_code == 400
        assert client.patch(f"/api/exchange-rates/{rate_id}", json={"toCurrency": "EUR"}).status_code == 400

    def test_exchange_rate_update_to_existing_pair_fails(self, client):
        client.post("/api/exchange-rates", json={"fromCurrency": "USD", "toCurrency": "TRY", "rate": "32"})
        rate_id = client.post("/api/exchange-rates", json={
            "fromCurrency": "EUR", "toCurrency": "TRY", "rate": "35"
        }).json()["id"]

        r = client.patch(f"/api/exchange-rates/{rate_id}", json={"fromCurrency": "USD"})
        assert r.status_code == 500
        assert r.json() == {"message": "Failed to update exchange rate"}

    def test_convert_route_not_shadowed_by_id_route(self, client):
        r = client.get("/api/exchange-rates/convert", params={"amount": "1", "from": "USD", "to": "USD"})
        assert r.status_code == 200
        assert r.json()["convertedAmount"] == "1.00"


class TestGuaranteeLetterFlow:
    """Guarantee letters with their bank and project"""

    def test_create_letter(self, client, bank_id, project_id):
        r = client.post("/api/guarantee-letters", json=letter_payload(bank_id, project_id))
        assert r.status_code == 201
        data = r.json()
        assert data["letterAmount"] == "100000"
        assert data["status"] == "active"
        assert data["expiryDate"] is None
        assert data["bank"]["name"] == "Is Bankasi"
        assert data["project"]["name"] == "Ring Road"

    def test_create_letter_bad_percentage(self, client, bank_id, project_id):
        r = client.post("/api/guarantee-letters", json=letter_payload(bank_id, project_id, letterPercentage="150"))
        assert r.status_code == 400

    def test_create_letter_bad_type(self, client, bank_id, project_id):
        r = client.post("/api/guarantee-letters", json=letter_payload(bank_id, project_id, letterType="blanket"))
        assert r.status_code == 400
        assert r.json()["errors"][0]["path"] == ["letterType"]

    def test_create_letter_unknown_bank(self, client, project_id):
        r = client.post("/api/guarantee-letters", json=letter_payload("missing", project_id))
        assert r.status_code == 500
        assert r.json() == {"message": "Failed to create guarantee letter"}

    def test_filter_by_project(self, client, bank_id, project_id):
        other_project = client.post("/api/projects", json={"name": "Harbour"}).json()["id"]
        client.post("/api/guarantee-letters", json=letter_payload(bank_id, project_id))
        client.post("/api/guarantee-letters", json=letter_payload(bank_id, other_project))

        r = client.get("/api/guarantee-letters", params={"projectId": other_project})
        assert r.status_code == 200
        assert [letter["projectId"] for letter in r.json()] == [other_project]
        assert len(client.get("/api/guarantee-letters", params={"bankId": bank_id}).json()) == 2

    def test_update_and_delete_letter(self, client, bank_id, project_id):
        letter_id = client.post("/api/guarantee-letters", json=letter_payload(bank_id, project_id)).json()["id"]

        r = client.patch(f"/api/guarantee-letters/{letter_id}", json={"status": "closed", "notes": "returned"})
        assert r.status_code == 200
        assert r.json()["status"] == "closed"
        assert r.json()["commissionRate"] == "2"

        assert client.delete(f"/api/guarantee-letters/{letter_id}").status_code == 204
        assert client.get(f"/api/guarantee-letters/{letter_id}").status_code == 404

    def test_bank_deletion_does_not_cascade(self, client, bank_id, project_id):
        letter_id = client.post("/api/guarantee-letters", json=letter_payload(bank_id, project_id)).json()["id"]
        assert client.delete(f"/api/banks/{bank_id}").status_code == 204

        r = client.get(f"/api/guarantee-letters/{letter_id}")
        assert r.status_code == 200
        assert r.json()["bank"] is None
        assert r.json()["project"]["id"] == project_id


class TestCreditFlow:
    """Bank credits"""

    def test_create_credit_defaults(self, client, bank_id, project_id):
        r = client.post("/api/credits", json=credit_payload(bank_id, project_id))
        assert r.status_code == 201
        data = r.json()
        assert data["status"] == "ongoing"
        assert data["totalRepaidAmount"] == "0"
        assert data["principalAmount"] == "50000"
        assert data["bank"]["id"] == bank_id

    def test_credits_by_project_and_bank(self, client, bank_id, project_id):
        credit_id = client.post("/api/credits", json=credit_payload(bank_id, project_id)).json()["id"]

        by_project = client.get(f"/api/credits/project/{project_id}").json()
        by_bank = client.get(f"/api/credits/bank/{bank_id}").json()
        assert [c["id"] for c in by_project] == [credit_id]
        assert [c["id"] for c in by_bank] == [credit_id]
        assert client.get("/api/credits/project/other").json() == []

    def test_update_credit_repayment(self, client, bank_id, project_id):
        credit_id = client.post("/api/credits", json=credit_payload(bank_id, project_id)).json()["id"]
        r = client.patch(f"/api/credits/{credit_id}", json={"totalRepaidAmount": "12000.50"})
        assert r.status_code == 200
        assert r.json()["totalRepaidAmount"] == "12000.50"
        assert r.json()["principalAmount"] == "50000"

    def test_update_credit_null_required_field(self, client, bank_id, project_id):
        credit_id = client.post("/api/credits", json=credit_payload(bank_id, project_id)).json()["id"]
        r = client.patch(f"/api/credits/{credit_id}", json={"currency": None})
        assert r.status_code == 400

    def test_get_unknown_credit(self, client):
        r = client.get("/api/credits/missing")
        assert r.status_code == 404
        assert r.json() == {"message": "Credit not found"}


class TestLetterPaymentFlow:
    """Commission payments and reconciliation"""

    @pytest.fixture
    def letter_id(self, client, bank_id, project_id):
        r = client.post("/api/guarantee-letters", json=letter_payload(bank_id, project_id))
        return r.json()["id"]

    def test_payment_summary(self, client, letter_id):
        for payment_date, amount in (("2024-02-01", "1000"), ("2024-04-01", "500")):
            r = client.post("/api/letter-payments", json={
                "letterId": letter_id, "paymentDate": payment_date, "amount": amount, "bsmv": "10"
            })
            assert r.status_code == 201

        r = client.get(f"/api/letter-payments/{letter_id}/summary")
        assert r.status_code == 200
        assert r.json() == {
            "letterId": letter_id,
            "totalCommission": "2500.00",
            "totalPaid": "1500.00",
            "totalBsmv": "20.00",
            "remainingCommission": "1000.00",
            "payments": 2,
            "lastPaymentDate": "2024-04-01",
        }

    def test_summary_for_unknown_letter(self, client):
        r = client.get("/api/letter-payments/missing/summary")
        assert r.status_code == 404
        assert r.json() == {"message": "Guarantee letter not found"}

    def test_payments_for_letter(self, client, letter_id):
        payment = client.post("/api/letter-payments", json={
            "letterId": letter_id, "paymentDate": "2024-02-01", "amount": 100
        }).json()
        assert payment["bsmv"] == "0"

        r = client.get(f"/api/letter-payments/letter/{letter_id}")
        assert [p["id"] for p in r.json()] == [payment["id"]]
        assert client.get(f"/api/letter-payments/{payment['id']}").status_code == 200

    def test_summaries(self, client, letter_id):
        r = client.get("/api/letter-payments/summaries")
        assert r.status_code == 200
        assert r.json()[0]["letterId"] == letter_id
        assert r.json()[0]["remainingCommission"] == "2500.00"

    def test_negative_payment_rejected(self, client, letter_id):
        r = client.post("/api/letter-payments", json={
            "letterId": letter_id, "paymentDate": "2024-02-01", "amount": -5
        })
        assert r.status_code == 400

    def test_update_and_delete_payment(self, client, letter_id):
        payment_id = client.post("/api/letter-payments", json={
            "letterId": letter_id, "paymentDate": "2024-02-01", "amount": 100
        }).json()["id"]

        r = client.patch(f"/api/letter-payments/{payment_id}", json={"receiptNo": "DK-77"})
        assert r.status_code == 200
        assert r.json()["receiptNo"] == "DK-77"

        assert client.delete(f"/api/letter-payments/{payment_id}").status_code == 204
        assert client.get(f"/api/letter-payments/{payment_id}").status_code == 404


class TestDashboardFlow:
    """Dashboard statistics"""

    def test_empty_dashboard(self, client):
        r = client.get("/api/dashboard-stats")
        assert r.status_code == 200
        data = r.json()
        assert data["totalLetters"] == 0
        assert data["totalCreditAmount"] == "0.00"
        assert data["currency"] is None

    def test_dashboard_counts(self, client, bank_id, project_id):
        today = date.today()
        client.post("/api/guarantee-letters", json=letter_payload(
            bank_id, project_id, expiryDate=(today + timedelta(days=10)).isoformat()
        ))
        client.post("/api/guarantee-letters", json=letter_payload(
            bank_id, project_id, expiryDate=(today - timedelta(days=10)).isoformat()
        ))
        client.post("/api/credits", json=credit_payload(
            bank_id, project_id, maturityDate=(today + timedelta(days=400)).isoformat()
        ))

        data = client.get("/api/dashboard-stats").json()
        assert data["totalLetters"] == 2
        assert data["activeLetters"] == 2
        assert data["totalLetterAmount"] == "200000.00"
        assert data["upcomingLetterPayments"] == 1
        assert data["overdueLetterPayments"] == 1
        assert data["totalCredits"] == 1
        assert data["activeCredits"] == 1
        assert data["totalCreditAmount"] == "55000.00"
        assert data["upcomingCreditPayments"] == 0
        assert data["totalProjects"] == 1
        assert data["totalBanks"] == 1

    def test_dashboard_in_currency(self, client, bank_id, project_id):
        client.post("/api/exchange-rates", json={"fromCurrency": "USD", "toCurrency": "TRY", "rate": "30"})
        client.post("/api/credits", json=credit_payload(bank_id, project_id))

        data = client.get("/api/dashboard-stats", params={"currency": "try"}).json()
        assert data["currency"] == "TRY"
        assert data["totalCreditAmount"] == "1650000.00"

    def test_dashboard_rejects_blank_currency(self, client):
        r = client.get("/api/dashboard-stats", params={"currency": " "})
        assert r.status_code == 400
        assert r.json()["errors"][0]["path"] == ["currency"]
