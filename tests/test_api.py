from api.deps import get_repository
from main import app


def _seed_balance(client, balance):
    response = client.post("/api/v1/account-balance", json={"balance": balance})
    assert response.status_code == 200


def _add_bill(client, name, amount, due_date):
    response = client.post("/api/v1/bills/", json={"name": name, "amount": amount, "due_date": due_date})
    assert response.status_code == 201
    return response.json()


def _add_income(client, amount, frequency, source="Job"):
    response = client.post("/api/v1/income/", json={"source": source, "amount": amount, "frequency": frequency})
    assert response.status_code == 201
    return response.json()


def test_root(client):
    assert client.get("/").json() == {"status": "ok", "version": "1.0.0"}


def test_requires_authentication(anonymous_client):
    response = anonymous_client.post("/api/v1/spending-advisor", json={"amount": "10"})

    assert response.status_code == 401
    assert anonymous_client.get("/api/v1/bills/").status_code == 401


def test_spending_advisor_rejects_over_balance(client):
    _seed_balance(client, "100.00")

    response = client.post("/api/v1/spending-advisor", json={"amount": "150.00"})

    assert response.status_code == 200
    body = response.json()
    assert body["canSpend"] is False
    assert "$100.00" in body["message"]


def test_spending_advisor_with_next_bill(client):
    _seed_balance(client, "500.00")
    _add_bill(client, "Rent", "400.00", 10)

    body = client.post("/api/v1/spending-advisor", json={"amount": "50.00"}).json()

    assert body["canSpend"] is True
    assert "Your balance after this purchase will be $450.00." in body["message"]
    assert "Rent ($400.00) is due in 2 days, which will leave you with $50.00." in body["message"]


def test_spending_advisor_without_balance_or_bills(client):
    body = client.post("/api/v1/spending-advisor", json={"amount": "5"}).json()

    assert body["canSpend"] is False
    assert "$0.00" in body["message"]


def test_spending_advisor_validation(client):
    assert client.post("/api/v1/spending-advisor", json={"amount": "abc"}).status_code == 400
    assert client.post("/api/v1/spending-advisor", json={"amount": "-3"}).status_code == 400
    assert client.post("/api/v1/spending-advisor", json={"amount": ""}).status_code == 400
    assert client.post("/api/v1/spending-advisor", json={}).status_code == 400


def test_financial_advisor_income_query(client):
    _add_income(client, "300", "Monthly")
    _add_income(client, "100", "Weekly", source="Side gig")

    response = client.post("/api/v1/financial-advisor", json={"query": "How much income do I have?"})

    assert response.status_code == 200
    assert response.json() == {"message": "You have 2 income sources totaling $700.00 per month."}


def test_financial_advisor_rejects_empty_query(client):
    assert client.post("/api/v1/financial-advisor", json={"query": "  "}).status_code == 400
    assert client.post("/api/v1/financial-advisor", json={}).status_code == 400


def test_income_crud(client):
    created = _add_income(client, "500", "Weekly")
    assert created["amount"] == "500.00"
    assert created["frequency"] == "Weekly"

    updated = client.put(
        f"/api/v1/income/{created['id']}",
        json={"source": "Job", "amount": "550", "frequency": "Bi-weekly"},
    )
    assert updated.status_code == 200
    assert updated.json()["frequency"] == "Bi-weekly"

    assert client.delete(f"/api/v1/income/{created['id']}").status_code == 204
    assert client.get("/api/v1/income/").json() == []


def test_income_rejects_unknown_frequency(client):
    response = client.post("/api/v1/income/", json={"source": "Job", "amount": "10", "frequency": "Yearly"})

    assert response.status_code == 400


def test_bill_validation_and_missing(client):
    response = client.post("/api/v1/bills/", json={"name": "Rent", "amount": "10", "due_date": 32})
    assert response.status_code == 400

    response = client.post("/api/v1/bills/", json={"name": "Rent", "amount": "0", "due_date": 3})
    assert response.status_code == 400

    assert client.delete("/api/v1/bills/unknown").status_code == 404
    response = client.put("/api/v1/bills/unknown", json={"name": "Rent", "amount": "10", "due_date": 3})
    assert response.status_code == 404


def test_account_balance_round_trip(client):
    assert client.get("/api/v1/account-balance").json() == {"accountBalance": None, "lastUpdate": None}

    _seed_balance(client, "250.5")
    body = client.get("/api/v1/account-balance").json()

    assert body["accountBalance"] == "250.50"
    assert body["lastUpdate"] is not None
    assert client.post("/api/v1/account-balance", json={"balance": "lots"}).status_code == 400


def test_calculated_balance(client):
    _seed_balance(client, "500")
    _add_bill(client, "Rent", "400", 10)
    _add_bill(client, "Gym", "30", 25)

    body = client.get("/api/v1/calculated-balance").json()

    assert body["calculatedBalance"] == "100.00"
    assert [(b["name"], b["days_until_due"]) for b in body["deductedBills"]] == [("Rent", 2)]


def test_summary(client):
    _add_income(client, "500", "Weekly")

    body = client.get("/api/v1/summary").json()

    assert body == {
        "totalMonthlyIncome": "2000.00",
        "totalMonthlyBills": "0.00",
        "availableToSpend": "2000.00",
    }


def test_calendar_defaults_to_current_month(client):
    _add_bill(client, "Rent", "400", 31)

    body = client.get("/api/v1/calendar/").json()

    assert body["year"] == 2026
    assert body["month"] == 10
    assert body["days"][0]["date"] == "2026-10-31"


def test_calendar_rejects_bad_month(client):
    assert client.get("/api/v1/calendar/", params={"year": 2026, "month": 13}).status_code == 400


def test_calendar_rejects_out_of_range_params(client):
    assert client.get("/api/v1/calendar/", params={"year": 0, "month": 5}).status_code == 400
    assert client.get("/api/v1/calendar/", params={"year": 2026, "month": 0}).status_code == 400


def test_calendar_storage_failure_is_500(client):
    class BrokenRepository:
        def list_bills(self, user_uid):
            raise RuntimeError("firestore unavailable")

    app.dependency_overrides[get_repository] = lambda: BrokenRepository()

    response = client.get("/api/v1/calendar/")

    assert response.status_code == 500
    assert response.json() == {"detail": "Error building bill calendar"}


def test_oversized_amounts_are_rejected(client):
    response = client.post("/api/v1/spending-advisor", json={"amount": "1" + "0" * 30})
    assert response.status_code == 400
    assert response.json() == {"detail": "Amount is too large"}

    response = client.post("/api/v1/financial-advisor", json={"query": "can I afford $" + "9" * 30})
    assert response.status_code == 200

    response = client.post("/api/v1/bills/", json={"name": "Rent", "amount": "1e30", "due_date": 3})
    assert response.status_code == 400
    response = client.post("/api/v1/income/", json={"source": "Job", "amount": "1e30", "frequency": "Monthly"})
    assert response.status_code == 400
