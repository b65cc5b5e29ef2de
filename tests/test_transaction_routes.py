"""Flask client tests for the transactions blueprint."""

from __future__ import annotations

from datetime import timedelta

from wealthlog.timeutils import utcnow

BASE = "/api/v1/transactions"


def _today() -> str:
    return utcnow().strftime("%Y-%m-%d")


def _create(client, headers, category, **overrides):
    payload = {
        "type": category["type"],
        "amount": 100,
        "description": "Entry",
        "date": _today(),
        "categoryId": category["id"],
    }
    payload.update(overrides)
    return client.post(BASE, json=payload, headers=headers)


def test_create_and_get(client, auth_headers, api_categories):
    food = api_categories["Food & Dining"]
    response = _create(client, auth_headers, food, amount=45.5, notes="Team lunch")
    assert response.status_code == 201
    data = response.get_json()["data"]
    assert data["amount"] == 45.5
    assert data["currency"] == "ETB"
    assert data["categoryName"] == "Food & Dining"
    assert data["category"]["icon"] == "utensils"

    fetched = client.get(f"{BASE}/{data['id']}", headers=auth_headers).get_json()["data"]
    assert fetched["notes"] == "Team lunch"
    assert fetched["date"].startswith(_today())


def test_type_mismatch_is_rejected(client, auth_headers, api_categories):
    salary = api_categories["Salary"]
    response = _create(client, auth_headers, salary, type="expense")
    assert response.status_code == 400
    body = response.get_json()
    assert body["error"]["details"][0]["field"] == "type"
    listing = client.get(BASE, headers=auth_headers).get_json()
    assert listing["meta"]["pagination"]["total"] == 0


def test_validation_errors(client, auth_headers, api_categories):
    food = api_categories["Food & Dining"]
    too_old = (utcnow() - timedelta(days=400)).strftime("%Y-%m-%d")
    response = _create(client, auth_headers, food, amount=-1, date=too_old, description="")
    assert response.status_code == 422
    fields = {d["field"] for d in response.get_json()["error"]["details"]}
    assert fields == {"amount", "date", "description"}


def test_list_filters_and_pagination(client, auth_headers, api_categories):
    food = api_categories["Food & Dining"]
    salary = api_categories["Salary"]
    for amount in (10, 20, 30):
        _create(client, auth_headers, food, amount=amount, description=f"Meal {amount}")
    _create(client, auth_headers, salary, amount=5000, description="Pay")

    page = client.get(f"{BASE}?limit=2&page=2", headers=auth_headers).get_json()
    assert page["meta"]["pagination"]["total"] == 4
    assert page["meta"]["pagination"]["hasPrev"] is True
    assert len(page["data"]) == 2

    filtered = client.get(
        f"{BASE}?type=expense&minAmount=15&search=meal", headers=auth_headers
    ).get_json()
    assert sorted(t["amount"] for t in filtered["data"]) == [20, 30]

    assert client.get(f"{BASE}?limit=101", headers=auth_headers).status_code == 400
    assert client.get(f"{BASE}?minAmount=9&maxAmount=1", headers=auth_headers).status_code == 400


def test_update_delete_restore(client, auth_headers, api_categories):
    food = api_categories["Food & Dining"]
    tx = _create(client, auth_headers, food).get_json()["data"]
    url = f"{BASE}/{tx['id']}"

    updated = client.put(url, json={"amount": 75.25, "notes": "edited"}, headers=auth_headers)
    assert updated.status_code == 200
    assert updated.get_json()["data"]["amount"] == 75.25

    assert client.delete(url, headers=auth_headers).status_code == 200
    assert client.get(url, headers=auth_headers).status_code == 404

    restored = client.patch(f"{url}/restore", headers=auth_headers)
    assert restored.status_code == 200
    assert client.get(url, headers=auth_headers).status_code == 200
    assert client.patch(f"{url}/restore", headers=auth_headers).status_code == 404


def test_summary_search_recent_and_spending(client, auth_headers, api_categories):
    food = api_categories["Food & Dining"]
    salary = api_categories["Salary"]
    _create(client, auth_headers, salary, amount=15000, description="Salary")
    _create(client, auth_headers, food, amount=1500, description="Groceries")
    _create(client, auth_headers, food, amount=1000, description="Dinner out")

    summary = client.get(f"{BASE}/summary?period=month", headers=auth_headers).get_json()["data"]
    assert summary["income"]["total"] == 15000
    assert summary["expense"]["count"] == 2
    assert summary["netIncome"] == 12500
    assert client.get(f"{BASE}/summary?period=decade", headers=auth_headers).status_code == 400

    search = client.get(f"{BASE}/search?q=grocer", headers=auth_headers).get_json()
    assert [t["description"] for t in search["data"]] == ["Groceries"]

    recent = client.get(f"{BASE}/recent?limit=2", headers=auth_headers).get_json()
    assert recent["meta"]["count"] == 2

    spending = client.get(f"{BASE}/spending-by-category", headers=auth_headers).get_json()["data"]
    assert spending[0]["categoryName"] == "Food & Dining"
    assert spending[0]["total"] == 2500


def test_non_finite_amount_is_a_validation_error(client, auth_headers, api_categories):
    food = api_categories["Food & Dining"]
    for amount in ("NaN", "Infinity"):
        response = _create(client, auth_headers, food, amount=amount)
        assert response.status_code == 422
        body = response.get_json()
        assert body["error"]["type"] == "ValidationError"
        assert body["error"]["details"][0]["field"] == "amount"

    response = client.get(f"{BASE}?minAmount=nan", headers=auth_headers)
    assert response.status_code == 400
    assert client.get(BASE, headers=auth_headers).get_json()["meta"]["pagination"]["total"] == 0
