"""Flask client tests for the monthly summary endpoint."""

from __future__ import annotations

from wealthlog.timeutils import utcnow

URL = "/api/v1/summary/monthly"


def test_invalid_month_is_rejected(client, auth_headers):
    response = client.get(f"{URL}?month=13&year=2024", headers=auth_headers)
    assert response.status_code == 400
    body = response.get_json()
    assert body["success"] is False
    assert body["error"]["type"] == "ValidationError"


def test_empty_month_reports_no_data(client, auth_headers):
    response = client.get(f"{URL}?month=1&year=2020", headers=auth_headers)
    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["hasData"] is False
    assert data["period"]["month"] == 1
    assert data["period"]["year"] == 2020


def test_current_month_summary(client, auth_headers, api_categories):
    today = utcnow().strftime("%Y-%m-%d")
    for name, amount in (("Salary", 15000), ("Food & Dining", 1500), ("Transportation", 1000)):
        category = api_categories[name]
        client.post(
            "/api/v1/transactions",
            json={
                "type": category["type"],
                "amount": amount,
                "description": name,
                "date": today,
                "categoryId": category["id"],
            },
            headers=auth_headers,
        )

    data = client.get(URL, headers=auth_headers).get_json()["data"]
    assert data["transactions"]["netIncome"] == 12500
    assert data["insights"]["savingsRate"] == 83
    assert data["insights"]["topExpenseCategory"]["categoryName"] == "Food & Dining"


def test_requires_authentication(client):
    assert client.get(URL).status_code == 401
