"""HTTP flows against the FastAPI application"""

from sqlmodel import Session, select

from conftest import register_and_login
from expense_tracker.models.user import User


def _category_id(client, headers, name):
    categories = client.get("/categories", headers=headers).json()
    return next(c["id"] for c in categories if c["name"] == name)


def _financial_user(client, headers, name="Rahim"):
    response = client.post("/financial-users", json={"name": name, "type": "Friend"}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["id"]


def _transaction(client, headers, kind, amount, category_id, financial_user_id, **extra):
    payload = {
        "title": f"{kind} {amount}",
        "amount": amount,
        "kind": kind,
        "category_id": category_id,
        "financial_user_id": financial_user_id,
        **extra,
    }
    response = client.post("/transactions", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "X-Request-ID" in response.headers


def test_requests_without_token_are_rejected(client):
    assert client.get("/transactions").status_code == 401
    assert client.get("/transactions", headers={"Authorization": "Bearer nope"}).status_code == 401


def test_register_login_and_me(client):
    headers = register_and_login(client, "bob@example.com")

    assert client.get("/auth/me", headers=headers).status_code == 200

    duplicate = client.post("/auth/register", json={"email": "bob@example.com", "password": "secret123"})
    assert duplicate.status_code == 400

    short = client.post("/auth/register", json={"email": "carol@example.com", "password": "123"})
    assert short.status_code == 400

    wrong = client.post("/auth/login", data={"username": "bob@example.com", "password": "wrong-password"})
    assert wrong.status_code == 401


def test_change_password(client):
    headers = register_and_login(client, "dave@example.com")
    response = client.post(
        "/auth/change-password",
        json={"current_password": "secret123", "new_password": "brand-new-1"},
        headers=headers,
    )
    assert response.status_code == 200
    register_and_login_again = client.post(
        "/auth/login", data={"username": "dave@example.com", "password": "brand-new-1"}
    )
    assert register_and_login_again.status_code == 200


def test_registration_seeds_base_categories(client, auth_headers):
    names = {c["name"] for c in client.get("/categories", headers=auth_headers).json()}
    assert {"Loan", "Loan Repayment", "Salary", "Food"} <= names


def test_period_summary_through_the_api(client, auth_headers):
    fu = _financial_user(client, auth_headers)
    salary = _category_id(client, auth_headers, "Salary")
    food = _category_id(client, auth_headers, "Food")

    _transaction(client, auth_headers, "income", 1000, salary, fu)
    _transaction(client, auth_headers, "expense", 400, food, fu)
    _transaction(client, auth_headers, "expense", 100, food, fu)

    summary = client.get("/reports/summary", headers=auth_headers).json()
    assert summary == {"income": 1000.0, "expense": 500.0, "net": 500.0, "savings_rate": 0.5}

    breakdown = client.get("/reports/categories", headers=auth_headers).json()
    assert [row["name"] for row in breakdown] == ["Food", "Salary"]
    assert breakdown[0]["count"] == 2
    assert breakdown[0]["pct_of_total_expense"] == 100.0


def test_transaction_validation_errors(client, auth_headers):
    fu = _financial_user(client, auth_headers)
    food = _category_id(client, auth_headers, "Food")
    base = {"title": "Lunch", "category_id": food, "financial_user_id": fu}

    response = client.post("/transactions", json={**base, "amount": 0, "kind": "expense"}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "ValidationError"

    response = client.post("/transactions", json={**base, "amount": 5, "kind": "gift"}, headers=auth_headers)
    assert response.status_code == 422

    response = client.post(
        "/transactions", json={**base, "amount": 5, "kind": "expense", "financial_user_id": 9999}, headers=auth_headers
    )
    assert response.status_code == 400

    assert client.get("/transactions/9999", headers=auth_headers).status_code == 404


def test_transaction_update_and_delete(client, auth_headers):
    fu = _financial_user(client, auth_headers)
    food = _category_id(client, auth_headers, "Food")
    created = _transaction(client, auth_headers, "expense", 40, food, fu)

    response = client.put(f"/transactions/{created['id']}", json={"amount": 45.5}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["amount"] == 45.5
    assert response.json()["voucher_id"] == created["voucher_id"]

    assert client.delete(f"/transactions/{created['id']}", headers=auth_headers).status_code == 200
    assert client.get("/transactions", headers=auth_headers).json() == []


def test_loan_lifecycle(client, auth_headers):
    fu = _financial_user(client, auth_headers)

    response = client.post(
        "/loans",
        json={"title": "Lent to Rahim", "amount": 250, "direction": "given", "financial_user_id": fu},
        headers=auth_headers,
    )
    assert response.status_code == 201, response.text
    body = response.json()
    loan_id = body["loan"]["id"]
    assert body["loan"]["status"] == "pending"
    assert body["transaction"]["kind"] == "expense"
    assert body["transaction"]["amount"] == 250
    assert body["loan"]["transaction_id"] == body["transaction"]["id"]

    summary = client.get("/reports/loans", headers=auth_headers).json()
    assert summary["total_given"] == 250
    assert summary["net_position"] == 250
    assert summary["pending_count"] == 1

    response = client.post(f"/loans/{loan_id}/repay", headers=auth_headers)
    assert response.status_code == 200, response.text
    repaid = response.json()
    assert repaid["loan"]["status"] == "repaid"
    assert repaid["loan"]["repaid_date"] is not None
    assert repaid["transaction"]["kind"] == "income"
    assert repaid["transaction"]["title"] == "Loan Repayment: Lent to Rahim"

    again = client.post(f"/loans/{loan_id}/repay", headers=auth_headers)
    assert again.status_code == 409
    assert again.json()["error"] == "StateError"
    assert len(client.get("/transactions", headers=auth_headers).json()) == 2

    summary = client.get("/reports/loans", headers=auth_headers).json()
    assert summary["pending_count"] == 0
    assert summary["repaid_count"] == 1
    assert summary["net_position"] == 0

    assert client.post("/loans/9999/repay", headers=auth_headers).status_code == 404


def test_loan_taken_entry_through_transactions(client, auth_headers):
    fu = _financial_user(client, auth_headers)
    response = client.post(
        "/transactions",
        json={"title": "Borrowed", "amount": 80, "kind": "loan_taken", "financial_user_id": fu},
        headers=auth_headers,
    )
    assert response.status_code == 201, response.text
    assert response.json()["kind"] == "income"

    loans = client.get("/loans", headers=auth_headers).json()
    assert len(loans) == 1
    assert loans[0]["direction"] == "taken"

    locked = client.put(f"/transactions/{response.json()['id']}", json={"amount": 10}, headers=auth_headers)
    assert locked.status_code == 409


def test_financial_user_delete_is_blocked_while_referenced(client, auth_headers):
    fu = _financial_user(client, auth_headers)
    food = _category_id(client, auth_headers, "Food")
    _transaction(client, auth_headers, "expense", 10, food, fu)
    _transaction(client, auth_headers, "expense", 20, food, fu)

    response = client.delete(f"/financial-users/{fu}", headers=auth_headers)
    assert response.status_code == 409
    assert response.json()["count"] == 2

    listed = client.get("/financial-users", headers=auth_headers).json()
    assert listed[0]["transactions_count"] == 2

    idle = _financial_user(client, auth_headers, "Office")
    assert client.delete(f"/financial-users/{idle}", headers=auth_headers).status_code == 200


def test_category_rules(client, auth_headers):
    response = client.post("/categories", json={"name": "  food ", "type": "expense"}, headers=auth_headers)
    assert response.status_code == 400

    response = client.post("/categories", json={"name": "Gifts", "type": "expense"}, headers=auth_headers)
    assert response.status_code == 201
    gifts = response.json()
    assert gifts["color"] == "#6366f1"

    loan_category = _category_id(client, auth_headers, "Loan")
    assert client.delete(f"/categories/{loan_category}", headers=auth_headers).status_code == 409
    response = client.put(f"/categories/{loan_category}", json={"type": "income"}, headers=auth_headers)
    assert response.status_code == 409

    fu = _financial_user(client, auth_headers)
    _transaction(client, auth_headers, "expense", 15, gifts["id"], fu)
    response = client.delete(f"/categories/{gifts['id']}", headers=auth_headers)
    assert response.status_code == 409
    assert response.json()["count"] == 1


def test_accounts_do_not_see_each_other(client, auth_headers):
    fu = _financial_user(client, auth_headers)
    food = _category_id(client, auth_headers, "Food")
    created = _transaction(client, auth_headers, "expense", 10, food, fu)

    other = register_and_login(client, "mallory@example.com")
    assert client.get("/transactions", headers=other).json() == []
    assert client.get(f"/transactions/{created['id']}", headers=other).status_code == 404
    assert client.delete(f"/financial-users/{fu}", headers=other).status_code == 404


def test_settings_defaults_and_update(client, auth_headers):
    settings = client.get("/settings", headers=auth_headers).json()
    assert settings["currency"] == "USD"
    assert settings["voucher_prefix"] == ""
    assert settings["software_name"] == "Expense Tracker"

    response = client.put("/settings", json={"currency": "BDT", "voucher_prefix": "EXP"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["currency"] == "BDT"
    assert response.json()["theme"] == "light"

    fu = _financial_user(client, auth_headers)
    food = _category_id(client, auth_headers, "Food")
    created = _transaction(client, auth_headers, "expense", 10, food, fu)
    assert created["voucher_id"].startswith("EXP-")

    assert client.put("/settings", json={"currency": "XYZ"}, headers=auth_headers).status_code == 422


def test_goals(client, auth_headers):
    response = client.post(
        "/goals", json={"title": "Laptop", "target_amount": 1000, "deadline": "2030-01-01"}, headers=auth_headers
    )
    assert response.status_code == 201
    goal_id = response.json()["id"]

    response = client.post(f"/goals/{goal_id}/contribute", json={"amount": 1000}, headers=auth_headers)
    assert response.json()["status"] == "completed"

    bad = client.post(
        "/goals", json={"title": "Car", "target_amount": -1, "deadline": "2030-01-01"}, headers=auth_headers
    )
    assert bad.status_code == 400

    dashboard = client.get("/dashboard", headers=auth_headers).json()
    assert dashboard["goals"] == {"active": 0, "completed": 1}


def test_dashboard(client, auth_headers):
    fu = _financial_user(client, auth_headers)
    salary = _category_id(client, auth_headers, "Salary")
    _transaction(client, auth_headers, "income", 300, salary, fu)
    client.post(
        "/loans",
        json={"title": "Borrowed", "amount": 100, "direction": "taken", "financial_user_id": fu},
        headers=auth_headers,
    )

    dashboard = client.get("/dashboard", headers=auth_headers).json()
    assert dashboard["total_balance"] == 400
    assert dashboard["monthly_income"] == 400
    assert dashboard["net_loans"] == -100
    assert len(dashboard["recent_transactions"]) == 2

    assert len(client.get("/reports/monthly-trend?months=3", headers=auth_headers).json()) == 3
    assert len(client.get("/reports/daily-spending?days=7", headers=auth_headers).json()) == 7


def test_pdf_documents(client, auth_headers):
    fu = _financial_user(client, auth_headers)
    food = _category_id(client, auth_headers, "Food")
    created = _transaction(client, auth_headers, "expense", 12.5, food, fu, date="2024-03-10T10:00:00")

    for path in (
        f"/documents/vouchers/{created['id']}",
        "/documents/statements/2024/3",
        "/documents/category-breakdown",
    ):
        response = client.get(path, headers=auth_headers)
        assert response.status_code == 200, path
        assert response.headers["content-type"] == "application/pdf"
        assert response.content.startswith(b"%PDF")

    assert client.get("/documents/vouchers/9999", headers=auth_headers).status_code == 404
    assert client.get("/documents/statements/2024/13", headers=auth_headers).status_code == 422


def test_backup_export_reset_import(client, auth_headers):
    fu = _financial_user(client, auth_headers)
    food = _category_id(client, auth_headers, "Food")
    client.post("/categories", json={"name": "Gifts", "type": "expense"}, headers=auth_headers)
    _transaction(client, auth_headers, "expense", 30, food, fu)
    client.post(
        "/loans",
        json={"title": "Lent", "amount": 70, "direction": "given", "financial_user_id": fu},
        headers=auth_headers,
    )

    exported = client.get("/backup", headers=auth_headers).json()
    assert len(exported["transactions"]) == 2
    assert len(exported["loans"]) == 1

    assert client.delete("/backup", headers=auth_headers).status_code == 200
    assert client.get("/transactions", headers=auth_headers).json() == []
    assert client.get("/loans", headers=auth_headers).json() == []

    response = client.post("/backup/import", json=exported, headers=auth_headers)
    assert response.status_code == 200, response.text
    assert response.json() == {
        "transactions": 2,
        "financial_users": 1,
        "categories": 1,
        "loans": 1,
        "goals": 0,
        "settings": True,
    }

    transactions = client.get("/transactions", headers=auth_headers).json()
    loans = client.get("/loans", headers=auth_headers).json()
    assert loans[0]["transaction_id"] in {tx["id"] for tx in transactions}
    assert client.get("/reports/summary", headers=auth_headers).json()["expense"] == 100


def test_admin_transactions_require_admin_role(client, engine, auth_headers):
    assert client.get("/admin/transactions", headers=auth_headers).status_code == 403

    with Session(engine) as session:
        user = session.exec(select(User).where(User.email == "alice@example.com")).one()
        user.role = "admin"
        session.add(user)
        session.commit()

    other = register_and_login(client, "erin@example.com")
    response = client.get("/admin/transactions", headers=auth_headers)
    assert response.status_code == 200
    assert {row["email"] for row in response.json()} == {"alice@example.com", "erin@example.com"}
    assert client.get("/admin/transactions", headers=other).status_code == 403


def test_recording_continues_after_restoring_a_backup(client, auth_headers):
    fu = _financial_user(client, auth_headers)
    food = _category_id(client, auth_headers, "Food")
    first = _transaction(client, auth_headers, "expense", 10, food, fu)

    exported = client.get("/backup", headers=auth_headers).json()
    assert client.delete("/backup", headers=auth_headers).status_code == 200
    assert client.post("/backup/import", json=exported, headers=auth_headers).status_code == 200

    food = _category_id(client, auth_headers, "Food")
    fu = client.get("/financial-users", headers=auth_headers).json()[0]["id"]
    second = _transaction(client, auth_headers, "expense", 20, food, fu)
    third = _transaction(client, auth_headers, "expense", 30, food, fu)

    vouchers = {first["voucher_id"], second["voucher_id"], third["voucher_id"]}
    assert len(vouchers) == 3


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"
