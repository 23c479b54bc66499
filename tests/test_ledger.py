# STOREFRONT/backend/tests/test_ledger.py : plan de comptes, comptes, transactions, virements

import pytest

from conftest import balance, category_id, create_account, post_transaction
from storefront.models import models


class TestAccountCategories:
    def test_create_custom_category(self, client, business):
        response = client.post("/api/account-categories", json={
            "name": "Marketing", "type": "expense", "isSystem": True
        })
        assert response.status_code == 201
        assert response.json()["isSystem"] is False

    def test_invalid_type(self, client, business):
        response = client.post("/api/account-categories", json={"name": "Odd", "type": "mystery"})
        assert response.status_code == 400

    def test_system_categories_are_protected(self, client, business):
        assets = category_id(client, "Assets")
        assert client.patch(f"/api/account-categories/{assets}", json={"name": "Stuff"}).status_code == 403
        assert client.delete(f"/api/account-categories/{assets}").status_code == 403

    def test_update_custom_category(self, client, business):
        created = client.post("/api/account-categories", json={"name": "Marketing", "type": "expense"}).json()
        response = client.patch(f"/api/account-categories/{created['id']}", json={"description": "Ads"})
        assert response.status_code == 200
        assert response.json()["description"] == "Ads"
        assert response.json()["name"] == "Marketing"

    def test_delete_category_with_accounts_is_refused(self, client, business, db_session):
        created = client.post("/api/account-categories", json={"name": "Marketing", "type": "expense"}).json()
        client.post("/api/accounts", json={"categoryId": created["id"], "name": "Ads"})

        response = client.delete(f"/api/account-categories/{created['id']}")
        assert response.status_code == 400
        assert db_session.get(models.AccountCategory, created["id"]) is not None

    def test_delete_empty_category(self, client, business):
        created = client.post("/api/account-categories", json={"name": "Marketing", "type": "expense"}).json()
        assert client.delete(f"/api/account-categories/{created['id']}").status_code == 200
        assert all(c["id"] != created["id"] for c in client.get("/api/account-categories").json())


class TestAccounts:
    def test_new_account_starts_at_initial_balance(self, client, business):
        account = create_account(client, initial_balance=5000)
        assert account["currentBalance"] == 5000

    def test_foreign_category_rejected(self, client, business, other_client, other_business):
        foreign = category_id(other_client, "Assets")
        response = client.post("/api/accounts", json={"categoryId": foreign, "name": "Cash"})
        assert response.status_code == 400

    def test_patch_initial_balance_recomputes(self, client, business):
        account = create_account(client, initial_balance=1000)
        post_transaction(client, account["id"], 500, "income")
        response = client.patch(f"/api/accounts/{account['id']}", json={"initialBalance": 2000})
        assert response.json()["currentBalance"] == 2500

    def test_delete_account_with_transactions_is_refused(self, client, business, db_session):
        account = create_account(client)
        post_transaction(client, account["id"], 500, "income")

        response = client.delete(f"/api/accounts/{account['id']}")
        assert response.status_code == 400
        assert db_session.get(models.Account, account["id"]) is not None

    def test_delete_empty_account(self, client, business):
        account = create_account(client)
        assert client.delete(f"/api/accounts/{account['id']}").status_code == 200
        assert client.get(f"/api/accounts/{account['id']}").status_code == 404

    def test_accounts_are_private(self, client, business, other_client, other_business):
        account = create_account(client)
        assert other_client.get(f"/api/accounts/{account['id']}").status_code == 403
        assert other_client.delete(f"/api/accounts/{account['id']}").status_code == 403


class TestBalances:
    def test_income_and_expense_move_balance(self, client, business):
        account = create_account(client, initial_balance=10000)
        post_transaction(client, account["id"], 2500, "income")
        assert balance(client, account["id"]) == 12500

        expense = post_transaction(client, account["id"], 1000, "expense", category="Rent")
        assert balance(client, account["id"]) == 11500

        # un type "transfer" ne modifie pas le solde
        post_transaction(client, account["id"], 700, "transfer")
        assert balance(client, account["id"]) == 11500

        client.delete(f"/api/transactions/{expense['id']}")
        assert balance(client, account["id"]) == 12500

    def test_update_amount_recomputes(self, client, business):
        account = create_account(client, initial_balance=0)
        income = post_transaction(client, account["id"], 2500, "income")
        response = client.patch(f"/api/transactions/{income['id']}", json={"amount": 3000})
        assert response.status_code == 200
        assert balance(client, account["id"]) == 3000

        client.patch(f"/api/transactions/{income['id']}", json={"type": "expense"})
        assert balance(client, account["id"]) == -3000

    def test_moving_transaction_updates_both_accounts(self, client, business):
        cash = create_account(client, "Cash", initial_balance=0)
        bank = create_account(client, "Bank", initial_balance=0)
        income = post_transaction(client, cash["id"], 800, "income")

        client.patch(f"/api/transactions/{income['id']}", json={"accountId": bank["id"]})
        assert balance(client, cash["id"]) == 0
        assert balance(client, bank["id"]) == 800

    def test_cancelled_transaction_does_not_move_balance(self, client, business):
        account = create_account(client, initial_balance=1000)
        post_transaction(client, account["id"], 400, "income", status="cancelled")
        assert balance(client, account["id"]) == 1000

        expense = post_transaction(client, account["id"], 300, "expense", category="Rent")
        assert balance(client, account["id"]) == 700
        client.patch(f"/api/transactions/{expense['id']}", json={"status": "cancelled"})
        assert balance(client, account["id"]) == 1000

        # le tableau de bord et le solde du compte s'accordent
        data = client.get("/api/dashboard").json()
        assert data["summary"]["totalRevenue"] == 0
        assert data["summary"]["totalExpenses"] == 0
        assert data["balancesByType"]["asset"] == 1000

    def test_sync_balances_repairs_drift(self, client, business, db_session):
        account = create_account(client, initial_balance=100)
        post_transaction(client, account["id"], 50, "income")

        stored = db_session.get(models.Account, account["id"])
        stored.current_balance = 999999
        db_session.commit()

        response = client.post("/api/accounts/sync-balances")
        assert response.status_code == 200
        synced = next(a for a in response.json() if a["id"] == account["id"])
        assert synced["currentBalance"] == 150


class TestTransactions:
    def test_filter_by_account(self, client, business):
        cash = create_account(client, "Cash")
        bank = create_account(client, "Bank")
        post_transaction(client, cash["id"], 100, "income")
        post_transaction(client, bank["id"], 200, "income")

        assert len(client.get("/api/transactions").json()) == 2
        filtered = client.get("/api/transactions", params={"accountId": cash["id"]}).json()
        assert [t["amount"] for t in filtered] == [100]

    def test_amount_must_be_positive(self, client, business):
        account = create_account(client)
        response = client.post("/api/transactions", json={
            "accountId": account["id"], "amount": 0, "type": "income", "category": "Sales"
        })
        assert response.status_code == 400

    @pytest.mark.parametrize("type_", ["refund", ""])
    def test_unknown_type(self, client, business, type_):
        account = create_account(client)
        response = client.post("/api/transactions", json={
            "accountId": account["id"], "amount": 10, "type": type_, "category": "Sales"
        })
        assert response.status_code == 400

    def test_foreign_account_rejected(self, client, business, other_client, other_business):
        foreign = create_account(other_client)
        response = client.post("/api/transactions", json={
            "accountId": foreign["id"], "amount": 10, "type": "income", "category": "Sales"
        })
        assert response.status_code == 400
        assert balance(other_client, foreign["id"]) == foreign["currentBalance"]

    def test_transactions_are_private(self, client, business, other_client, other_business):
        account = create_account(client)
        tx = post_transaction(client, account["id"], 100, "income")
        assert other_client.get(f"/api/transactions/{tx['id']}").status_code == 403
        assert other_client.delete(f"/api/transactions/{tx['id']}").status_code == 403


class TestTransfers:
    def test_transfer_is_recorded_without_moving_balances(self, client, business):
        cash = create_account(client, "Cash", initial_balance=1000)
        bank = create_account(client, "Bank", initial_balance=0)

        response = client.post("/api/transfers", json={
            "fromAccountId": cash["id"], "toAccountId": bank["id"], "amount": 400
        })
        assert response.status_code == 201
        assert response.json()["amount"] == 400
        assert len(client.get("/api/transfers").json()) == 1
        assert balance(client, cash["id"]) == 1000
        assert balance(client, bank["id"]) == 0

    def test_same_account_rejected(self, client, business):
        cash = create_account(client)
        response = client.post("/api/transfers", json={
            "fromAccountId": cash["id"], "toAccountId": cash["id"], "amount": 400
        })
        assert response.status_code == 400

    def test_foreign_account_rejected(self, client, business, other_client, other_business):
        cash = create_account(client)
        foreign = create_account(other_client)
        response = client.post("/api/transfers", json={
            "fromAccountId": cash["id"], "toAccountId": foreign["id"], "amount": 400
        })
        assert response.status_code == 400

    def test_account_used_by_transfer_cannot_be_deleted(self, client, business):
        cash = create_account(client, "Cash")
        bank = create_account(client, "Bank")
        client.post("/api/transfers", json={"fromAccountId": cash["id"], "toAccountId": bank["id"], "amount": 1})
        assert client.delete(f"/api/accounts/{bank['id']}").status_code == 400


class TestTransactionVersions:
    def versions(self, client, transaction_id):
        response = client.get(f"/api/transactions/{transaction_id}/versions")
        assert response.status_code == 200, response.text
        return response.json()

    def test_every_write_adds_a_version(self, client, business):
        account = create_account(client, initial_balance=0)
        tx = post_transaction(client, account["id"], 1000, "income")
        client.patch(f"/api/transactions/{tx['id']}", json={"amount": 1500, "notes": "Corrigé"})

        versions = self.versions(client, tx["id"])
        assert [v["version"] for v in versions] == [2, 1]
        assert [v["changeType"] for v in versions] == ["update", "create"]
        assert versions[1]["data"]["amount"] == 1000
        assert versions[0]["data"]["amount"] == 1500
        assert "amount" in versions[0]["changeDescription"]
        assert versions[0]["important"] is False

    def test_history_survives_delete(self, client, business):
        account = create_account(client, initial_balance=0)
        tx = post_transaction(client, account["id"], 1000, "income")
        assert client.delete(f"/api/transactions/{tx['id']}").status_code == 200

        versions = self.versions(client, tx["id"])
        assert [v["changeType"] for v in versions] == ["delete", "create"]
        assert versions[0]["data"]["id"] == tx["id"]

        # un nouvel identifiant ne reprend pas l'historique de l'ancien
        replacement = post_transaction(client, account["id"], 200, "income")
        assert replacement["id"] != tx["id"]
        assert len(self.versions(client, replacement["id"])) == 1

    def test_restore_previous_version(self, client, business):
        cash = create_account(client, "Cash", initial_balance=0)
        bank = create_account(client, "Bank", initial_balance=0)
        tx = post_transaction(client, cash["id"], 1000, "income", description="Vente")
        client.patch(f"/api/transactions/{tx['id']}", json={
            "amount": 4000, "accountId": bank["id"], "description": "Erreur"
        })
        first = self.versions(client, tx["id"])[-1]

        response = client.post(f"/api/transactions/{tx['id']}/versions/{first['id']}/restore")
        assert response.status_code == 200, response.text
        restored = response.json()
        assert restored["amount"] == 1000
        assert restored["accountId"] == cash["id"]
        assert restored["description"] == "Vente"
        assert balance(client, cash["id"]) == 1000
        assert balance(client, bank["id"]) == 0

        versions = self.versions(client, tx["id"])
        assert [v["changeType"] for v in versions] == ["restore", "pre-restore", "update", "create"]
        assert versions[1]["data"]["amount"] == 4000
        assert versions[0]["data"]["amount"] == 1000

    def test_restore_refused_when_account_is_gone(self, client, business):
        cash = create_account(client, "Cash", initial_balance=0)
        bank = create_account(client, "Bank", initial_balance=0)
        tx = post_transaction(client, cash["id"], 1000, "income")
        client.patch(f"/api/transactions/{tx['id']}", json={"accountId": bank["id"]})
        assert client.delete(f"/api/accounts/{cash['id']}").status_code == 200
        first = self.versions(client, tx["id"])[-1]

        response = client.post(f"/api/transactions/{tx['id']}/versions/{first['id']}/restore")
        assert response.status_code == 400
        assert client.get(f"/api/transactions/{tx['id']}").json()["accountId"] == bank["id"]
        assert len(self.versions(client, tx["id"])) == 2

    def test_mark_version_important(self, client, business):
        account = create_account(client)
        tx = post_transaction(client, account["id"], 1000, "income")
        version = self.versions(client, tx["id"])[0]

        response = client.patch(
            f"/api/transactions/{tx['id']}/versions/{version['id']}/important", json={"important": True}
        )
        assert response.status_code == 200
        assert response.json()["important"] is True
        assert self.versions(client, tx["id"])[0]["important"] is True

    def test_version_must_belong_to_transaction(self, client, business):
        account = create_account(client)
        first = post_transaction(client, account["id"], 1000, "income")
        second = post_transaction(client, account["id"], 500, "income")
        version = self.versions(client, first["id"])[0]

        assert client.post(f"/api/transactions/{second['id']}/versions/{version['id']}/restore").status_code == 404
        assert client.patch(
            f"/api/transactions/{second['id']}/versions/{version['id']}/important", json={"important": True}
        ).status_code == 404

    def test_versions_are_private(self, client, business, other_client, other_business):
        account = create_account(client)
        tx = post_transaction(client, account["id"], 1000, "income")
        version = self.versions(client, tx["id"])[0]

        assert other_client.get(f"/api/transactions/{tx['id']}/versions").status_code == 403
        assert other_client.post(f"/api/transactions/{tx['id']}/versions/{version['id']}/restore").status_code == 403
        client.delete(f"/api/transactions/{tx['id']}")
        assert other_client.get(f"/api/transactions/{tx['id']}/versions").status_code == 403

    def test_unknown_transaction_history(self, client, business):
        assert client.get("/api/transactions/999/versions").status_code == 404
