# STOREFRONT/backend/storefront/routes/dashboard.py

from fastapi import APIRouter, Depends

from storefront.auth import get_current_business
from storefront.models import models as db_models
from storefront.services.storage import Storage, get_storage

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])

@router.get("")
def dashboard_summary(
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    """Tableau de bord financier de l'entreprise connectée (montants en centimes)"""
    transactions = storage.get_transactions_by_business(business.id)
    accounts = storage.get_accounts_by_business(business.id)

    # Les transactions annulées ne comptent pas
    active = [t for t in transactions if t.status != "cancelled"]
    total_revenue = sum(t.amount for t in active if t.type == "income")
    total_expenses = sum(t.amount for t in active if t.type == "expense")
    net_profit = total_revenue - total_expenses

    # Répartition par catégorie (dépenses)
    expenses_by_category = {}
    for tx in active:
        if tx.type != "expense":
            continue
        expenses_by_category[tx.category] = expenses_by_category.get(tx.category, 0) + tx.amount

    # Soldes par type de catégorie comptable
    balances_by_type = {}
    for account in accounts:
        account_type = account.category.type if account.category else "unknown"
        balances_by_type[account_type] = balances_by_type.get(account_type, 0) + account.current_balance

    return {
        "summary": {
            "totalRevenue": total_revenue,
            "totalExpenses": total_expenses,
            "netProfit": net_profit,
            "profitMargin": round(net_profit / total_revenue * 100, 2) if total_revenue > 0 else 0
        },
        "expensesByCategory": expenses_by_category,
        "balancesByType": balances_by_type,
        "counts": {
            "products": len(storage.get_products_by_business(business.id)),
            "orders": len(storage.get_orders_by_business(business.id)),
            "transactions": len(transactions)
        }
    }
