# STOREFRONT/backend/storefront/services/billing.py : statut des factures

"""
Statut d'une facture (bill, invoice) déduit de deux axes indépendants :
le paiement (montant réglé / montant total) et la réception des articles
(quantités reçues / quantités commandées).
"""

from typing import Any, Dict, Iterable, Optional

from storefront.constants import BILL_DOCUMENT_TYPES

# (paiement, réception) -> statut
_STATUS_MATRIX = {
    ("unpaid", "not_received"): "draft",
    ("paid", "received"): "paid_received",
    ("paid", "partially_received"): "paid_partially_received",
    ("partially_paid", "received"): "partially_paid_received",
    ("partially_paid", "partially_received"): "partially_paid_partially_received",
    ("paid", "not_received"): "paid",
    ("partially_paid", "not_received"): "partially_paid",
    ("unpaid", "received"): "received",
    ("unpaid", "partially_received"): "partially_received",
}


def quantity_received(item: Dict[str, Any]) -> float:
    """Quantité reçue d'un article (camelCase ou snake_case), 0 si absente"""
    return item.get("quantityReceived", item.get("quantity_received")) or 0


def payment_state(total: int, paid: int) -> str:
    if total > 0 and paid >= total:
        return "paid"
    if 0 < paid < total:
        return "partially_paid"
    return "unpaid"


def receipt_state(ordered: float, received: float) -> str:
    if ordered > 0 and received >= ordered:
        return "received"
    if 0 < received < ordered:
        return "partially_received"
    return "not_received"


def calculate_bill_status(
    total: int,
    paid: Optional[int],
    items: Iterable[Dict[str, Any]] = (),
    cancelled: bool = False
) -> str:
    """
    Statut d'une facture :
        - "cancelled" si elle est annulée, quel que soit le reste
        - sinon la combinaison paiement / réception (voir _STATUS_MATRIX)
    Montants en centimes.
    """
    if cancelled:
        return "cancelled"

    items = list(items or [])
    ordered = sum(item.get("quantity") or 0 for item in items)
    received = sum(quantity_received(item) for item in items)

    key = (payment_state(total or 0, paid or 0), receipt_state(ordered, received))
    return _STATUS_MATRIX[key]


def is_bill(document_type: Optional[str]) -> bool:
    return document_type in BILL_DOCUMENT_TYPES
