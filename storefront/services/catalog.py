# STOREFRONT/backend/storefront/services/catalog.py : règles métier du catalogue

"""
Fonctions pures du catalogue produits : conversion monétaire, stock,
combinaisons de variantes et détection des SKU en double.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from itertools import product as cartesian_product
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

CENT = Decimal("0.01")


def to_cents(amount) -> int:
    """Convertit un montant décimal (24.99, "24.99") en centimes (2499)"""
    if amount is None or amount == "":
        return 0
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation:
        raise ValueError(f"Montant invalide: {amount!r}")
    if not value.is_finite():
        raise ValueError(f"Montant invalide: {amount!r}")
    return int((value.quantize(CENT, rounding=ROUND_HALF_UP) * 100).to_integral_value())


def from_cents(cents: Optional[int]) -> Decimal:
    """Centimes -> montant décimal à deux chiffres"""
    return (Decimal(cents or 0) / 100).quantize(CENT)


def format_currency(cents: Optional[int], symbol: str = "$") -> str:
    value = from_cents(cents)
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def in_stock_for(inventory: int) -> bool:
    return inventory > 0


def apply_stock_rule(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Si l'inventaire figure dans les données, inStock en est déduit et
    remplace toute valeur envoyée par le client.
    """
    if data.get("inventory") is not None:
        data["in_stock"] = in_stock_for(data["inventory"])
    return data


def find_duplicate_skus(skus: Iterable[Optional[str]]) -> List[str]:
    """SKU non vides présents plusieurs fois, dans l'ordre de première répétition"""
    seen = set()
    duplicates = []
    for sku in skus:
        if not sku or not sku.strip():
            continue
        key = sku.strip()
        if key in seen and key not in duplicates:
            duplicates.append(key)
        seen.add(key)
    return duplicates


def _clean_values(values: Sequence[str]) -> List[str]:
    cleaned = []
    for value in values:
        value = (value or "").strip()
        if value and value not in cleaned:
            cleaned.append(value)
    return cleaned


def _options_key(options) -> Tuple[Tuple[str, str], ...]:
    return tuple((o["group"], o["value"]) for o in options)


def generate_variant_combinations(
    groups: Sequence[Tuple[str, Sequence[str]]],
    existing: Optional[Iterable[Dict[str, Any]]] = None,
) -> List[Dict[str, Any]]:
    """
    Produit cartésien des groupes d'options (ex: Taille x Couleur).

    L'ordre est déterministe : le premier groupe déclaré varie le plus
    lentement, les valeurs gardent leur ordre de déclaration. Une
    combinaison déjà connue (mêmes options) conserve son sku, son prix et
    son inventaire ; les nouvelles partent du prix de base (price=None).
    """
    named = [(name.strip(), _clean_values(values)) for name, values in groups]
    named = [(name, values) for name, values in named if name and values]
    if not named:
        return []

    known = {}
    for combo in existing or []:
        known[_options_key(combo.get("options", []))] = combo

    combinations = []
    for picked in cartesian_product(*[values for _, values in named]):
        options = [
            {"group": name, "value": value}
            for (name, _), value in zip(named, picked)
        ]
        previous = known.get(_options_key(options))
        combinations.append({
            "options": options,
            "sku": previous.get("sku") if previous else "",
            "price": previous.get("price") if previous else None,
            "inventory": previous.get("inventory", 0) if previous else 0,
        })
    return combinations
