from typing import Iterable


def calculate_profit(supply) -> float:
    """(sale_price - cost) * quantity. Negative means the item sells at a loss."""
    return (supply.sale_price - supply.cost) * supply.quantity


def total_profit(supplies: Iterable) -> float:
    return sum((calculate_profit(s) for s in supplies), 0)
