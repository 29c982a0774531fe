"""ORM model registry — import all models so Alembic autogenerate discovers them."""

from buyer_api.models.buyer import Buyer
from buyer_api.models.buyer_history import BuyerHistory

__all__ = [
    "Buyer",
    "BuyerHistory",
]
