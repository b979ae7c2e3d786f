# cartstore/domain/actions.py
from dataclasses import dataclass, field
from typing import Any, Mapping

from cartstore.domain.schemas import Product, QuantityUpdate

# typy akcji - stale, uzywane w fixture'ach testow i w zapisanych logach
INIT = "@@INIT"

ADD_TO_CART = "cart/addToCart"
REMOVE_FROM_CART = "cart/removeFromCart"
UPDATE_QUANTITY = "cart/updateQuantity"
CLEAR_CART = "cart/clearCart"

SET_FILTERED_PRODUCTS = "product/setFilteredProducts"

PRODUCT_LIST = "product/list"
PRODUCT_LIST_PENDING = f"{PRODUCT_LIST}/pending"
PRODUCT_LIST_FULFILLED = f"{PRODUCT_LIST}/fulfilled"
PRODUCT_LIST_REJECTED = f"{PRODUCT_LIST}/rejected"

REHYDRATE = "persist/REHYDRATE"
PURGE = "persist/PURGE"


@dataclass(frozen=True)
class Action:
    type: str
    payload: Any = None
    error: BaseException | None = None
    meta: Mapping[str, Any] = field(default_factory=dict)


def _as_product(product: Product | Mapping[str, Any]) -> Product:
    if isinstance(product, Product):
        return product
    return Product.model_validate(product)


# action creators

def add_to_cart(product: Product | Mapping[str, Any]) -> Action:
    return Action(ADD_TO_CART, _as_product(product))


def remove_from_cart(product_id: int) -> Action:
    return Action(REMOVE_FROM_CART, product_id)


def update_quantity(product_id: int, quantity: int) -> Action:
    return Action(UPDATE_QUANTITY, QuantityUpdate(id=product_id, quantity=quantity))


def clear_cart() -> Action:
    return Action(CLEAR_CART)


def set_filtered_products(products) -> Action:
    return Action(SET_FILTERED_PRODUCTS, tuple(_as_product(p) for p in products))
