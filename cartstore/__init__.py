# cartstore/__init__.py
from cartstore.domain import actions
from cartstore.domain.actions import (
    Action,
    add_to_cart,
    clear_cart,
    remove_from_cart,
    set_filtered_products,
    update_quantity,
)
from cartstore.domain.schemas import CartItem, CartState, Product, ProductState, RootState
from cartstore.main import StoreConfig, bootstrap, create_persistor, create_store
from cartstore.store.product_slice import apply_product_filter, filter_products
from cartstore.store.product_thunks import fetch_products
from cartstore.store.thunk import unwrap_result

__all__ = [
    "actions",
    "Action",
    "add_to_cart",
    "clear_cart",
    "remove_from_cart",
    "set_filtered_products",
    "update_quantity",
    "CartItem",
    "CartState",
    "Product",
    "ProductState",
    "RootState",
    "StoreConfig",
    "bootstrap",
    "create_persistor",
    "create_store",
    "apply_product_filter",
    "filter_products",
    "fetch_products",
    "unwrap_result",
]
