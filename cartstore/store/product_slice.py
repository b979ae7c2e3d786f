# cartstore/store/product_slice.py
"""
Slice produktow: lista z katalogu + lista przefiltrowana przez UI.

Kontrakt: akcje fetch NIGDY nie dotykaja filtered_products. Po kazdej zmianie
product_list warstwa prezentacji musi ponownie nalozyc aktualny filtr
(patrz apply_product_filter), inaczej po rejected filtered_products zostaja
ze starymi pozycjami.
"""
from typing import Iterable

from cartstore.domain.actions import (
    Action,
    PRODUCT_LIST_FULFILLED,
    PRODUCT_LIST_PENDING,
    PRODUCT_LIST_REJECTED,
    SET_FILTERED_PRODUCTS,
    set_filtered_products,
)
from cartstore.domain.schemas import Product, ProductState

initial_state = ProductState()


def _products(payload) -> tuple[Product, ...]:
    return tuple(
        p if isinstance(p, Product) else Product.model_validate(p)
        for p in (payload or ())
    )


def _reduce(state: ProductState, action: Action) -> ProductState:
    if action.type == SET_FILTERED_PRODUCTS:
        return state.model_copy(update={"filtered_products": _products(action.payload)})

    if action.type == PRODUCT_LIST_PENDING:
        if state.is_loading:
            return state
        return state.model_copy(update={"is_loading": True})

    if action.type == PRODUCT_LIST_FULFILLED:
        return state.model_copy(
            update={"is_loading": False, "product_list": _products(action.payload)}
        )

    if action.type == PRODUCT_LIST_REJECTED:
        return state.model_copy(update={"is_loading": False, "product_list": ()})

    return state


def product_reducer(state: ProductState | None, action: Action) -> ProductState:
    if state is None:
        state = initial_state
    return _reduce(state, action)


def filter_products(products: Iterable[Product], query: str) -> tuple[Product, ...]:
    """Wyszukiwanie po tytule, bez rozrozniania wielkosci liter. Kolejnosc zachowana."""
    needle = (query or "").lower()
    return tuple(p for p in products if needle in p.title.lower())


def apply_product_filter(query: str):
    """Thunk: przelicza filtered_products z aktualnej product_list."""

    def thunk(api):
        products = api.get_state().product.product_list
        return api.dispatch(set_filtered_products(filter_products(products, query)))

    return thunk
