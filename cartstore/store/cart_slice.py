# cartstore/store/cart_slice.py
import math
from typing import Any, Mapping

from cartstore.domain.actions import (
    Action,
    ADD_TO_CART,
    CLEAR_CART,
    REMOVE_FROM_CART,
    UPDATE_QUANTITY,
)
from cartstore.domain.errors import InvariantViolation
from cartstore.domain.schemas import CartItem, CartState, Product, QuantityUpdate

initial_state = CartState()


def _with_items(items: tuple[CartItem, ...]) -> CartState:
    # sumy liczone od nowa z pozycji, bez dryfu floatow
    return CartState(
        items=items,
        total_quantity=sum(i.quantity for i in items),
        total_amount=math.fsum(i.quantity * i.price for i in items),
    )


def _find(items: tuple[CartItem, ...], product_id: int) -> int:
    for idx, item in enumerate(items):
        if item.id == product_id:
            return idx
    return -1


def add_to_cart(state: CartState, product: Product | Mapping[str, Any]) -> CartState:
    """
    Dodanie produktu: jesli juz jest w koszyku to quantity + 1,
    w przeciwnym razie nowa pozycja na koncu z quantity = 1.
    Pole quantity w payloadzie jest ignorowane.
    """
    if not isinstance(product, Product):
        product = Product.model_validate(product)

    idx = _find(state.items, product.id)

    if idx == -1:
        fields = product.model_dump(exclude={"quantity"})
        items = state.items + (CartItem(**fields, quantity=1),)
    else:
        existing = state.items[idx]
        bumped = existing.model_copy(update={"quantity": existing.quantity + 1})
        items = state.items[:idx] + (bumped,) + state.items[idx + 1:]

    return _with_items(items)


def update_quantity(state: CartState, update: QuantityUpdate | Mapping[str, Any]) -> CartState:
    if not isinstance(update, QuantityUpdate):
        update = QuantityUpdate.model_validate(update)

    idx = _find(state.items, update.id)
    if idx == -1:
        return state

    # quantity <= 0 usuwa pozycje
    if update.quantity <= 0:
        return _with_items(state.items[:idx] + state.items[idx + 1:])

    existing = state.items[idx]
    if existing.quantity == update.quantity:
        return state

    changed = existing.model_copy(update={"quantity": update.quantity})
    return _with_items(state.items[:idx] + (changed,) + state.items[idx + 1:])


def remove_from_cart(state: CartState, product_id: int) -> CartState:
    idx = _find(state.items, product_id)
    if idx == -1:
        return state
    return _with_items(state.items[:idx] + state.items[idx + 1:])


def clear_cart(state: CartState, _payload: Any = None) -> CartState:
    if not state.items and state.total_quantity == 0 and state.total_amount == 0:
        return state
    return initial_state


_HANDLERS = {
    ADD_TO_CART: add_to_cart,
    UPDATE_QUANTITY: update_quantity,
    REMOVE_FROM_CART: remove_from_cart,
    CLEAR_CART: clear_cart,
}


def cart_reducer(state: CartState | None, action: Action) -> CartState:
    if state is None:
        state = initial_state

    handler = _HANDLERS.get(action.type)
    if handler is None:
        return state
    return handler(state, action.payload)


def check_invariants(state: CartState, tolerance: float = 1e-9) -> None:
    """Rzuca InvariantViolation jesli sumy/pozycje koszyka sa niespojne."""
    ids = [i.id for i in state.items]
    if len(ids) != len(set(ids)):
        raise InvariantViolation(f"Duplicate cart item ids: {ids}")

    bad = [i.id for i in state.items if i.quantity < 1]
    if bad:
        raise InvariantViolation(f"Non-positive quantity for items {bad}")

    expected_qty = sum(i.quantity for i in state.items)
    if state.total_quantity != expected_qty:
        raise InvariantViolation(
            f"totalQuantity {state.total_quantity} != sum of quantities {expected_qty}"
        )

    expected_amount = math.fsum(i.quantity * i.price for i in state.items)
    if abs(state.total_amount - expected_amount) > tolerance * max(1.0, abs(expected_amount)):
        raise InvariantViolation(
            f"totalAmount {state.total_amount} != sum of line totals {expected_amount}"
        )
