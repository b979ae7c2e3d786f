# cartstore/store/root.py
from cartstore.domain.actions import Action
from cartstore.domain.schemas import RootState
from cartstore.store.cart_slice import cart_reducer, check_invariants
from cartstore.store.product_slice import product_reducer
from cartstore.store.store import combine_reducers

root_reducer = combine_reducers(
    {
        "cart": cart_reducer,
        "product": product_reducer,
    },
    RootState,
)


def invariant_middleware(api):
    """Tylko w trybie DEBUG: po kazdej akcji sprawdza spojnosc koszyka."""

    def wrap(next_dispatch):
        def dispatch(action):
            result = next_dispatch(action)
            if isinstance(action, Action):
                check_invariants(api.get_state().cart)
            return result

        return dispatch

    return wrap


# selektory

def select_cart(state: RootState):
    return state.cart


def select_cart_items(state: RootState):
    return state.cart.items


def select_total_quantity(state: RootState) -> int:
    return state.cart.total_quantity


def select_total_amount(state: RootState) -> float:
    return state.cart.total_amount


def select_products(state: RootState):
    return state.product.filtered_products


def select_is_loading(state: RootState) -> bool:
    return state.product.is_loading
