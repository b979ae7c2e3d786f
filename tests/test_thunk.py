import asyncio

import pytest

from cartstore.domain import actions as A
from cartstore.domain.errors import DecodeError, HttpError, NetworkError
from cartstore.main import StoreExtra
from cartstore.store.product_slice import apply_product_filter
from cartstore.store.product_thunks import fetch_products
from cartstore.store.root import root_reducer
from cartstore.store.store import Store
from cartstore.store.thunk import create_async_thunk, thunk_middleware, unwrap_result
from tests.helpers import StubCatalog, make_product, recorder


def _store(catalog, log=None, retry_attempts=1):
    log = log if log is not None else []
    extra = StoreExtra(catalog_client=catalog, retry_attempts=retry_attempts)
    return Store(root_reducer, middleware=[thunk_middleware(extra), recorder(log)])


def test_action_types():
    assert fetch_products.pending == "product/list/pending"
    assert fetch_products.fulfilled == "product/list/fulfilled"
    assert fetch_products.rejected == "product/list/rejected"


@pytest.mark.asyncio
async def test_fetch_success():
    log = []
    store = _store(StubCatalog([make_product(1, 9.99)]), log)

    task = store.dispatch(fetch_products())
    # pending idzie synchronicznie
    assert store.get_state().product.is_loading is True
    assert log == [A.PRODUCT_LIST_PENDING]

    action = await task
    state = store.get_state().product
    assert action.type == A.PRODUCT_LIST_FULFILLED
    assert state.is_loading is False
    assert len(state.product_list) == 1
    assert state.product_list[0].price == 9.99
    assert A.PRODUCT_LIST_REJECTED not in log


@pytest.mark.asyncio
async def test_fetch_failure_wipes_list(products):
    failing = _store(StubCatalog(error=HttpError(500)))
    failing.dispatch(A.Action(A.PRODUCT_LIST_FULFILLED, payload=products))
    failing.dispatch(A.set_filtered_products(products[:2]))
    assert len(failing.get_state().product.product_list) == 3

    action = await failing.dispatch(fetch_products())
    state = failing.get_state().product
    assert action.type == A.PRODUCT_LIST_REJECTED
    assert isinstance(action.error, HttpError)
    assert action.error.status == 500
    assert state.is_loading is False
    assert state.product_list == ()
    assert state.filtered_products == tuple(products[:2])


@pytest.mark.asyncio
async def test_rejection_does_not_raise_to_caller():
    store = _store(StubCatalog(error=NetworkError("down")))
    action = await store.dispatch(fetch_products())
    assert action.type == A.PRODUCT_LIST_REJECTED
    with pytest.raises(NetworkError):
        unwrap_result(action)


@pytest.mark.asyncio
async def test_unwrap_fulfilled(products):
    store = _store(StubCatalog(products))
    action = await store.dispatch(fetch_products())
    assert unwrap_result(action) == products


@pytest.mark.asyncio
async def test_meta_carries_request_id():
    seen = []

    def spy(api):
        def wrap(next_dispatch):
            def dispatch(action):
                if isinstance(action, A.Action):
                    seen.append(action)
                return next_dispatch(action)
            return dispatch
        return wrap

    store = Store(root_reducer, middleware=[thunk_middleware(StoreExtra(StubCatalog())), spy])
    await store.dispatch(fetch_products())

    pending, fulfilled = seen
    assert pending.meta["request_id"] == fulfilled.meta["request_id"]
    assert pending.meta["request_status"] == "pending"
    assert fulfilled.meta["request_status"] == "fulfilled"


@pytest.mark.asyncio
async def test_lifecycle_pairs_pending_with_terminal():
    log = []
    loading_while_idle = []

    for catalog in (StubCatalog([make_product(1, 1)]), StubCatalog(error=NetworkError("x"))):
        store = _store(catalog, log)
        await store.dispatch(fetch_products())
        loading_while_idle.append(store.get_state().product.is_loading)

    assert log == [
        A.PRODUCT_LIST_PENDING,
        A.PRODUCT_LIST_FULFILLED,
        A.PRODUCT_LIST_PENDING,
        A.PRODUCT_LIST_REJECTED,
    ]
    assert loading_while_idle == [False, False]


@pytest.mark.asyncio
async def test_overlapping_fetches_are_serialized(products):
    gate = asyncio.Event()
    log = []
    catalog = StubCatalog(products, gate=gate)
    store = _store(catalog, log)

    first = store.dispatch(fetch_products())
    second = store.dispatch(fetch_products())
    await asyncio.sleep(0)
    assert log == [A.PRODUCT_LIST_PENDING]

    gate.set()
    await asyncio.gather(first, second)

    assert log == [
        A.PRODUCT_LIST_PENDING,
        A.PRODUCT_LIST_FULFILLED,
        A.PRODUCT_LIST_PENDING,
        A.PRODUCT_LIST_FULFILLED,
    ]
    assert catalog.calls == 2
    assert store.get_state().product.is_loading is False


@pytest.mark.asyncio
async def test_other_actions_interleave_with_fetch(products):
    gate = asyncio.Event()
    log = []
    store = _store(StubCatalog(products, gate=gate), log)

    task = store.dispatch(fetch_products())
    store.dispatch(A.add_to_cart(products[0]))
    gate.set()
    await task

    assert log == [A.PRODUCT_LIST_PENDING, A.ADD_TO_CART, A.PRODUCT_LIST_FULFILLED]


@pytest.mark.asyncio
async def test_retry_on_network_error(products):
    class Flaky(StubCatalog):
        async def fetch_catalog(self):
            self.calls += 1
            if self.calls == 1:
                raise NetworkError("blip")
            return list(self.products)

    catalog = Flaky(products)
    store = _store(catalog, retry_attempts=2)
    action = await store.dispatch(fetch_products())
    assert action.type == A.PRODUCT_LIST_FULFILLED
    assert catalog.calls == 2


@pytest.mark.asyncio
async def test_no_retry_on_http_error():
    catalog = StubCatalog(error=HttpError(404))
    store = _store(catalog, retry_attempts=3)
    action = await store.dispatch(fetch_products())
    assert action.type == A.PRODUCT_LIST_REJECTED
    assert catalog.calls == 1


@pytest.mark.asyncio
async def test_generic_async_thunk():
    async def body(arg, api):
        return arg * 2

    double = create_async_thunk("math/double", body)
    log = []
    store = Store(root_reducer, middleware=[thunk_middleware(), recorder(log)])

    action = await store.dispatch(double(21))
    assert action.payload == 42
    assert action.meta["arg"] == 21
    assert log == ["math/double/pending", "math/double/fulfilled"]


def test_dispatch_without_running_loop_fails():
    store = _store(StubCatalog())
    with pytest.raises(RuntimeError):
        store.dispatch(fetch_products())
    assert store.get_state().product.is_loading is False


@pytest.mark.asyncio
async def test_refilter_after_fetch(products):
    store = _store(StubCatalog(products))
    await store.dispatch(fetch_products())
    store.dispatch(apply_product_filter("shirt"))
    assert [p.id for p in store.get_state().product.filtered_products] == [1, 3]


@pytest.mark.asyncio
async def test_invalid_records_reject_and_stop_loading():
    log = []
    store = _store(StubCatalog([{"id": 1, "price": 9.99}]), log)

    action = await store.dispatch(fetch_products())

    assert action.type == A.PRODUCT_LIST_REJECTED
    assert isinstance(action.error, DecodeError)
    assert log == [A.PRODUCT_LIST_PENDING, A.PRODUCT_LIST_REJECTED]
    assert store.get_state().product.is_loading is False
    assert store.get_state().product.product_list == ()


@pytest.mark.asyncio
async def test_raw_valid_records_are_decoded():
    raw = [{"id": 4, "title": "Raw", "price": 1.25, "description": "", "image": "", "category": "c"}]
    store = _store(StubCatalog(raw))
    action = await store.dispatch(fetch_products())
    assert action.type == A.PRODUCT_LIST_FULFILLED
    assert store.get_state().product.product_list[0].id == 4
