# cartstore/main.py
from dataclasses import dataclass

from cartstore.repos.sqlite_storage import SqliteStorage
from cartstore.repos.storage import StorageAdapter
from cartstore.services.persistor import PersistConfig, Persistor, persist_reducer
from cartstore.services.product_client import CatalogClient
from cartstore.store.root import invariant_middleware, root_reducer
from cartstore.store.store import Store
from cartstore.store.thunk import thunk_middleware
from cartstore.utils.settings import CATALOG_RETRY_ATTEMPTS, DEBUG, PERSIST_KEY
from cartstore.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class StoreConfig:
    storage: StorageAdapter | None = None
    catalog_client: CatalogClient | None = None
    persist_key: str = PERSIST_KEY
    whitelist: tuple[str, ...] = ("cart",)
    retry_attempts: int = CATALOG_RETRY_ATTEMPTS
    debug: bool = DEBUG


@dataclass
class StoreExtra:
    """Zaleznosci wstrzykiwane do thunkow (ThunkAPI.extra)."""

    catalog_client: CatalogClient
    retry_attempts: int = CATALOG_RETRY_ATTEMPTS


def create_store(config: StoreConfig | None = None) -> Store:
    config = config or StoreConfig()

    extra = StoreExtra(
        catalog_client=config.catalog_client or CatalogClient(),
        retry_attempts=config.retry_attempts,
    )

    middleware = [thunk_middleware(extra)]
    if config.debug:
        middleware.append(invariant_middleware)

    return Store(persist_reducer(root_reducer), middleware=middleware)


def create_persistor(store: Store, config: StoreConfig | None = None) -> Persistor:
    config = config or StoreConfig()
    storage = config.storage or SqliteStorage()
    return Persistor(
        store,
        PersistConfig(storage=storage, key=config.persist_key, whitelist=config.whitelist),
    )


async def bootstrap(config: StoreConfig | None = None) -> tuple[Store, Persistor]:
    """
    Tworzy store + persistor i czeka na odtworzenie stanu.
    Warstwa prezentacji nie powinna niczego pokazywac przed powrotem z tej funkcji.
    """
    store = create_store(config)
    persistor = create_persistor(store, config)
    await persistor.rehydrate()
    logger.info(f"Store ready, {store.get_state().cart.total_quantity} items in cart")
    return store, persistor
