# cartstore/store/product_thunks.py
from pydantic import TypeAdapter, ValidationError

from cartstore.domain.actions import PRODUCT_LIST
from cartstore.domain.errors import DecodeError
from cartstore.domain.schemas import Product
from cartstore.services.product_client import CatalogClient
from cartstore.store.thunk import ThunkAPI, create_async_thunk
from cartstore.utils.retry import catalog_retry
from cartstore.utils.settings import CATALOG_RETRY_ATTEMPTS
from cartstore.utils.logging import get_logger

logger = get_logger(__name__)

_product_list = TypeAdapter(list[Product])


async def _load_product_list(_arg, api: ThunkAPI):
    client = getattr(api.extra, "catalog_client", None) or CatalogClient()
    attempts = getattr(api.extra, "retry_attempts", CATALOG_RETRY_ATTEMPTS)

    async for attempt in catalog_retry(attempts):
        with attempt:
            products = await client.fetch_catalog()

    # podstawiony klient moze oddac surowe rekordy, blad ma skonczyc sie rejected
    try:
        return _product_list.validate_python(list(products or ()))
    except ValidationError as e:
        logger.error(f"Catalog client returned invalid products: {e.error_count()} errors")
        raise DecodeError(str(e)) from e


fetch_products = create_async_thunk(PRODUCT_LIST, _load_product_list)
