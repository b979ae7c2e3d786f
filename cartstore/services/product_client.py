# cartstore/services/product_client.py
import asyncio

import requests
from pydantic import TypeAdapter, ValidationError
from requests import RequestException

from cartstore.domain.errors import DecodeError, HttpError, NetworkError
from cartstore.domain.schemas import Product
from cartstore.utils.settings import CATALOG_BASE_URL, CATALOG_TIMEOUT_SECONDS
from cartstore.utils.logging import get_logger

logger = get_logger(__name__)

_product_list = TypeAdapter(list[Product])


class CatalogClient:
    """
    Klient katalogu produktow: jeden GET {base_url}/products.
    Bez retry i bez wlasnego timeoutu (domyslnie) - o ponawianiu decyduje wywolujacy.
    """

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = (base_url or CATALOG_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else CATALOG_TIMEOUT_SECONDS

    async def fetch_catalog(self) -> list[Product]:
        # requests jest blokujace, wiec idzie do osobnego watku
        return await asyncio.to_thread(self._fetch)

    def _fetch(self) -> list[Product]:
        url = f"{self.base_url}/products"
        logger.info(f"CatalogClient GET {url}")

        try:
            resp = requests.get(url, timeout=self.timeout)
        except RequestException as e:
            logger.error(f"Error fetching products: {e}")
            raise NetworkError(str(e)) from e

        if not 200 <= resp.status_code < 300:
            logger.error(f"Error fetching products: HTTP {resp.status_code}")
            raise HttpError(resp.status_code)

        try:
            body = resp.json()
        except ValueError as e:
            logger.error(f"Catalog body is not JSON: {e}")
            raise DecodeError("Catalog response is not valid JSON") from e

        if not isinstance(body, list):
            logger.error(f"Catalog body is not an array: {type(body).__name__}")
            raise DecodeError(f"Expected a JSON array, got {type(body).__name__}")

        try:
            products = _product_list.validate_python(body)
        except ValidationError as e:
            logger.error(f"Catalog records failed validation: {e.error_count()} errors")
            raise DecodeError(str(e)) from e

        logger.info(f"Fetched {len(products)} products")
        return products
