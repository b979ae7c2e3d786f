# cartstore/domain/errors.py


class CatalogError(Exception):
    """Base dla bledow pobierania katalogu."""


class NetworkError(CatalogError):
    """Transport failure (DNS, connection refused, timeout...)."""


class HttpError(CatalogError):
    def __init__(self, status: int, message: str | None = None):
        self.status = status
        super().__init__(message or f"Catalog responded with HTTP {status}")


class DecodeError(CatalogError):
    """Response body is not a JSON array of products."""


class StoreError(Exception):
    pass


class ConcurrentDispatchError(StoreError):
    def __init__(self, action_type: str | None = None):
        self.action_type = action_type
        super().__init__(
            f"Reducers may not dispatch actions (attempted: {action_type})"
        )


class InvariantViolation(StoreError):
    pass


class StorageUnavailable(Exception):
    # shipped adapters never raise it, they log and report absence
    pass
