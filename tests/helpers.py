import asyncio

from cartstore.domain.actions import Action
from cartstore.domain.schemas import Product


def make_product(id, price, title=None, **extra):
    return Product(
        id=id,
        title=title or f"Product {id}",
        price=price,
        description=extra.get("description", ""),
        image=extra.get("image", f"https://example.com/{id}.png"),
        category=extra.get("category", "misc"),
    )


class StubCatalog:
    """Podstawiany klient katalogu: zwraca liste albo rzuca podany blad."""

    def __init__(self, products=(), error=None, gate: asyncio.Event | None = None):
        self.products = list(products)
        self.error = error
        self.gate = gate
        self.calls = 0

    async def fetch_catalog(self):
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return list(self.products)


def recorder(log: list):
    """Middleware zapisujacy typy akcji, ktore dotarly do reducera."""

    def middleware(api):
        def wrap(next_dispatch):
            def dispatch(action):
                if isinstance(action, Action):
                    log.append(action.type)
                return next_dispatch(action)

            return dispatch

        return wrap

    return middleware
