# cartstore/repos/storage.py
from typing import Protocol


class StorageAdapter(Protocol):
    """
    Kontrakt magazynu klucz-wartosc dla persystencji.

    Sygnatury sa async, zeby dalo sie podstawic inne backendy. Implementacje
    nie rzucaja: blad odczytu -> None, blad zapisu -> zalogowany i pominiety.
    StorageUnavailable (domain.errors) opisuje ten przypadek, ale zaden adapter
    z tego pakietu go nie rzuca; Persistor i tak lapie wyjatki obcych adapterow.
    """

    async def get_item(self, key: str) -> str | None:
        ...

    async def set_item(self, key: str, value: str) -> None:
        ...

    async def remove_item(self, key: str) -> None:
        ...


class MemoryStorage:
    """Magazyn w pamieci procesu (testy, sesje bez zapisu na dysk)."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> str | None:
        return self.data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self.data[key] = value

    async def remove_item(self, key: str) -> None:
        self.data.pop(key, None)
