# cartstore/services/persistor.py
"""
Persystencja wybranych slice'ow stanu.

Format zapisu (klucz "root"): JSON, w ktorym kazdy slice jest osobno
zserializowanym JSON-em (podwojne kodowanie), plus "_persist" z wersja.
Tylko slice'y z whitelisty sa zapisywane i odtwarzane.
"""
import asyncio
import json
from dataclasses import dataclass
from typing import Callable

from pydantic import BaseModel, ValidationError

from cartstore.domain.actions import Action, PURGE, REHYDRATE
from cartstore.domain.errors import InvariantViolation
from cartstore.domain.schemas import CartState
from cartstore.repos.storage import StorageAdapter
from cartstore.store.cart_slice import check_invariants
from cartstore.utils.settings import PERSIST_KEY
from cartstore.utils.logging import get_logger

logger = get_logger(__name__)

PERSIST_META_KEY = "_persist"
DEFAULT_VERSION = -1  # migracje wylaczone


@dataclass(frozen=True)
class PersistConfig:
    storage: StorageAdapter
    key: str = PERSIST_KEY
    whitelist: tuple[str, ...] = ("cart",)
    version: int = DEFAULT_VERSION


def persist_reducer(root_reducer):
    """Dokleja obsluge persist/REHYDRATE (nadpisanie slice'ow z payloadu)."""

    def reducer(state, action: Action):
        if action.type == REHYDRATE and state is not None:
            if not action.payload:
                return state
            return state.model_copy(update=dict(action.payload))
        if action.type == PURGE:
            return state
        return root_reducer(state, action)

    return reducer


class CorruptedSnapshot(Exception):
    pass


class Persistor:
    def __init__(self, store, config: PersistConfig):
        self.store = store
        self.config = config

        self._rehydrated = False
        self._rehydrated_event = asyncio.Event()
        self._callbacks: list[Callable[[], None]] = []

        self._unsubscribe: Callable[[], None] | None = None
        self._paused = False
        self._last_slices: dict[str, object] = {}
        self._staged: dict[str, str] = {}
        self._dirty = False
        self._write_task: asyncio.Task | None = None

    # ---------------------------------------------------------------
    # gate
    # ---------------------------------------------------------------
    @property
    def rehydrated(self) -> bool:
        return self._rehydrated

    def on_rehydrated(self, fn: Callable[[], None]) -> None:
        if self._rehydrated:
            fn()
        else:
            self._callbacks.append(fn)

    async def wait_rehydrated(self) -> None:
        await self._rehydrated_event.wait()

    # ---------------------------------------------------------------
    # boot
    # ---------------------------------------------------------------
    async def rehydrate(self) -> None:
        if self._rehydrated:
            return

        restored = {}
        try:
            raw = await self.config.storage.get_item(self.config.key)
        except Exception:
            logger.exception(f"Reading persisted state {self.config.key} failed")
            raw = None

        if raw is not None:
            try:
                restored = self._decode(raw)
            except CorruptedSnapshot as e:
                logger.warning(f"Persisted state {self.config.key} is corrupted, starting fresh: {e}")
                restored = {}
                # nadpisz uszkodzony blob przy najblizszym zapisie
                self._dirty = True

        if restored:
            logger.info(f"Rehydrating slices: {sorted(restored)}")
        self.store.dispatch(Action(REHYDRATE, payload=restored, meta={"key": self.config.key}))

        state = self.store.get_state()
        for name in self.config.whitelist:
            slice_state = getattr(state, name)
            self._last_slices[name] = slice_state
            self._stage(name, slice_state)
            # zmiany sprzed rehydracji, ktorych nie ma w magazynie
            if slice_state != restored.get(name, type(slice_state)()):
                self._dirty = True

        self._unsubscribe = self.store.subscribe(self._on_change)
        self._mark_rehydrated()

        if self._dirty:
            self._schedule_write()

    def _decode(self, raw: str) -> dict[str, BaseModel]:
        try:
            envelope = json.loads(raw)
        except ValueError as e:
            raise CorruptedSnapshot(f"outer document: {e}") from e
        if not isinstance(envelope, dict):
            raise CorruptedSnapshot("outer document is not an object")

        state = self.store.get_state()
        restored = {}
        for name in self.config.whitelist:
            if name not in envelope:
                continue
            slice_type = type(getattr(state, name))
            try:
                restored[name] = slice_type.model_validate_json(envelope[name])
            except (ValidationError, TypeError, ValueError) as e:
                raise CorruptedSnapshot(f"slice {name}: {e}") from e

            if isinstance(restored[name], CartState):
                try:
                    check_invariants(restored[name])
                except InvariantViolation as e:
                    raise CorruptedSnapshot(f"slice {name}: {e}") from e
        return restored

    def _mark_rehydrated(self) -> None:
        self._rehydrated = True
        self._rehydrated_event.set()
        callbacks, self._callbacks = self._callbacks, []
        for fn in callbacks:
            try:
                fn()
            except Exception:
                logger.exception(f"on_rehydrated callback {fn!r} failed")

    # ---------------------------------------------------------------
    # snapshot
    # ---------------------------------------------------------------
    def _stage(self, name: str, slice_state: BaseModel) -> bool:
        try:
            self._staged[name] = slice_state.model_dump_json(by_alias=True)
            return True
        except Exception:
            logger.exception(f"Serializing slice {name} failed, keeping previous snapshot")
            return False

    def _envelope(self) -> str:
        document = dict(self._staged)
        document[PERSIST_META_KEY] = json.dumps(
            {"version": self.config.version, "rehydrated": True}
        )
        return json.dumps(document)

    def _on_change(self) -> None:
        if self._paused:
            return

        state = self.store.get_state()
        changed = False
        for name in self.config.whitelist:
            slice_state = getattr(state, name)
            if slice_state is self._last_slices.get(name):
                continue
            self._last_slices[name] = slice_state
            changed = self._stage(name, slice_state) or changed

        if changed:
            self._dirty = True
            self._schedule_write()

    def _schedule_write(self) -> None:
        if self._write_task is not None and not self._write_task.done():
            # petla zapisu i tak wezmie najnowszy stan
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running loop, snapshot deferred until flush()")
            return
        self._write_task = loop.create_task(self._write_loop())

    async def _write_loop(self) -> None:
        while self._dirty:
            self._dirty = False
            blob = self._envelope()
            try:
                await self.config.storage.set_item(self.config.key, blob)
            except Exception:
                logger.exception(f"Writing persisted state {self.config.key} failed")

    async def flush(self) -> None:
        """Czeka az ostatni stan trafi do magazynu."""
        if self._write_task is not None and not self._write_task.done():
            await self._write_task
        if self._dirty:
            await self._write_loop()

    async def purge(self) -> None:
        """Usuwa zapisany stan z magazynu (stan w pamieci zostaje)."""
        self._dirty = False
        if self._write_task is not None and not self._write_task.done():
            await self._write_task
        try:
            await self.config.storage.remove_item(self.config.key)
        except Exception:
            logger.exception(f"Purging persisted state {self.config.key} failed")
        self.store.dispatch(Action(PURGE, meta={"key": self.config.key}))

    def pause(self) -> None:
        self._paused = True

    def persist(self) -> None:
        """Wznawia zapisywanie po pause(); od razu lapie zmiany z przerwy."""
        self._paused = False
        if self._rehydrated:
            self._on_change()

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
