# cartstore/store/thunk.py
"""
Thunki i orkiestrator zapytan asynchronicznych.

thunk_middleware rozpoznaje akcje-funkcje i wywoluje je z ThunkAPI.
create_async_thunk zamienia jedna korutyne w sekwencje akcji
<prefix>/pending -> <prefix>/fulfilled | <prefix>/rejected.

Polityka jednego zapytania w locie: SERIALIZACJA. Drugi dispatch tego samego
prefiksu na tym samym store czeka, az poprzedni sie zakonczy; jego pending
idzie dopiero po akcji koncowej poprzedniego. Anulowanie nie jest wspierane.
"""
import asyncio
import uuid
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from cartstore.domain.actions import Action
from cartstore.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ThunkAPI:
    dispatch: Callable[[Any], Any]
    get_state: Callable[[], Any]
    extra: Any = None
    in_flight: dict[str, asyncio.Task] = field(default_factory=dict)


def thunk_middleware(extra: Any = None):
    def middleware(api):
        # jeden ThunkAPI (i jeden rejestr zapytan w locie) na store
        thunk_api = ThunkAPI(dispatch=api.dispatch, get_state=api.get_state, extra=extra)

        def wrap(next_dispatch):
            def dispatch(action):
                if callable(action) and not isinstance(action, Action):
                    return action(thunk_api)
                return next_dispatch(action)

            return dispatch

        return wrap

    return middleware


PayloadCreator = Callable[[Any, ThunkAPI], Awaitable[Any]]


class AsyncThunk:
    def __init__(self, type_prefix: str, payload_creator: PayloadCreator):
        self.type_prefix = type_prefix
        self.payload_creator = payload_creator
        self.pending = f"{type_prefix}/pending"
        self.fulfilled = f"{type_prefix}/fulfilled"
        self.rejected = f"{type_prefix}/rejected"

    def __call__(self, arg: Any = None):
        def thunk(api: ThunkAPI) -> asyncio.Task:
            loop = asyncio.get_running_loop()
            request_id = str(uuid.uuid4())
            previous = api.in_flight.get(self.type_prefix)

            if previous is None or previous.done():
                api.dispatch(self._pending(request_id, arg))
                task = loop.create_task(self._settle(api, arg, request_id))
            else:
                logger.info(f"{self.type_prefix} already in flight, request {request_id} queued")
                task = loop.create_task(self._run_after(previous, api, arg, request_id))

            api.in_flight[self.type_prefix] = task
            task.add_done_callback(lambda t: self._forget(api, t))
            return task

        return thunk

    def _meta(self, request_id: str, arg: Any, status: str) -> dict:
        return {"request_id": request_id, "request_status": status, "arg": arg}

    def _pending(self, request_id: str, arg: Any) -> Action:
        return Action(self.pending, meta=self._meta(request_id, arg, "pending"))

    async def _run_after(self, previous: asyncio.Task, api: ThunkAPI, arg: Any, request_id: str) -> Action:
        # poprzedni task nie rzuca, konczy sie akcja fulfilled/rejected
        await asyncio.wait([previous])
        api.dispatch(self._pending(request_id, arg))
        return await self._settle(api, arg, request_id)

    async def _settle(self, api: ThunkAPI, arg: Any, request_id: str) -> Action:
        try:
            payload = await self.payload_creator(arg, api)
        except Exception as e:
            logger.warning(f"{self.type_prefix} rejected ({request_id}): {e!r}")
            action = Action(
                self.rejected,
                error=e,
                meta=self._meta(request_id, arg, "rejected"),
            )
        else:
            action = Action(
                self.fulfilled,
                payload=payload,
                meta=self._meta(request_id, arg, "fulfilled"),
            )

        api.dispatch(action)
        return action

    def _forget(self, api: ThunkAPI, task: asyncio.Task) -> None:
        if api.in_flight.get(self.type_prefix) is task:
            del api.in_flight[self.type_prefix]


def create_async_thunk(type_prefix: str, payload_creator: PayloadCreator) -> AsyncThunk:
    return AsyncThunk(type_prefix, payload_creator)


def unwrap_result(action: Action) -> Any:
    """Payload dla fulfilled, rzuca dolaczony blad dla rejected."""
    if action.error is not None:
        raise action.error
    return action.payload
