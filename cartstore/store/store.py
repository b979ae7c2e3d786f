# cartstore/store/store.py
from collections import deque
from dataclasses import dataclass
from functools import reduce
from typing import Any, Callable, Iterable

from pydantic import BaseModel

from cartstore.domain.actions import Action, INIT
from cartstore.domain.errors import ConcurrentDispatchError
from cartstore.utils.logging import get_logger

logger = get_logger(__name__)

Reducer = Callable[[Any, Action], Any]
Listener = Callable[[], None]


@dataclass(frozen=True)
class MiddlewareAPI:
    dispatch: Callable[[Any], Any]
    get_state: Callable[[], Any]


Middleware = Callable[[MiddlewareAPI], Callable[[Callable], Callable]]


def combine_reducers(reducers: dict[str, Reducer], state_type: type[BaseModel]) -> Reducer:
    """
    Sklada reducery slice'ow w jeden reducer stanu glownego.
    Jesli zaden slice sie nie zmienil (po referencji), zwraca ten sam obiekt stanu.
    """

    def root_reducer(state, action: Action):
        if state is None:
            return state_type(**{name: r(None, action) for name, r in reducers.items()})

        changed = {}
        for name, r in reducers.items():
            previous = getattr(state, name)
            nxt = r(previous, action)
            if nxt is not previous:
                changed[name] = nxt

        if not changed:
            return state
        return state.model_copy(update=changed)

    return root_reducer


class Store:
    """
    Kontener stanu: dispatch / get_state / subscribe.

    - dispatch z wnetrza reducera -> ConcurrentDispatchError
    - dispatch z subskrybenta jest kolejkowany i wykonany po biezacym
    - subskrybenci wolani w kolejnosci rejestracji, tylko gdy stan sie zmienil
    """

    def __init__(
        self,
        reducer: Reducer,
        preloaded_state: Any = None,
        middleware: Iterable[Middleware] = (),
    ):
        self._reducer = reducer
        self._state = preloaded_state
        self._listeners: list[Listener] = []
        self._reducing = False
        self._notifying = False
        self._queue: deque[Action] = deque()

        self._state = self._reducer(self._state, Action(INIT))

        api = MiddlewareAPI(
            dispatch=lambda action: self.dispatch(action),
            get_state=self.get_state,
        )
        chain = [m(api) for m in middleware]
        # pierwszy middleware na liscie widzi akcje jako pierwszy
        self._dispatch = reduce(lambda nxt, wrap: wrap(nxt), reversed(chain), self._base_dispatch)

    def get_state(self):
        return self._state

    def dispatch(self, action):
        return self._dispatch(action)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)
        subscribed = True

        def unsubscribe():
            nonlocal subscribed
            if not subscribed:
                return
            subscribed = False
            self._listeners.remove(listener)

        return unsubscribe

    def _base_dispatch(self, action: Action) -> Action:
        if not isinstance(action, Action):
            raise TypeError(f"Actions must be Action instances, got {type(action).__name__}")

        if self._reducing:
            raise ConcurrentDispatchError(action.type)

        if self._notifying:
            self._queue.append(action)
            return action

        self._apply(action)
        while self._queue:
            self._apply(self._queue.popleft())
        return action

    def _apply(self, action: Action) -> None:
        previous = self._state

        self._reducing = True
        try:
            self._state = self._reducer(previous, action)
        except ConcurrentDispatchError:
            raise
        except Exception:
            logger.exception(f"Reducer failed for action {action.type}, state kept")
            self._state = previous
        finally:
            self._reducing = False

        if self._state is previous:
            return

        self._notifying = True
        try:
            for listener in list(self._listeners):
                try:
                    listener()
                except Exception:
                    logger.exception(f"Subscriber {listener!r} failed after {action.type}")
        finally:
            self._notifying = False
