from __future__ import annotations

from collections import deque
from typing import Any, Callable, Deque, Dict, List, Optional

Action = Dict[str, Any]
Reducer = Callable[[Optional[dict], Action], dict]
Listener = Callable[[Dict[str, Any]], None]


class Store:
    """Minimal state container: each top-level key is owned by one reducer.

    The last ``history_size`` dispatched actions are kept in ``history``; the
    default of 0 keeps none.
    """

    def __init__(
        self,
        reducers: Dict[str, Reducer],
        initial_state: Optional[dict] = None,
        history_size: int = 0,
    ):
        self._reducers = dict(reducers)
        self._state: Dict[str, Any] = dict(initial_state or {})
        self._listeners: List[Listener] = []
        self.history: Deque[Action] = deque(maxlen=history_size)
        for key, reducer in self._reducers.items():
            self._state[key] = reducer(self._state.get(key), {"type": "@@INIT"})

    def get_state(self) -> Dict[str, Any]:
        return self._state

    def dispatch(self, action: Action) -> Action:
        self.history.append(action)
        next_state = dict(self._state)
        for key, reducer in self._reducers.items():
            next_state[key] = reducer(self._state.get(key), action)
        self._state = next_state
        for listener in list(self._listeners):
            listener(self._state)
        return action

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe


def token_from_state(store: Store) -> Callable[[], Optional[str]]:
    """Credential provider reading ``userLogin.userInfo.token`` from the store."""

    def provider() -> Optional[str]:
        user_info = (store.get_state().get("userLogin") or {}).get("userInfo") or {}
        return user_info.get("token")

    return provider
