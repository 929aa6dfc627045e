"""
Navigation controller - backstack state machine driving which screen is shown.

The backstack is never empty and the current destination is always its last
entry. Both change together under one lock, so hosts that run UI callbacks on
several threads still observe a consistent state.
"""

import inspect
import threading
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Tuple, Union

from services.navigation_service.destinations import HOME, LOGIN, Destination
from utils.logging_config import get_logger, log_navigation_event


@dataclass(frozen=True)
class NavigationState:
    """Snapshot handed to subscribers after every transition"""
    backstack: Tuple[Destination, ...]
    current_destination: Destination


NavigationListener = Callable[[NavigationState], None]
SessionCheck = Callable[[], Union[bool, Awaitable[bool]]]


class NavigationController:
    """
    Ordered backstack with push/pop/reset transitions.

    Args:
        root: Initial (unauthenticated) root destination
        authenticated_root: Root selected by start() when the session check passes
    """

    def __init__(self, root: Destination = LOGIN, authenticated_root: Destination = HOME):
        self.logger = get_logger(__name__)
        self.authenticated_root = authenticated_root
        self._lock = threading.RLock()
        self._backstack: Tuple[Destination, ...] = (root,)
        self._listeners: List[NavigationListener] = []
        self._started = False
        self._disposed = False

    @property
    def backstack(self) -> Tuple[Destination, ...]:
        with self._lock:
            return self._backstack

    @property
    def current_destination(self) -> Destination:
        with self._lock:
            return self._backstack[-1]

    @property
    def depth(self) -> int:
        with self._lock:
            return len(self._backstack)

    @property
    def can_navigate_back(self) -> bool:
        with self._lock:
            return len(self._backstack) > 1

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def navigate_to(self, destination: Destination) -> None:
        """Push a destination; revisiting the same one adds another entry"""
        with self._lock:
            self._backstack = self._backstack + (destination,)
            state = self._snapshot("navigate_to")
        self._notify(state)

    def navigate_back(self) -> bool:
        """
        Pop the top entry

        Returns:
            False when already at the root (nothing changes), True otherwise
        """
        with self._lock:
            if len(self._backstack) <= 1:
                return False
            self._backstack = self._backstack[:-1]
            state = self._snapshot("navigate_back")
        self._notify(state)
        return True

    def navigate_to_root(self, destination: Destination) -> None:
        """Replace the whole history with a single entry"""
        with self._lock:
            self._backstack = (destination,)
            state = self._snapshot("navigate_to_root")
        self._notify(state)

    async def start(self, session_check: SessionCheck) -> Destination:
        """
        Pick the start destination once

        Awaits the session check and, when it reports a valid session, resets
        to the authenticated root. Later calls do nothing. If dispose() ran
        while the check was pending, the result is dropped.

        Returns:
            The current destination after the check
        """
        with self._lock:
            if self._started:
                return self._backstack[-1]
            self._started = True

        result = session_check()
        if inspect.isawaitable(result):
            result = await result

        if self._disposed:
            self.logger.debug("Navigation controller disposed before the session check finished")
            return self.current_destination

        if result:
            self.logger.info(f"Existing session found, starting at {self.authenticated_root}")
            self.navigate_to_root(self.authenticated_root)

        return self.current_destination

    def dispose(self) -> None:
        """Detach listeners and ignore any pending startup result"""
        with self._lock:
            self._disposed = True
            self._listeners.clear()

    def subscribe(self, listener: NavigationListener) -> None:
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def unsubscribe(self, listener: NavigationListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def breadcrumbs(self) -> str:
        """Breadcrumb path like "Feed > Profile > Settings" """
        return " > ".join(destination.title for destination in self.backstack)

    def _snapshot(self, action: str) -> NavigationState:
        state = NavigationState(self._backstack, self._backstack[-1])
        log_navigation_event(self.logger, action, str(state.current_destination), len(state.backstack))
        return state

    def _notify(self, state: NavigationState) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(state)
            except Exception as e:
                self.logger.error(f"Navigation listener failed: {e}", exc_info=True)
