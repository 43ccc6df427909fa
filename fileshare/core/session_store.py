"""
Session store.

Observable container for the current authenticated identity of a UI
runtime. It resolves the initial session once, then follows session-change
events pushed by its source. State transitions go through the pure
`reduce_session` reducer so they can be replayed without any transport.

Dependencies: asyncio (stdlib)
System role: Client-side session state with explicit subscription lifecycle
"""

import asyncio
import enum
import logging
from contextlib import suppress
from dataclasses import dataclass
from typing import AsyncIterator, Callable, Protocol

logger = logging.getLogger(__name__)


class SessionStatus(str, enum.Enum):
    """
    Session lifecycle states.

    LOADING: Initial lookup outstanding, identity must not be acted on
    ABSENT: No authenticated identity
    PRESENT: Authenticated identity available
    """

    LOADING = "loading"
    ABSENT = "absent"
    PRESENT = "present"


@dataclass(frozen=True)
class Identity:
    """Opaque reference to an authenticated user."""

    user_id: str
    email: str | None = None


@dataclass(frozen=True)
class SessionState:
    """Snapshot of the session store."""

    status: SessionStatus
    identity: Identity | None = None

    @classmethod
    def loading(cls) -> "SessionState":
        return cls(SessionStatus.LOADING)

    @classmethod
    def absent(cls) -> "SessionState":
        return cls(SessionStatus.ABSENT)

    @classmethod
    def present(cls, identity: Identity) -> "SessionState":
        return cls(SessionStatus.PRESENT, identity)

    @classmethod
    def resolved(cls, identity: Identity | None) -> "SessionState":
        """State after a lookup returned `identity` (None means logged out)."""
        return cls.present(identity) if identity is not None else cls.absent()

    @property
    def is_loading(self) -> bool:
        return self.status is SessionStatus.LOADING

    @property
    def is_authenticated(self) -> bool:
        return self.status is SessionStatus.PRESENT


class SessionEventType(str, enum.Enum):
    """Kinds of session-change notifications."""

    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"


@dataclass(frozen=True)
class SessionChangeEvent:
    """A pushed session change and the identity it carries (None when signed out)."""

    type: SessionEventType
    identity: Identity | None = None


def reduce_session(state: SessionState, event: SessionChangeEvent) -> SessionState:
    """
    Compute the next state for an event.

    Never returns LOADING: once resolved, the store only moves between
    ABSENT and PRESENT.

    Args:
        state: Current state
        event: Incoming session change

    Returns:
        SessionState: Next state (the same instance when nothing changed)
    """
    if event.type is SessionEventType.SIGNED_OUT or event.identity is None:
        next_state = SessionState.absent()
    else:
        next_state = SessionState.present(event.identity)
    return state if next_state == state else next_state


class SessionSubscription:
    """
    Async iterator over events published after it was opened.

    Events are queued from the moment of subscription, so a consumer that
    starts iterating later does not miss anything.
    """

    def __init__(self, hub: "SessionEventHub") -> None:
        self._hub = hub
        self._queue: asyncio.Queue[SessionChangeEvent | None] = asyncio.Queue()
        self._closed = False

    def __aiter__(self) -> "SessionSubscription":
        return self

    async def __anext__(self) -> SessionChangeEvent:
        if self._closed and self._queue.empty():
            raise StopAsyncIteration
        event = await self._queue.get()
        if event is None:
            raise StopAsyncIteration
        return event

    def push(self, event: SessionChangeEvent) -> None:
        if not self._closed:
            self._queue.put_nowait(event)

    def close(self) -> None:
        """Unsubscribe; pending iteration ends after queued events drain."""
        if self._closed:
            return
        self._closed = True
        self._hub.discard(self)
        self._queue.put_nowait(None)

    async def aclose(self) -> None:
        self.close()


class SessionEventHub:
    """Fan-out of session-change events to every open subscription."""

    def __init__(self) -> None:
        self._subscriptions: list[SessionSubscription] = []

    def subscribe(self) -> SessionSubscription:
        subscription = SessionSubscription(self)
        self._subscriptions.append(subscription)
        return subscription

    def discard(self, subscription: SessionSubscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    def publish(self, event: SessionChangeEvent) -> None:
        for subscription in list(self._subscriptions):
            subscription.push(event)

    def close_all(self) -> None:
        """Close every open subscription."""
        for subscription in list(self._subscriptions):
            subscription.close()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)


class SessionSource(Protocol):
    """Anything that can look up the current session and push changes."""

    async def get_session(self) -> Identity | None: ...

    def session_events(self) -> AsyncIterator[SessionChangeEvent]: ...


SessionListener = Callable[[SessionState], None]


class SessionStore:
    """
    Observable session state scoped to one UI runtime.

    Lifecycle: `start()` opens the event subscription, resolves the initial
    session and then follows events in a background task; `close()` tears
    everything down. Also usable as an async context manager.

    Attributes:
        state: Current SessionState (LOADING until the initial lookup ends)
    """

    def __init__(self, source: SessionSource) -> None:
        """
        Initialize store bound to a session source.

        Args:
            source: Provider of the initial session and change events
        """
        self._source = source
        self._state = SessionState.loading()
        self._listeners: list[SessionListener] = []
        self._events: AsyncIterator[SessionChangeEvent] | None = None
        self._task: asyncio.Task | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def identity(self) -> Identity | None:
        return self._state.identity

    @property
    def loading(self) -> bool:
        return self._state.is_loading

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Register a listener called with the new state after every change.

        Args:
            listener: Callable receiving the new SessionState

        Returns:
            Callable[[], None]: Unsubscribe function (safe to call twice)
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def start(self) -> None:
        """
        Resolve the initial session and begin following change events.

        A failing lookup resolves to ABSENT; the error is logged only.
        """
        if self._events is not None:
            return

        self._events = self._source.session_events()

        try:
            identity = await self._source.get_session()
        except Exception as e:
            logger.exception(
                "Error getting session",
                extra={"error_type": type(e).__name__, "error_msg": str(e)},
            )
            identity = None

        self._set_state(SessionState.resolved(identity))
        self._task = asyncio.create_task(self._follow(self._events))

    def apply(self, event: SessionChangeEvent) -> SessionState:
        """
        Apply one session-change event.

        Args:
            event: Incoming session change

        Returns:
            SessionState: The state after the event
        """
        self._set_state(reduce_session(self._state, event))
        return self._state

    async def close(self) -> None:
        """Cancel event following, close the subscription, drop listeners."""
        if self._task is not None:
            self._task.cancel()
            with suppress(asyncio.CancelledError):
                await self._task
            self._task = None

        if self._events is not None:
            aclose = getattr(self._events, "aclose", None)
            if aclose is not None:
                await aclose()
            self._events = None

        self._listeners.clear()

    async def __aenter__(self) -> "SessionStore":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _follow(self, events: AsyncIterator[SessionChangeEvent]) -> None:
        async for event in events:
            logger.debug("Session change received", extra={"event_type": event.type.value})
            self.apply(event)

    def _set_state(self, state: SessionState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Session listener failed")
