# /clinicsync/utils/broadcaster.py
import logging
import threading

from flask import current_app

logger = logging.getLogger(__name__)

EXTENSION_KEY = 'mutation_broadcaster'


class ObserverRegistry:
    """
    Fans record mutations out to every Socket.IO observer of one app.

    The set of live sessions is written only by the connect and disconnect
    handlers. Broadcasts iterate over a snapshot of it and go through a
    single dispatch lock, so all observers see events in the order they were
    broadcast. Delivery is fire-and-forget: observers that are not connected
    when an event is broadcast never receive it.
    """
    def __init__(self, server, namespace='/'):
        self.server = server
        self.namespace = namespace
        self._observers = set()
        self._registry_lock = threading.Lock()
        self._dispatch_lock = threading.Lock()

    def register(self, sid):
        with self._registry_lock:
            self._observers.add(sid)
            live = len(self._observers)
        logger.info(f"Observer {sid} connected ({live} live)")

    def unregister(self, sid):
        with self._registry_lock:
            self._observers.discard(sid)
            live = len(self._observers)
        logger.info(f"Observer {sid} disconnected ({live} live)")

    def observers(self) -> frozenset:
        with self._registry_lock:
            return frozenset(self._observers)

    def broadcast(self, event: str, payload=None) -> int:
        """Emits ``event`` to every live observer and returns how many were reached."""
        delivered = 0
        with self._dispatch_lock:
            for sid in self.observers():
                try:
                    if payload is None:
                        self.server.emit(event, to=sid, namespace=self.namespace)
                    else:
                        self.server.emit(event, payload, to=sid, namespace=self.namespace)
                    delivered += 1
                except Exception as e:
                    # best effort per observer
                    logger.error(f"Failed to deliver '{event}' to observer {sid}: {e}")
        logger.info(f"Broadcast '{event}' to {delivered} observer(s)")
        return delivered


class MutationBroadcaster:
    """
    Extension front for the per-app :class:`ObserverRegistry`.

    Each app gets its own registry bound to the Socket.IO server created for
    it, so building another app in the same process leaves existing
    observers untouched.
    """
    def __init__(self, app=None, socketio=None):
        if app is not None:
            self.init_app(app, socketio)

    def init_app(self, app, socketio):
        app.extensions[EXTENSION_KEY] = ObserverRegistry(socketio.server)

    @staticmethod
    def registry(app=None) -> ObserverRegistry:
        app = app or current_app
        if EXTENSION_KEY not in app.extensions:
            raise RuntimeError("MutationBroadcaster has not been initialized with this app.")
        return app.extensions[EXTENSION_KEY]

    def register(self, sid):
        self.registry().register(sid)

    def unregister(self, sid):
        self.registry().unregister(sid)

    def observers(self) -> frozenset:
        return self.registry().observers()

    def broadcast(self, event: str, payload=None) -> int:
        return self.registry().broadcast(event, payload)


broadcaster = MutationBroadcaster()
