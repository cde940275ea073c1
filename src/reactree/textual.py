"""Textual integration for reactree. Opt-in, requires textual.

Bridges operation handlers to Textual widgets: a guarded handler skips while
its app is paused or not running, marshals calls made from other threads
through ``app.call_from_thread``, and ignores ``NoMatches`` raised while a
widget tree is being rebuilt.

Pause state lives in this module, keyed by ``id(app)``, never on the app.
"""

import threading

from textual.css.query import NoMatches

from reactree._tracking import subscribe as _subscribe
from reactree.boundary import Boundary, create_boundary_function

# Module-owned pause state, keyed by id(app).
_paused_apps: set[int] = set()


def pause(app) -> Boundary:
    """Boundary suspending guarded handlers during widget replacement.

    Usage:
        with rtx.pause(app):
            rebuild_widgets()

        on_resize = rtx.pause(app).bound(rebuild_widgets)
    """
    key = id(app)
    return create_boundary_function(
        lambda: _paused_apps.add(key),
        lambda: _paused_apps.discard(key),
    )


def is_safe(app) -> bool:
    """Is the widget tree in a queryable state?"""
    return app.is_running and id(app) not in _paused_apps


def subscribe(app, handler):
    """subscribe() that safely bridges to Textual widgets.

    Returns a function that removes the handler.
    """
    _main = threading.get_ident()

    def _guarded(operation):
        if not is_safe(app):
            return
        if threading.get_ident() != _main:
            app.call_from_thread(_safe, operation)
        else:
            _safe(operation)

    def _safe(operation):
        try:
            handler(operation)
        except NoMatches:
            pass

    return _subscribe(_guarded)
