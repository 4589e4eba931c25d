"""Textual integration for storescope. Opt-in, requires textual.

Store listeners fire synchronously wherever the mutation happened. Widgets
must only be touched from the app thread and only while the DOM is
queryable, so subscribe() guards the effect, marshals it through
app.call_from_thread and drops NoMatches raised by widget queries.
"""

import threading
from contextlib import contextmanager

from textual.css.query import NoMatches

from storescope.subscriber import _UNSET, Subscription

# Module-owned pause state, keyed by id(app) so multiple apps work in tests.
_paused_apps: set[int] = set()


@contextmanager
def pause(app):
    """Suspend guarded effects during widget replacement."""
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)


def is_safe(app) -> bool:
    """Is the widget tree in a queryable state?"""
    return app.is_running and id(app) not in _paused_apps


def guard(app, effect_fn):
    """Wrap a one-argument effect so it is safe to call from any store listener.

    The wrapped effect does nothing while the app is paused or not running,
    runs on the app thread via call_from_thread when triggered elsewhere,
    and drops NoMatches from widget queries. Other exceptions propagate.
    """
    main_thread = threading.get_ident()

    def _run(value):
        try:
            effect_fn(value)
        except NoMatches:
            pass

    def _guarded(value):
        if not is_safe(app):
            return
        if threading.get_ident() != main_thread:
            app.call_from_thread(_run, value)
        else:
            _run(value)

    return _guarded


def subscribe(app, api, store_type, effect_fn, *, selector=None, scope=_UNSET, props=None):
    """Subscription whose effect is wrapped with guard().

    The selected value is still tracked while the app is paused or not
    running; only the widget-facing effect is skipped.
    """
    return Subscription(api, store_type, guard(app, effect_fn), selector=selector, scope=scope, props=props)
