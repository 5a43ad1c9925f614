"""
Debounced preview refresh.

Every edit requests a refresh; requests arriving within the debounce window
collapse into one render. The render always reads the state as it is when
the timer fires (or when flush() is called), never a state captured at
request time, so the last edit is never lost.

Renders are serialized. A timer render that is overtaken by a newer request
or by flush() is discarded instead of published, so the preview never ends
on an older state than the latest one rendered.
"""

import logging
import threading
from typing import Callable

from core.config import InvoicingConfig
from core.document_builder import build_document
from core.rendering.html import render_html

logger = logging.getLogger(__name__)


class PreviewRefresher:
    """
    Coalesces refresh requests for one editing session.

    Usage:
        refresher = PreviewRefresher(lambda: state, on_render=push_to_client)
        refresher.request()   # after each edit
        html = refresher.flush()  # render now, cancelling any pending timer
    """

    def __init__(
        self,
        get_state: Callable,
        on_render: Callable[[str], None] | None = None,
        debounce_ms: int = 100,
    ):
        self._get_state = get_state
        self._on_render = on_render
        self._delay = debounce_ms / 1000
        self._lock = threading.Lock()
        self._render_lock = threading.RLock()
        self._timer: threading.Timer | None = None
        self._generation = 0
        self.render_count = 0
        self.last_html: str | None = None

    @classmethod
    def from_config(
        cls,
        get_state: Callable,
        config: InvoicingConfig,
        on_render: Callable[[str], None] | None = None,
    ) -> "PreviewRefresher":
        return cls(get_state, on_render=on_render, debounce_ms=config.preview_debounce_ms)

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def request(self) -> None:
        """Schedule a render, restarting the window if one is pending."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            self._timer = threading.Timer(self._delay, self._fire, args=(self._generation,))
            self._timer.daemon = True
            self._timer.start()

    def flush(self) -> str:
        """Cancel any pending timer and render the latest state now."""
        self.cancel()
        with self._render_lock:
            html = self._render_state()
            self._publish(html)
            return html

    def cancel(self) -> None:
        with self._lock:
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    def _fire(self, generation: int) -> None:
        with self._render_lock:
            with self._lock:
                if generation != self._generation:
                    return
                self._timer = None
            try:
                html = self._render_state()
            except Exception:
                logger.exception("Preview refresh failed")
                return
            if not self._current(generation):
                logger.debug("Dropping superseded preview render")
                return
            self._publish(html)

    def _render_state(self) -> str:
        return render_html(build_document(self._get_state()))

    def _publish(self, html: str) -> None:
        with self._lock:
            self.render_count += 1
            self.last_html = html
        if self._on_render is not None:
            self._on_render(html)
