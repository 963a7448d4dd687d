"""Threaded producer/consumer hand-off between the lexer and the parser."""

from __future__ import annotations

import queue
import threading

from .helper import logger

_DONE = object()


class CancelToken(threading.Event):
    """
    Cooperative cancellation signal shared by the lexer and the parser.
    """

    def cancel(self):
        self.set()

    @property
    def cancelled(self) -> bool:
        return self.is_set()


class TokenPipe:
    """
    Runs a Lexer in a daemon thread and hands its tokens over through a
    bounded queue.

    Iterating the pipe pulls tokens in document order. The producer blocks
    while the queue is full; leaving the context (or calling close) stops and
    drains it, so an abandoned producer never stays blocked.

    Exceptions raised by the producer are re-raised in the consumer.
    """

    poll_interval = 0.05

    def __init__(self, lexer, maxsize=64):
        self.lexer = lexer
        self._queue = queue.Queue(maxsize)
        self._stop = threading.Event()
        self._thread = None

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, *exc_info):
        self.close()

    def start(self):
        self._thread = threading.Thread(target=self._produce, daemon=True, name="icsx-lexer")
        self._thread.start()

    def _produce(self):
        try:
            for token in self.lexer.tokens():
                if not self._put(token):
                    logger.debug("token producer stopped before end of stream")
                    return
        except Exception as e:  # handed to the consumer thread
            self._put(e)
        finally:
            self._put(_DONE)

    def _put(self, item) -> bool:
        while not self._stop.is_set():
            try:
                self._queue.put(item, timeout=self.poll_interval)
                return True
            except queue.Full:
                continue
        return False

    def __iter__(self):
        while True:
            try:
                item = self._queue.get(timeout=self.poll_interval)
            except queue.Empty:
                if self._stop.is_set():
                    return
                continue
            if item is _DONE:
                return
            if isinstance(item, Exception):
                raise item
            yield item

    def close(self):
        self._stop.set()
        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                break
        if self._thread is not None:
            self._thread.join(timeout=1)
