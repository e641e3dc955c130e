"""
Progressive word-by-word reveal of an answer.

Owned by the display layer; the resolver never knows about it.
"""

import threading
from typing import Iterator


class ProgressiveReveal:
    """Cancelable timed iteration over growing prefixes of a text.

    Cancelling stops the iteration at the next word boundary; the caller
    is expected to render the full text itself afterwards.
    """

    def __init__(self, text: str, word_delay: float = 0.2):
        if word_delay < 0:
            raise ValueError("word_delay must be >= 0")
        self.text = text
        self.word_delay = word_delay
        self._cancelled = threading.Event()
        self._done = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def done(self) -> bool:
        """True once every word has been yielded."""
        return self._done

    def cancel(self) -> None:
        self._cancelled.set()

    def frames(self) -> Iterator[str]:
        """Yield the text one more word at a time, waiting between words."""
        words = self.text.split(" ")
        for index in range(len(words)):
            if self._cancelled.is_set():
                return
            if index > 0 and self._cancelled.wait(self.word_delay):
                return
            yield " ".join(words[:index + 1])
        self._done = True
