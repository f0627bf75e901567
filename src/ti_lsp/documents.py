"""Latest full text of every open document."""

from __future__ import annotations

import threading


class DocumentStore:
    """URI -> text mapping shared by all handlers.

    Writers replace the whole text (full document sync). Readers get the text
    as it was when they asked; an oracle call started from that snapshot
    may finish after newer edits have arrived.

    Thread-safe via threading.Lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._texts: dict[str, str] = {}

    def open(self, uri: str, text: str) -> None:
        with self._lock:
            self._texts[uri] = text

    def update(self, uri: str, text: str) -> None:
        with self._lock:
            self._texts[uri] = text

    def get(self, uri: str) -> str | None:
        with self._lock:
            return self._texts.get(uri)

    def __contains__(self, uri: object) -> bool:
        with self._lock:
            return uri in self._texts

    def __len__(self) -> int:
        with self._lock:
            return len(self._texts)
