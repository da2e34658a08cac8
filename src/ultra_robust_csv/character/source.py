"""Character sources feeding the CSV row tokenizer.

The tokenizer consumes exactly one capability: "give me the next character, or
tell me there are none left". Each class here implements that capability over a
different kind of backing object. The right implementation is chosen once, when
a source is attached, by :func:`attach_source`, so the tokenizer's inner loop
never inspects what it is reading from.
"""

import codecs
import io
from abc import ABC, abstractmethod
from typing import Any, Iterable, Iterator, Optional, Union

from ultra_robust_csv.shared.config import StreamingConfig
from ultra_robust_csv.shared.logging import get_logger

from .encoding import BOM_SNIFF_SIZE, EncodingResult, select_encoding

BYTE_ORDER_MARK = "\ufeff"

logger = get_logger(__name__, component="character_source")


class CharacterSource(ABC):
    """Pull interface producing one character per call.

    ``read_char`` returns a one-character string, or ``""`` once the source is
    exhausted. Exhaustion is permanent. Sources are also iterators over their
    characters.
    """

    @abstractmethod
    def read_char(self) -> str:
        """Return the next character, or an empty string at end of data."""

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        ch = self.read_char()
        if not ch:
            raise StopIteration
        return ch


class EmptySource(CharacterSource):
    """Source that is already exhausted."""

    def read_char(self) -> str:
        return ""


class StringSource(CharacterSource):
    """Source walking over an in-memory string."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.index = 0

    def read_char(self) -> str:
        if self.index < len(self.text):
            ch = self.text[self.index]
            self.index += 1
            return ch
        return ""


class IterableSource(CharacterSource):
    """Source over any iterable of strings.

    Items may be single characters or longer chunks; chunks are flattened and
    empty chunks are skipped. Items that are not strings are converted with
    ``str()``. Exceptions raised by the iterator propagate to the caller.
    """

    def __init__(self, iterable: Iterable[Any]) -> None:
        self._iterator: Optional[Iterator[Any]] = iter(iterable)
        self._chunk = ""
        self._index = 0

    def read_char(self) -> str:
        while self._index >= len(self._chunk):
            if self._iterator is None:
                return ""
            try:
                item = next(self._iterator)
            except StopIteration:
                self._iterator = None
                self._chunk = ""
                return ""
            self._chunk = item if isinstance(item, str) else str(item)
            self._index = 0
        ch = self._chunk[self._index]
        self._index += 1
        return ch


class StreamSource(CharacterSource):
    """Buffered source over a file-like object with a ``read(size)`` method.

    The wrapped object is only read from when the internal buffer has been
    fully consumed, one ``buffer_size`` request at a time. Text chunks are used
    as they are; byte chunks are decoded incrementally, so multi-byte
    sequences split across reads are handled. Without a configured encoding
    the leading bytes are checked for a byte order mark, falling back to
    UTF-8. A missing stream, or a read returning nothing, is end of data.

    If the wrapped object exposes ``pause()`` and ``resume()``, it is paused
    while the buffer holds unread data and resumed when the buffer runs dry.
    """

    def __init__(
        self,
        stream: Optional[Any],
        streaming: Optional[StreamingConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.stream = stream
        self.config = streaming or StreamingConfig()
        self.buffer = ""
        self.index = 0
        self.eof = stream is None
        self.encoding: Optional[EncodingResult] = None
        self.paused = False
        self._decoder: Optional[codecs.IncrementalDecoder] = None
        self._head = b""
        self._first_text = True
        self._flow_control = (
            callable(getattr(stream, "pause", None))
            and callable(getattr(stream, "resume", None))
        )
        self._logger = get_logger(__name__, correlation_id, "stream_source")

    def read_char(self) -> str:
        if self.index < len(self.buffer):
            ch = self.buffer[self.index]
            self.index += 1
            return ch
        while not self.eof:
            self._fill()
            if self.buffer:
                self.index = 1
                return self.buffer[0]
        return ""

    def _fill(self) -> None:
        """Replace the exhausted buffer with the next chunk from the stream."""
        self._set_paused(False)
        data = self.stream.read(self.config.buffer_size)
        if not data:
            self.eof = True
            self.buffer = self._finish()
            self.index = 0
            self._logger.debug(
                "Stream exhausted",
                extra={"encoding": self.encoding.encoding if self.encoding else None},
            )
            return
        if isinstance(data, str):
            if self._first_text and data.startswith(BYTE_ORDER_MARK):
                data = data[1:]
            self._first_text = False
            self.buffer = data
        else:
            self.buffer = self._decode(bytes(data), final=False)
        self.index = 0
        if self.buffer:
            self._set_paused(True)

    def _decode(self, data: bytes, final: bool) -> str:
        if self._decoder is None:
            self._head += data
            if len(self._head) < BOM_SNIFF_SIZE and not final:
                return ""
            self.encoding = select_encoding(self._head, self.config.encoding)
            for issue in self.encoding.issues:
                self._logger.debug(issue)
            self._decoder = codecs.getincrementaldecoder(self.encoding.encoding)(
                errors=self.config.errors
            )
            data = self._head[self.encoding.bom_length:]
            self._head = b""
        return self._decoder.decode(data, final=final)

    def _finish(self) -> str:
        """Flush bytes held back by the decoder at end of data."""
        if self._decoder is None and not self._head:
            return ""
        return self._decode(b"", final=True)

    def _set_paused(self, paused: bool) -> None:
        if not self._flow_control or paused == self.paused:
            return
        if paused:
            self.stream.pause()
        else:
            self.stream.resume()
        self.paused = paused


SourceParameter = Union[None, str, bytes, bytearray, CharacterSource, Iterable[Any], Any]


def attach_source(
    source: SourceParameter,
    streaming: Optional[StreamingConfig] = None,
    correlation_id: Optional[str] = None,
) -> CharacterSource:
    """Wrap ``source`` in the CharacterSource matching its capabilities.

    Args:
        source: None, a string, bytes, a file-like object with ``read``, an
            existing CharacterSource, or any iterable of strings
        streaming: Buffering and decoding options for stream-backed sources
        correlation_id: Optional correlation ID for request tracking

    Returns:
        A CharacterSource reading from ``source``

    Raises:
        TypeError: If ``source`` cannot produce characters
    """
    if source is None:
        return EmptySource()
    if isinstance(source, CharacterSource):
        return source
    if isinstance(source, str):
        return StringSource(source)
    if isinstance(source, (bytes, bytearray)):
        return StreamSource(io.BytesIO(bytes(source)), streaming, correlation_id)
    if callable(getattr(source, "read", None)):
        return StreamSource(source, streaming, correlation_id)
    try:
        return IterableSource(source)
    except TypeError:
        logger.bind(correlation_id).error(
            "Unsupported CSV source",
            extra={"source_type": type(source).__name__},
            exc_info=False,
        )
        raise TypeError(
            f"Cannot read CSV characters from {type(source).__name__} object"
        ) from None
