"""
Streaming of the long-lived responses: raw bytes and JSON-lines objects.

A stream is a one-time asynchronous iterable over a single HTTP response.
It goes through the states: ``IDLE → STREAMING → (CLOSED | ERRORED)``.

* ``IDLE``: created, but not connected yet. The connection is established
  when entering the ``async with`` block, on the explicit ``open()``,
  or lazily on the first iteration.
* ``STREAMING``: connected, the data flows. Only one consumer can iterate.
* ``CLOSED``: closed by the caller (``close()`` or exiting ``async with``),
  or by the server at the natural end of the response.
* ``ERRORED``: the transport has failed. Terminal.

There is no reconnection here. Reconnecting on drops, with the resource
versions continued, is a policy of the callers, not of the streams.

The object streams split the bytes into lines, and parse every line
as a JSON document, e.g. a watch-event ``{"type": "ADDED", "object": {...}}``.
A line that cannot be parsed does not break the stream: it is yielded as
a :class:`StreamDecodeWarning` element, and the stream continues.
Long-lived watches should survive one garbled event.
"""
import contextlib
import enum
import json
import logging
from collections.abc import AsyncIterable, AsyncIterator, Awaitable, Callable
from typing import Any, Protocol

from kubeswagger._cogs.helpers import errors

logger = logging.getLogger(__name__)


class StreamTransportError(errors.ClientError):
    """ The underlying connection has failed while streaming. """


class StreamStateError(errors.ClientError, RuntimeError):
    """ The stream is used not as intended, e.g. re-iterated after it is closed. """


class StreamDecodeWarning(errors.ClientError, Warning):
    """
    One line of an object stream could not be decoded.

    It is not raised, but yielded from the stream in place of the object.
    """

    def __init__(self, line: bytes, reason: Exception) -> None:
        super().__init__(f"Cannot decode a line of the stream: {reason}")
        self.line = line
        self.reason = reason


class StreamState(enum.Enum):
    IDLE = 'idle'
    STREAMING = 'streaming'
    CLOSED = 'closed'
    ERRORED = 'errored'


class RawStream(Protocol):
    """
    A live HTTP response as provided by the backends: byte chunks as they arrive.

    Closing it must release the underlying connection immediately.
    A closed response stops or fails its ongoing iteration.
    """

    def __aiter__(self) -> AsyncIterator[bytes]: ...

    def close(self) -> None: ...


RawStreamOpener = Callable[[], Awaitable[RawStream]]


class ByteStream:
    """
    A raw byte stream of a response, with no decoding of the content.

    Usage::

        async with view.get_byte_stream(params={'follow': True}) as stream:
            async for chunk in stream:
                print(chunk.decode())
    """

    def __init__(self, opener: RawStreamOpener, *, description: str = '') -> None:
        super().__init__()
        self._opener = opener
        self._description = description
        self._state = StreamState.IDLE
        self._raw: RawStream | None = None
        self._consumed = False

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} {self._description} ({self._state.value})>'

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._state in (StreamState.CLOSED, StreamState.ERRORED)

    async def open(self) -> None:
        if self._state is not StreamState.IDLE:
            raise StreamStateError(f"Cannot open a stream which is {self._state.value}.")
        try:
            raw = await self._opener()
        except Exception:
            self._state = StreamState.ERRORED
            raise

        # The caller could have closed the stream while we were connecting.
        if self._state is not StreamState.IDLE:
            raw.close()
            raise StreamStateError(f"The stream was {self._state.value} while connecting.")

        self._raw = raw
        self._state = StreamState.STREAMING
        logger.debug(f"Streaming {self._description}")

    def close(self) -> None:
        if self._state in (StreamState.IDLE, StreamState.STREAMING):
            self._state = StreamState.CLOSED
            logger.debug(f"Closing the stream of {self._description}")
        if self._raw is not None:
            self._raw.close()

    async def __aenter__(self) -> 'ByteStream':
        if self._state is StreamState.IDLE:
            await self.open()
        return self

    async def __aexit__(self, *_: Any) -> None:
        self.close()

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self._iter_chunks()

    async def _iter_chunks(self) -> AsyncIterator[bytes]:
        if self._state is StreamState.IDLE:
            await self.open()
        if self._state is not StreamState.STREAMING or self._raw is None or self._consumed:
            raise StreamStateError(f"Cannot iterate a stream which is {self._state.value} "
                                   f"or is already being iterated.")

        self._consumed = True
        raw = self._raw
        try:
            async for chunk in raw:
                yield chunk
        except Exception as e:  # cancellations and generator exits pass through as they are.
            if self._state is StreamState.CLOSED:
                return  # closed by the caller, so the connection is expectedly broken.
            self._state = StreamState.ERRORED
            logger.debug(f"The stream of {self._description} has failed: {e!r}")
            if isinstance(e, StreamTransportError):
                raise
            raise StreamTransportError(f"The stream of {self._description} has failed.") from e
        finally:
            if self._state is StreamState.STREAMING:
                self._state = StreamState.CLOSED
                logger.debug(f"The stream of {self._description} has ended.")
            raw.close()


class ObjectStream:
    """
    A stream of JSON objects, one per line of a response (e.g. watch-events).

    Usage::

        async with view.get_object_stream() as stream:
            async for event in stream:
                if isinstance(event, StreamDecodeWarning):
                    continue
                print(event['type'], event['object']['metadata']['name'])
    """

    def __init__(self, source: ByteStream) -> None:
        super().__init__()
        self._source = source

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} of {self._source!r}>'

    @property
    def state(self) -> StreamState:
        return self._source.state

    @property
    def closed(self) -> bool:
        return self._source.closed

    async def open(self) -> None:
        await self._source.open()

    def close(self) -> None:
        self._source.close()

    async def __aenter__(self) -> 'ObjectStream':
        await self._source.__aenter__()
        return self

    async def __aexit__(self, *_: Any) -> None:
        self.close()

    def __aiter__(self) -> AsyncIterator[Any]:
        return self._iter_objects()

    async def _iter_objects(self) -> AsyncIterator[Any]:
        async with contextlib.aclosing(aiter(self._source)) as chunks:
            async for line in iter_jsonlines(chunks):
                try:
                    item = json.loads(line.decode('utf-8'))
                except ValueError as e:  # incl. JSONDecodeError & UnicodeDecodeError
                    logger.warning(f"Skipping an undecodable line of {self._source!r}: {e}")
                    item = StreamDecodeWarning(line, e)
                yield item


async def iter_jsonlines(
        chunks: AsyncIterable[bytes],
) -> AsyncIterator[bytes]:
    """
    Iterate line by line over the chunks of the response's content.

    Usage::

        async for line in iter_jsonlines(response.content.iter_chunked(1024)):
            pass

    This is an equivalent of::

        async for line in response.content:
            pass

    Except that the aiohttp's line iteration fails if the accumulated buffer
    length is above 2**17 bytes, i.e. 128 KB (`aiohttp.streams.DEFAULT_LIMIT`
    for the buffer's low-watermark, multiplied by 2 for the high-watermark).
    Kubernetes secrets and other fields can be much longer, up to MBs in length.

    The lines split across the chunks are reassembled before being yielded.
    The blank lines are skipped. The last line is yielded at the end
    of the content even if it is not terminated by a newline.
    """

    # Minimize the memory footprint by keeping at most 2 copies of a yielded line in memory
    # (in the buffer and as a yielded value), and at most 1 copy of other lines (in the buffer).
    buffer = b''
    async for data in chunks:
        buffer += data
        del data

        start = 0
        index = buffer.find(b'\n', start)
        while index >= 0:
            line = buffer[start:index]
            if line.strip():
                yield line
            del line
            start = index + 1
            index = buffer.find(b'\n', start)

        if start > 0:
            buffer = buffer[start:]

    if buffer.strip():
        yield buffer
