"""Streaming adapters: many raw messages in, many CommitRecords out.

Both adapters are lazy and single-pass. They read at most
``high_water_mark`` raw messages ahead of the consumer, so a fast producer
(e.g. a ``git log`` pipe) cannot grow memory without bound.

Failure policy:
  - InputError (an empty message) ends the sequence, unless a ``warn``
    callable is given, in which case it is called with the error, a
    placeholder record is yielded and parsing continues.
  - ConfigurationError is raised before any message is read and is never
    turned into a warning.
"""

from __future__ import annotations

import asyncio
import contextlib
import itertools
import logging
from collections import deque
from collections.abc import AsyncIterable, AsyncIterator, Callable, Iterable, Iterator

from commitlens_core.errors import ConfigurationError, InputError
from commitlens_core.grammar import CompiledGrammar, compile_grammar
from commitlens_core.models import CommitRecord, empty_record
from commitlens_core.options import GrammarOptions
from commitlens_core.parser import parse_commit

logger = logging.getLogger(__name__)

DEFAULT_HIGH_WATER_MARK = 16

WarnSink = Callable[[InputError], None]

_END = object()


def _prepare(options: GrammarOptions | None, high_water_mark: int) -> tuple[GrammarOptions, CompiledGrammar]:
    if options is None:
        options = GrammarOptions()
    if isinstance(high_water_mark, bool) or not isinstance(high_water_mark, int) or high_water_mark < 1:
        raise ConfigurationError(f"high_water_mark must be a positive integer, got {high_water_mark!r}")
    return options, compile_grammar(options)


def _parse_one(raw, options: GrammarOptions, grammar: CompiledGrammar, warn: WarnSink | None) -> CommitRecord:
    try:
        return parse_commit(raw, options, grammar)
    except InputError as e:
        if warn is None:
            raise
        logger.warning("Skipping unparseable commit: %s", e)
        warn(e)
        return empty_record(grammar)


def parse_commits(
    raw_commits: Iterable[str | bytes],
    options: GrammarOptions | None = None,
    *,
    warn: WarnSink | None = None,
    high_water_mark: int = DEFAULT_HIGH_WATER_MARK,
) -> Iterator[CommitRecord]:
    """Lazily parse every message in ``raw_commits``.

    The grammar is compiled here, before the first message is read, so a bad
    configuration fails immediately rather than on first iteration.
    """
    options, grammar = _prepare(options, high_water_mark)
    return _parse_buffered(iter(raw_commits), options, grammar, warn, high_water_mark)


def _parse_buffered(
    source: Iterator[str | bytes],
    options: GrammarOptions,
    grammar: CompiledGrammar,
    warn: WarnSink | None,
    high_water_mark: int,
) -> Iterator[CommitRecord]:
    buffer: deque = deque()
    while True:
        if not buffer:
            # Refill only once drained, never holding more than high_water_mark items.
            buffer.extend(itertools.islice(source, high_water_mark))
            if not buffer:
                return
        yield _parse_one(buffer.popleft(), options, grammar, warn)


def aparse_commits(
    raw_commits: AsyncIterable[str | bytes] | Iterable[str | bytes],
    options: GrammarOptions | None = None,
    *,
    warn: WarnSink | None = None,
    high_water_mark: int = DEFAULT_HIGH_WATER_MARK,
) -> AsyncIterator[CommitRecord]:
    """Async counterpart of parse_commits over a sync or async iterable.

    A producer task feeds a bounded queue and suspends while it is full.
    Closing the returned iterator cancels the producer.
    """
    options, grammar = _prepare(options, high_water_mark)
    return _aparse_buffered(raw_commits, options, grammar, warn, high_water_mark)


async def _aiter(source: AsyncIterable | Iterable) -> AsyncIterator:
    if hasattr(source, "__aiter__"):
        async for item in source:
            yield item
    else:
        for item in source:
            yield item


async def _aparse_buffered(
    source: AsyncIterable | Iterable,
    options: GrammarOptions,
    grammar: CompiledGrammar,
    warn: WarnSink | None,
    high_water_mark: int,
) -> AsyncIterator[CommitRecord]:
    queue: asyncio.Queue = asyncio.Queue(maxsize=high_water_mark)

    async def produce():
        # Upstream failures are handed to the consumer, which re-raises them in order.
        try:
            async for raw in _aiter(source):
                await queue.put((raw, None))
        except Exception as e:
            await queue.put((_END, e))
        else:
            await queue.put((_END, None))

    producer = asyncio.ensure_future(produce())
    try:
        while True:
            raw, error = await queue.get()
            if raw is _END:
                if error is not None:
                    raise error
                return
            yield _parse_one(raw, options, grammar, warn)
    finally:
        producer.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await producer
