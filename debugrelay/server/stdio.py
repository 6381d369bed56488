"""Line-delimited JSON server loop over stdin/stdout."""

from __future__ import annotations

import asyncio
import json
import os
import stat
import sys
from typing import IO, Awaitable, Callable, TextIO

from loguru import logger

from debugrelay.api.rpc.envelope import EnvelopeTranslator
from debugrelay.session import DebugSession
from debugrelay.utils import codes

# Inbound requests may inline large launch environments.
STDIN_LIMIT = 16 * 1024 * 1024
FILE_CHUNK_SIZE = 64 * 1024

PROCESSING_ERROR_LINE = json.dumps(
    {
        "success": False,
        "error": {"code": codes.PROCESSING_ERROR, "message": "Failed to process request"},
    },
    separators=(",", ":"),
)

LineWriter = Callable[[str], Awaitable[None]]


async def run_message_loop(
    translator: EnvelopeTranslator,
    reader: asyncio.StreamReader,
    write_line: LineWriter,
) -> int:
    """Answer each non-blank inbound line with exactly one line, in order.

    Returns the number of lines answered once the reader hits EOF.
    """
    handled = 0
    while True:
        try:
            raw = await reader.readline()
        except ValueError as exc:
            logger.warning("Inbound line rejected: {}", exc)
            await write_line(PROCESSING_ERROR_LINE)
            handled += 1
            continue
        if not raw:
            break
        text = raw.decode("utf-8", errors="replace").strip()
        if not text:
            continue
        try:
            response = await translator.handle_line(text)
        except Exception:
            logger.exception("Failed to process request")
            response = PROCESSING_ERROR_LINE
        await write_line(response)
        handled += 1
    logger.info("Input closed after {} request(s)", handled)
    return handled


def stream_line_writer(stream: TextIO) -> LineWriter:
    async def write_line(line: str) -> None:
        stream.write(line + "\n")
        stream.flush()

    return write_line


_feeders: set[asyncio.Task] = set()


def _is_regular_file(stream: IO) -> bool:
    try:
        return stat.S_ISREG(os.fstat(stream.fileno()).st_mode)
    except (OSError, ValueError):
        return False


async def _feed_from_file(reader: asyncio.StreamReader, stream: IO) -> None:
    # Regular files cannot back a pipe transport; read them off-loop instead.
    binary = getattr(stream, "buffer", stream)
    try:
        while True:
            chunk = await asyncio.to_thread(binary.read, FILE_CHUNK_SIZE)
            if not chunk:
                break
            reader.feed_data(chunk)
    except (OSError, ValueError) as exc:
        logger.warning("Reading input file failed: {}", exc)
    finally:
        reader.feed_eof()


async def open_stdin_reader(stdin: IO | None = None) -> asyncio.StreamReader:
    """Wrap stdin in a StreamReader; pipes and ttys use a transport, files a reader task."""
    stream = stdin or sys.stdin
    reader = asyncio.StreamReader(limit=STDIN_LIMIT)
    if _is_regular_file(stream):
        task = asyncio.create_task(_feed_from_file(reader, stream), name="debugrelay-stdin-file")
        _feeders.add(task)
        task.add_done_callback(_feeders.discard)
        return reader
    loop = asyncio.get_running_loop()
    protocol = asyncio.StreamReaderProtocol(reader)
    await loop.connect_read_pipe(lambda: protocol, stream)
    return reader


async def serve_stdio(session: DebugSession) -> int:
    """Serve one session over the process's stdin/stdout until stdin closes."""
    reader = await open_stdin_reader()
    logger.info("debugrelay listening on stdio ({} methods)", len(session.registry.methods()))
    return await run_message_loop(session.translator, reader, stream_line_writer(sys.stdout))
