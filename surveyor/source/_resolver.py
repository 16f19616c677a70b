# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import abc
import queue
import threading
from typing import BinaryIO, Callable, Iterable, Iterator, List, Optional

from loguru import logger

from ._file_metadata import FileMetadata
from ._location import Location

# size of the handoff queue between the enumeration thread and the consumer
ENUMERATION_BUFFER_SIZE = 64
# how often a blocked producer re-checks whether the consumer went away
_PRODUCER_POLL_SECONDS = 0.05

_DONE = object()


class FileResolver(abc.ABC):
    """
    Capability interface for querying and reading files from one source (image, directory, file).

    All paths are POSIX paths relative to the source root (a leading "/" is implied). Lookups that
    match nothing return an empty list (or None), they never raise. Results carry no ordering
    guarantee; callers sort when order matters.
    """

    @abc.abstractmethod
    def files_by_path(self, *paths: str) -> List[Location]:
        """Exact path lookup."""

    @abc.abstractmethod
    def files_by_glob(self, *patterns: str) -> List[Location]:
        """Shell-glob matching (with ``**`` support) over every indexed path."""

    @abc.abstractmethod
    def files_by_mime_type(self, *types: str) -> List[Location]:
        """Files whose sniffed MIME type is one of ``types``."""

    @abc.abstractmethod
    def files_by_extension(self, *extensions: str) -> List[Location]:
        """Files whose basename ends with one of ``extensions`` (e.g. ".jar")."""

    @abc.abstractmethod
    def files_by_basename(self, *names: str) -> List[Location]:
        """Files whose basename is exactly one of ``names``."""

    @abc.abstractmethod
    def files_by_basename_glob(self, *patterns: str) -> List[Location]:
        """Files whose basename matches one of the glob ``patterns``."""

    @abc.abstractmethod
    def file_contents_by_location(self, location: Location) -> BinaryIO:
        """Open the content of a location for binary reading.

        Raises:
            NotFoundError: If the location does not resolve.
        """

    @abc.abstractmethod
    def file_metadata_by_location(self, location: Location) -> FileMetadata:
        """Metadata for a location.

        Raises:
            NotFoundError: If the location does not resolve.
        """

    @abc.abstractmethod
    def has_path(self, path: str) -> bool:
        """Existence probe that does not resolve content."""

    @abc.abstractmethod
    def relative_file_by_path(self, base: Location, path: str) -> Optional[Location]:
        """Resolve ``path`` relative to the directory containing ``base``; None if nothing resolves."""

    @abc.abstractmethod
    def all_locations(self) -> Iterator[Location]:
        """Lazily enumerate every file location of the source.

        Each call performs a fresh, single pass enumeration.
        """


def stream_locations(
    produce: Callable[[], Iterable[Location]], buffer_size: int = ENUMERATION_BUFFER_SIZE
) -> Iterator[Location]:
    """
    Run ``produce`` on a background thread and yield its locations through a bounded queue.

    The thread is only started once the consumer asks for the first element. When the consumer
    stops early (``break``, ``close()`` or garbage collection of the generator) the producer is
    told to stop and is joined before the generator finishes, so no thread outlives the
    enumeration.

    Args:
        produce (Callable[[], Iterable[Location]]): Produces the full enumeration; may be lazy.
        buffer_size (int): Maximum number of locations buffered between producer and consumer.

    Yields:
        Location: Each produced location, in production order.
    """
    handoff: "queue.Queue[object]" = queue.Queue(maxsize=buffer_size)
    stop = threading.Event()

    def offer(item: object) -> bool:
        while not stop.is_set():
            try:
                handoff.put(item, timeout=_PRODUCER_POLL_SECONDS)
                return True
            except queue.Full:
                continue
        return False

    def worker() -> None:
        try:
            for location in produce():
                if not offer(location):
                    return
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.warning(f"unable to enumerate all locations: {e}")
        finally:
            offer(_DONE)

    thread = threading.Thread(target=worker, name="all-locations", daemon=True)
    thread.start()
    try:
        while True:
            item = handoff.get()
            if item is _DONE:
                break
            yield item  # type: ignore[misc]
    finally:
        stop.set()
        thread.join()
