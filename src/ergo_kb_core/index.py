"""
ChunkIndex - Read-only lookup structure over knowledge-base chunks.

Maps stable chunk ids to Chunk records and answers two queries: exact
lookup by id and filter-by-tag. The index is built once and never mutated,
so concurrent readers need no locking.

License: MIT
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Sequence, Union

from ergo_kb_core.exceptions import NotFoundError, ValidationError
from ergo_kb_core.models import Chunk
from ergo_kb_core.utils import get_logger


class ChunkIndex:
    """
    Immutable mapping of chunk id to Chunk, in insertion order.

    Example:
        ```python
        index = ChunkIndex([
            Chunk(id="a", tags=["x"]),
            Chunk(id="b", tags=["x", "y"]),
        ])
        index.get("b")          # Chunk(id='b', ...)
        index.filter({"x"})     # [a, b]
        index.filter(set())     # []
        ```
    """

    def __init__(self, chunks: Iterable[Chunk] = (), source: str = "<memory>") -> None:
        """
        Build the index.

        Args:
            chunks: Chunk records in the order they should be served
            source: Label for logs and error details (usually a file path)

        Raises:
            ValidationError: If an element is not a Chunk or an id repeats
        """
        self.logger = get_logger(__name__)
        self.source = source

        by_id: Dict[str, Chunk] = {}
        for chunk in chunks:
            if not isinstance(chunk, Chunk):
                raise ValidationError(
                    message=f"ChunkIndex accepts Chunk records, got {type(chunk).__name__}",
                    error_code="VAL_002",
                    details={"source": source},
                )
            if chunk.id in by_id:
                raise ValidationError(
                    message=f"Duplicate chunk id '{chunk.id}' in {source}",
                    error_code="VAL_003",
                    details={"chunk_id": chunk.id, "source": source},
                )
            by_id[chunk.id] = chunk

        self._chunks: Mapping[str, Chunk] = MappingProxyType(by_id)

        self.logger.debug(
            "chunk_index_built",
            source=source,
            chunk_count=len(by_id),
        )

    @classmethod
    def from_records(
        cls, records: Iterable[Mapping[str, Any]], source: str = "<memory>"
    ) -> "ChunkIndex":
        """Build an index from plain ``{id, title, tags, text}`` mappings."""
        from ergo_kb_core.loaders.records import chunks_from_records

        return cls(chunks_from_records(list(records), source=source), source=source)

    @classmethod
    def merge(cls, indexes: Iterable["ChunkIndex"], source: str = "<merged>") -> "ChunkIndex":
        """
        Combine several indexes into one, keeping each index's order.

        Raises:
            ValidationError: If the same id appears in more than one index
        """
        merged: List[Chunk] = []
        origin: Dict[str, str] = {}
        for index in indexes:
            for chunk in index:
                if chunk.id in origin:
                    raise ValidationError(
                        message=(
                            f"Duplicate chunk id '{chunk.id}' in {index.source} "
                            f"(first seen in {origin[chunk.id]})"
                        ),
                        error_code="VAL_003",
                        details={
                            "chunk_id": chunk.id,
                            "source": index.source,
                            "first_source": origin[chunk.id],
                        },
                    )
                origin[chunk.id] = index.source
                merged.append(chunk)
        return cls(merged, source=source)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, chunk_id: str) -> Chunk:
        """
        Exact-key lookup.

        Raises:
            NotFoundError: If no chunk has ``chunk_id``
        """
        try:
            return self._chunks[chunk_id]
        except (KeyError, TypeError):
            raise NotFoundError(
                message=f"No chunk with id '{chunk_id}'",
                details={"chunk_id": chunk_id, "source": self.source},
            ) from None

    def filter(self, tags: Union[str, Iterable[str]]) -> List[Chunk]:
        """
        Return every chunk whose tags intersect ``tags``, in insertion order.

        An empty query returns an empty list rather than every chunk.
        """
        if isinstance(tags, str):
            query = frozenset([tags])
        else:
            query = frozenset(tags)

        if not query:
            return []

        return [chunk for chunk in self._chunks.values() if not chunk.tag_set.isdisjoint(query)]

    def ids(self) -> List[str]:
        return list(self._chunks)

    def all_tags(self) -> List[str]:
        """Sorted union of every chunk's tags."""
        return sorted({tag for chunk in self._chunks.values() for tag in chunk.tags})

    def to_records(self) -> List[Dict[str, Any]]:
        return [chunk.to_record() for chunk in self._chunks.values()]

    # ------------------------------------------------------------------
    # Container protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._chunks)

    def __iter__(self) -> Iterator[Chunk]:
        return iter(self._chunks.values())

    def __contains__(self, chunk_id: object) -> bool:
        return chunk_id in self._chunks

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ChunkIndex):
            return NotImplemented
        return list(self._chunks.values()) == list(other._chunks.values())

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ChunkIndex(source={self.source!r}, chunks={len(self._chunks)})"

    @property
    def chunks(self) -> Sequence[Chunk]:
        return tuple(self._chunks.values())
