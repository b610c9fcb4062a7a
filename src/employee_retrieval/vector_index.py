"""Vector index access for employee records.

Defines the narrow search contract the retrieval tool depends on and its
Qdrant implementation.
"""

import logging
from typing import Any, Protocol

from qdrant_client import QdrantClient
from qdrant_client.models import Filter, IsEmptyCondition, PayloadField

from hr_agent_config import Settings, get_settings

logger = logging.getLogger(__name__)

# (document projection, similarity score)
SearchHit = tuple[dict[str, Any], float]


class VectorIndex(Protocol):
    """Nearest-neighbour search over an indexed collection."""

    def search(self, vector: list[float], field: str, k: int) -> list[SearchHit]:
        """Return up to ``k`` hits ordered by descending score."""
        ...


class QdrantVectorIndex:
    """Employee index backed by a Qdrant collection.

    Each hit is projected into ``{"page_content": ..., "metadata": ...}`` where
    ``page_content`` is the configured text field of the point payload and
    ``metadata`` holds the rest of the payload.
    """

    def __init__(
        self,
        client: QdrantClient,
        collection_name: str,
        vector_name: str | None = None
    ):
        if not collection_name or not collection_name.strip():
            raise ValueError("collection_name cannot be empty")

        self.client = client
        self.collection_name = collection_name
        self.vector_name = vector_name

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "QdrantVectorIndex":
        """Create an index using the configured Qdrant instance and collection."""
        settings = settings or get_settings()
        return cls(
            client=QdrantClient(url=settings.qdrant.url),
            collection_name=settings.qdrant.collection_name,
            vector_name=settings.qdrant.vector_name
        )

    def search(self, vector: list[float], field: str, k: int) -> list[SearchHit]:
        """Approximate nearest-neighbour search restricted to records with ``field``.

        Args:
            vector: Query embedding
            field: Payload field holding the embedded text
            k: Maximum number of hits

        Returns:
            Hits ordered by descending similarity score

        Raises:
            ValueError: If k < 1
            Exception: Any Qdrant client error is propagated
        """
        if k < 1:
            raise ValueError(f"k must be at least 1, got {k}")

        logger.debug(f"Searching {self.collection_name} (field={field}, k={k})")

        points = self.client.query_points(
            collection_name=self.collection_name,
            query=vector,
            using=self.vector_name,
            query_filter=Filter(
                must_not=[IsEmptyCondition(is_empty=PayloadField(key=field))]
            ),
            limit=k,
            with_payload=True
        ).points

        hits: list[SearchHit] = []
        for point in points:
            payload = dict(point.payload or {})
            text = payload.pop(field, "")
            hits.append(({"page_content": text, "metadata": payload}, point.score))

        return hits
