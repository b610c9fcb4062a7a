"""Employee record indexing.

Builds the searchable text of each employee record, embeds all records in a
single batch and upserts them into the Qdrant collection the employee_lookup
tool searches.
"""

import logging
import uuid
from typing import Any

from langchain_core.embeddings import Embeddings
from qdrant_client import QdrantClient
from qdrant_client.models import Distance, PointStruct, VectorParams

logger = logging.getLogger(__name__)


def build_embedding_text(record: dict[str, Any], prefix: str = "") -> str:
    """Flatten an employee record into ``key: value`` lines.

    Nested objects are flattened with dotted keys and lists are joined
    with commas.

    Args:
        record: Employee record
        prefix: Key prefix used for nested objects

    Returns:
        Multi-line text suitable for embedding
    """
    lines = []
    for key, value in record.items():
        name = f"{prefix}{key}"
        if isinstance(value, dict):
            nested = build_embedding_text(value, prefix=f"{name}.")
            if nested:
                lines.append(nested)
        elif isinstance(value, list):
            lines.append(f"{name}: {', '.join(str(item) for item in value)}")
        elif value is not None:
            lines.append(f"{name}: {value}")
    return "\n".join(lines)


class EmployeeIndexer:
    """Writes employee records into the vector index.

    Args:
        client: Qdrant client
        embeddings: Embedding model (same model the lookup tool queries with)
        collection_name: Target collection
        text_key: Payload field that stores the embedded text
        vector_name: Named vector to write (None for the default vector)
    """

    def __init__(
        self,
        client: QdrantClient,
        embeddings: Embeddings,
        collection_name: str,
        text_key: str = "embedding_text",
        vector_name: str | None = None
    ):
        self.client = client
        self.embeddings = embeddings
        self.collection_name = collection_name
        self.text_key = text_key
        self.vector_name = vector_name

    def ensure_collection(self) -> None:
        """Ensure the collection exists with the embedding dimension.

        Creates the collection if missing, probing the dimension with a test
        embedding. Uses cosine distance for similarity.
        """
        collections = self.client.get_collections()
        collection_names = [col.name for col in collections.collections]

        if self.collection_name in collection_names:
            logger.info(f"Collection already exists: {self.collection_name}")
            return

        logger.info(f"Creating Qdrant collection: {self.collection_name}")

        dimension = len(self.embeddings.embed_query("test"))
        params = VectorParams(size=dimension, distance=Distance.COSINE)

        self.client.create_collection(
            collection_name=self.collection_name,
            vectors_config={self.vector_name: params} if self.vector_name else params
        )

        logger.info(f"Collection created with dimension {dimension}")

    def index_employees(self, records: list[dict[str, Any]]) -> int:
        """Embed and upsert employee records.

        Records that already carry the text field keep it; otherwise it is
        built with build_embedding_text(). Point IDs are UUID v5 of the
        employee_id, so re-indexing a record overwrites it.

        Args:
            records: Employee records, each with an ``employee_id``

        Returns:
            Number of records indexed

        Raises:
            ValueError: If records is empty or a record has no employee_id
        """
        if not records:
            raise ValueError("records list cannot be empty")

        payloads = []
        for record in records:
            if not record.get("employee_id"):
                raise ValueError(f"employee record is missing employee_id: {record}")
            payload = dict(record)
            if not payload.get(self.text_key):
                payload[self.text_key] = build_embedding_text(record)
            payloads.append(payload)

        logger.info(f"Generating embeddings for {len(payloads)} employee records")
        vectors = self.embeddings.embed_documents([p[self.text_key] for p in payloads])

        points = []
        for payload, vector in zip(payloads, vectors):
            point_id = str(uuid.uuid5(uuid.NAMESPACE_DNS, str(payload["employee_id"])))
            points.append(PointStruct(
                id=point_id,
                vector={self.vector_name: vector} if self.vector_name else vector,
                payload=payload
            ))

        self.client.upsert(collection_name=self.collection_name, points=points)

        logger.info(f"Stored {len(points)} employee records in {self.collection_name}")
        return len(points)
