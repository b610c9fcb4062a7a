"""The ``employee_lookup`` retrieval tool.

Embeds a natural-language query, runs a nearest-neighbour search over the
employee index and serializes the matches for the reasoning step. Retrieval
failures are returned as an in-band error sentinel instead of being raised, so
the model can react to them (apologize, retry with other arguments) without
aborting the conversation.
"""

import json
import logging
from typing import Any

from langchain_core.embeddings import Embeddings
from langchain_core.tools import StructuredTool
from pydantic import BaseModel, Field, field_validator

from .vector_index import VectorIndex

logger = logging.getLogger(__name__)

TOOL_NAME = "employee_lookup"
TOOL_DESCRIPTION = "Gathers employee details from the HR database"
DEFAULT_RESULTS = 10
SEARCH_FAILED_MESSAGE = "Vector search failed. See logs."


class RetrievalFailure(Exception):
    """Embedding or vector search failed.

    Never escapes the tool: employee_lookup converts it into an
    ``[{"error": ...}]`` payload.
    """


class EmployeeLookupInput(BaseModel):
    """Arguments accepted by employee_lookup."""

    query: str = Field(..., min_length=1, description="The search query")
    n: int = Field(
        default=DEFAULT_RESULTS,
        ge=1,
        description="Number of results to return"
    )

    @field_validator("query")
    @classmethod
    def query_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("query cannot be blank")
        return value


class EmployeeLookup:
    """Vector search over employee records.

    Args:
        embeddings: Model used to embed the query (must match the indexed vectors)
        index: Vector index to search
        text_key: Payload field holding the embedded record text

    Example:
        >>> lookup = EmployeeLookup(embeddings, QdrantVectorIndex.from_settings())
        >>> lookup.lookup("engineers hired after 2020", n=3)
        [{"document": {...}, "score": 0.91}, ...]
    """

    def __init__(
        self,
        embeddings: Embeddings,
        index: VectorIndex,
        text_key: str = "embedding_text"
    ):
        self.embeddings = embeddings
        self.index = index
        self.text_key = text_key

    def lookup(self, query: str, n: int = DEFAULT_RESULTS) -> list[dict[str, Any]]:
        """Return the ``n`` closest employee records, or a one-element error list.

        Args:
            query: Natural-language search query
            n: Maximum number of matches

        Returns:
            Matches as ``{"document", "score"}`` dicts ordered by descending
            score, or ``[{"error": ...}]`` if retrieval failed
        """
        logger.info(f"Employee lookup called: query={query[:50]!r}, n={n}")

        try:
            hits = self._search(query, n)
        except RetrievalFailure as e:
            logger.error(f"Employee lookup failed: {e}", exc_info=True)
            return [{"error": SEARCH_FAILED_MESSAGE}]

        matches = [{"document": document, "score": score} for document, score in hits[:n]]
        logger.info(f"Employee lookup returned {len(matches)} matches")
        return matches

    def _search(self, query: str, n: int) -> list[tuple[dict[str, Any], float]]:
        try:
            vector = self.embeddings.embed_query(query)
            return self.index.search(vector, self.text_key, n)
        except Exception as e:
            raise RetrievalFailure(str(e)) from e

    def _run(self, query: str, n: int = DEFAULT_RESULTS) -> str:
        return json.dumps(self.lookup(query, n), default=str)

    def as_tool(self) -> StructuredTool:
        """Expose the lookup as a LangChain tool returning a JSON string."""
        return StructuredTool.from_function(
            func=self._run,
            name=TOOL_NAME,
            description=TOOL_DESCRIPTION,
            args_schema=EmployeeLookupInput
        )
