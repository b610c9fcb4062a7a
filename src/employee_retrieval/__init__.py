"""Employee retrieval package for the HR agent.

This package provides the employee_lookup tool, the vector index it searches
and the indexer that seeds employee records into it.
"""

from employee_retrieval.embeddings import build_embeddings
from employee_retrieval.employee_lookup import (
    EmployeeLookup,
    EmployeeLookupInput,
    RetrievalFailure,
)
from employee_retrieval.indexer import EmployeeIndexer, build_embedding_text
from employee_retrieval.vector_index import QdrantVectorIndex, VectorIndex

__all__ = [
    "EmployeeIndexer",
    "EmployeeLookup",
    "EmployeeLookupInput",
    "QdrantVectorIndex",
    "RetrievalFailure",
    "VectorIndex",
    "build_embedding_text",
    "build_embeddings",
]
