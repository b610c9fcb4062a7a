"""Seed the employee vector index from a JSON file.

Usage:
    hr-agent-seed employees.json
"""

import argparse
import json
import logging
from pathlib import Path

from qdrant_client import QdrantClient

from hr_agent_config import get_settings

from .embeddings import build_embeddings
from .indexer import EmployeeIndexer

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def load_records(path: Path) -> list[dict]:
    """Load a JSON array of employee records.

    Raises:
        ValueError: If the file does not contain a JSON array
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON array of employee records")

    return data


def main(argv: list[str] | None = None) -> None:
    """Main entry point for index seeding."""
    parser = argparse.ArgumentParser(description="Index employee records for the HR agent")
    parser.add_argument("path", type=Path, help="JSON file with an array of employee records")
    args = parser.parse_args(argv)

    settings = get_settings()
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Seeding collection {settings.qdrant.collection_name} at {settings.qdrant.url}")

    indexer = EmployeeIndexer(
        client=QdrantClient(url=settings.qdrant.url),
        embeddings=build_embeddings(settings),
        collection_name=settings.qdrant.collection_name,
        text_key=settings.qdrant.text_key,
        vector_name=settings.qdrant.vector_name
    )

    records = load_records(args.path)
    indexer.ensure_collection()
    count = indexer.index_employees(records)

    logger.info(f"Seeding completed: {count} employee records indexed")


if __name__ == "__main__":
    main()
