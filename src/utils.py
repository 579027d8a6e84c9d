"""Shared utility functions."""
import logging
import os
from pathlib import Path


def get_package_root() -> Path:
    """
    Get the package root directory (the one holding metamodel/).

    Returns:
        Path to package root, valid for source checkouts and installs alike
    """
    return Path(__file__).parent


def get_config_path(filename: str = None) -> Path:
    """
    Get path to config directory or file.

    Args:
        filename: Optional config filename

    Returns:
        Path to config directory or specific config file
    """
    config_dir = get_package_root()
    if filename:
        return config_dir / filename
    return config_dir


def get_metamodel_path(filename: str = None) -> Path:
    """
    Get path to metamodel config directory or file.

    Args:
        filename: Optional metamodel filename

    Returns:
        Path to metamodel directory or specific metamodel file
    """
    metamodel_dir = get_config_path("metamodel")
    if filename:
        return metamodel_dir / filename
    return metamodel_dir


def setup_logging(level: str = None) -> logging.Logger:
    """
    Configure process-wide logging for scripts and services.

    Args:
        level: Log level name (e.g. 'INFO', 'DEBUG'). Defaults to Config.LOG_LEVEL.

    Returns:
        The package root logger.
    """
    level = level or Config.LOG_LEVEL
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s  %(name)-30s  %(levelname)-7s  %(message)s",
    )
    return logging.getLogger("src")


class Config:
    """Configuration constants."""

    # Neo4j
    NEO4J_URI = os.getenv("NEO4J_URI", "bolt://localhost:7687")
    NEO4J_USER = os.getenv("NEO4J_USER", "neo4j")
    NEO4J_PASSWORD = os.getenv("NEO4J_PASSWORD", "password")
    NEO4J_DATABASE = os.getenv("NEO4J_DATABASE") or None

    # Relation taxonomy (hierarchical types, relation label aliases)
    RELATION_TAXONOMY = os.getenv(
        "RELATION_TAXONOMY",
        str(get_metamodel_path("relation_taxonomy.yaml"))
    )

    # Paging
    DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "20"))

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
