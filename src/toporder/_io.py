"""Reading graph descriptions from TOML files."""

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

logger = logging.getLogger(__name__)


class InputFileError(Exception):
    """Error in a graph or dataset input file."""


class GraphFile(BaseModel):
    """Schema of a plain graph file.

    Each key of the `[graph]` table is a vertex, and its value lists the
    vertices on the other end of its edges:

        [graph]
        a = []
        b = ["a"]
    """

    model_config = ConfigDict(extra="forbid")

    graph: dict[str, list[str]]


def read_toml(path: Path) -> dict[str, Any]:
    """Read a TOML file into a dictionary.

    Raises:
        InputFileError: If the file is not valid TOML.

    """
    with path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {path}: {e}"
            raise InputFileError(msg) from e
    logger.debug(f"Read {path}")
    return data


def load_graph(path: Path) -> tuple[tuple[str, ...], dict[str, tuple[str, ...]]]:
    """Load vertices and edges from a graph file.

    Args:
        path: Path to a TOML file with a `[graph]` table.

    Returns:
        The vertices in file order, and the edge set of each vertex.

    Raises:
        InputFileError: If the file is not valid TOML or does not match the schema.

    """
    data = read_toml(path)
    try:
        graph_file = GraphFile.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid graph file {path}: {e}"
        raise InputFileError(msg) from e

    edges = {vertex: tuple(neighbors) for vertex, neighbors in graph_file.graph.items()}
    return tuple(edges), edges
