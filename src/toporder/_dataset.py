"""Named tables of fixture rows, loadable in dependency order."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ._graph import topological_sort
from ._io import InputFileError, read_toml

logger = logging.getLogger(__name__)


class DataSetError(InputFileError):
    """Error in a dataset fixture file."""


class TableSpec(BaseModel):
    """Schema of one `[tables.<name>]` entry in a dataset file."""

    model_config = ConfigDict(extra="forbid")

    depends_on: list[str] = Field(default_factory=list)
    primary_keys: list[str] = Field(default_factory=list)
    rows: list[dict[str, Any]] = Field(default_factory=list)


class DataSetFile(BaseModel):
    """Schema of a dataset file."""

    model_config = ConfigDict(extra="forbid")

    tables: dict[str, TableSpec] = Field(default_factory=dict)


@dataclass(slots=True)
class Table:
    """A named table of rows.

    Attributes:
        name: Table name.
        depends_on: Names of the tables whose rows must be loaded first.
        rows: Rows in insertion order.
        columns: Every column seen in the rows, in first-seen order.
        primary_keys: Columns identifying a row.

    """

    name: str
    depends_on: list[str] = field(default_factory=list)
    rows: list[dict[str, Any]] = field(default_factory=list)
    columns: list[str] = field(default_factory=list)
    primary_keys: list[str] = field(default_factory=list)

    def add_rows(self, rows: Iterable[Mapping[str, Any]]) -> None:
        for row in rows:
            self.rows.append(dict(row))
            self.columns.extend(column for column in row if column not in self.columns)

    def add_dependencies(self, names: Iterable[str]) -> None:
        self.depends_on.extend(name for name in names if name not in self.depends_on)

    def add_primary_keys(self, columns: Iterable[str]) -> None:
        self.primary_keys.extend(column for column in columns if column not in self.primary_keys)

    def matches(self, other: Table) -> bool:
        """Check whether two tables share a name and the same columns, in any order."""
        return self.name == other.name and sorted(self.columns) == sorted(other.columns)

    def __len__(self) -> int:
        return len(self.rows)


class DataSet:
    """A collection of tables built from one or more fixture files.

    Files are merged in the order they are added: a table that appears in
    several files keeps its first position and collects the rows,
    dependencies and primary keys of every occurrence.
    """

    def __init__(self) -> None:
        self._tables: dict[str, Table] = {}

    @classmethod
    def from_toml(cls, *paths: Path) -> Self:
        """Build a dataset from TOML fixture files.

        Raises:
            DataSetError: If a file is not valid TOML or does not match the schema.

        """
        dataset = cls()
        for path in paths:
            dataset.add_file(path)
        return dataset

    def add_file(self, path: Path) -> None:
        """Merge the tables of a TOML fixture file into the dataset.

        Raises:
            DataSetError: If the file is not valid TOML or does not match the schema.

        """
        try:
            data = read_toml(path)
        except InputFileError as e:
            raise DataSetError(str(e)) from e
        try:
            dataset_file = DataSetFile.model_validate(data)
        except ValidationError as e:
            msg = f"Invalid dataset file {path}: {e}"
            raise DataSetError(msg) from e

        for name, spec in dataset_file.tables.items():
            self.add_table(name, rows=spec.rows, depends_on=spec.depends_on, primary_keys=spec.primary_keys)
        logger.debug(f"Loaded {len(dataset_file.tables)} tables from {path}")

    def add_table(
        self,
        name: str,
        rows: Iterable[Mapping[str, Any]] = (),
        depends_on: Iterable[str] = (),
        primary_keys: Iterable[str] = (),
    ) -> Table:
        """Add a table, or extend the table of that name if it already exists."""
        table = self._tables.setdefault(name, Table(name))
        table.add_dependencies(depends_on)
        table.add_primary_keys(primary_keys)
        table.add_rows(rows)
        return table

    @property
    def table_names(self) -> tuple[str, ...]:
        return tuple(self._tables)

    def get_table(self, name: str) -> Table:
        """Get a table by name.

        Raises:
            KeyError: If the dataset has no table of that name.

        """
        if name not in self._tables:
            msg = f"Table '{name}' does not exist in the dataset"
            raise KeyError(msg)
        return self._tables[name]

    def iter_tables(self, *, reverse: bool = False) -> Iterator[Table]:
        """Iterate over the tables in insertion order, or in reverse."""
        tables = self._tables.values()
        return reversed(tables) if reverse else iter(tables)

    def load_order(
        self,
        *,
        exclude: Callable[[str], bool] | None = None,
        strict: bool = True,
    ) -> tuple[Table, ...]:
        """Order the tables so that every table follows the tables it depends on.

        Args:
            exclude: Predicate returning True for table names to leave out.
            strict: Fail when a table depends on a table that is missing or excluded.

        Returns:
            The tables in load order.

        Raises:
            DanglingVertexError: If `strict` is set and a dependency is not in the order.
            CyclicGraphError: If the table dependencies form a cycle.

        """
        names = topological_sort(
            self._tables,
            lambda name: self._tables[name].depends_on,
            exclude=exclude,
            strict=strict,
        )
        return tuple(self._tables[name] for name in names)

    def teardown_order(
        self,
        *,
        exclude: Callable[[str], bool] | None = None,
        strict: bool = True,
    ) -> tuple[Table, ...]:
        """Order the tables so that dependents come before their dependencies."""
        return self.load_order(exclude=exclude, strict=strict)[::-1]

    def __iter__(self) -> Iterator[Table]:
        return self.iter_tables()

    def __len__(self) -> int:
        return len(self._tables)

    def __contains__(self, name: object) -> bool:
        return name in self._tables
