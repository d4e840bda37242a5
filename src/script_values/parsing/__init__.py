"""Parsing of index and range literals."""

from script_values.parsing.index_parser import IndexParser, parse_index

__all__ = [
    "IndexParser",
    "parse_index",
]
