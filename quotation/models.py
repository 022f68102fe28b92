"""
Data models for USD-BRL quotations.
"""

from dataclasses import asdict, dataclass
from typing import Dict

from sqlalchemy import Column, MetaData, Table, Text

# Constants
QUOTATION_TABLE = "cotacao"

metadata = MetaData()

# Append-only log of fetched quotations: every column is TEXT, there is no
# primary key, constraint or index.
quotation_table = Table(
    QUOTATION_TABLE,
    metadata,
    Column("code", Text),
    Column("code_in", Text),
    Column("name", Text),
    Column("high", Text),
    Column("low", Text),
    Column("var_bid", Text),
    Column("pct_change", Text),
    Column("bid", Text),
    Column("ask", Text),
    Column("timestamp", Text),
    Column("create_date", Text),
)


@dataclass(frozen=True)
class Quotation:
    """A single USD-BRL quotation. Values are kept exactly as received."""

    code: str
    code_in: str
    name: str
    high: str
    low: str
    var_bid: str
    pct_change: str
    bid: str
    ask: str
    timestamp: str
    create_date: str

    def to_row(self) -> Dict[str, str]:
        """Column name to value mapping for an insert."""
        return asdict(self)

    def __repr__(self) -> str:
        return f"Quotation(code={self.code!r}, code_in={self.code_in!r}, bid={self.bid!r})"
