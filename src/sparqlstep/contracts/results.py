"""Operation outcomes and results.

These types answer: "What did an operation produce?"

IMPORTANT:
- OutputRow values are lexical strings, or None for an unbound variable
- CheckResult carries a message key, NOT rendered text; render via MessageBundle
"""

from collections.abc import Iterator
from dataclasses import dataclass, field

from sparqlstep.contracts.enums import CheckResultType, FieldType, TrimType


@dataclass(frozen=True, slots=True)
class OutputRow:
    """One projected result row.

    Fields are ordered exactly as the query result's column list.
    Frozen: once emitted, the consumer owns it.
    """

    fields: tuple[str, ...]
    values: tuple[str | None, ...]

    def __post_init__(self) -> None:
        if len(self.fields) != len(self.values):
            raise ValueError(
                f"OutputRow has {len(self.fields)} fields but {len(self.values)} values"
            )

    def pairs(self) -> Iterator[tuple[str, str | None]]:
        """Yield (field, value) pairs in column order."""
        return zip(self.fields, self.values, strict=True)

    def to_row(self) -> dict[str, str | None]:
        """Convert to a row dict (insertion order is column order)."""
        return dict(self.pairs())

    def __len__(self) -> int:
        return len(self.fields)


@dataclass(frozen=True, slots=True)
class FieldMeta:
    """Design-time description of one output field."""

    name: str
    type: FieldType = FieldType.STRING
    trim_type: TrimType = TrimType.BOTH
    origin: str | None = None


@dataclass(frozen=True, slots=True)
class CheckResult:
    """A design-time verification remark.

    Use the factory methods to create instances.
    """

    type: CheckResultType
    message_key: str
    step_name: str | None = field(default=None)

    @classmethod
    def ok(cls, message_key: str, step_name: str | None = None) -> "CheckResult":
        """Create an OK remark."""
        return cls(type=CheckResultType.OK, message_key=message_key, step_name=step_name)

    @classmethod
    def error(cls, message_key: str, step_name: str | None = None) -> "CheckResult":
        """Create an ERROR remark."""
        return cls(type=CheckResultType.ERROR, message_key=message_key, step_name=step_name)

    @property
    def is_error(self) -> bool:
        return self.type is CheckResultType.ERROR


@dataclass(frozen=True, slots=True)
class ProbeResult:
    """Outcome of a connection test against an endpoint."""

    ok: bool
    endpoint_url: str
    message_key: str
    error: str | None = None
