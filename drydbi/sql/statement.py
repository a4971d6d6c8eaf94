"""
=====================================
Rendered SQL fragments and bindings.
=====================================

A Statement pairs a piece of SQL text with the ordered values bound to the
``?`` placeholders inside it. There are exactly two kinds:

- Raw: caller-supplied text and bindings, trusted and never escaped.
- ComputedStatement: produced by the builders, either a quoted identifier
  (no bindings) or a single ``?`` placeholder bound to a plain value.

Example:
    >>> from drydbi.sql.statement import Raw, ComputedStatement
    >>>
    >>> Raw('COUNT(*)').value
    'COUNT(*)'
    >>> ComputedStatement.parameter('active').bindings
    ('active',)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterable, Tuple


class Statement(ABC):
    """A SQL text fragment with its ordered parameter bindings."""

    @property
    @abstractmethod
    def value(self) -> str:
        """Rendered SQL text."""

    @property
    @abstractmethod
    def bindings(self) -> Tuple[Any, ...]:
        """Values for the placeholders in ``value``, left to right."""

    def get_value(self) -> str:
        return self.value

    def get_bindings(self) -> list:
        return list(self.bindings)


@dataclass(frozen=True)
class Raw(Statement):
    """Trusted SQL text inserted verbatim.

    Args:
        text: SQL fragment, e.g. ``COUNT(*)`` or ``JSON_ARRAY()``
        params: Values for any ``?`` placeholders the text contains

    Example:
        >>> Raw('DATE(created) > ?', ['2024-01-01'])
    """

    text: str
    params: Tuple[Any, ...] = field(default_factory=tuple)

    def __init__(self, text: str, params: Iterable[Any] = ()):
        object.__setattr__(self, 'text', text)
        object.__setattr__(self, 'params', tuple(params))

    @property
    def value(self) -> str:
        return self.text

    @property
    def bindings(self) -> Tuple[Any, ...]:
        return self.params


@dataclass(frozen=True)
class ComputedStatement(Statement):
    """Fragment computed by a builder from a column reference or a plain value.

    Use the ``identifier`` and ``parameter`` constructors rather than building
    instances directly.
    """

    text: str
    params: Tuple[Any, ...] = ()

    @classmethod
    def identifier(cls, quoted: str) -> 'ComputedStatement':
        """Wrap an already quoted identifier such as ```users`.`name```."""
        return cls(quoted)

    @classmethod
    def parameter(cls, value: Any) -> 'ComputedStatement':
        """Bind a plain value behind a single ``?`` placeholder."""
        return cls('?', (value,))

    @property
    def value(self) -> str:
        return self.text

    @property
    def bindings(self) -> Tuple[Any, ...]:
        return self.params
