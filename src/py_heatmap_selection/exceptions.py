"""
Errors raised by the selection resolvers.

Empty outcomes (a click outside every panel, a rectangle that touches
nothing, a label query without matches) are not errors; they come back as
None or an empty SelectionRecord.
"""


class SelectionError(Exception):
    """Base class for every error raised while resolving a selection."""


class NoRenderedSurface(SelectionError):
    """The composite is not on an active rendering surface."""


class AmbiguousPanel(SelectionError):
    """A joint row/column label query has no single target panel."""


class InvalidGeometryInput(SelectionError):
    """A point or rectangle is malformed (bad unit, non-finite coordinate...)."""


class EmptyComposite(SelectionError):
    """The composite has no data panel with a non-empty value grid."""


class InvalidQuery(SelectionError):
    """A label query is malformed (e.g. an invalid regular expression)."""
