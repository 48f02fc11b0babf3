"""Exceptions raised by the graph engine."""


class GraphEngineError(Exception):
    pass


class LoadError(GraphEngineError, ValueError):
    """Build input could not be turned into a graph. The previous generation stays published."""


class EnumerationTimeout(GraphEngineError, TimeoutError):
    """The cycle search ran out of its visit budget or wall-clock deadline."""


class GraphInvariantError(GraphEngineError, RuntimeError):
    """The graph or a cycle refers to something that does not exist."""
