"""Core traversal errors."""


class FlowpathError(Exception):
    """Base class for all flowpath errors."""

    pass


class ConfigError(FlowpathError):
    """Raised when configuration is invalid."""


class FlowNotFoundError(FlowpathError):
    """Raised when a flow graph cannot be loaded."""

    pass


class FlowInactiveError(FlowpathError):
    """Raised when a session is requested for a flow that is not live."""

    pass


class FlowConfigurationError(FlowpathError):
    """Raised when a flow graph cannot be traversed as configured."""

    pass


class GraphIntegrityError(FlowConfigurationError):
    """Dangling connection, missing target or a cycle of logic blocks."""

    pass


class UnsupportedTopologyError(FlowConfigurationError):
    """Raised when a node has more than one predecessor and 'previous' is ambiguous."""

    def __init__(self, node_id: str, predecessors: list[str]):
        self.node_id = node_id
        self.predecessors = predecessors
        super().__init__(
            f"Node '{node_id}' has {len(predecessors)} predecessors "
            f"({', '.join(predecessors)}); previous node is ambiguous"
        )


class SessionError(FlowpathError):
    """Raised when session operations fail."""

    pass


class SessionNotFoundError(SessionError):
    """Raised when a session id is unknown."""

    pass


class SessionCompletedError(SessionError):
    """Raised when navigating a session that is already completed."""

    pass


class AnswerRequiredError(FlowpathError):
    """Raised when advancing past a question node without an answer."""

    pass


class PersistenceError(FlowpathError):
    """Raised when a store read or write fails."""

    pass
