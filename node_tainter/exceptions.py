"""Custom exceptions for node-tainter."""


class NodeTainterError(Exception):
    """Base exception for all node-tainter errors."""

    def __init__(self, message: str, details: str = None):
        """Initialize the exception.

        Args:
            message: Main error message
            details: Additional details or suggestions
        """
        self.message = message
        self.details = details
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format the complete error message.

        Returns:
            Formatted error message with details
        """
        if self.details:
            return f"{self.message}\n\nDetails: {self.details}"
        return self.message


class ConfigurationError(NodeTainterError):
    """Exception raised for invalid policies or marker definitions."""

    pass


class ScriptError(NodeTainterError):
    """Base exception for health-check script failures.

    A script error fails the policy that ran the script, never the cycle.
    """

    def __init__(self, message: str, details: str = None, script_path: str = None):
        self.script_path = script_path
        super().__init__(message, details)


class ScriptTimeoutError(ScriptError):
    """Exception raised when a script exceeds its timeout and is killed."""

    pass


class ScriptExecutionError(ScriptError):
    """Exception raised when a script exits with a non-zero status."""

    def __init__(
        self,
        message: str,
        details: str = None,
        script_path: str = None,
        returncode: int = None,
        output: str = "",
    ):
        self.returncode = returncode
        self.output = output
        super().__init__(message, details, script_path)


class ScriptNotFoundError(ScriptError, ConfigurationError):
    """Exception raised when a script path is missing or not executable."""

    pass


class KubernetesError(NodeTainterError):
    """Exception raised for Kubernetes API errors."""

    pass


class UnknownClusterStateError(KubernetesError):
    """Exception raised when node state cannot be read from the cluster."""

    pass


class NodeNotFoundError(UnknownClusterStateError):
    """Exception raised when the target node does not exist."""

    pass


class NodeWriteConflictError(KubernetesError):
    """Exception raised when the final node update is rejected."""

    pass


class NotificationError(NodeTainterError):
    """Exception raised when a notification cannot be delivered."""

    pass
