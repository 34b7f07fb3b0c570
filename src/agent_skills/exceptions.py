"""
Exceptions for agent-skills.

Defines the error taxonomy shared by the cache, registry and installer layers.
"""

from enum import Enum

import httpx


class FailureType(Enum):
    """Classification of fetch failures for retry decisions."""

    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    SERVER_ERROR = "server_error"
    CLIENT_ERROR = "client_error"
    UNKNOWN = "unknown"


class SkillsError(Exception):
    """Base exception for agent-skills errors."""

    pass


class InvalidNameError(SkillsError, ValueError):
    """Skill name is empty or `.` after sanitization."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Invalid skill name: {name!r}")


class NetworkError(SkillsError):
    """Network-related error (connection, timeout, HTTP status)."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        failure_type: FailureType = FailureType.NETWORK_ERROR,
    ):
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.failure_type = failure_type

    @property
    def retryable(self) -> bool:
        """Whether another attempt may succeed."""
        return should_retry(self.failure_type)


class RegistryFormatError(SkillsError):
    """The registry manifest could not be parsed or validated."""

    pass


class SkillNotFoundError(SkillsError):
    """Skill is not present in the registry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Skill not found in registry: {name}")


class UnknownAgentError(SkillsError):
    """Agent id has no directory configuration."""

    def __init__(self, agent: str):
        self.agent = agent
        super().__init__(f"Unknown agent: {agent}")


class IncompleteDownloadError(SkillsError):
    """Not every file of a skill bundle was downloaded."""

    def __init__(self, downloaded: int, total: int, skill: str | None = None):
        self.downloaded = downloaded
        self.total = total
        self.skill = skill
        super().__init__(f"Only {downloaded}/{total} files downloaded successfully")


def classify_status(status_code: int) -> FailureType:
    """
    Classify an HTTP status code.

    Args:
        status_code: HTTP response status.

    Returns:
        SERVER_ERROR for 5xx, CLIENT_ERROR for any other non-2xx status.
    """
    if 500 <= status_code < 600:
        return FailureType.SERVER_ERROR
    return FailureType.CLIENT_ERROR


def classify_error(error: Exception) -> FailureType:
    """
    Classify an exception into a failure type for retry decisions.

    Args:
        error: The exception to classify.

    Returns:
        The failure type classification.
    """
    if isinstance(error, NetworkError):
        return error.failure_type
    if isinstance(error, httpx.TimeoutException):
        return FailureType.TIMEOUT
    if isinstance(error, httpx.HTTPStatusError):
        return classify_status(error.response.status_code)
    if isinstance(error, httpx.TransportError):
        return FailureType.NETWORK_ERROR

    return FailureType.UNKNOWN


def should_retry(failure_type: FailureType) -> bool:
    """
    Determine if a failure type is transient.

    Args:
        failure_type: The classified failure type.

    Returns:
        True if the same request should be attempted again.
    """
    # 4xx means the resource is wrong, not the connection
    non_retriable = {
        FailureType.CLIENT_ERROR,
        FailureType.UNKNOWN,
    }
    return failure_type not in non_retriable
