"""
OpenAlgo client exceptions.

Steady-state streaming and REST transport problems are logged or returned
as structured results; only the cases below reach the caller as raised
exceptions.
"""


class OpenAlgoError(Exception):
    """Base class for all client errors"""


class NotConnectedError(OpenAlgoError):
    """Subscribe/unsubscribe issued with no active streaming session"""


class ConnectionSetupError(OpenAlgoError):
    """Transport failed before the connection opened"""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to connect to {url}: {reason}")
        self.url = url
        self.reason = reason


class InvalidModeError(OpenAlgoError, ValueError):
    """Unknown subscription mode supplied by the caller"""


class WebhookError(OpenAlgoError):
    """Strategy webhook request failed"""

    def __init__(self, url: str, message: str, status_code: int = None):
        super().__init__(f"Strategy webhook {url} failed: {message}")
        self.url = url
        self.status_code = status_code
