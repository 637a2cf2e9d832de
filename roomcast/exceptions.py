"""
Roomcast Exceptions

Custom exception classes for error handling
"""


class RoomcastError(Exception):
    """Base Roomcast exception"""

    def __init__(self, message: str, error_code: str = "RC000", details: dict = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary format"""
        return {
            "error_code": self.error_code,
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


# Hub errors
class HubError(RoomcastError):
    """Hub error"""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, "HUB001", details)


class HubClosedError(HubError):
    """Raised when an event is published to a hub that has been stopped"""

    def __init__(self, message: str = "Hub is closed", details: dict = None):
        super().__init__(message, details)
        self.error_code = "HUB002"


# Connection errors
class ConnectionError(RoomcastError):
    """Connection error"""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, "CONN001", details)


class ConnectionClosedError(ConnectionError):
    """Connection already closed"""

    def __init__(self, connection_id: str, details: dict = None):
        message = f"Connection closed: {connection_id}"
        super().__init__(message, details)
        self.error_code = "CONN002"
        self.connection_id = connection_id


# Protocol errors
class PayloadError(RoomcastError):
    """Payload cannot be encoded or decoded"""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, "PROTO001", details)


# Store errors
class ValidationError(RoomcastError):
    """Input validation error"""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, "STORE001", details)


class RoomNotFoundError(RoomcastError):
    """Room not found error"""

    def __init__(self, room_id: str, details: dict = None):
        message = f"Room not found: {room_id}"
        super().__init__(message, "STORE002", details)
        self.room_id = room_id


# Configuration errors
class ConfigurationError(RoomcastError):
    """Configuration error"""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, "CONFIG001", details)


class InvalidConfigurationError(ConfigurationError):
    """Invalid configuration error"""

    def __init__(self, key: str, value: str, details: dict = None):
        message = f"Invalid configuration: {key} = {value}"
        super().__init__(message, details)
        self.error_code = "CONFIG002"
        self.key = key
        self.value = value


# Error code mapping
ERROR_CODE_MAP = {
    "HUB001": HubError,
    "HUB002": HubClosedError,
    "CONN001": ConnectionError,
    "CONN002": ConnectionClosedError,
    "PROTO001": PayloadError,
    "STORE001": ValidationError,
    "STORE002": RoomNotFoundError,
    "CONFIG001": ConfigurationError,
    "CONFIG002": InvalidConfigurationError,
}
