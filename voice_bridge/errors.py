"""
Exception types raised by the voice bridge.

None of these ever reach the remote peer as an error frame. Inside a drafting
cycle they are logged and the cycle degrades to fewer frames.
"""


class VoiceBridgeError(Exception):
    """Base class for all voice bridge errors."""


class StreamTransportError(VoiceBridgeError):
    """The completion stream failed to open or broke mid-iteration."""


class ToolError(VoiceBridgeError):
    """Base class for failures while executing a tool call."""

    def __init__(self, tool_name: str, message: str):
        super().__init__(message)
        self.tool_name = tool_name


class ArgumentParseError(ToolError):
    """A tool call's argument string is not a JSON object."""


class UnknownToolError(ToolError):
    """No handler is registered under the requested tool name."""

    def __init__(self, tool_name: str):
        super().__init__(tool_name, f"Unknown tool: {tool_name}")


class ToolNotFoundError(ToolError):
    """A tool's lookup found nothing for the given identifier."""


class ShapeViolationError(VoiceBridgeError):
    """An inbound WebSocket message does not match the request schema."""


class CallRegistrationError(VoiceBridgeError):
    """The orchestration service refused or failed to register a call."""


class TelephonyError(VoiceBridgeError):
    """A telephony provider operation failed."""
