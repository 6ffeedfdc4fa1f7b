"""Error types raised by the assistant and converted into transcript entries."""


class AssistantError(Exception):
    """Base exception for assistant errors."""

    pass


class AssistantUnavailableError(AssistantError):
    """Raised when the LLM call has no credential configured."""

    pass


class LLMCallError(AssistantError):
    """Raised when the LLM call itself fails.

    Attributes:
        original_error: Exception raised by the client library
    """

    def __init__(self, original_error: Exception) -> None:
        self.original_error = original_error
        super().__init__(f"LLM call failed: {original_error}")

    @property
    def is_permission_error(self) -> bool:
        status = getattr(self.original_error, "status_code", None)
        return status == 403 or "403" in str(self.original_error)


class ToolExecutionError(AssistantError):
    """Raised when a tool handler fails unexpectedly.

    Attributes:
        tool_name: Name of the tool that failed
        original_error: Original exception that caused the failure
    """

    def __init__(self, tool_name: str, original_error: Exception) -> None:
        self.tool_name = tool_name
        self.original_error = original_error
        super().__init__(f"Tool '{tool_name}' failed: {original_error}")
