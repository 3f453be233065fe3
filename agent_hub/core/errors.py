"""Exception types shared by the agent loop, event pipeline and scheduler."""


class AgentHubError(Exception):
    """Base class for errors raised by Agent Hub components."""


class InvalidInput(AgentHubError):
    """Raised when a request or event is malformed."""


class UnknownDepartment(InvalidInput):
    """Raised when a department has no agent configuration."""

    def __init__(self, department: str):
        super().__init__(f"Unknown department: {department}")
        self.department = department


class ToolNotFound(AgentHubError):
    """Raised when the model asks for a tool the department does not declare."""

    def __init__(self, tool_name: str):
        super().__init__(f"Tool not found: {tool_name}")
        self.tool_name = tool_name


class ToolInputError(AgentHubError):
    """Raised when tool input is missing fields its schema requires."""


class UpstreamUnavailable(AgentHubError):
    """Raised when the completion endpoint fails (network, auth, rate limit)."""


class AgentCallError(AgentHubError):
    """Raised when a nested call to the agent chat endpoint fails."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
