from __future__ import annotations
from typing import List, Optional


class GalaxyError(Exception):
    """Base class for every failure raised by the relay core."""


class ValidationError(GalaxyError):
    pass


class PayloadTooLarge(ValidationError):
    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"File too large: {size} bytes (limit {limit} bytes)")


class RemoteApiError(GalaxyError):
    def __init__(self, status: int, body: str):
        self.status = status
        self.body = body
        super().__init__(f"Galaxy API error {status}: {body}")


class RemoteTimeout(GalaxyError):
    def __init__(self, endpoint: str, timeout: float):
        self.endpoint = endpoint
        self.timeout = timeout
        super().__init__(f"Galaxy API request {endpoint} timed out after {timeout:g}s")


class RemoteConnectionError(GalaxyError):
    def __init__(self, endpoint: str, reason: str):
        self.endpoint = endpoint
        self.reason = reason
        super().__init__(f"Galaxy API request {endpoint} failed to connect: {reason}")


class UnrecognizedUploadResponse(GalaxyError):
    def __init__(self, response: object):
        self.response = response
        super().__init__("Could not get dataset information from the upload response")


class AllToolCandidatesFailed(GalaxyError):
    def __init__(self, last_error: Optional[BaseException], attempts: Optional[List[str]] = None):
        self.last_error = last_error
        self.attempts = list(attempts or [])
        if last_error is None:
            msg = "All AMRFinder tool ids failed"
        else:
            msg = str(last_error)
        super().__init__(msg)


class EmptyJobList(GalaxyError):
    def __init__(self, tool_id: str, response: object):
        self.tool_id = tool_id
        self.response = response
        super().__init__(f"Tool {tool_id} was accepted but returned no jobs")
