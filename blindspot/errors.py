"""Failure kinds for one analysis submission.

Every kind is terminal for the request that raised it; nothing here is
retried automatically.
"""


class BlindspotError(Exception):
    kind = "error"
    user_message = "Failed to analyze assumptions"

    def __init__(self, details: str):
        super().__init__(details)
        self.details = details


class InvalidRequest(BlindspotError):
    """Required input for the selected mode is missing."""

    kind = "invalid_request"
    user_message = "Invalid request"


class UpstreamFailure(BlindspotError):
    """The LLM call itself failed (network, auth, rate limit)."""

    kind = "upstream_failure"

    def __init__(self, details: str, status_code: int | None = None):
        super().__init__(details)
        self.status_code = status_code


class MalformedResponse(BlindspotError):
    """The model reply is not JSON, even after fence stripping.

    ``raw`` keeps the full reply for logs. It is never sent to the client.
    """

    kind = "malformed_response"

    def __init__(self, details: str, raw: str):
        super().__init__(details)
        self.raw = raw


class SchemaViolation(BlindspotError):
    """Parsed JSON does not have the AnalysisResult shape."""

    kind = "schema_violation"

    def __init__(self, problems: list[str]):
        super().__init__("; ".join(problems))
        self.problems = problems


class Timeout(BlindspotError):
    kind = "timeout"
    user_message = "The analysis took too long"


class KeychainUnavailable(BlindspotError):
    """The OS keychain could not store or remove the API key."""

    kind = "keychain_unavailable"
    user_message = "Failed to update the stored API key"
