"""Shared exceptions for service layer operations."""


class OpenAIJobError(Exception):
    """
    Raised when a tag inference job cannot complete.

    The message is prefixed with the job id so failures can be traced back to
    a queue entry in the worker logs.
    """

    def __init__(self, job_id: str, reason: str) -> None:
        self.job_id = job_id
        self.reason = reason
        super().__init__(f"[openai][{job_id}] {reason}")
