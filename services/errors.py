"""
Error taxonomy for the intake relay.

Transport failures and upstream rejections are not raised; they come back as a
failed RelayResult so the caller always gets status/body for diagnosis.
"""
from __future__ import annotations


class RelayError(Exception):
    """Base class for errors surfaced by the relay layer."""


class ConfigurationError(RelayError):
    """A required configuration value is missing or malformed."""


class SubmissionNotFoundError(RelayError):
    def __init__(self, submission_id: str):
        super().__init__(f"Submission {submission_id} not found")
        self.submission_id = submission_id


class StaleDataError(RelayError):
    """Stored submission no longer passes validation; sending is blocked."""

    def __init__(self, submission_id: str, errors: dict):
        super().__init__(f"Submission {submission_id} is invalid; fix it before sending")
        self.submission_id = submission_id
        self.errors = errors
