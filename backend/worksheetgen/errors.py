from __future__ import annotations
from typing import Optional


class WorksheetError(Exception):
	"""Base class for failures inside the generation pipeline."""


class ConfigError(WorksheetError):
	"""Missing or invalid configuration. Never retried."""


class RemoteError(WorksheetError):
	"""The inference endpoint failed or returned an unexpected envelope."""

	def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
		super().__init__(message)
		self.status_code = status_code


class ParseError(WorksheetError):
	"""Model output could not be repaired into a valid worksheet."""
