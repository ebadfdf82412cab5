from __future__ import annotations

from typing import Optional


class LL1DashboardError(Exception):
	"""Base class for every error raised by the dashboard."""


class ConfigError(LL1DashboardError):
	pass


class GrammarSyntaxError(LL1DashboardError):
	def __init__(self, message: str, line: Optional[int] = None) -> None:
		super().__init__(message)
		self.message = message
		self.line = line

	def __str__(self) -> str:
		if self.line is None:
			return self.message
		return f"line {self.line}: {self.message}"


class AnalysisServiceError(LL1DashboardError):
	"""The analysis service could not be reached or returned something unusable."""

	def __init__(self, message: str) -> None:
		super().__init__(message)
		self.message = message

	def __str__(self) -> str:
		return self.message


class AnalysisTransportError(AnalysisServiceError):
	pass


class AnalysisHTTPError(AnalysisServiceError):
	def __init__(self, message: str, status_code: int) -> None:
		super().__init__(message)
		self.status_code = status_code

	def __str__(self) -> str:
		return f"HTTP {self.status_code}: {self.message}"


class AnalysisDecodeError(AnalysisServiceError):
	pass
