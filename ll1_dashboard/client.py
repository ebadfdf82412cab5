from __future__ import annotations

import logging
from typing import Optional

import requests
from pydantic import ValidationError

from ll1_dashboard.config import Settings
from ll1_dashboard.errors import (
	AnalysisDecodeError,
	AnalysisHTTPError,
	AnalysisTransportError,
)
from ll1_dashboard.payload import AnalysisResponse, ErrorPayload, GrammarPayload, serialize_request

log = logging.getLogger(__name__)

HEADERS = {"Content-Type": "application/json"}


class AnalysisClient:
	"""
	One request/response exchange with the LL(1) analysis service.

	Transport failures (connection refused, timeouts) are retried at most
	`retries` times; HTTP error statuses are reported immediately.
	"""

	def __init__(
		self,
		url: str,
		*,
		timeout: float = 5.0,
		retries: int = 1,
		session: Optional[requests.Session] = None,
	) -> None:
		self.url = url
		self.timeout = timeout
		self.retries = retries
		self._session = session or requests.Session()

	@classmethod
	def from_settings(cls, settings: Settings, session: Optional[requests.Session] = None) -> "AnalysisClient":
		return cls(settings.service_url, timeout=settings.timeout, retries=settings.retries, session=session)

	def analyze(self, payload: GrammarPayload) -> AnalysisResponse:
		body = serialize_request(payload)
		resp = self._post(body.encode("utf-8"))

		if resp.status_code >= 400:
			raise AnalysisHTTPError(_error_message(resp), resp.status_code)

		try:
			return AnalysisResponse.model_validate_json(resp.content)
		except ValidationError as exc:
			raise AnalysisDecodeError(f"unexpected response from analysis service: {exc.error_count()} error(s)") from exc

	def _post(self, body: bytes) -> requests.Response:
		attempts = self.retries + 1
		attempt = 0
		while True:
			attempt += 1
			try:
				log.info("POST %s (attempt %d/%d)", self.url, attempt, attempts)
				return self._session.post(self.url, data=body, headers=HEADERS, timeout=self.timeout)
			except (requests.ConnectionError, requests.Timeout) as exc:
				if attempt >= attempts:
					log.warning("analysis service unreachable: %s", exc)
					raise AnalysisTransportError(f"analysis service unreachable at {self.url}: {exc}") from exc
				log.warning("transient failure talking to %s, retrying: %s", self.url, exc)
			except requests.RequestException as exc:
				raise AnalysisTransportError(f"request to {self.url} failed: {exc}") from exc

	def close(self) -> None:
		self._session.close()


def _error_message(resp: requests.Response) -> str:
	try:
		return ErrorPayload.model_validate_json(resp.content).message
	except ValidationError:
		return (resp.text or resp.reason or "analysis failed").strip()
