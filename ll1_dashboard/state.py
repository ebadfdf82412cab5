from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional, Tuple

from ll1_dashboard.grammar_text import Grammar, GrammarIssue, parse_grammar_text
from ll1_dashboard.payload import AnalysisResponse, AnalysisResult, GrammarPayload, build_request_for

log = logging.getLogger(__name__)

STATUS_IDLE = "idle"
STATUS_PENDING = "pending"
STATUS_OK = "ok"
STATUS_ERROR = "error"


@dataclass(frozen=True)
class Submission:
	request_id: int
	grammar: Grammar
	payload: GrammarPayload


@dataclass(frozen=True)
class Snapshot:
	text: str
	order: tuple
	result: Optional[AnalysisResult]
	status: str
	message: Optional[str]
	latest_request_id: int
	issues: Tuple[GrammarIssue, ...] = ()


class ViewState:
	"""
	Dashboard state changed only through explicit transitions.

	Every submission gets a new, strictly increasing request id. A result or
	error for any id other than the latest one is stale and is dropped, so a
	slow earlier response can never overwrite a newer one. A failed request
	keeps the previously displayed result and grammar.
	"""

	def __init__(self, text: str = "") -> None:
		self._lock = threading.Lock()
		self._text = text
		self._order: tuple = ()
		self._result: Optional[AnalysisResult] = None
		self._status = STATUS_IDLE
		self._message: Optional[str] = None
		self._issues: Tuple[GrammarIssue, ...] = ()
		self._next_id = 0

	def update_text(self, text: str) -> None:
		with self._lock:
			self._text = text

	def begin_submit(self, text: str, *, strict: bool = False) -> Submission:
		grammar = parse_grammar_text(text, strict=strict)
		payload = build_request_for(grammar)
		with self._lock:
			self._text = text
			self._next_id += 1
			request_id = self._next_id
			self._status = STATUS_PENDING
			self._message = None
			self._issues = grammar.issues
		log.debug("submission %d: %d non-terminal(s)", request_id, len(grammar.order))
		return Submission(request_id=request_id, grammar=grammar, payload=payload)

	def receive_result(self, submission: Submission, response: AnalysisResponse) -> bool:
		with self._lock:
			if submission.request_id != self._next_id:
				log.info("dropping stale response for request %d (latest is %d)", submission.request_id, self._next_id)
				return False
			if response.grammar is not None and response.grammar.order:
				self._order = tuple(response.grammar.order)
			else:
				self._order = submission.grammar.order
			self._result = response.result
			self._status = STATUS_OK
			self._message = None
			return True

	def receive_error(self, submission: Submission, error: Exception) -> bool:
		with self._lock:
			if submission.request_id != self._next_id:
				log.info("dropping stale error for request %d (latest is %d)", submission.request_id, self._next_id)
				return False
			self._status = STATUS_ERROR
			self._message = str(error)
			return True

	def snapshot(self) -> Snapshot:
		with self._lock:
			return Snapshot(
				text=self._text,
				order=self._order,
				result=self._result,
				status=self._status,
				message=self._message,
				latest_request_id=self._next_id,
				issues=self._issues,
			)
