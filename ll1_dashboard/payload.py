from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from pydantic import (
	BaseModel,
	Field,
	ValidationError,
	ValidationInfo,
	ValidatorFunctionWrapHandler,
	field_validator,
)

from ll1_dashboard.grammar_text import Grammar

log = logging.getLogger(__name__)


class GrammarPayload(BaseModel):
	order: List[str] = Field(default_factory=list)
	productions_set: Dict[str, List[str]] = Field(default_factory=dict)


class AnalysisResult(BaseModel):
	"""
	Each section is validated on its own: a section of the wrong shape is
	dropped (and its table not shown) without losing the others. A `null`
	symbol list counts as empty.
	"""

	first: Optional[Dict[str, List[str]]] = None
	follow: Optional[Dict[str, List[str]]] = None
	prediction: Optional[Dict[str, List[str]]] = None

	@field_validator("first", "follow", "prediction", mode="wrap")
	@classmethod
	def _tolerate_bad_section(cls, value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo) -> Any:
		if isinstance(value, dict):
			value = {k: ([] if v is None else v) for k, v in value.items()}
		try:
			return handler(value)
		except ValidationError as exc:
			log.warning("ignoring malformed %r section in analysis result: %d error(s)", info.field_name, exc.error_count())
			return None


class AnalysisResponse(BaseModel):
	result: Optional[AnalysisResult] = None
	grammar: Optional[GrammarPayload] = None


class ErrorPayload(BaseModel):
	message: str


def build_request(order: Sequence[str], productions: Mapping[str, Sequence[str]]) -> GrammarPayload:
	"""Merge a non-terminal order and a production mapping. The two are not cross-checked."""
	return GrammarPayload(
		order=list(order),
		productions_set={nt: list(alts) for nt, alts in productions.items()},
	)


def build_request_for(grammar: Grammar) -> GrammarPayload:
	return build_request(grammar.order, grammar.productions)


def serialize_request(payload: GrammarPayload) -> str:
	return payload.model_dump_json()
