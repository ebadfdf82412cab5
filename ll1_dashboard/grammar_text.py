from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List, Tuple

from ll1_dashboard.errors import GrammarSyntaxError

log = logging.getLogger(__name__)

# `->` and `|` are equivalent token boundaries.
SEPARATOR = re.compile(r"\s*->\s*|\s*\|\s*")


class Severity(Enum):
	WARNING = auto()
	ERROR = auto()


@dataclass(frozen=True)
class GrammarIssue:
	severity: Severity
	line: int
	message: str
	text: str = ""

	def __str__(self) -> str:
		return f"line {self.line}: {self.message}"


@dataclass(frozen=True)
class Grammar:
	order: Tuple[str, ...]
	productions: Dict[str, Tuple[str, ...]]
	issues: Tuple[GrammarIssue, ...] = field(default=(), compare=False)

	@property
	def nonterminals(self) -> Tuple[str, ...]:
		return self.order

	def alternatives_for(self, nonterminal: str) -> Tuple[str, ...]:
		return self.productions.get(nonterminal, ())

	@property
	def has_errors(self) -> bool:
		return any(i.severity is Severity.ERROR for i in self.issues)

	def to_payload(self):
		from ll1_dashboard.payload import build_request_for

		return build_request_for(self)


def split_alternatives(line: str) -> List[str]:
	"""Tokenize one grammar line: `[lhs, alt1, alt2, ...]`."""
	return SEPARATOR.split(line.strip())


def parse_grammar_text(text: str, *, strict: bool = False) -> Grammar:
	"""
	Parse grammar text such as:

	  P -> P or D | D
	  D -> D and C
	  D -> C

	into the declared non-terminal order and the alternatives of each one.
	A non-terminal may be spread over several lines; its alternatives are
	appended in reading order and it keeps the position of its first line.

	Malformed input:
	- blank lines are ignored.
	- a line with an empty left-hand side is skipped (ERROR issue).
	- a line without separators declares the non-terminal with no alternatives (WARNING issue).
	- empty alternatives (`A -> a |`) are dropped (WARNING issue).

	With `strict=True` the first issue raises GrammarSyntaxError instead.
	"""
	order: List[str] = []
	productions: Dict[str, List[str]] = {}
	issues: List[GrammarIssue] = []

	def report(severity: Severity, lineno: int, message: str, raw: str) -> None:
		if strict:
			raise GrammarSyntaxError(message, line=lineno)
		issue = GrammarIssue(severity, lineno, message, raw)
		log.debug("grammar issue: %s", issue)
		issues.append(issue)

	for lineno, raw_line in enumerate((text or "").split("\n"), start=1):
		line = raw_line.strip()
		if not line:
			continue

		tokens = split_alternatives(line)
		lhs, alternatives = tokens[0], tokens[1:]
		if not lhs:
			report(Severity.ERROR, lineno, "missing non-terminal before '->'", raw_line)
			continue
		if not alternatives:
			report(Severity.WARNING, lineno, f"no productions given for {lhs!r}", raw_line)

		if lhs not in productions:
			order.append(lhs)
			productions[lhs] = []

		for alt in alternatives:
			if not alt:
				report(Severity.WARNING, lineno, f"empty alternative for {lhs!r}", raw_line)
				continue
			productions[lhs].append(alt)

	return Grammar(
		order=tuple(order),
		productions={nt: tuple(alts) for nt, alts in productions.items()},
		issues=tuple(issues),
	)
