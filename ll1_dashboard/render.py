from __future__ import annotations

from dataclasses import dataclass
from html import escape
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ll1_dashboard.payload import AnalysisResult

PLACEHOLDER = "No data to display"
NONTERMINAL_HEADER = "Non-terminal"

# (result attribute, table title, second column header)
TABLES: Tuple[Tuple[str, str, str], ...] = (
	("first", "FIRST", "FIRST set"),
	("follow", "FOLLOW", "FOLLOW set"),
	("prediction", "PREDICTION", "Prediction set"),
)


@dataclass(frozen=True)
class DisplayRow:
	key: str
	symbols: Tuple[str, ...]

	@property
	def display(self) -> str:
		return ", ".join(self.symbols)


@dataclass(frozen=True)
class ResultTable:
	kind: str
	title: str
	headers: Tuple[str, str]
	rows: Tuple[DisplayRow, ...]


@dataclass(frozen=True)
class Rendering:
	tables: Tuple[ResultTable, ...] = ()
	placeholder: Optional[str] = None

	@property
	def empty(self) -> bool:
		return not self.tables


def _ordered_keys(mapping: Mapping[str, Sequence[str]], order: Sequence[str], declared_order: bool) -> List[str]:
	if not declared_order:
		return list(mapping.keys())
	keys = [nt for nt in order if nt in mapping]
	keys.extend(k for k in mapping.keys() if k not in keys)
	return keys


def build_rows(
	mapping: Mapping[str, Sequence[str]],
	order: Sequence[str] = (),
	*,
	declared_order: bool = False,
) -> Tuple[DisplayRow, ...]:
	"""One row per key; symbols are kept verbatim (no sorting or dedup)."""
	return tuple(
		DisplayRow(key=key, symbols=tuple(mapping[key] or ()))
		for key in _ordered_keys(mapping, order, declared_order)
	)


def render_result(
	order: Optional[Sequence[str]],
	result: Optional[AnalysisResult],
	*,
	declared_order: bool = False,
) -> Rendering:
	"""
	Turn an analysis result into display tables.

	Nothing is rendered unless there is a non-terminal order and the result
	carries a FIRST mapping. FIRST is then always shown; FOLLOW and
	PREDICTION are shown only when present. Rows follow the mapping's own
	key order unless `declared_order` is set, in which case keys known to
	the grammar come first in declaration order.
	"""
	if not order or result is None or result.first is None:
		return Rendering(placeholder=PLACEHOLDER)

	tables: List[ResultTable] = []
	for attr, title, header in TABLES:
		mapping = getattr(result, attr)
		if mapping is None:
			continue
		tables.append(
			ResultTable(
				kind=attr,
				title=title,
				headers=(NONTERMINAL_HEADER, header),
				rows=build_rows(mapping, order, declared_order=declared_order),
			)
		)
	return Rendering(tables=tuple(tables))


def rendering_to_dict(rendering: Rendering) -> Dict[str, Any]:
	return {
		"placeholder": rendering.placeholder,
		"tables": [
			{
				"kind": t.kind,
				"title": t.title,
				"headers": list(t.headers),
				"rows": [{"key": r.key, "symbols": list(r.symbols), "display": r.display} for r in t.rows],
			}
			for t in rendering.tables
		],
	}


def render_html(rendering: Rendering) -> str:
	if rendering.empty:
		return f'<p class="placeholder">{escape(rendering.placeholder or PLACEHOLDER)}</p>'

	parts: List[str] = []
	for t in rendering.tables:
		parts.append(f'<table class="result" data-kind="{escape(t.kind)}">')
		parts.append(f"<caption>{escape(t.title)}</caption>")
		parts.append(f"<thead><tr><th>{escape(t.headers[0])}</th><th>{escape(t.headers[1])}</th></tr></thead>")
		parts.append("<tbody>")
		for r in t.rows:
			parts.append(f"<tr><td>{escape(r.key)}</td><td>{escape(r.display)}</td></tr>")
		parts.append("</tbody></table>")
	return "\n".join(parts)
