from __future__ import annotations

"""
Submit a grammar file to the LL(1) analysis service and print the FIRST,
FOLLOW and prediction tables.

Optionally export each table as CSV (Excel can open these directly) and,
with the `xlsx` extra installed, as a single workbook.

Usage:
  python -X utf8 analyze_grammar.py grammar.txt
  python -X utf8 analyze_grammar.py grammar.txt --csv-dir out --xlsx out/LL1_Tables.xlsx
"""

import argparse
import csv
import sys
from pathlib import Path
from typing import List, Optional

from ll1_dashboard.client import AnalysisClient
from ll1_dashboard.config import Settings, configure_logging
from ll1_dashboard.errors import AnalysisServiceError, ConfigError, GrammarSyntaxError
from ll1_dashboard.grammar_text import parse_grammar_text
from ll1_dashboard.render import Rendering, ResultTable, render_result


def print_rendering(rendering: Rendering) -> None:
	if rendering.empty:
		print(rendering.placeholder)
		return
	for t in rendering.tables:
		print(f"\n=== {t.title} ===")
		width = max([len(t.headers[0])] + [len(r.key) for r in t.rows])
		print(f"{t.headers[0].ljust(width)} | {t.headers[1]}")
		for r in t.rows:
			print(f"{r.key.ljust(width)} | {r.display}")


def export_table_csv(out_dir: Path, table: ResultTable) -> Path:
	out_dir.mkdir(parents=True, exist_ok=True)
	out_path = out_dir / f"LL1_{table.title}.csv"
	with out_path.open("w", newline="", encoding="utf-8") as f:
		w = csv.writer(f)
		w.writerow(list(table.headers))
		for r in table.rows:
			w.writerow([r.key, " ".join(r.symbols)])
	return out_path


def export_xlsx(out_path: Path, rendering: Rendering) -> None:
	try:
		import openpyxl
		from openpyxl.utils import get_column_letter
	except ImportError:
		raise SystemExit("xlsx export needs openpyxl: pip install 'll1-dashboard[xlsx]'") from None

	wb = openpyxl.Workbook()
	wb.remove(wb.active)
	for t in rendering.tables:
		ws = wb.create_sheet(t.title)
		ws.append(list(t.headers))
		for r in t.rows:
			ws.append([r.key, r.display])
		for col in range(1, ws.max_column + 1):
			ws.column_dimensions[get_column_letter(col)].width = 22 if col == 1 else 40

	out_path.parent.mkdir(parents=True, exist_ok=True)
	wb.save(out_path)


def main(argv: Optional[List[str]] = None) -> int:
	ap = argparse.ArgumentParser(description="Compute FIRST/FOLLOW/prediction sets for a grammar file.")
	ap.add_argument("grammar", type=Path, help="grammar text file, one `A -> x | y` rule per line")
	ap.add_argument("--url", help="analysis endpoint (default: LL1_SERVICE_URL or http://localhost:3002/ll1)")
	ap.add_argument("--strict", action="store_true", help="reject malformed grammar lines instead of skipping them")
	ap.add_argument("--declared-order", action="store_true", help="order rows by declared non-terminal order")
	ap.add_argument("--csv-dir", type=Path, help="write one CSV file per table into this directory")
	ap.add_argument("--xlsx", type=Path, help="write all tables into one .xlsx workbook")
	args = ap.parse_args(argv)

	try:
		settings = Settings.from_env()
	except ConfigError as exc:
		print(f"configuration error: {exc}", file=sys.stderr)
		return 2
	configure_logging(settings.log_level)

	text = args.grammar.read_text(encoding="utf-8")
	try:
		grammar = parse_grammar_text(text, strict=args.strict)
	except GrammarSyntaxError as exc:
		print(f"{args.grammar}: {exc}", file=sys.stderr)
		return 1
	for issue in grammar.issues:
		print(f"{args.grammar}: {issue.severity.name.lower()}: {issue}", file=sys.stderr)

	client = AnalysisClient(
		args.url or settings.service_url,
		timeout=settings.timeout,
		retries=settings.retries,
	)
	try:
		response = client.analyze(grammar.to_payload())
	except AnalysisServiceError as exc:
		print(f"analysis failed: {exc}", file=sys.stderr)
		return 1
	finally:
		client.close()

	order = response.grammar.order if response.grammar is not None and response.grammar.order else grammar.order
	rendering = render_result(order, response.result, declared_order=args.declared_order or settings.declared_order)

	print("=== GRAMMAR ===")
	for nt in grammar.order:
		print(f"{nt} -> {' | '.join(grammar.alternatives_for(nt))}")
	print_rendering(rendering)

	if args.csv_dir is not None:
		for t in rendering.tables:
			print("Wrote:", export_table_csv(args.csv_dir, t))
	if args.xlsx is not None and not rendering.empty:
		export_xlsx(args.xlsx, rendering)
		print("Wrote:", args.xlsx)
	return 0


if __name__ == "__main__":
	sys.exit(main())
