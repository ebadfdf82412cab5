from __future__ import annotations

import csv

import pytest

import analyze_grammar
from ll1_dashboard.errors import AnalysisHTTPError
from ll1_dashboard.service import analyze


class StubClient:
	error = None

	def __init__(self, url, *, timeout, retries):
		self.url = url

	def analyze(self, payload):
		if StubClient.error is not None:
			raise StubClient.error
		return analyze(payload)

	def close(self):
		pass


@pytest.fixture(autouse=True)
def stub_client(monkeypatch):
	StubClient.error = None
	monkeypatch.setattr(analyze_grammar, "AnalysisClient", StubClient)
	for var in ("LL1_SERVICE_URL", "LL1_SERVICE_TIMEOUT", "LL1_SERVICE_RETRIES", "LL1_DECLARED_ORDER", "LL1_LOG_LEVEL"):
		monkeypatch.delenv(var, raising=False)


def test_prints_tables_and_writes_csv(tmp_path, capsys):
	src = tmp_path / "grammar.txt"
	src.write_text("S -> ( S ) | id\n", encoding="utf-8")
	out = tmp_path / "out"

	assert analyze_grammar.main([str(src), "--csv-dir", str(out)]) == 0
	printed = capsys.readouterr().out
	assert "=== FIRST ===" in printed
	assert "S -> ( S ) | id" in printed

	with (out / "LL1_FIRST.csv").open(encoding="utf-8") as f:
		rows = list(csv.reader(f))
	assert rows == [["Non-terminal", "FIRST set"], ["S", "( id"]]
	assert (out / "LL1_FOLLOW.csv").exists()
	assert (out / "LL1_PREDICTION.csv").exists()


def test_service_error_exit_code(tmp_path, capsys):
	src = tmp_path / "grammar.txt"
	src.write_text("S -> a\n", encoding="utf-8")
	StubClient.error = AnalysisHTTPError("validate ll1 failed", 400)

	assert analyze_grammar.main([str(src)]) == 1
	assert "analysis failed" in capsys.readouterr().err


def test_strict_mode_reports_line(tmp_path, capsys):
	src = tmp_path / "grammar.txt"
	src.write_text("S -> a\n-> b\n", encoding="utf-8")

	assert analyze_grammar.main([str(src), "--strict"]) == 1
	assert "line 2" in capsys.readouterr().err
