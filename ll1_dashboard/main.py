from __future__ import annotations

import logging
from functools import lru_cache
from html import escape
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel

from ll1_dashboard.client import AnalysisClient
from ll1_dashboard.config import Settings, configure_logging
from ll1_dashboard.errors import AnalysisServiceError, GrammarSyntaxError
from ll1_dashboard.grammar_text import Grammar, parse_grammar_text
from ll1_dashboard.payload import build_request_for
from ll1_dashboard.render import Rendering, render_html, render_result, rendering_to_dict
from ll1_dashboard.state import Snapshot, ViewState

log = logging.getLogger(__name__)

SAMPLE_GRAMMAR = """AL -> id := P
P -> P or D | D
D -> D and C | C
C -> S | not ( P )
S -> ( P ) | OP REL OP | true | false
REL -> = | < | <= | > | >= | <>
OP -> id | num"""


@lru_cache(maxsize=1)
def get_settings() -> Settings:
	settings = Settings.from_env()
	configure_logging(settings.log_level)
	return settings


@lru_cache(maxsize=1)
def get_client() -> AnalysisClient:
	return AnalysisClient.from_settings(get_settings())


state = ViewState(text=SAMPLE_GRAMMAR)


def get_state() -> ViewState:
	return state


app = FastAPI(title="LL(1) Grammar Dashboard", version="1.0.0")

app.add_middleware(
	CORSMiddleware,
	allow_origins=["*"],
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
)


class GrammarTextRequest(BaseModel):
	text: str
	strict: bool = False


def _issues(grammar: Grammar) -> list:
	return [
		{"severity": i.severity.name, "line": i.line, "message": i.message, "text": i.text}
		for i in grammar.issues
	]


def _render(snap: Snapshot, settings: Settings) -> Rendering:
	return render_result(snap.order, snap.result, declared_order=settings.declared_order)


def _state_json(snap: Snapshot, settings: Settings) -> Dict[str, Any]:
	return {
		"request_id": snap.latest_request_id,
		"status": snap.status,
		"message": snap.message,
		"order": list(snap.order),
		"rendering": rendering_to_dict(_render(snap, settings)),
	}


@app.get("/", response_class=HTMLResponse)
def index(settings: Settings = Depends(get_settings), view: ViewState = Depends(get_state)) -> HTMLResponse:
	snap = view.snapshot()
	status = ""
	if snap.status == "error":
		status = f'<p class="status error">Request failed: {escape(snap.message or "")}</p>'
	elif snap.status == "pending":
		status = '<p class="status">Waiting for the analysis service...</p>'
	if snap.issues:
		status += '<ul class="issues">' + "".join(
			f'<li class="{i.severity.name.lower()}">{escape(str(i))}</li>' for i in snap.issues
		) + "</ul>"
	return HTMLResponse(
		PAGE.format(
			text=escape(snap.text),
			status=status,
			tables=render_html(_render(snap, settings)),
		)
	)


@app.get("/health")
def health() -> Dict[str, str]:
	return {"status": "ok"}


@app.post("/api/parse")
def parse_only(req: GrammarTextRequest):
	"""Parse grammar text and return the payload that would be sent, without calling the service."""
	try:
		grammar = parse_grammar_text(req.text, strict=req.strict)
	except GrammarSyntaxError as exc:
		return JSONResponse(status_code=400, content={"message": str(exc), "line": exc.line})
	return {
		"payload": build_request_for(grammar).model_dump(),
		"issues": _issues(grammar),
	}


@app.get("/api/state")
def current_state(settings: Settings = Depends(get_settings), view: ViewState = Depends(get_state)) -> Dict[str, Any]:
	return _state_json(view.snapshot(), settings)


@app.post("/api/submit")
def submit(
	req: GrammarTextRequest,
	settings: Settings = Depends(get_settings),
	client: AnalysisClient = Depends(get_client),
	view: ViewState = Depends(get_state),
):
	try:
		submission = view.begin_submit(req.text, strict=req.strict)
	except GrammarSyntaxError as exc:
		return JSONResponse(status_code=400, content={"message": str(exc), "line": exc.line})

	if submission.grammar.issues:
		log.warning("grammar has %d issue(s); submitting best-effort parse", len(submission.grammar.issues))

	error: Optional[AnalysisServiceError] = None
	try:
		response = client.analyze(submission.payload)
	except AnalysisServiceError as exc:
		log.warning("analysis request %d failed: %s", submission.request_id, exc)
		error = exc
		view.receive_error(submission, exc)
	else:
		view.receive_result(submission, response)

	body = _state_json(view.snapshot(), settings)
	body["issues"] = _issues(submission.grammar)
	return JSONResponse(status_code=502 if error is not None else 200, content=body)


PAGE = """<!doctype html>
<html>
<head>
<meta charset="utf-8">
<title>LL(1) Grammar Dashboard</title>
<style>
textarea {{ width: 100%; height: 200px; padding: 10px; box-sizing: border-box; font-family: monospace; }}
button {{ padding: 10px; margin-top: 10px; }}
table.result {{ border-collapse: collapse; width: 30%; margin: 1rem 0; border: 1px solid black; }}
table.result th, table.result td {{ border: 1px solid black; padding: 0.5rem; }}
.status.error {{ color: #b00020; }}
.issues .error {{ color: #b00020; }}
.issues .warning {{ color: #8a6d00; }}
</style>
</head>
<body>
<h2>Enter the grammar</h2>
<textarea id="grammar">{text}</textarea>
<label><input type="checkbox" id="strict"> Reject malformed lines</label>
<button id="submit">Submit</button>
<div id="status">{status}</div>
<div id="results">{tables}</div>
<script>
document.getElementById("submit").addEventListener("click", async () => {{
	const text = document.getElementById("grammar").value;
	const strict = document.getElementById("strict").checked;
	const resp = await fetch("/api/submit", {{
		method: "POST",
		headers: {{"Content-Type": "application/json"}},
		body: JSON.stringify({{text, strict}}),
	}});
	if (resp.status === 400) {{
		const body = await resp.json();
		const p = document.createElement("p");
		p.className = "status error";
		p.textContent = "Invalid grammar: " + body.message;
		document.getElementById("status").replaceChildren(p);
		return;
	}}
	window.location.reload();
}});
</script>
</body>
</html>
"""
