from __future__ import annotations

from ll1_dashboard.errors import AnalysisTransportError
from ll1_dashboard.payload import AnalysisResponse, AnalysisResult, GrammarPayload
from ll1_dashboard.state import STATUS_ERROR, STATUS_IDLE, STATUS_OK, STATUS_PENDING, ViewState


def _response(first):
	return AnalysisResponse(result=AnalysisResult(first=first))


def test_initial_state_is_idle():
	snap = ViewState("S -> a").snapshot()
	assert snap.status == STATUS_IDLE
	assert snap.text == "S -> a"
	assert snap.result is None
	assert snap.order == ()


def test_submit_then_result():
	view = ViewState()
	sub = view.begin_submit("S -> a | b")
	assert sub.request_id == 1
	assert sub.payload.order == ["S"]
	assert view.snapshot().status == STATUS_PENDING

	assert view.receive_result(sub, _response({"S": ["a", "b"]}))
	snap = view.snapshot()
	assert snap.status == STATUS_OK
	assert snap.order == ("S",)
	assert snap.result.first == {"S": ["a", "b"]}


def test_request_ids_increase():
	view = ViewState()
	ids = [view.begin_submit("S -> a").request_id for _ in range(3)]
	assert ids == [1, 2, 3]


def test_stale_response_is_dropped():
	view = ViewState()
	old = view.begin_submit("S -> a")
	new = view.begin_submit("T -> b")
	assert view.receive_result(new, _response({"T": ["b"]}))
	assert not view.receive_result(old, _response({"S": ["a"]}))
	assert view.snapshot().result.first == {"T": ["b"]}


def test_stale_error_is_dropped():
	view = ViewState()
	old = view.begin_submit("S -> a")
	new = view.begin_submit("T -> b")
	view.receive_result(new, _response({"T": ["b"]}))
	assert not view.receive_error(old, AnalysisTransportError("boom"))
	assert view.snapshot().status == STATUS_OK


def test_error_keeps_previous_result():
	view = ViewState()
	first = view.begin_submit("S -> a")
	view.receive_result(first, _response({"S": ["a"]}))
	second = view.begin_submit("T -> b")
	assert view.receive_error(second, AnalysisTransportError("service down"))
	snap = view.snapshot()
	assert snap.status == STATUS_ERROR
	assert snap.message == "service down"
	assert snap.order == ("S",)
	assert snap.result.first == {"S": ["a"]}
	assert snap.text == "T -> b"


def test_order_comes_from_echoed_grammar():
	view = ViewState()
	sub = view.begin_submit("E -> E + T | T\nT -> id")
	echoed = GrammarPayload(order=["E", "E'", "T"], productions_set={})
	view.receive_result(sub, AnalysisResponse(grammar=echoed, result=AnalysisResult(first={"E": ["id"]})))
	assert view.snapshot().order == ("E", "E'", "T")


def test_update_text():
	view = ViewState()
	view.update_text("A -> a")
	assert view.snapshot().text == "A -> a"


def test_snapshot_carries_issues_of_latest_submission():
	view = ViewState()
	view.begin_submit("S -> a\n-> b")
	assert [i.line for i in view.snapshot().issues] == [2]
	view.begin_submit("S -> a")
	assert view.snapshot().issues == ()
