from __future__ import annotations

from fastapi.testclient import TestClient

from ll1_dashboard.service import LAMBDA, app, remove_left_recursion

client = TestClient(app)

EXPR = {
	"order": ["E", "T", "F"],
	"productions_set": {
		"E": ["E + T", "T"],
		"T": ["T * F", "F"],
		"F": ["( E )", "id"],
	},
}


def test_remove_left_recursion():
	order, prods = remove_left_recursion(["A"], {"A": [["A", "a"], ["b"]]})
	assert order == ["A", "A'"]
	assert prods["A"] == [["b", "A'"]]
	assert prods["A'"] == [["a", "A'"], [LAMBDA]]


def test_expression_grammar():
	r = client.post("/ll1", json=EXPR)
	assert r.status_code == 200
	body = r.json()
	assert body["grammar"]["order"] == ["E", "E'", "T", "T'", "F"]
	assert body["grammar"]["productions_set"]["E"] == ["T E'"]
	assert body["grammar"]["productions_set"]["E'"] == ["+ T E'", LAMBDA]

	res = body["result"]
	assert res["first"]["E"] == ["(", "id"]
	assert res["first"]["E'"] == ["+", LAMBDA]
	assert res["follow"]["E"] == ["$", ")"]
	assert res["follow"]["T"] == ["$", ")", "+"]
	assert res["prediction"]["E'"] == ["$", ")"]
	assert res["prediction"]["F"] == ["(", "id"]


def test_lambda_alternative():
	r = client.post("/ll1", json={"order": ["S"], "productions_set": {"S": ["a S", LAMBDA]}})
	res = r.json()["result"]
	assert res["first"]["S"] == ["a", LAMBDA]
	assert res["follow"]["S"] == ["$"]


def test_empty_grammar_is_rejected():
	r = client.post("/ll1", json={"order": [], "productions_set": {}})
	assert r.status_code == 400
	assert "no non-terminals" in r.json()["message"]


def test_unknown_nonterminal_in_order_is_rejected():
	r = client.post("/ll1", json={"order": ["S", "A"], "productions_set": {"S": ["a"]}})
	assert r.status_code == 400
	assert "A" in r.json()["message"]


def test_invalid_body():
	r = client.post("/ll1", json={"order": "S", "productions_set": []})
	assert r.status_code == 400
	assert r.json() == {"message": "invalid body"}


def test_nullable_nonterminal_is_predicted_by_follow():
	r = client.post("/ll1", json={"order": ["S", "A"], "productions_set": {"S": ["A b"], "A": ["a", LAMBDA]}})
	res = r.json()["result"]
	assert res["first"]["A"] == ["a", LAMBDA]
	assert res["follow"]["A"] == ["b"]
	assert res["prediction"]["A"] == ["b"]
	assert res["prediction"]["S"] == ["a", "b"]
