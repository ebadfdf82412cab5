from __future__ import annotations

"""
Reference LL(1) analysis service.

Implements the same JSON contract the dashboard talks to:

  POST /ll1   {"order": [...], "productions_set": {...}}
  200         {"grammar": {...}, "result": {"first": ..., "follow": ..., "prediction": ...}}
  400         {"message": "..."}

Useful for local development and tests; production deployments point the
dashboard at the real service through LL1_SERVICE_URL.
"""

import logging
from typing import Dict, List, Set, Tuple

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ll1_dashboard.payload import AnalysisResponse, AnalysisResult, ErrorPayload, GrammarPayload

log = logging.getLogger(__name__)

LAMBDA = "λ"
EOF_SYMBOL = "$"

Productions = Dict[str, List[List[str]]]


class GrammarError(ValueError):
	pass


def _symbols(alt: str) -> List[str]:
	syms = [s for s in alt.split() if s]
	return syms if syms else [LAMBDA]


def _fresh_name(base: str, taken: Set[str]) -> str:
	name = base + "'"
	while name in taken:
		name += "'"
	return name


def remove_left_recursion(order: List[str], productions: Productions) -> Tuple[List[str], Productions]:
	"""
	Remove immediate left recursion:

	  A -> A a | b      becomes      A  -> b A'
	                                 A' -> a A' | λ

	The new non-terminal is declared right after the one it came from.
	"""
	new_order: List[str] = []
	out: Productions = {}
	taken = set(order)

	for nt in order:
		alts = productions[nt]
		recursive = [alt[1:] for alt in alts if alt and alt[0] == nt]
		if not recursive:
			new_order.append(nt)
			out[nt] = alts
			continue

		prime = _fresh_name(nt, taken)
		taken.add(prime)
		betas = [alt for alt in alts if not (alt and alt[0] == nt)]

		out[nt] = [[prime] if beta == [LAMBDA] else beta + [prime] for beta in betas] or [[prime]]
		out[prime] = [(alpha or []) + [prime] for alpha in recursive] + [[LAMBDA]]
		new_order.extend([nt, prime])

	return new_order, out


def _first_of_sequence(seq: List[str], first: Dict[str, Set[str]]) -> Set[str]:
	out: Set[str] = set()
	for sym in seq:
		if sym == LAMBDA:
			continue
		if sym not in first:
			out.add(sym)
			return out
		out |= first[sym] - {LAMBDA}
		if LAMBDA not in first[sym]:
			return out
	out.add(LAMBDA)
	return out


def compute_first(productions: Productions) -> Dict[str, Set[str]]:
	first: Dict[str, Set[str]] = {nt: set() for nt in productions}
	changed = True
	while changed:
		changed = False
		for nt, alts in productions.items():
			before = len(first[nt])
			for alt in alts:
				first[nt] |= _first_of_sequence(alt, first)
			if len(first[nt]) != before:
				changed = True
	return first


def compute_follow(start: str, productions: Productions, first: Dict[str, Set[str]]) -> Dict[str, Set[str]]:
	follow: Dict[str, Set[str]] = {nt: set() for nt in productions}
	follow[start].add(EOF_SYMBOL)
	changed = True
	while changed:
		changed = False
		for lhs, alts in productions.items():
			for alt in alts:
				for i, sym in enumerate(alt):
					if sym not in productions:
						continue
					before = len(follow[sym])
					first_beta = _first_of_sequence(alt[i + 1 :], first)
					follow[sym] |= first_beta - {LAMBDA}
					if LAMBDA in first_beta:
						follow[sym] |= follow[lhs]
					if len(follow[sym]) != before:
						changed = True
	return follow


def analyze(payload: GrammarPayload) -> AnalysisResponse:
	if not payload.order:
		raise GrammarError("grammar has no non-terminals")
	missing = [nt for nt in payload.order if nt not in payload.productions_set]
	if missing:
		raise GrammarError(f"productions set not found for {', '.join(missing)}")

	productions: Productions = {nt: [_symbols(a) for a in payload.productions_set[nt]] for nt in payload.order}
	order, productions = remove_left_recursion(list(payload.order), productions)

	first = compute_first(productions)
	follow = compute_follow(order[0], productions, first)

	prediction: Dict[str, List[str]] = {}
	for nt in order:
		# a nullable non-terminal is predicted by its FOLLOW set alone
		values = follow[nt] if LAMBDA in first[nt] else first[nt]
		prediction[nt] = sorted(values)

	return AnalysisResponse(
		grammar=GrammarPayload(
			order=order,
			productions_set={nt: [" ".join(alt) for alt in productions[nt]] for nt in order},
		),
		result=AnalysisResult(
			first={nt: sorted(first[nt]) for nt in order},
			follow={nt: sorted(follow[nt]) for nt in order},
			prediction=prediction,
		),
	)


app = FastAPI(title="LL(1) Analysis Service", version="1.0.0")

app.add_middleware(
	CORSMiddleware,
	allow_origins=["*"],
	allow_methods=["GET", "POST", "OPTIONS"],
	allow_headers=["Accept", "Authorization", "Content-Type"],
)


@app.exception_handler(RequestValidationError)
async def invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
	return JSONResponse(status_code=400, content=ErrorPayload(message="invalid body").model_dump())


@app.post("/ll1")
def ll1_process(payload: GrammarPayload):
	try:
		response = analyze(payload)
	except GrammarError as exc:
		log.info("rejected grammar: %s", exc)
		return JSONResponse(status_code=400, content=ErrorPayload(message=f"validate ll1 failed: {exc}").model_dump())
	return response.model_dump(exclude_none=True)
