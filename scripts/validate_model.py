#!/usr/bin/env python3
# Validate a goal model JSON file: schema check, then cycles + n-ary consistency.
import json, sys
from jsonschema import Draft202012Validator
from pydantic import ValidationError

from goalgraph.adapters.diagram import build_snapshot
from goalgraph.messages import CYCLE_TITLE, SYNTAX_TITLE, report_messages
from goalgraph.schema import GraphSnapshot, MalformedGraph, snapshot_json_schema
from goalgraph.validate import load_config, validate

def main() -> int:
    if len(sys.argv) != 2:
        print("Usage: python scripts/validate_model.py <model.json>")
        return 2

    try:
        with open(sys.argv[1], encoding="utf-8") as f:
            data = json.load(f)
        if isinstance(data, dict) and ("links" in data or "elements" in data):
            snapshot = build_snapshot(data.get("elements") or [], data.get("links") or [])
        else:
            errs = list(Draft202012Validator(snapshot_json_schema()).iter_errors(data))
            if errs:
                for e in errs:
                    print(f"- {e.message}")
                return 2
            snapshot = GraphSnapshot(**data)
    except (MalformedGraph, ValidationError, ValueError) as e:
        print(f"[x] {e}", file=sys.stderr)
        return 2

    report = validate(snapshot, cfg=load_config(digest=True))
    if report.cycles:
        print(f"{CYCLE_TITLE}:")
        for i, cycle in enumerate(report.cycles):
            print(f"  #{i}: " + " -> ".join(str(n) for n in cycle))
    messages = report_messages(report, snapshot)
    if messages:
        print(f"{SYNTAX_TITLE}:")
        for m in messages:
            print("  " + m.suggestion)
    if report.digest is not None:
        print(f"[digest] {report.digest.model_dump_json()}")
    if report.ok:
        print("OK")
        return 0
    return 1

if __name__ == "__main__":
    sys.exit(main())
