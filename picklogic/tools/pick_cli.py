#!/usr/bin/env python3
"""picklogic-pick: evaluate pickables against data.

Modes (combinable):
- readout: print the governing logic of every pickable as readable text
- pick: build a data bag from --data/--set and print the selected pickable
- fill: fill a {HELPERS.<name>} template from the same data bag
- table: pick for every row of a CSV/TSV/Parquet table

Examples:
  picklogic-pick --list-builtins
  picklogic-pick --builtin temperature --readout
  picklogic-pick --builtin temperature --set system=F --set temperature=101.2
  picklogic-pick rules.yaml --data facts.json --exclude fever --messages fr.yaml
  picklogic-pick rules.json --table patients.csv --id-col Patient --out picks.csv --on-error skip
  picklogic-pick --fill "{HELPERS.referenceHelper} years" --set constitution=1787 --set declaration=1776
"""

from __future__ import annotations

import argparse
import json
import logging
from typing import Any, Dict, List, Optional

from picklogic.batch import pick_for_table, read_observations, write_picks
from picklogic.builtins import BUILTIN_PICKABLES
from picklogic.config import (
    Localizer,
    PickableSet,
    datapoint,
    load_data_bag,
    load_messages,
    load_pickables,
)
from picklogic.errors import PickLogicError
from picklogic.helpers import fill_template
from picklogic.picker import Picker


def _parse_assignment(text: str) -> tuple[str, Any]:
    if "=" not in text:
        raise SystemExit(f"--set expects key=value, got: {text}")
    key, raw = text.split("=", 1)
    try:
        value = json.loads(raw)
    except ValueError:
        value = raw
    return key.strip(), value


def _resolve_pickables(args: argparse.Namespace) -> Optional[PickableSet]:
    if args.builtin:
        if args.builtin not in BUILTIN_PICKABLES:
            raise SystemExit(f"Unknown built-in: {args.builtin}. Use --list-builtins.")
        return BUILTIN_PICKABLES[args.builtin]
    if args.pickables:
        return load_pickables(args.pickables)
    return None


def _build_data_bag(args: argparse.Namespace) -> Dict[str, Dict[str, Any]]:
    bag: Dict[str, Dict[str, Any]] = {}
    if args.data:
        bag.update(load_data_bag(args.data))
    for assignment in args.set:
        key, value = _parse_assignment(assignment)
        bag[key] = datapoint(value)
    return bag


def _print_readouts(picker: Picker, localize: Optional[Localizer]) -> None:
    print("The governing logic may be expressed as:\n")
    for raw, readouts in picker.readouts(localize):
        label = raw.get("name") or raw.get("id") or "(unnamed)"
        print(f"[{label}]")
        for r in readouts:
            print(f"  {r.conjunction} {r.condition_string}".rstrip())
        payload = raw.get("payload")
        if payload is not None:
            print(f"  ----> {json.dumps(payload, ensure_ascii=False)}")
        print()


def main(argv: Optional[List[str]] = None) -> None:
    ap = argparse.ArgumentParser(
        description="PickLogic: pick one outcome from declarative conditions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    ap.add_argument("pickables", nargs="?", help="Pickables file (JSON/YAML)")
    ap.add_argument("--builtin", default=None, help="Use a built-in pickable set instead of a file")
    ap.add_argument("--list-builtins", action="store_true", help="List built-in pickable sets and exit")
    ap.add_argument("--default-key", default=None, help="Data key for conditions that omit dataKey")
    ap.add_argument("--readout", action="store_true", help="Print the logic of every pickable")
    ap.add_argument("--data", default=None, help="Data bag file (JSON/YAML)")
    ap.add_argument(
        "--set",
        action="append",
        default=[],
        help="Data value as key=value (value parsed as JSON when possible). Can be repeated.",
    )
    ap.add_argument("--exclude", action="append", default=[], help="Pickable id to exclude. Can be repeated.")
    ap.add_argument("--fill", default=None, help="Template string to fill from the data bag")
    ap.add_argument("--messages", default=None, help="Message translation table (JSON/YAML)")
    ap.add_argument("--table", default=None, help="Pick for every row of this CSV/TSV/Parquet table")
    ap.add_argument("--id-col", default=None, help="Row label column for --table warnings")
    ap.add_argument("--out", default=None, help="Output table for --table (default: print)")
    ap.add_argument(
        "--on-error",
        choices=["raise", "skip"],
        default="raise",
        help="--table: abort on unevaluable rows, or skip them with a warning",
    )
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = ap.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.list_builtins:
        print("Built-in pickable sets:\n")
        for k, ps in BUILTIN_PICKABLES.items():
            ids = ", ".join(str(p.get("id")) for p in ps.pickables)
            print(f"- {k}: {len(ps.pickables)} pickables ({ids})")
        return

    try:
        localize = load_messages(args.messages) if args.messages else None
        bag = _build_data_bag(args)

        if args.fill:
            print(fill_template(args.fill, bag))

        pickable_set = _resolve_pickables(args)
        if pickable_set is None:
            if not args.fill:
                ap.error("a pickables file or --builtin is required")
            return

        picker = Picker(pickable_set.pickables, args.default_key or pickable_set.default_key)

        if args.readout:
            _print_readouts(picker, localize)

        if args.table:
            df = read_observations(args.table)
            res = pick_for_table(
                df, picker, id_col=args.id_col, excluded_ids=args.exclude, on_error=args.on_error
            )
            for w in res.warnings:
                print(f"WARNING: {w}")
            if args.out:
                write_picks(res, args.out)
                print(f"Picks written to: {args.out}")
            else:
                print(res.df.to_csv(index=False), end="")

        if bag:
            pick = picker.pick_for_data(bag, args.exclude)
            if pick is None:
                print("No pickable matched.")
            else:
                print(json.dumps({"id": pick.get("id"), "payload": pick.get("payload")}, ensure_ascii=False))
    except PickLogicError as e:
        raise SystemExit(f"Cannot decide: {e}")
    except ValueError as e:
        raise SystemExit(str(e))


if __name__ == "__main__":
    main()
