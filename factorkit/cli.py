from __future__ import annotations
import argparse
import json
import logging
import random
import sys
from typing import List, Optional

from .config import Settings
from .errors import InvalidInput
from .factorize import analyze
from .numtext import int_text
from .primality import is_probable_prime
from .validate import parse_positive_int


def _line(out: dict) -> str:
    n, status = out["n"], out["status"]
    if status in ("unit", "prime"):
        return f"{n}\t{status}"
    if status == "composite":
        return f"{n}\tfactors\t{' '.join(out['factors'])}"
    return f"{n}\tincomplete\t{' '.join(out['factors'])}\t| {' '.join(out['unsplit'])}"


def process(raw, args, settings: Settings, rng) -> int:
    try:
        n = parse_positive_int(raw, max_bits=args.max_bits)
    except InvalidInput as e:
        print(f"# skip: {e}", file=sys.stderr)
        return 1
    if args.prime_only:
        verdict = is_probable_prime(n, rounds=args.rounds, rng=rng)
        if args.json:
            print(json.dumps({"n": int_text(n), "is_probable_prime": verdict}))
        else:
            print(f"{int_text(n)}\t{'prime' if verdict else 'composite'}")
        return 0
    out = analyze(n, rounds=args.rounds, rng=rng,
                  max_attempts=settings.rho_attempts, max_splits=settings.max_splits)
    print(json.dumps(out) if args.json else _line(out))
    return 1 if out["status"] == "incomplete" else 0


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="factorkit",
                                 description="Miller–Rabin primality and Pollard rho factorization.")
    ap.add_argument("N", nargs="*", help="integers to analyze (reads stdin when omitted)")
    ap.add_argument("--rounds", type=int, default=settings.rounds, help="Miller–Rabin rounds")
    ap.add_argument("--seed", type=int, default=None, help="seed for random witnesses (reproducible runs)")
    ap.add_argument("--max-bits", type=int, default=None, help="reject inputs wider than this")
    ap.add_argument("--prime-only", action="store_true", help="only print the primality verdict")
    ap.add_argument("--json", action="store_true", help="one JSON object per input")
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    settings = Settings.from_env()
    args = build_parser(settings).parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")
    if args.rounds < 1:
        print("--rounds must be >= 1", file=sys.stderr)
        return 2
    rng = random.Random(args.seed) if args.seed is not None else None

    rc = 0
    if args.N:
        for raw in args.N:
            rc |= process(raw, args, settings, rng)
    else:
        for line in sys.stdin:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            rc |= process(line, args, settings, rng)
    return rc


if __name__ == "__main__":
    raise SystemExit(main())
