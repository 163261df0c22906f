from __future__ import annotations

import argparse
import random
import sys
from typing import List, Optional


def generate(
    books: int,
    libraries: int,
    days: int,
    score_min: int = 0,
    score_max: int = 100,
    held_min: int = 1,
    held_max: int = 20,
    signup_min: int = 1,
    signup_max: int = 10,
    rate_min: int = 1,
    rate_max: int = 5,
    rng: Optional[random.Random] = None,
) -> str:
    rng = rng or random.Random()

    lines = [f"{books} {libraries} {days}"]
    lines.append(" ".join(str(rng.randint(score_min, score_max)) for _ in range(books)))

    for _ in range(libraries):
        held_max_here = max(0, min(held_max, books))
        held_min_here = min(max(0, held_min), held_max_here)
        held = rng.randint(held_min_here, held_max_here)
        book_ids: List[int] = rng.sample(range(books), held)
        signup = rng.randint(max(1, signup_min), max(1, signup_min, signup_max))
        rate = rng.randint(max(1, rate_min), max(1, rate_min, rate_max))
        lines.append(f"{held} {signup} {rate}")
        lines.append(" ".join(str(book_id) for book_id in book_ids))

    return "\n".join(lines) + "\n"


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Generate random book scanning instances")
    ap.add_argument("-B", "--books", type=int, required=True, help="Number of books")
    ap.add_argument("-L", "--libraries", type=int, required=True, help="Number of libraries")
    ap.add_argument("-D", "--days", type=int, required=True, help="Day budget")
    ap.add_argument("-o", "--output", help="Output file (default stdout)")
    ap.add_argument("--seed", type=int, help="Random seed")
    ap.add_argument("--score-min", type=int, default=0, help="Min book score")
    ap.add_argument("--score-max", type=int, default=100, help="Max book score")
    ap.add_argument("--held-min", type=int, default=1, help="Min books held per library")
    ap.add_argument("--held-max", type=int, default=20, help="Max books held per library")
    ap.add_argument("--signup-min", type=int, default=1, help="Min signup days")
    ap.add_argument("--signup-max", type=int, default=10, help="Max signup days")
    ap.add_argument("--rate-min", type=int, default=1, help="Min books scanned per day")
    ap.add_argument("--rate-max", type=int, default=5, help="Max books scanned per day")
    args = ap.parse_args(argv)

    text = generate(
        args.books,
        args.libraries,
        args.days,
        score_min=args.score_min,
        score_max=args.score_max,
        held_min=args.held_min,
        held_max=args.held_max,
        signup_min=args.signup_min,
        signup_max=args.signup_max,
        rate_min=args.rate_min,
        rate_max=args.rate_max,
        rng=random.Random(args.seed),
    )
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(text)
    else:
        sys.stdout.write(text)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
