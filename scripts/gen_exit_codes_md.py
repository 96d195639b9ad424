#!/usr/bin/env python3
"""Render docs/exit_codes.md from huffcode.errors.EXIT_CODES.

  python scripts/gen_exit_codes_md.py          rewrite the doc
  python scripts/gen_exit_codes_md.py --check  exit 1 if the doc is stale
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

REPO = Path(__file__).resolve().parents[1]
DOC = REPO / "docs" / "exit_codes.md"


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="gen_exit_codes_md")
    ap.add_argument("--check", action="store_true", help="Only compare, do not write")
    ap.add_argument("--out", type=Path, default=DOC, help="Target markdown file")
    ns = ap.parse_args(argv)

    sys.path.insert(0, str(REPO / "src"))
    from huffcode.errors import render_exit_codes_markdown  # noqa: E402

    text = render_exit_codes_markdown()
    out: Path = ns.out

    if ns.check:
        current = out.read_text(encoding="utf-8") if out.is_file() else None
        if current != text:
            print(f"[huffcode] {out} is stale: rerun without --check", file=sys.stderr)
            return 1
        print(f"[huffcode] {out} is up to date")
        return 0

    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text, encoding="utf-8")
    print(f"[huffcode] wrote {out} ({len(text.splitlines())} lines)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
