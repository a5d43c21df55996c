# backend/combine_page.py

import sys

from pydantic import ValidationError

from combiner import CombineError, combine
from settings import load_settings


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if argv:
        print("Usage: singlepage  (configure with SINGLEPAGE_* env vars or .env)", file=sys.stderr)
        return 1

    try:
        settings = load_settings()
    except ValidationError as e:
        print(f"[ERROR] Invalid configuration: {e}", file=sys.stderr)
        return 1

    try:
        result = combine(settings)
    except CombineError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    print(f"✅ Wrote {result.lines_written} lines to {result.output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
