import os
import sys

import atheris

# Instrument imports for coverage
with atheris.instrument_imports():
    import math_parse  # noqa: F401

from mathfuzz.harness import FuzzSession, build_parser


def main(argv=None):
    argv = sys.argv if argv is None else argv
    args, _ = build_parser().parse_known_args(argv[1:])

    os.makedirs(args.artifacts_dir, exist_ok=True)
    session = FuzzSession(args)

    # Emit an initial summary so artifacts dir exists immediately
    session.periodic_summary(force=True)

    atheris.Setup(session.libfuzzer_flags(argv[0]), session.one_input)
    try:
        atheris.Fuzz()
    finally:
        # Some environments never return here; the periodic summaries keep things visible.
        session.periodic_summary(force=True)
    return 0


if __name__ == "__main__":
    raise SystemExit(main() or 0)
