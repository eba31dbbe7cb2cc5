"""
Fuzz session for the expression evaluator.

A session owns the run configuration (an argparse namespace), the run stats
and the crash artifacts. `one_input` is the libFuzzer callback; it does not
depend on atheris, so the classification logic can be driven directly.

Outcome classes:
- accepted / rejected: the target returned a value / None
- handled: the target raised one of EXPECTED_EXCEPTIONS[target]
- crash: anything else; recorded as an artifact and re-raised unless
  --continue_on_crash
"""

import argparse
import os
import random
import time
import traceback
from functools import partial

from math_parse import GrammarError, Int32OverflowError, evaluate, evaluate_with_trace, math_parse

from . import report

ARITHMETIC_FAULTS = (ZeroDivisionError, Int32OverflowError)

TARGET_FUNCS = {
    "parse": math_parse,
    "strict": partial(math_parse, strict=True),
    "evaluate": evaluate,
    "trace": evaluate_with_trace,
}

# Expected (non-crash) exceptions per target
EXPECTED_EXCEPTIONS = {
    "parse": ARITHMETIC_FAULTS,                   # grammar failures come back as None
    "strict": ARITHMETIC_FAULTS,
    "evaluate": ARITHMETIC_FAULTS + (GrammarError,),
    "trace": ARITHMETIC_FAULTS + (GrammarError,),
}

# Targets whose public contract maps a grammar failure to None
NONE_ON_REJECT = ("parse", "strict")

DEFAULT_SUMMARY_INTERVAL = 5.0

# Demo expressions to guarantee visible operations when requested
CALC_EXPR_SEEDS = [
    "(1+2)*3-2",
    "2 ^ (1 + 3 * 2)",
    "7 / 2 + 8 * 2",
    "(100 - 25) / 5",
    "((3+3)*(2+1)) - 4",
]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mathfuzz", description="Fuzz the integer expression evaluator.")
    parser.add_argument("--target", choices=list(TARGET_FUNCS.keys()), default="parse")
    parser.add_argument("--artifacts-dir", default="reports")
    parser.add_argument("--time_budget", type=int, default=60)  # seconds
    parser.add_argument("--max_len", type=int, default=4096)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--continue_on_crash", action="store_true",
                        help="Record crashes but continue (better console summary).")
    parser.add_argument("--trace_calc", type=int, default=0,
                        help="Print up to N traced evaluations.")
    parser.add_argument("--trace_errors", action="store_true",
                        help="Also print traces for expected failures.")
    parser.add_argument("--demo_ops", action="store_true",
                        help="After an error trace, also print a demo expression so real operations are visible.")
    parser.add_argument("--summary_interval", type=float, default=DEFAULT_SUMMARY_INTERVAL,
                        help="How often to write/print summary during fuzzing (seconds).")
    parser.add_argument("--no_fail", action="store_true",
                        help="Swallow all exceptions (expected or not) so the run is smooth/quiet.")
    parser.add_argument("--plain", action="store_true",
                        help="Render tables with tabulate instead of rich.")
    parser.add_argument("corpus", nargs="*")
    return parser


class FuzzSession:
    def __init__(self, args: argparse.Namespace):
        self.args = args
        self.trace_left = args.trace_calc
        self.rng = random.Random(args.seed)
        self.last_summary_ts = 0.0
        self.stats = {
            "target": args.target,
            "mode": "no-fail" if args.no_fail else "default",
            "start_time": time.time(),
            "duration_sec": None,
            "total_inputs": 0,
            "accepted": 0,
            "rejected": 0,
            "handled_exceptions": 0,
            "unexpected_exceptions": 0,
            "artifacts_dir": args.artifacts_dir,
            "crashes": [],
            "seed": args.seed,
        }

    # ------------------- artifact & summary -------------------
    def write_summary(self):
        self.stats["duration_sec"] = round(time.time() - self.stats["start_time"], 3)
        report.write_json(os.path.join(self.args.artifacts_dir, "run_summary.json"), self.stats)
        # ensure at least one extra file so CI artifacts are never empty
        with open(os.path.join(self.args.artifacts_dir, "SUCCESS.txt"), "w") as f:
            f.write("Fuzz run in progress/completed. See run_summary.json for details.\n")

    def periodic_summary(self, force: bool = False):
        """Write JSON + print table periodically so we don't rely on finally."""
        now = time.time()
        interval = max(0.5, self.args.summary_interval)
        if not force and (now - self.last_summary_ts) < interval:
            return
        self.last_summary_ts = now
        self.write_summary()
        report.render_summary(self.stats, plain=self.args.plain)

    def _trace(self, expr: str, steps: list, outcome: str):
        report.render_trace(expr, steps, outcome, plain=self.args.plain)
        self.trace_left -= 1

    def _maybe_demo_calc_ops(self):
        """Print a demo evaluation so you always see actual operations."""
        expr = self.rng.choice(CALC_EXPR_SEEDS)
        try:
            result, steps = evaluate_with_trace(expr)
        except (GrammarError,) + ARITHMETIC_FAULTS as e:
            self._trace(expr, getattr(e, "_trace_steps", []), f"DEMO ERROR: {type(e).__name__}")
            return
        self._trace(expr, steps, f"DEMO OK (result {result})")

    # ------------------- fuzz logic -------------------
    def classify(self, e: Exception, data_str: str, data_bytes: bytes, steps_if_any=None):
        # Smooth mode: treat all exceptions as handled and return silently
        if self.args.no_fail:
            self.stats["handled_exceptions"] += 1
            return

        expected = EXPECTED_EXCEPTIONS.get(self.args.target, tuple())
        if isinstance(e, expected):
            self.stats["handled_exceptions"] += 1
            if self.args.trace_errors and self.trace_left > 0:
                self._trace(data_str, steps_if_any or [], f"EXPECTED FAILURE: {type(e).__name__}")
            return

        self.stats["unexpected_exceptions"] += 1
        crash_meta = {
            "target": self.args.target,
            "exception_type": type(e).__name__,
            "exception_message": str(e),
            "traceback": traceback.format_exc(),
            "input_b64": report.b64(data_bytes),
            "input_preview": data_str[:200],
            "seed": self.args.seed,
            "ts": time.time(),
            "trace_steps": steps_if_any or [],
        }
        path = report.write_artifact(self.args.artifacts_dir, "crash", data_bytes, crash_meta)
        self.stats["crashes"].append(path)

        if self.args.continue_on_crash:
            if self.trace_left > 0:
                self._trace(data_str, steps_if_any or [], f"UNEXPECTED CRASH: {type(e).__name__}")
            return
        raise e

    def _count(self, result):
        if result is None:
            self.stats["rejected"] += 1
        else:
            self.stats["accepted"] += 1

    def one_input(self, data: bytes):
        self.stats["total_inputs"] += 1
        s = data.decode("utf-8", errors="ignore")

        try:
            # Traced path: show step-by-step operations while the budget lasts
            if self.trace_left > 0:
                try:
                    result, steps = evaluate_with_trace(s, strict=self.args.target == "strict")
                except Exception as e:
                    steps = getattr(e, "_trace_steps", [])
                    if isinstance(e, GrammarError) and self.args.target in NONE_ON_REJECT:
                        self._count(None)
                        if self.args.trace_errors:
                            self._trace(s, steps, "REJECTED (None)")
                    else:
                        self.classify(e, s, data, steps_if_any=steps)
                    if self.args.demo_ops and self.trace_left > 0:
                        self._maybe_demo_calc_ops()
                    return
                self._count(result)
                self._trace(s, steps, f"OK (result {result})")
                return

            try:
                result = TARGET_FUNCS[self.args.target](s)
            except Exception as e:
                self.classify(e, s, data)
                return
            self._count(result)
        finally:
            self.periodic_summary()

    def libfuzzer_flags(self, argv0: str) -> list:
        flags = [argv0, f"-max_total_time={self.args.time_budget}", f"-max_len={self.args.max_len}"]
        if self.args.seed is not None:
            flags.append(f"-seed={self.args.seed}")
        flags.extend(self.args.corpus or [])
        return flags
