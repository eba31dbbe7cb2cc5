"""Console tables and on-disk artifacts for fuzz runs."""

import base64
import hashlib
import json as _json
import os

from rich.console import Console
from rich.table import Table
from rich.text import Text
from tabulate import tabulate


def b64(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")

def write_json(path: str, obj: dict):
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        _json.dump(obj, f, indent=2, sort_keys=True)

def write_artifact(artifacts_dir: str, prefix: str, data_bytes: bytes, meta: dict) -> str:
    base = os.path.join(artifacts_dir, f"{prefix}_{hashlib.sha1(data_bytes).hexdigest()}")
    os.makedirs(artifacts_dir, exist_ok=True)
    with open(base + ".input", "wb") as f:
        f.write(data_bytes)
    write_json(base + ".json", meta)
    return base

def summary_rows(stats: dict) -> list:
    return [
        ["Target", stats["target"]],
        ["Total Inputs", stats["total_inputs"]],
        ["Accepted", stats["accepted"]],
        ["Rejected (None)", stats["rejected"]],
        ["Handled Exceptions", stats["handled_exceptions"]],
        ["Unexpected (Crashes)", stats["unexpected_exceptions"]],
        ["Duration (s)", stats["duration_sec"]],
        ["Artifacts dir", stats["artifacts_dir"]],
    ]

def render_summary(stats: dict, plain: bool = False, console: Console = None):
    rows = summary_rows(stats)
    if plain:
        print("\n=== Fuzzing Run Summary ===")
        print(tabulate(rows, headers=["Metric", "Value"], tablefmt="grid"))
        return
    console = console or Console()
    table = Table(title="Fuzzing Run Summary")
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Value", style="magenta")
    for k, v in rows:
        table.add_row(str(k), str(v))
    console.print(table)

def render_trace(expr: str, steps: list, outcome: str, plain: bool = False, console: Console = None):
    header = f"\n[Calculator Trace] {outcome}\n  EXPR: {expr!r}\n"
    rows = [[i, s] for i, s in enumerate(steps or [], 1)] or [["-", "(no steps recorded)"]]
    if plain:
        print(header)
        print(tabulate(rows, headers=["#", "Operation / Result"], tablefmt="grid"))
        return
    console = console or Console()
    console.print(header, markup=False)
    table = Table(title="Steps")
    table.add_column("#", style="cyan", no_wrap=True)
    table.add_column("Operation / Result", style="magenta")
    for i, s in rows:
        table.add_row(str(i), Text(str(s)))
    console.print(table)
