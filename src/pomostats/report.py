"""Report generation for pomostats.

Reads the JSON written by ``pomostats analyze run`` and renders a Markdown
report using a Jinja2 template.  The template lives in
``templates/report.md.j2`` next to this module.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict

import typer
from jinja2 import Environment, FileSystemLoader, select_autoescape

from .config import HOUR_NAMES, WEEKDAY_NAMES

app = typer.Typer(name="report")


def _decode(data: Dict[str, Any], key: str) -> Any:
    """Undo the JSON-string encoding of one statistics field."""
    value = data.get(key)
    if isinstance(value, str):
        return json.loads(value)
    return value


def render_report(data: Dict[str, Any]) -> str:
    """Render analysis findings to Markdown."""
    weekdays = _decode(data, "weekdays") or {"pomodoros": [0] * 7, "names": WEEKDAY_NAMES}
    hours = _decode(data, "hours") or {"pomodoros": [0] * 24, "names": HOUR_NAMES}
    days_hours = _decode(data, "daysHours") or [[0] * 24 for _ in WEEKDAY_NAMES]
    this_dir = os.path.dirname(os.path.abspath(__file__))
    env = Environment(
        loader=FileSystemLoader(os.path.join(this_dir, "templates")),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    tmpl = env.get_template("report.md.j2")
    return tmpl.render(
        board=data.get("board") or "Trello board",
        total=data.get("pomodoroAmount", 0),
        weekdays=list(zip(weekdays["names"], weekdays["pomodoros"])),
        hours=list(zip(hours["names"], hours["pomodoros"])),
        grid=list(zip(WEEKDAY_NAMES, days_hours)),
        hour_names=HOUR_NAMES,
        cards=sorted(data.get("cards", []), key=lambda c: -c["pomodoros"]),
    )


@app.command()
def render(findings: str = typer.Option(..., help="Path to analysis JSON file"),
           out: str = typer.Option(..., help="Path to write Markdown report")) -> None:
    """Generate a Markdown report from analysis findings."""
    try:
        with open(findings, "r", encoding="utf-8") as f:
            data: Dict[str, Any] = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(code=1)
    rendered = render_report(data)
    out_path = os.path.abspath(out)
    os.makedirs(os.path.dirname(out_path), exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f_out:
        f_out.write(rendered)
    typer.echo(f"Report written to {out}")
