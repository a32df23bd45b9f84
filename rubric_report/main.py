from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from . import config
from .models import reset_engine
from .pipeline.ingest import load_rubric
from .pipeline.rubric import Level, rating_label
from .pipeline.run import export_assessment
from .pipeline.state import (
    clear_rating,
    get_or_create_assessment,
    load_snapshot,
    set_note,
    set_rating,
)

app = typer.Typer(help="Curriculum rubric ratings and printable summary")

ASSESSMENT_OPTION = typer.Option(config.DEFAULT_ASSESSMENT, "--assessment", "-a", help="Assessment name")
OUT_OPTION = typer.Option(None, "--out", help="Output directory")


def _use_out(out: Optional[Path]) -> None:
    if out:
        config.set_out_dir(out)
        reset_engine()


@app.command()
def rate(
    domain: str = typer.Argument(..., help="Rubric domain"),
    level: str = typer.Argument(..., help="Emerging, Developing, Embedding or Excelling"),
    assessment: str = ASSESSMENT_OPTION,
    out: Optional[Path] = OUT_OPTION,
) -> None:
    _use_out(out)
    try:
        parsed = Level.parse(level)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="level") from exc
    set_rating(get_or_create_assessment(assessment), domain, parsed)
    typer.echo(f"{domain}: {rating_label(parsed)}")


@app.command()
def clear(
    domain: str = typer.Argument(..., help="Rubric domain"),
    assessment: str = ASSESSMENT_OPTION,
    out: Optional[Path] = OUT_OPTION,
) -> None:
    _use_out(out)
    clear_rating(get_or_create_assessment(assessment), domain)
    typer.echo(f"{domain}: {rating_label(None)}")


@app.command()
def note(
    domain: str = typer.Argument(..., help="Rubric domain"),
    evidence: Optional[str] = typer.Option(None, "--evidence", help="Evidence text (markdown list allowed)"),
    next_steps: Optional[str] = typer.Option(None, "--next-steps", help="Next steps text"),
    assessment: str = ASSESSMENT_OPTION,
    out: Optional[Path] = OUT_OPTION,
) -> None:
    if evidence is None and next_steps is None:
        raise typer.BadParameter("Pass --evidence and/or --next-steps")
    _use_out(out)
    record = get_or_create_assessment(assessment)
    if evidence is not None:
        set_note(record, domain, "evidence", evidence)
    if next_steps is not None:
        set_note(record, domain, "next_steps", next_steps)
    typer.echo(f"Saved notes for {domain}")


@app.command()
def show(
    csv: Path = typer.Option(..., "--csv", help="Rubric CSV"),
    assessment: str = ASSESSMENT_OPTION,
    out: Optional[Path] = OUT_OPTION,
) -> None:
    _use_out(out)
    snapshot = load_snapshot(get_or_create_assessment(assessment))
    for record in load_rubric(csv):
        if not record.domain:
            continue
        level = snapshot.ratings.get(record.domain)
        flags = []
        if snapshot.evidence.get(record.domain, "").strip():
            flags.append("evidence")
        if snapshot.next_steps.get(record.domain, "").strip():
            flags.append("next steps")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        typer.echo(f"{record.domain}: {rating_label(level)}{suffix}")


@app.command()
def export(
    csv: Path = typer.Option(..., "--csv", help="Rubric CSV"),
    assessment: str = ASSESSMENT_OPTION,
    out: Optional[Path] = OUT_OPTION,
    letterhead: Optional[Path] = typer.Option(None, "--letterhead", help="Letterhead image"),
    preview: bool = typer.Option(False, "--preview", help="Also render PNG previews"),
) -> None:
    _use_out(out)
    try:
        result = export_assessment(assessment, csv, letterhead=letterhead, preview=preview)
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"FAILED: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Wrote {result.pdf} ({result.page_count} pages)")
    for path in result.previews:
        typer.echo(f"Preview: {path}")


if __name__ == "__main__":
    app()
