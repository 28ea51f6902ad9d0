from __future__ import annotations

import transmute.lib.cli as click
from transmute import curve
from transmute.core import ConfigProvider, di


@click.command("calculate")
@click.argument("score", type=float)
@click.argument("total", type=float)
@click.option(
    "-f",
    "--min-floor",
    type=click.IntRange(0, 100),
    default=None,
    help="grade given for a zero score; defaults to transmutation.min_floor",
)
@di.inject
def calculate(
    score: float,
    total: float,
    min_floor: int | None,
    config: ConfigProvider = di.Provide["config_provider"],
) -> int:
    """Show the transmuted grade for SCORE out of TOTAL items."""
    if score < 0 or total <= 0:
        raise click.UsageError("Score and total items must be non-negative numbers")
    if score > total:
        raise click.UsageError("Score cannot exceed total items")

    floor = min_floor if min_floor is not None else config.get_config("min_floor")
    if floor is None:
        floor = curve.DEFAULT_MIN_FLOOR

    rs = curve.explain(score, total, floor)
    if rs.value is None or rs.segment is None:
        failure = rs.failure.value if rs.failure else "unknown"
        raise click.ClickException(f"no transmuted grade for {score:g} / {total:g} ({failure})")

    click.echo(f"Transmuted Grade: {rs.value:g}")
    click.echo(f"Score: {score:g} / {total:g} ({rs.percent:.2f}%)")
    click.echo(f"Segment: {rs.segment.value} (minimum floor {floor})")
    return 0
