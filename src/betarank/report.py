"""Plotly rendering of a single ranking result."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import plotly.express as px

from betarank.domain.models import RankResult


def write_ranking_report(result: RankResult, output_html_path: str) -> Path:
    """Render scores and per-benchmark betas as a standalone HTML page."""
    output = Path(output_html_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    primary, secondary = result.benchmarks
    title = f"Beta ranking vs {primary.base} / {secondary.base} ({result.lookback_days}d)"

    frame = result.to_frame()
    scored = frame[frame["score"].notna()]
    if scored.empty:
        empty_df = pd.DataFrame({"ticker": ["no-scores"], "score": [0.0]})
        figure = px.bar(empty_df, x="ticker", y="score", title=title)
        figure.write_html(str(output), include_plotlyjs="cdn")
        return output

    scores = px.bar(
        scored,
        x="ticker",
        y="score",
        title=title,
        hover_data=["rank", "base"],
    )
    beta_columns = [f"beta_{primary.base}", f"beta_{secondary.base}"]
    betas = scored.melt(
        id_vars=["ticker"],
        value_vars=beta_columns,
        var_name="benchmark",
        value_name="beta",
    )
    beta_bars = px.bar(
        betas,
        x="ticker",
        y="beta",
        color="benchmark",
        barmode="group",
        title="Beta per benchmark",
    )
    html_parts = [
        "<html><head><meta charset='utf-8'><title>betarank report</title></head><body>",
        scores.to_html(full_html=False, include_plotlyjs="cdn"),
        beta_bars.to_html(full_html=False, include_plotlyjs=False),
    ]
    failed = frame[frame["error"].notna()]
    if not failed.empty:
        html_parts.append(failed[["ticker", "error"]].to_html(index=False))
    html_parts.append("</body></html>")
    output.write_text("".join(html_parts), encoding="utf-8")
    return output
