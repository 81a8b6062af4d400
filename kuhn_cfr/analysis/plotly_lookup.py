"""Interactive Plotly strategy lookup tool for the Kuhn poker solver.

Three public functions:

    build_strategy_lookup_figure(result)
        — Interactive P(BET) heat map of a run's average strategy.
    build_comparison_figure(results, alpha)
        — One panel per run plus the closest Nash equilibrium.
    save_lookup_html(fig, path)
        — Export any figure to a self-contained HTML file.

Hover over any cell to see the infoset (card and history), the acting seat,
P(BET), and, when the run's node store is attached, the raw regret and
strategy accumulators behind it.
"""

from __future__ import annotations

import numpy as np
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from kuhn_cfr.analysis.heat_maps import (
    build_equilibrium_heatmap_data,
    build_strategy_heatmap_data,
)
from kuhn_cfr.analysis.strategy_report import estimate_alpha
from kuhn_cfr.engine.cards import DECK, Action, card_to_str
from kuhn_cfr.solvers.cfr import CfrResult, InfoSetStore
from kuhn_cfr.solvers.information_sets import DECISION_HISTORIES, KuhnInfoSet

# ─── Constants ────────────────────────────────────────────────────────────────

_ROW_LABELS: list[str] = ["P0 open", "P1 after check", "P1 facing bet", "P0 facing bet"]
_COL_LABELS: list[str] = [card_to_str(c) for c in DECK]

_COLORSCALE: str = "RdYlGn"


# ─── Hover text builder ───────────────────────────────────────────────────────


def _build_hover(data: np.ndarray, store: InfoSetStore | None) -> list[list[str]]:
    """Return a 4×3 list of hover strings for a P(BET) panel.

    Args:
        data:  (4, 3) matrix: P(BET) in [0, 1], NaN = absent.
        store: Node store to pull raw accumulators from, or None.

    Returns:
        4×3 list of HTML hover strings (empty string for absent cells).
    """
    rows: list[list[str]] = []
    for r, history in enumerate(DECISION_HISTORIES):
        row: list[str] = []
        for c, card in enumerate(DECK):
            val = data[r, c]
            if np.isnan(val):
                row.append("")
                continue
            info_set = KuhnInfoSet(history=history, card=card)
            lines = [
                f"Infoset: <b>{info_set.label()}</b>",
                f"Player: {info_set.player}",
                f"P(BET): <b>{val:.3f}</b>",
                f"Leans: {'BET' if val >= 0.5 else 'CHECK'}",
            ]
            node = store.get(info_set) if store is not None else None
            if node is not None:
                lines.append(
                    f"Regret: check {node.regret_sum[Action.CHECK]:+.3f}, "
                    f"bet {node.regret_sum[Action.BET]:+.3f}"
                )
                lines.append(
                    f"Strategy sum: check {node.strategy_sum[Action.CHECK]:.3f}, "
                    f"bet {node.strategy_sum[Action.BET]:.3f}"
                )
            row.append("<br>".join(lines))
        rows.append(row)
    return rows


# ─── Trace builder ─────────────────────────────────────────────────────────────


def _make_heatmap_trace(
    data: np.ndarray,
    hover_text: list[list[str]],
    *,
    name: str,
    showscale: bool = True,
) -> go.Heatmap:
    """Build one go.Heatmap trace for a strategy panel.

    NaN values in *data* are converted to None so Plotly renders them as
    blank (transparent) cells.
    """
    z = [[None if np.isnan(v) else v for v in row] for row in data.tolist()]
    return go.Heatmap(
        z=z,
        x=_COL_LABELS,
        y=_ROW_LABELS,
        colorscale=_COLORSCALE,
        zmin=0.0,
        zmax=1.0,
        text=hover_text,
        hovertemplate="%{text}<extra></extra>",
        showscale=showscale,
        colorbar={"title": "P(BET)" if showscale else ""},
        name=name,
    )


# ─── Public figure builders ───────────────────────────────────────────────────


def build_strategy_lookup_figure(result: CfrResult) -> go.Figure:
    """Build an interactive P(BET) heat map of a run's average strategy.

    Args:
        result: CfrResult returned by cfr.solve().

    Returns:
        go.Figure with a single heatmap trace.
    """
    data = build_strategy_heatmap_data(result)
    fig = go.Figure(
        _make_heatmap_trace(data, _build_hover(data, result.store), name=result.method)
    )
    fig.update_layout(
        title_text=f"{result.method.upper()} Strategy Lookup — P(BET)",
        title_font_size=15,
        height=420,
        width=560,
    )
    fig.update_yaxes(title_text="Decision point", autorange="reversed")
    fig.update_xaxes(title_text="Own card")
    return fig


def build_comparison_figure(results: list[CfrResult], alpha: float | None = None) -> go.Figure:
    """Build a 1×(n+1) interactive comparison: each run, then the Nash panel.

    Args:
        results: Trained runs to compare.
        alpha:   Equilibrium parameter; read off the first run when None.

    Returns:
        go.Figure with len(results) + 1 heatmap traces.
    """
    if alpha is None:
        alpha = estimate_alpha(results[0].average_strategy) if results else 1.0 / 6.0

    panels: list[tuple[str, np.ndarray, InfoSetStore | None]] = [
        (f"{r.method.upper()} ({r.n_iterations:,})", build_strategy_heatmap_data(r), r.store)
        for r in results
    ]
    panels.append((f"Nash (α={alpha:.3f})", build_equilibrium_heatmap_data(alpha), None))

    fig = make_subplots(
        rows=1,
        cols=len(panels),
        subplot_titles=[title for title, _, _ in panels],
        horizontal_spacing=0.08,
    )
    for col, (title, data, store) in enumerate(panels, start=1):
        fig.add_trace(
            _make_heatmap_trace(
                data,
                _build_hover(data, store),
                name=title,
                showscale=col == len(panels),
            ),
            row=1,
            col=col,
        )

    fig.update_layout(
        title_text="Kuhn Poker Strategy Comparison — P(BET)",
        title_font_size=15,
        height=420,
        width=380 * len(panels),
    )
    fig.update_yaxes(autorange="reversed")
    fig.update_yaxes(title_text="Decision point", col=1)
    fig.update_xaxes(title_text="Own card")
    return fig


# ─── HTML export ───────────────────────────────────────────────────────────────


def save_lookup_html(fig: go.Figure, path: str) -> None:
    """Save a Plotly figure to a self-contained HTML file.

    The resulting file can be opened in any browser.  Plotly JS is loaded
    from the CDN so the file itself remains compact.

    Args:
        fig:  Any go.Figure produced by this module.
        path: Destination file path (e.g. ``"strategy_lookup.html"``).
    """
    fig.write_html(path, include_plotlyjs="cdn")


# ─── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import sys

    from kuhn_cfr.solvers.cfr import solve

    n_iter = int(sys.argv[1]) if len(sys.argv) > 1 else 20_000
    print(f"Running CFR and MCCFR for {n_iter} iterations …")
    cfr_result = solve(n_iterations=n_iter, method="cfr", seed=42)
    mccfr_result = solve(n_iterations=n_iter, method="mccfr", seed=42)

    print("Building interactive lookup figures …")
    save_lookup_html(build_strategy_lookup_figure(cfr_result), "cfr_lookup.html")
    save_lookup_html(
        build_comparison_figure([cfr_result, mccfr_result]), "strategy_comparison_lookup.html"
    )
    print("Saved: cfr_lookup.html, strategy_comparison_lookup.html")
