"""Strategy heat maps for the Kuhn poker solver.

Two public data-builder functions return NumPy matrices that can be used
programmatically or passed to the plot helpers:

    build_strategy_heatmap_data(result)     — P(BET) matrix from a trained run
    build_equilibrium_heatmap_data(alpha)   — P(BET) matrix of a known Nash

Four public plot functions render matplotlib figures:

    plot_strategy_heatmap(data, title, ...)     — single panel
    plot_cfr_strategy_heatmap(result, ...)      — convenience wrapper
    plot_strategy_comparison(results, ...)      — runs side by side + Nash
    plot_convergence(results, ...)              — running average value

Matrix convention (both builders):
    Shape  : (4, 3) — rows = decision histories ["", "c", "b", "cb"],
                       cols = cards [J, Q, K]
    Values : P(BET) in [0, 1]; np.nan = infoset absent from the strategy
"""

from __future__ import annotations

import matplotlib
import matplotlib.colors
import matplotlib.figure
import matplotlib.pyplot as plt
import numpy as np

from kuhn_cfr.analysis.strategy_report import equilibrium_bet_probs, estimate_alpha
from kuhn_cfr.engine.cards import DECK, Action, card_to_str
from kuhn_cfr.solvers.cfr import KUHN_GAME_VALUE, CfrResult
from kuhn_cfr.solvers.information_sets import DECISION_HISTORIES, KuhnInfoSet

# ─── Constants ────────────────────────────────────────────────────────────────

_ROW_LABELS: list[str] = [
    "P0 open",
    "P1 after check",
    "P1 facing bet",
    "P0 facing bet",
]
_COL_LABELS: list[str] = [card_to_str(c) for c in DECK]
_NAN_COLOR: str = "#cccccc"


def _make_continuous_cmap() -> matplotlib.colors.Colormap:
    """RdYlGn gradient: red=P(BET)=0, green=P(BET)=1, grey=absent (NaN)."""
    cmap = matplotlib.colormaps["RdYlGn"].copy()
    cmap.set_bad(color=_NAN_COLOR)
    return cmap


_CONTINUOUS_CMAP: matplotlib.colors.Colormap = _make_continuous_cmap()


# ─── Data builders ────────────────────────────────────────────────────────────


def _matrix_from_bet_probs(bet_probs: dict[KuhnInfoSet, float]) -> np.ndarray:
    data = np.full((len(DECISION_HISTORIES), len(DECK)), np.nan)
    for r, history in enumerate(DECISION_HISTORIES):
        for c, card in enumerate(DECK):
            p_bet = bet_probs.get(KuhnInfoSet(history=history, card=card))
            if p_bet is not None:
                data[r, c] = p_bet
    return data


def build_strategy_heatmap_data(result: CfrResult) -> np.ndarray:
    """Return the (4, 3) P(BET) matrix of a run's average strategy.

    Args:
        result: CfrResult returned by cfr.solve().

    Returns:
        float64 matrix; np.nan where the run never visited the infoset.
    """
    return _matrix_from_bet_probs(
        {
            info_set: probs.get(Action.BET, 0.0)
            for info_set, probs in result.average_strategy.items()
        }
    )


def build_equilibrium_heatmap_data(alpha: float = 1.0 / 6.0) -> np.ndarray:
    """Return the (4, 3) P(BET) matrix of the Nash equilibrium with parameter α."""
    return _matrix_from_bet_probs(equilibrium_bet_probs(alpha))


# ─── Rendering helper ─────────────────────────────────────────────────────────


def _render_panel(
    ax: matplotlib.axes.Axes,
    data: np.ndarray,
) -> matplotlib.image.AxesImage:
    """Render one heat-map panel onto *ax* and return the AxesImage.

    Sets axis ticks, tick labels, and cell annotations.  The caller is
    responsible for setting the title.
    """
    masked = np.ma.masked_invalid(data)
    im = ax.imshow(masked, cmap=_CONTINUOUS_CMAP, vmin=0.0, vmax=1.0, aspect="auto")

    ax.set_xticks(range(len(_COL_LABELS)))
    ax.set_xticklabels(_COL_LABELS, fontsize=9)
    ax.set_yticks(range(len(_ROW_LABELS)))
    ax.set_yticklabels(_ROW_LABELS, fontsize=9)
    ax.set_xlabel("Own card", fontsize=9)

    for r in range(data.shape[0]):
        for c in range(data.shape[1]):
            val = data[r, c]
            if np.isnan(val):
                continue
            ax.text(
                c,
                r,
                f"{val:.2f}",
                ha="center",
                va="center",
                fontsize=9,
                color="black" if 0.25 < val < 0.75 else "white",
                fontweight="bold",
            )

    return im


def _finish(fig: matplotlib.figure.Figure, show: bool, save_path: str | None) -> None:
    plt.tight_layout()
    if save_path is not None:
        fig.savefig(save_path, bbox_inches="tight", dpi=120)
    if show:
        plt.show()


# ─── Public plot functions ────────────────────────────────────────────────────


def plot_strategy_heatmap(
    data: np.ndarray,
    title: str,
    *,
    show: bool = True,
    save_path: str | None = None,
) -> matplotlib.figure.Figure:
    """Plot one P(BET) heat map.

    Args:
        data:      (4, 3) P(BET) matrix, NaN = absent.
        title:     Figure title.
        show:      If True, call plt.show() after rendering.
        save_path: If not None, save the figure to this path before showing.

    Returns:
        matplotlib.figure.Figure.
    """
    fig, ax = plt.subplots(figsize=(6, 4.5))
    im = _render_panel(ax, data)
    ax.set_title(title, fontsize=12, fontweight="bold")
    plt.colorbar(im, ax=ax, label="P(BET)", fraction=0.046, pad=0.04)
    _finish(fig, show, save_path)
    return fig


def plot_cfr_strategy_heatmap(
    result: CfrResult,
    *,
    show: bool = True,
    save_path: str | None = None,
) -> matplotlib.figure.Figure:
    """Convenience: build the average-strategy matrix and render it."""
    return plot_strategy_heatmap(
        build_strategy_heatmap_data(result),
        f"{result.method.upper()} Average Strategy  ({result.n_iterations:,} hands)",
        show=show,
        save_path=save_path,
    )


def plot_strategy_comparison(
    results: list[CfrResult],
    *,
    alpha: float | None = None,
    show: bool = True,
    save_path: str | None = None,
) -> matplotlib.figure.Figure:
    """Side-by-side P(BET) panels: one per run, plus the Nash equilibrium.

    Args:
        results:   Trained runs to compare (e.g. CFR and MCCFR).
        alpha:     Equilibrium parameter for the reference panel; read off the
                   first run's J opening bet when None.
        show:      If True, call plt.show().
        save_path: If not None, save to path.

    Returns:
        matplotlib.figure.Figure with len(results) + 1 axes.
    """
    if alpha is None:
        alpha = estimate_alpha(results[0].average_strategy) if results else 1.0 / 6.0

    panels = [
        (f"{r.method.upper()} ({r.n_iterations:,})", build_strategy_heatmap_data(r))
        for r in results
    ]
    panels.append((f"Nash (α={alpha:.3f})", build_equilibrium_heatmap_data(alpha)))

    fig, axes = plt.subplots(1, len(panels), figsize=(4.5 * len(panels), 4.5), squeeze=False)
    fig.suptitle("Kuhn Poker Strategy Comparison  (P(BET))", fontsize=13, fontweight="bold")
    for ax, (title, data) in zip(axes[0], panels, strict=True):
        im = _render_panel(ax, data)
        ax.set_title(title, fontsize=10, fontweight="bold")
    plt.colorbar(im, ax=axes[0][-1], label="P(BET)", fraction=0.046, pad=0.04)

    _finish(fig, show, save_path)
    return fig


def plot_convergence(
    results: list[CfrResult],
    *,
    show: bool = True,
    save_path: str | None = None,
) -> matplotlib.figure.Figure:
    """Plot each run's running average root value against the game value.

    Runs without checkpoints in ``value_history`` are skipped.
    """
    fig, ax = plt.subplots(figsize=(8, 4.5))
    for result in results:
        if not result.value_history:
            continue
        iterations, values = zip(*result.value_history, strict=True)
        ax.plot(iterations, values, label=result.method.upper(), linewidth=1.5)
    ax.axhline(KUHN_GAME_VALUE, color="black", linestyle="--", linewidth=1, label="−1/18")
    ax.set_xlabel("Iteration", fontsize=9)
    ax.set_ylabel("Average value (player 0)", fontsize=9)
    ax.set_title("Training Convergence", fontsize=12, fontweight="bold")
    ax.legend(fontsize=9)
    _finish(fig, show, save_path)
    return fig


# ─── Entry point ──────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import sys

    from kuhn_cfr.solvers.cfr import solve

    n_iter = int(sys.argv[1]) if len(sys.argv) > 1 else 20_000
    print(f"Running CFR and MCCFR for {n_iter} iterations …")
    cfr_result = solve(n_iterations=n_iter, method="cfr", seed=42)
    mccfr_result = solve(n_iterations=n_iter, method="mccfr", seed=42)

    print("Generating strategy heat maps …")
    plot_cfr_strategy_heatmap(cfr_result, show=False, save_path="cfr_strategy.png")
    plot_strategy_comparison([cfr_result, mccfr_result], show=False, save_path="comparison.png")
    plot_convergence([cfr_result, mccfr_result], show=False, save_path="convergence.png")
    print("Saved: cfr_strategy.png, comparison.png, convergence.png")
