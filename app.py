"""Kuhn Poker CFR Solver — Streamlit Dashboard.

Four-tab interactive dashboard for exploring Kuhn poker training results:
  Tab 1 — Strategy Heat Maps   (matplotlib, run vs Nash equilibrium)
  Tab 2 — Interactive Lookup   (Plotly, hover for P(BET) and accumulators)
  Tab 3 — Head-to-Head         (Monte Carlo vs a random opponent)
  Tab 4 — Strategy Report      (training summary, equilibrium check, store)

Run:
    streamlit run app.py
"""

from __future__ import annotations

import contextlib
import io

import matplotlib

matplotlib.use("Agg")  # must be set before any other matplotlib imports

import pandas as pd
import streamlit as st

# ─── Page config ──────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="Kuhn Poker CFR Solver",
    page_icon="🃏",
    layout="wide",
)

# ─── Lazy imports (inside functions to keep startup fast) ─────────────────────


@st.cache_resource
def _load_analysis_modules():
    """Import analysis modules once (cached for the process lifetime)."""
    from kuhn_cfr.analysis.heat_maps import (
        build_equilibrium_heatmap_data,
        plot_cfr_strategy_heatmap,
        plot_convergence,
        plot_strategy_comparison,
        plot_strategy_heatmap,
    )
    from kuhn_cfr.analysis.plotly_lookup import (
        build_comparison_figure,
        build_strategy_lookup_figure,
    )
    from kuhn_cfr.analysis.simulator import (
        make_random_player,
        make_trained_player,
        simulate_hands,
    )
    from kuhn_cfr.analysis.strategy_report import (
        equilibrium_deviation,
        print_average_strategy,
        print_equilibrium_check,
        print_store,
        print_training_summary,
    )

    return {
        "build_equilibrium_heatmap_data": build_equilibrium_heatmap_data,
        "plot_strategy_heatmap": plot_strategy_heatmap,
        "plot_cfr_strategy_heatmap": plot_cfr_strategy_heatmap,
        "plot_strategy_comparison": plot_strategy_comparison,
        "plot_convergence": plot_convergence,
        "build_strategy_lookup_figure": build_strategy_lookup_figure,
        "build_comparison_figure": build_comparison_figure,
        "simulate_hands": simulate_hands,
        "make_random_player": make_random_player,
        "make_trained_player": make_trained_player,
        "equilibrium_deviation": equilibrium_deviation,
        "print_training_summary": print_training_summary,
        "print_average_strategy": print_average_strategy,
        "print_equilibrium_check": print_equilibrium_check,
        "print_store": print_store,
    }


@st.cache_resource
def _run_solver(method: str, n_iterations: int, exploration: float, seed: int):
    """Train and cache the result (keyed on every sidebar setting)."""
    from kuhn_cfr.solvers.cfr import solve

    return solve(
        n_iterations=n_iterations,
        method=method,
        exploration=exploration,
        seed=seed,
    )


@st.cache_resource
def _train_player(method: str, n_iterations: int, seed: int):
    """Train and cache a CfrPlayer for the head-to-head tab."""
    m = _load_analysis_modules()
    return m["make_trained_player"](n_iterations, method=method, seed=seed)


# ─── Sidebar controls ─────────────────────────────────────────────────────────

with st.sidebar:
    st.title("🃏 Kuhn Poker CFR Solver")
    st.markdown("---")

    method = st.selectbox(
        "Training method",
        options=["cfr", "mccfr"],
        format_func=lambda v: "Vanilla CFR" if v == "cfr" else "Outcome-sampling MCCFR",
        index=0,
    )

    n_iterations = st.slider(
        "Training hands",
        min_value=1_000,
        max_value=100_000,
        value=20_000,
        step=1_000,
    )

    exploration = st.slider(
        "Exploration ε",
        min_value=0.0,
        max_value=0.5,
        value=0.0 if method == "cfr" else 0.1,
        step=0.01,
    )

    seed = st.number_input("Seed", min_value=0, value=42, step=1)

    run_solver = st.button("Run Solver", type="primary")

    st.markdown("---")
    n_mc_hands = st.slider(
        "MC hands (head-to-head tab)",
        min_value=2_000,
        max_value=100_000,
        value=10_000,
        step=2_000,
    )

    st.markdown("---")
    st.caption("Kuhn Poker CFR Solver")
    st.caption("Engine → CFR / MCCFR → Analysis")

# ─── Solver result ────────────────────────────────────────────────────────────

# Trigger a solve if the button was pressed or a cached result exists.
result = None
if run_solver or "solver_result_cached" in st.session_state:
    with st.spinner(f"Training {method.upper()} ({n_iterations:,} hands) …"):
        result = _run_solver(method, n_iterations, float(exploration), int(seed))
    st.session_state["solver_result_cached"] = True
    st.sidebar.success(
        f"{method.upper()} done — EV: {result.game_value:+.4f} | "
        f"Exploitability: {result.exploitability:.4f}"
    )

# ─── Tabs ─────────────────────────────────────────────────────────────────────

tab1, tab2, tab3, tab4 = st.tabs(
    [
        "Strategy Heat Maps",
        "Interactive Plotly Lookup",
        "Head-to-Head Simulation",
        "Strategy Report",
    ]
)

m = _load_analysis_modules()

# ── Tab 1: Strategy Heat Maps ─────────────────────────────────────────────────

with tab1:
    st.header("Strategy Heat Maps")
    st.caption(
        "Rows = decision point | Cols = own card (J, Q, K) | "
        "Green = BET, Red = CHECK, Grey = absent"
    )

    alpha = st.slider("Equilibrium α", min_value=0.0, max_value=1.0 / 3.0, value=1.0 / 6.0)
    st.subheader(f"Nash Equilibrium — α={alpha:.3f}")
    fig_nash = m["plot_strategy_heatmap"](
        m["build_equilibrium_heatmap_data"](alpha),
        f"Kuhn Nash Equilibrium  (α={alpha:.3f})",
        show=False,
    )
    st.pyplot(fig_nash)

    st.markdown("---")

    if result is not None:
        st.subheader(f"{result.method.upper()} Average Strategy")
        st.pyplot(m["plot_cfr_strategy_heatmap"](result, show=False))

        st.markdown("---")

        st.subheader("Run vs Closest Equilibrium")
        st.pyplot(m["plot_strategy_comparison"]([result], show=False))

        st.markdown("---")

        st.subheader("Convergence of the Running Average Value")
        st.pyplot(m["plot_convergence"]([result], show=False))
    else:
        st.info("Press **Run Solver** in the sidebar to see the trained heat maps.")

# ── Tab 2: Interactive Plotly Lookup ─────────────────────────────────────────

with tab2:
    st.header("Interactive Plotly Strategy Lookup")
    st.caption("Hover over any cell to see the infoset, P(BET), and raw accumulators.")

    if result is not None:
        st.subheader(f"{result.method.upper()} Lookup — P(BET) heatmap")
        st.plotly_chart(m["build_strategy_lookup_figure"](result), use_container_width=True)

        st.markdown("---")
        st.subheader("Run vs Nash Comparison")
        st.plotly_chart(m["build_comparison_figure"]([result]), use_container_width=True)
    else:
        st.info("Press **Run Solver** in the sidebar to see the interactive lookup.")

# ── Tab 3: Head-to-Head Simulation ────────────────────────────────────────────

with tab3:
    st.header("Head-to-Head Simulation")
    st.caption(
        "Monte Carlo hands through the two-player harness. "
        "Payoffs are chips per hand for the trained player."
    )

    with st.spinner(f"Simulating {n_mc_hands:,} hands …"):
        baseline = m["simulate_hands"](
            m["make_random_player"](), m["make_random_player"](), n_hands=n_mc_hands, seed=42
        )
        rows = [
            {
                "Matchup": "Random vs Random (seat 0)",
                "Mean": f"{baseline.mean_payoff:+.4f}",
                "CI Low": f"{baseline.ci_95_low:+.4f}",
                "CI High": f"{baseline.ci_95_high:+.4f}",
                "Wins": baseline.n_wins,
                "Losses": baseline.n_losses,
            }
        ]

        if result is not None:
            trained = _train_player(method, n_iterations, int(seed))
            first = m["simulate_hands"](
                trained, m["make_random_player"](), n_hands=n_mc_hands, seed=42
            )
            second = m["simulate_hands"](
                m["make_random_player"](), trained, n_hands=n_mc_hands, seed=42
            )
            rows.append(
                {
                    "Matchup": f"{method.upper()} in seat 0 vs Random",
                    "Mean": f"{first.mean_payoff:+.4f}",
                    "CI Low": f"{first.ci_95_low:+.4f}",
                    "CI High": f"{first.ci_95_high:+.4f}",
                    "Wins": first.n_wins,
                    "Losses": first.n_losses,
                }
            )
            rows.append(
                {
                    "Matchup": f"{method.upper()} in seat 1 vs Random",
                    "Mean": f"{-second.mean_payoff:+.4f}",
                    "CI Low": f"{-second.ci_95_high:+.4f}",
                    "CI High": f"{-second.ci_95_low:+.4f}",
                    "Wins": second.n_losses,
                    "Losses": second.n_wins,
                }
            )

    st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)
    if result is None:
        st.info("Press **Run Solver** in the sidebar to add the trained player.")

# ── Tab 4: Strategy Report ────────────────────────────────────────────────────

with tab4:
    st.header("Strategy Report")

    if result is not None:
        col1, col2, col3 = st.columns(3)
        col1.metric("Average root value", f"{result.average_value:+.4f}")
        col2.metric("Exact EV (player 0)", f"{result.game_value:+.4f}", "Nash: −1/18")
        col3.metric("Exploitability", f"{result.exploitability:.4f}")

        deviation = m["equilibrium_deviation"](result)
        dev_df = pd.DataFrame(
            {
                "Infoset": [info_set.label() for info_set in deviation],
                "|Δ P(BET)|": [round(d, 4) for d in deviation.values()],
            }
        )
        st.dataframe(dev_df, use_container_width=True, hide_index=True)

        for section_fn, label in [
            (m["print_training_summary"], "Training Summary"),
            (m["print_average_strategy"], "Average Strategy"),
            (m["print_equilibrium_check"], "Equilibrium Check"),
            (m["print_store"], "Information Set Store"),
        ]:
            st.subheader(label)
            buf = io.StringIO()
            with contextlib.redirect_stdout(buf):
                section_fn(result)
            st.code(buf.getvalue(), language=None)
    else:
        st.info("Press **Run Solver** in the sidebar to see the strategy report.")
