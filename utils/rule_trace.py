# rule_trace.py

from typing import List, Dict, Any, Mapping

import matplotlib.pyplot as plt
import matplotlib.patches as mpatches

from fls.inference import compute_firing_strength


def trace_rule_firing(system, crisp_inputs: Mapping[str, float]) -> List[Dict[str, Any]]:
    """
    Evaluate each rule of a FuzzyLogicSystem and return detailed trace
    information per rule, including disabled rules.

    Args:
        system: The FuzzyLogicSystem whose rule base is traced.
        crisp_inputs: Variable name to crisp value.

    Returns:
        A list of dictionaries, one per rule in rule-base order, with keys
        rule_index, rule, enabled, weight, strength (unweighted),
        firing_strength (weighted, 0 for disabled rules) and consequent.
    """
    fuzzified = system.get_fuzzification_results(crisp_inputs)
    engine = system.inference_engine

    traces = []
    for i, rule in enumerate(system.rule_base.rules):
        strength = compute_firing_strength(
            rule, fuzzified, engine.and_operator, engine.or_operator
        )
        traces.append(
            {
                "rule_index": i,
                "rule": str(rule),
                "enabled": rule.enabled,
                "weight": rule.weight,
                "strength": strength,
                "firing_strength": strength * rule.weight if rule.enabled else 0.0,
                "consequent": rule.consequent_fuzzy_set_name,
            }
        )
    return traces


def plot_rule_contributions(trace_data, title="Rule Contributions", show=True):
    """
    Bar chart of weighted firing strength per rule. Disabled rules are grey,
    rules whose weight clipped their strength are orange.

    Returns the matplotlib Figure.
    """
    labels = [f"#{t['rule_index']} {t['consequent']}" for t in trace_data]
    ws = [t["firing_strength"] for t in trace_data]
    colors = [
        "grey" if not t["enabled"] else ("orange" if t["weight"] < 1.0 else "blue")
        for t in trace_data
    ]

    fig, ax = plt.subplots(figsize=(12, 6))
    bars = ax.bar(range(len(labels)), ws, color=colors, alpha=0.7)

    ax.set_ylabel("Firing Strength")
    ax.set_ylim(0.0, 1.1)
    ax.set_xticks(range(len(labels)))
    ax.set_xticklabels(labels, rotation=45, ha="right")

    # Annotate W values on top of bars
    for bar in bars:
        height = bar.get_height()
        if height > 0:
            ax.text(
                bar.get_x() + bar.get_width() / 2,
                height + 0.01,
                f"{height:.2f}",
                ha="center",
                va="bottom",
                fontsize=8,
                color="black",
            )

    enabled_patch = mpatches.Patch(color="blue", label="Enabled")
    weighted_patch = mpatches.Patch(color="orange", label="Enabled, weight < 1")
    disabled_patch = mpatches.Patch(color="grey", label="Disabled")
    ax.legend(handles=[enabled_patch, weighted_patch, disabled_patch], loc="upper left")

    ax.set_title(title)
    fig.tight_layout()
    if show:
        plt.show()
    return fig
