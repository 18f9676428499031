import os

import numpy as np
import matplotlib.pyplot as plt


def plot_variable(variable, points=None, save=False, output_dir="plots", show=True, n=500):
    """
    Plot every fuzzy set of a LinguisticVariable over its domain.
    Optionally overlay points as red dots.
    Args:
        variable (LinguisticVariable): Variable to plot
        points (list of (x, y)): Points to overlay (optional)
        save (bool): Whether to save the plot as a PNG
        output_dir (str): Directory to save the plot
        show (bool): Whether to open a window
        n (int): Number of sample points across the domain
    Returns:
        str or None: Path of the saved PNG, if saved.
    """
    xs = np.linspace(variable.min_domain, variable.max_domain, n)

    plt.figure(figsize=(8, 4))
    for fuzzy_set in variable.fuzzy_sets:
        ys = np.array([fuzzy_set.membership(float(x)) for x in xs])
        plt.plot(xs, ys, label=fuzzy_set.name)
        plt.fill_between(xs, ys, alpha=0.1)

    if points is not None and len(points) > 0:
        x, y = zip(*points)
        plt.scatter(
            x,
            y,
            color="red",
            s=30,
            marker="o",
            edgecolors="black",
            linewidths=0.8,
            label="Inputs",
            zorder=10,
        )

    plt.title(f"Membership Functions – {variable.name}")
    plt.xlabel(variable.name)
    plt.ylabel("Membership Degree")
    plt.ylim(0.0, 1.05)
    plt.grid(True)
    plt.legend()
    plt.tight_layout()

    return _finish(f"{variable.name.lower()}_membership_functions.png", save, output_dir, show)


def plot_output_surface(system, crisp_inputs, save=False, output_dir="plots", show=True, n=500):
    """
    Plot the implicated, aggregated Mamdani output surface for one input
    vector, with the defuzzified crisp output as a vertical line.
    Returns:
        str or None: Path of the saved PNG, if saved.
    """
    output_variable = system.output_variable
    inferred = system.get_inference_results(crisp_inputs)
    mu = system.aggregated_membership(inferred)
    crisp = system.defuzzify(inferred)

    xs = np.linspace(output_variable.min_domain, output_variable.max_domain, n)
    ys = np.array([mu(float(x)) for x in xs])

    plt.figure(figsize=(8, 4))
    for fuzzy_set in output_variable.fuzzy_sets:
        raw = np.array([fuzzy_set.membership(float(x)) for x in xs])
        plt.plot(xs, raw, linestyle="--", linewidth=0.8, label=fuzzy_set.name)
    plt.fill_between(xs, ys, alpha=0.4, color="tab:blue", label="Aggregated")
    plt.axvline(crisp, color="red", label=f"Output = {crisp:.2f}")

    plt.title(f"Output Surface – {output_variable.name}")
    plt.xlabel(output_variable.name)
    plt.ylabel("Membership Degree")
    plt.ylim(0.0, 1.05)
    plt.grid(True)
    plt.legend()
    plt.tight_layout()

    return _finish(f"{output_variable.name.lower()}_output_surface.png", save, output_dir, show)


def _finish(filename, save, output_dir, show):
    path = None
    if save:
        os.makedirs(output_dir, exist_ok=True)
        path = os.path.join(output_dir, filename)
        plt.savefig(path)
        print(f"Saved plot to: {path}")
    if show:
        plt.show()
    else:
        plt.close()
    return path
