"""
Plotting helpers for survey and adjusted Lorenz curves.
"""

from __future__ import annotations

from typing import Any

import matplotlib.pyplot as plt

from chandy_seidel.helpers.lorenz.curves import as_lorenz_points, curve_arrays


def plot_lorenz_comparison(
    survey: Any,
    adjusted: Any = None,
    ax: plt.Axes | None = None,
    title: str | None = None,
    survey_label: str = "Survey",
    adjusted_label: str = "Adjusted (Pareto tail)",
    survey_color: str = "b",
    adjusted_color: str = "r",
) -> plt.Axes:
    """Plot the survey curve, the adjusted curve and its Pareto points against equality."""
    axes = ax or plt.gca()
    axes.plot([0, 1], [0, 1], "k--", lw=1, label="Line of equality")

    survey_p, survey_l = curve_arrays(as_lorenz_points(survey))
    axes.plot(survey_p, survey_l, color=survey_color, lw=1.8, label=survey_label)

    if adjusted is not None:
        adjusted_points = as_lorenz_points(adjusted)
        adjusted_p, adjusted_l = curve_arrays(adjusted_points)
        axes.plot(adjusted_p, adjusted_l, color=adjusted_color, lw=1.8, label=adjusted_label)
        pareto_p, pareto_l = curve_arrays(
            [point for point in adjusted_points if point.is_pareto]
        )
        if pareto_p:
            axes.scatter(pareto_p, pareto_l, s=12, color=adjusted_color, zorder=3)

    axes.set_xlim(0, 1)
    axes.set_ylim(0, 1)
    axes.set_xlabel("Cumulative population share")
    axes.set_ylabel("Cumulative income share")
    axes.grid(alpha=0.3)
    axes.legend(loc="upper left")
    if title:
        axes.set_title(title)
    return axes
