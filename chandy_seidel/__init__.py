"""Chandy-Seidel Pareto elongation of survey income distributions."""
