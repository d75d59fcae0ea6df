"""
metrics_engine — Derived-metric calculation engine for what-if analysis.

Base metrics are supplied per period; derived metrics are recomputed from
them in dependency order, and scenarios perturb base metrics to show the
downstream impact.
"""

__version__ = "0.1.0"
