"""
Métriques Prometheus pour la persistance des contenus.

Ce module définit les compteurs Prometheus utilisés pour suivre les écritures de contenus, la
propagation entre locales et les conflits de concurrence.
"""

from prometheus_client import Counter

CONTENT_SAVES_TOTAL = Counter(
    "content_saves_total",
    "Content row save outcomes",
    ["result"],
)
CONTENT_PROPAGATED_ROWS_TOTAL = Counter(
    "content_propagated_rows_total",
    "Other-locale content rows rewritten with non-translatable values",
)
CONTENT_PROPAGATION_FAILURES_TOTAL = Counter(
    "content_propagation_failures_total",
    "Other-locale content rows that could not be rewritten",
)
CONTENT_CONFLICTS_TOTAL = Counter(
    "content_conflicts_total",
    "Content updates rejected by the optimistic revision check",
)
