"""
notebook_health.metrics — Execution-log health metrics.

Modules:
    sessions   — Per-(user, day) session reconstruction → success/failure depth.
    depth      — Execution depth + first failure depth (means over sessions).
    pass_rate  — Fraction of successful executions in the window.
    scale      — Traffic-confidence multiplier (pluggable policy).
    score      — Health score composition + healthy/unhealthy/unknown status.
    cells      — Aggregation of per-cell statuses into notebook cell metrics.

Every metric takes the same materialized execution frame for a window and
returns None (never 0) when its denominator is zero.

All thresholds and scale constants live in notebook_health.config.HealthConfig.
"""
