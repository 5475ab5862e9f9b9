"""
notebook_health.reports — Notebook health reports.

Modules:
    health_report — HealthReport + build_health_report(), the per-notebook
                    orchestration of every metric in notebook_health.metrics.
"""
