"""
notebook_health — Execution-log health scoring for interactive notebooks.

Scores how well a notebook works for the people running it, from a trailing
window of cell execution events:

- Session reconstruction (notebook_health.metrics.sessions)
- Execution depth + first failure depth (notebook_health.metrics.depth)
- Pass rate, traffic scale, health score (notebook_health.metrics.pass_rate,
  notebook_health.metrics.scale, notebook_health.metrics.score)
- Per-cell aggregation (notebook_health.metrics.cells)
- Notebook health report (notebook_health.reports.health_report,
  notebook_health.notebook.NotebookHealth)

Author: notebook-health maintainers
"""

__version__ = "0.1.0"
