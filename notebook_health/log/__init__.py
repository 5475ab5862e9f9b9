"""
notebook_health.log — Execution log and per-cell status access layer.

Modules:
    executions  — Execution record type + canonical execution DataFrame.
    accessor    — ExecutionLogAccessor / CellStatusProvider interfaces and
                  their in-memory (DataFrame / CSV) reference implementations.

Every accessor returns a fully materialized pandas DataFrame with the columns
listed in notebook_health.log.executions.EXECUTION_COLUMNS. The scoring core
never re-queries a window: it fetches once and hands the same frame to every
metric.
"""
