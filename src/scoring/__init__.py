"""QHSE project health-metrics scoring engine.

Normalises untyped project records and derives, for the Quality, Health &
Safety and Environmental domains, composite scores, performance bands,
risk / impact rankings and completion-bucketed trends.

Deterministic -- no I/O.
"""
