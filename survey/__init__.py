"""Survey aggregation and comparison engine (UI-agnostic).

This package contains:
- CSV loading into a read-only record store
- filter normalization and record predicates
- numeric and categorical aggregation
- comparison modes (baseline / roles / location) and coloring
- page compute functions (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
