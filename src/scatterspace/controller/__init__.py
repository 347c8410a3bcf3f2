"""
Plot Controllers
================
Turn table contents into instance arrays and answer spatial queries.

Why is this file needed?
------------------------
1. Instancing: Builds per-row transform matrices from table columns.
2. Wiring: Rebuilds whenever the table or the shared domain changes.
3. Queries: Routes brushes and probes from the scene root to every plot.
"""
