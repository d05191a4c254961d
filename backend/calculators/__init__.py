"""
Deterministic pricing engine.

Pure Python math over an in-memory catalog snapshot. No I/O in the
calculators themselves. Routers load the Catalog and hand it in.
Given a stair description, a linear product selection or a job's sections,
produce an itemized price with cents-exact totals.
"""
