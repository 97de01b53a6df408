"""
Clients module.

Clients are the agency accounts every channel KPI row hangs off. Deleting a
client removes all of its KPI data in the same transaction.
"""
