"""
Team KPIs: per team member task throughput and 0-10 performance scores.
"""
