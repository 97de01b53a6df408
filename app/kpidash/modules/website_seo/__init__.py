"""
Website / SEO KPIs.

A row can credit several team members (team_member_ids); the first of them is
mirrored into team_member_id so joins and filters keep working.
"""
