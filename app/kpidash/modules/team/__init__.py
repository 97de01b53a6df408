"""
Team members module.

Team members are agency staff (not login users). Deleting a member drops their
team KPI rows and detaches them from channel KPI rows.
"""
