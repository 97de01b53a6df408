"""
Email marketing KPIs: template quality, send volume and opening ratio.
"""
