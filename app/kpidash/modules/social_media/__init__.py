"""
Social media KPIs: per client, per platform post quality and volume.
"""
