"""
Paid ads KPIs (Facebook ADS, Google ADS, Go High Level, Closings).
"""
