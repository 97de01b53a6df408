"""
Activity feed endpoints. The ActivityLog model lives in app.kpidash.models and
writes go through app.kpidash.activity.record_activity.
"""
