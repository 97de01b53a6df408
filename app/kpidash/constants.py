"""
Central constants for the KPI dashboard.
"""
from __future__ import annotations

ROLES = ("admin", "editor", "viewer")
WRITE_ROLES = ("admin", "editor")

SOCIAL_MEDIA_PLATFORMS = ("Reddit", "TikTok", "Instagram", "Facebook", "YouTube")
ADS_PLATFORMS = ("Facebook ADS", "Google ADS", "Go High Level", "Closings")

# Dashboard tab each KPI domain is edited from (stored on activity rows)
TAB_SOCIAL_MEDIA = "SocialMediaTab"
TAB_WEBSITE_SEO = "WebsiteSEOTab"
TAB_ADS = "AdsTab"
TAB_EMAIL_MARKETING = "EmailMarketingTab"
TAB_CLIENT_RESPONSES = "ClientResponsesTab"
TAB_TEAM = "TeamTab"

ACTIVITY_DEFAULT_LIMIT = 20
ACTIVITY_BY_DATE_DEFAULT_LIMIT = 100
ACTIVITY_MAX_LIMIT = 500
