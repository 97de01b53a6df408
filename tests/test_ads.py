import pytest


def _ad(client_id, platform, **kw):
    body = {"client_id": client_id, "date": "2024-06-01", "platform": platform}
    body.update(kw)
    return body


def test_ads_crud_and_platform_summary(client, editor_headers, seed_client):
    cid = seed_client["id"]
    r = client.post(
        "/api/ads",
        json=_ad(cid, "Facebook ADS", cost_per_lead="12.50", cost_per_click=1.2, quantity_leads=20,
                 conversions=5, closing=2, tracking=1, quality_of_ads=8, lead_quality=7, keyword_refinement=6,
                 closing_ratio=40),
        headers=editor_headers,
    )
    assert r.status_code == 201, r.json
    fb = r.json
    assert fb["cost_per_lead"] == 12.5
    assert fb["client_name"] == "Acme Roofing"

    client.post(
        "/api/ads",
        json=_ad(cid, "Facebook ADS", date="2024-06-08", cost_per_lead=7.5, quantity_leads=10, conversions=1),
        headers=editor_headers,
    )
    client.post("/api/ads", json=_ad(cid, "Google ADS", quantity_leads=3), headers=editor_headers)

    s = client.get("/api/ads/summary", headers=editor_headers).json
    assert s["entries"] == 3
    fbs = s["platforms"]["Facebook ADS"]
    assert fbs["entries"] == 2
    assert fbs["total_leads"] == 30
    assert fbs["total_conversions"] == 6
    assert fbs["total_closings"] == 2
    assert fbs["avg_cost_per_lead"] == 10.0
    # only rows with a value count toward an average
    assert fbs["avg_quality_of_ads"] == 8.0
    assert s["platforms"]["Go High Level"]["entries"] == 0
    assert s["platforms"]["Closings"]["avg_cost_per_click"] == 0

    r = client.put(f"/api/ads/{fb['id']}", json=_ad(cid, "Closings", closing=9), headers=editor_headers)
    assert r.status_code == 200
    assert r.json["platform"] == "Closings"
    assert r.json["cost_per_lead"] is None

    assert client.delete(f"/api/ads/{fb['id']}", headers=editor_headers).status_code == 200
    assert len(client.get("/api/ads", headers=editor_headers).json) == 2


@pytest.mark.parametrize(
    "patch",
    [
        {"platform": "Bing ADS"},
        {"cost_per_lead": -1},
        {"closing_ratio": 101},
        {"quality_of_ads": "ten"},
        {"conversions": True},
    ],
)
def test_ads_validation(client, admin_headers, seed_client, patch):
    body = _ad(seed_client["id"], "Google ADS")
    body.update(patch)
    assert client.post("/api/ads", json=body, headers=admin_headers).status_code == 400


def test_ads_entity_name_uses_platform(client, admin_headers, seed_client):
    client.post("/api/ads", json=_ad(seed_client["id"], "Go High Level"), headers=admin_headers)
    acts = client.get("/api/activities/by-action/data_added", headers=admin_headers).json
    assert acts[0]["entity_name"] == "Acme Roofing - Go High Level"
    assert acts[0]["tab_name"] == "AdsTab"
