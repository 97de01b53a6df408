import pytest


def _body(client_id, **kw):
    body = {
        "client_id": client_id,
        "date": "2024-05-01",
        "changes_asked": 2,
        "blogs_posted": 3,
        "updates": 1,
        "ranking_issues": True,
        "ranking_issues_description": "Dropped on main keyword",
        "reports_sent": True,
        "backlinks": 12,
        "domain_authority": 30,
        "page_authority": 20,
        "keyword_pass": 5,
        "site_health": 90,
        "issues": 4,
    }
    body.update(kw)
    return body


def test_create_with_member_list(client, admin_headers, seed_client, seed_member):
    other = client.post("/api/team", json={"name": "Bo Chen"}, headers=admin_headers).json
    r = client.post(
        "/api/website-seo",
        json=_body(seed_client["id"], team_member_ids=[other["id"], seed_member["id"]]),
        headers=admin_headers,
    )
    assert r.status_code == 201, r.json
    row = r.json
    assert row["team_member_id"] == other["id"]
    assert row["team_member_name"] == "Bo Chen"
    assert row["team_member_ids"] == [other["id"], seed_member["id"]]
    assert row["team_member_names"] == ["Bo Chen", "Dana Lee"]
    assert row["client_name"] == "Acme Roofing"
    assert row["ranking_issues"] is True


def test_single_member_fills_list(client, admin_headers, seed_client, seed_member):
    r = client.post(
        "/api/website-seo", json=_body(seed_client["id"], team_member_id=seed_member["id"]), headers=admin_headers
    )
    assert r.status_code == 201
    assert r.json["team_member_ids"] == [seed_member["id"]]


def test_description_kept_as_sent_without_ranking_issue(client, admin_headers, seed_client):
    r = client.post(
        "/api/website-seo", json=_body(seed_client["id"], ranking_issues=False), headers=admin_headers
    )
    assert r.status_code == 201
    assert r.json["ranking_issues"] is False
    assert r.json["ranking_issues_description"] == "Dropped on main keyword"


@pytest.mark.parametrize(
    "patch",
    [
        {"team_member_ids": "not-a-list"},
        {"team_member_ids": ["00000000-0000-0000-0000-000000000000"]},
        {"site_health": 120},
        {"backlinks": -3},
        {"date": ""},
    ],
)
def test_validation(client, admin_headers, seed_client, patch):
    r = client.post("/api/website-seo", json=_body(seed_client["id"], **patch), headers=admin_headers)
    assert r.status_code == 400


def test_update_delete_and_summary(client, admin_headers, seed_client):
    a = client.post("/api/website-seo", json=_body(seed_client["id"]), headers=admin_headers).json
    client.post(
        "/api/website-seo",
        json=_body(seed_client["id"], date="2024-05-08", reports_sent=False, ranking_issues=False, domain_authority=40),
        headers=admin_headers,
    )

    s = client.get("/api/website-seo/summary", headers=admin_headers).json
    assert s["entries"] == 2
    assert s["total_blogs"] == 6
    assert s["total_backlinks"] == 24
    assert s["total_changes"] == 4
    assert s["total_issues"] == 8
    assert s["avg_domain_authority"] == 35.0
    assert s["avg_site_health"] == 90.0
    assert s["reports_sent_count"] == 1
    assert s["ranking_issues_count"] == 1

    r = client.put(f"/api/website-seo/{a['id']}", json=_body(seed_client["id"], blogs_posted=10), headers=admin_headers)
    assert r.status_code == 200
    assert r.json["blogs_posted"] == 10

    assert client.delete(f"/api/website-seo/{a['id']}", headers=admin_headers).status_code == 200
    assert len(client.get("/api/website-seo", headers=admin_headers).json) == 1

    acts = client.get("/api/activities", headers=admin_headers).json
    seo_acts = [x for x in acts if x["tab_name"] == "WebsiteSEOTab"]
    assert {x["action_type"] for x in seo_acts} == {"data_added", "data_edited", "data_deleted"}
    assert all(x["entity_name"] == "Acme Roofing - SEO" for x in seo_acts)


def test_empty_summary_is_zeros(client, admin_headers):
    s = client.get("/api/website-seo/summary", headers=admin_headers).json
    assert s["entries"] == 0
    assert s["avg_domain_authority"] == 0
    assert s["total_blogs"] == 0
