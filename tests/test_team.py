def test_team_crud(client, admin_headers):
    r = client.post("/api/team", json={"name": "Sam Park", "email": "sam@example.com"}, headers=admin_headers)
    assert r.status_code == 201
    sam = r.json
    assert sam["email"] == "sam@example.com"

    client.post("/api/team", json={"name": "Ana Ruiz"}, headers=admin_headers)
    names = [m["name"] for m in client.get("/api/team", headers=admin_headers).json]
    assert names == ["Ana Ruiz", "Sam Park"]

    r = client.put(f"/api/team/{sam['id']}", json={"name": "Samuel Park", "email": ""}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json["name"] == "Samuel Park"
    assert r.json["email"] is None


def test_team_validation(client, admin_headers):
    r = client.post("/api/team", json={"email": "a@example.com"}, headers=admin_headers)
    assert r.status_code == 400
    r = client.post("/api/team", json={"name": "Bad Email", "email": "not-an-email"}, headers=admin_headers)
    assert r.status_code == 400
    r = client.get("/api/team/not-a-uuid", headers=admin_headers)
    assert r.status_code == 404


def test_viewer_cannot_modify_team(client, viewer_headers, seed_member):
    r = client.put(f"/api/team/{seed_member['id']}", json={"name": "X"}, headers=viewer_headers)
    assert r.status_code == 403


def test_delete_member_detaches_kpis(client, admin_headers, seed_client, seed_member):
    mid = seed_member["id"]
    cid = seed_client["id"]

    social = client.post(
        "/api/social-media",
        json={"client_id": cid, "team_member_id": mid, "date": "2024-04-01", "platform": "TikTok", "quantity": 2},
        headers=admin_headers,
    ).json
    other = client.post("/api/team", json={"name": "Other Member"}, headers=admin_headers).json
    seo = client.post(
        "/api/website-seo",
        json={"client_id": cid, "date": "2024-04-01", "team_member_ids": [mid, other["id"]], "blogs_posted": 1},
        headers=admin_headers,
    ).json
    assert seo["team_member_id"] == mid

    r = client.post(
        "/api/team-kpis",
        json={"team_member_id": mid, "date": "2024-04-01", "tasks_assigned": 5, "tasks_completed": 4},
        headers=admin_headers,
    )
    assert r.status_code == 201

    r = client.delete(f"/api/team/{mid}", headers=admin_headers)
    assert r.status_code == 200
    assert r.json["message"] == "Team member deleted successfully"
    assert r.json["deletedMember"]["name"] == "Dana Lee"

    rows = client.get("/api/social-media", headers=admin_headers).json
    assert [r["id"] for r in rows] == [social["id"]]
    assert rows[0]["team_member_id"] is None
    assert rows[0]["team_member_name"] is None

    seo_rows = client.get("/api/website-seo", headers=admin_headers).json
    assert seo_rows[0]["team_member_id"] is None
    assert seo_rows[0]["team_member_ids"] == [other["id"]]

    assert client.get("/api/team-kpis", headers=admin_headers).json == []
    assert client.get(f"/api/team/{mid}", headers=admin_headers).status_code == 404


def test_delete_missing_member_404(client, admin_headers):
    r = client.delete("/api/team/00000000-0000-0000-0000-000000000000", headers=admin_headers)
    assert r.status_code == 404


def test_malformed_bodies_are_400(client, admin_headers, seed_member):
    r = client.post("/api/team", json={"name": "X", "email": 5}, headers=admin_headers)
    assert r.status_code == 400
    assert r.json["error"] == "Team member name and email must be text"

    r = client.post("/api/team", json=["Dana Lee"], headers=admin_headers)
    assert r.status_code == 400

    r = client.put(f"/api/team/{seed_member['id']}", json={"name": 7}, headers=admin_headers)
    assert r.status_code == 400
    assert client.get(f"/api/team/{seed_member['id']}", headers=admin_headers).json["name"] == "Dana Lee"


def test_failed_cascade_leaves_member_and_links(client, admin_headers, seed_client, seed_member, monkeypatch):
    mid = seed_member["id"]
    cid = seed_client["id"]
    client.post(
        "/api/social-media",
        json={"client_id": cid, "team_member_id": mid, "date": "2024-04-01", "platform": "TikTok", "quantity": 2},
        headers=admin_headers,
    )
    client.post(
        "/api/website-seo",
        json={"client_id": cid, "date": "2024-04-01", "team_member_ids": [mid], "blogs_posted": 1},
        headers=admin_headers,
    )
    client.post(
        "/api/team-kpis",
        json={"team_member_id": mid, "date": "2024-04-01", "tasks_assigned": 5, "tasks_completed": 4},
        headers=admin_headers,
    )

    def _fail(*args, **kwargs):
        raise RuntimeError("activity store unavailable")

    monkeypatch.setattr("app.kpidash.modules.team.service.record_activity", _fail)

    r = client.delete(f"/api/team/{mid}", headers=admin_headers)
    assert r.status_code == 500

    assert client.get(f"/api/team/{mid}", headers=admin_headers).status_code == 200
    assert client.get("/api/social-media", headers=admin_headers).json[0]["team_member_id"] == mid
    seo = client.get("/api/website-seo", headers=admin_headers).json[0]
    assert seo["team_member_id"] == mid
    assert seo["team_member_ids"] == [mid]
    assert len(client.get("/api/team-kpis", headers=admin_headers).json) == 1
