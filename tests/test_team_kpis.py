import pytest


def _kpi(member_id, day, assigned, completed, q=None, r=None, p=None):
    return {
        "team_member_id": member_id,
        "date": day,
        "tasks_assigned": assigned,
        "tasks_completed": completed,
        "quality_score": q,
        "responsibility_score": r,
        "punctuality_score": p,
    }


def test_team_kpi_crud(client, admin_headers, seed_member):
    r = client.post("/api/team-kpis", json=_kpi(seed_member["id"], "2024-09-01", 10, 8, 9, 8, 7), headers=admin_headers)
    assert r.status_code == 201, r.json
    row = r.json
    assert row["team_member_name"] == "Dana Lee"
    assert row["email"] == "dana@example.com"
    assert "client_name" not in row

    r = client.put(f"/api/team-kpis/{row['id']}", json=_kpi(seed_member["id"], "2024-09-01", 10, 10), headers=admin_headers)
    assert r.status_code == 200
    assert r.json["tasks_completed"] == 10
    assert r.json["quality_score"] is None

    acts = client.get("/api/activities", headers=admin_headers).json
    assert acts[0]["action_type"] == "data_edited"
    assert acts[0]["entity_name"] == "Dana Lee - KPI"
    assert acts[0]["tab_name"] == "TeamTab"

    assert client.delete(f"/api/team-kpis/{row['id']}", headers=admin_headers).status_code == 200


@pytest.mark.parametrize(
    "body",
    [
        {"date": "2024-09-01"},
        {"team_member_id": "00000000-0000-0000-0000-000000000000", "date": "2024-09-01"},
        {"team_member_id": "MEMBER", "date": "2024-09-01", "quality_score": 12},
        {"team_member_id": "MEMBER", "date": "2024-09-01", "tasks_assigned": -2},
        {"team_member_id": "MEMBER"},
    ],
)
def test_team_kpi_validation(client, admin_headers, seed_member, body):
    body = {k: (seed_member["id"] if v == "MEMBER" else v) for k, v in body.items()}
    assert client.post("/api/team-kpis", json=body, headers=admin_headers).status_code == 400


def test_filter_by_member_and_summary(client, admin_headers, seed_member):
    other = client.post("/api/team", json={"name": "Abe Fox"}, headers=admin_headers).json
    client.post("/api/team-kpis", json=_kpi(seed_member["id"], "2024-09-01", 10, 8, 9, 8, 7), headers=admin_headers)
    client.post("/api/team-kpis", json=_kpi(seed_member["id"], "2024-09-08", 10, 10, 7, 8, 9), headers=admin_headers)
    client.post("/api/team-kpis", json=_kpi(other["id"], "2024-09-02", 5, 1, 4), headers=admin_headers)

    rows = client.get(f"/api/team-kpis?teamMemberId={seed_member['id']}", headers=admin_headers).json
    assert [r["date"] for r in rows] == ["2024-09-08", "2024-09-01"]

    s = client.get("/api/team-kpis/summary", headers=admin_headers).json
    assert s["entries"] == 3
    assert s["active_members"] == 2
    assert s["total_tasks_assigned"] == 25
    assert s["total_tasks_completed"] == 19
    assert s["completion_rate"] == 76.0
    assert s["avg_quality_score"] == pytest.approx(6.67, abs=0.01)
    assert s["avg_punctuality_score"] == 8.0

    members = s["members"]
    assert [m["team_member_name"] for m in members] == ["Abe Fox", "Dana Lee"]
    assert members[1]["completion_rate"] == 90.0
    assert members[0]["avg_responsibility_score"] == 0


def test_viewer_can_read_summary(client, viewer_headers):
    s = client.get("/api/team-kpis/summary", headers=viewer_headers).json
    assert s["entries"] == 0
    assert s["completion_rate"] == 0
    assert s["members"] == []
