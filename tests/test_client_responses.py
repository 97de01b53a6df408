def _post(client, headers, client_id, day, rating, misc=None, comment=None):
    r = client.post(
        "/api/responses",
        json={
            "client_id": client_id,
            "date": day,
            "review_rating": rating,
            "review_comment": comment,
            "miscellaneous_work": misc,
        },
        headers=headers,
    )
    return r


def test_responses_crud(client, admin_headers, seed_client):
    r = _post(client, admin_headers, seed_client["id"], "2024-08-01", 5, comment="Great work")
    assert r.status_code == 201
    row = r.json
    assert row["review_comment"] == "Great work"
    assert row["client_name"] == "Acme Roofing"

    r = client.put(
        f"/api/responses/{row['id']}",
        json={"client_id": seed_client["id"], "date": "2024-08-01", "review_rating": 4, "review_comment": "  "},
        headers=admin_headers,
    )
    assert r.status_code == 200
    assert r.json["review_rating"] == 4
    assert r.json["review_comment"] is None

    assert client.delete(f"/api/responses/{row['id']}", headers=admin_headers).status_code == 200
    assert client.get("/api/responses", headers=admin_headers).json == []


def test_rating_range(client, admin_headers, seed_client):
    assert _post(client, admin_headers, seed_client["id"], "2024-08-01", 6).status_code == 400
    assert _post(client, admin_headers, seed_client["id"], "2024-08-01", -1).status_code == 400
    assert _post(client, admin_headers, seed_client["id"], "2024-08-01", 0).status_code == 201


def test_responses_summary(client, admin_headers, seed_client):
    cid = seed_client["id"]
    _post(client, admin_headers, cid, "2024-08-01", 5, misc="Fixed landing page")
    _post(client, admin_headers, cid, "2024-08-02", 4)
    _post(client, admin_headers, cid, "2024-08-03", 5, misc="   ")
    _post(client, admin_headers, cid, "2024-08-04", 0, misc="Extra banner")

    s = client.get("/api/responses/summary", headers=admin_headers).json
    assert s["entries"] == 4
    assert s["total_reviews"] == 3
    assert s["avg_rating"] == 4.67
    assert s["total_misc_work"] == 2
    assert s["rating_distribution"] == {"1": 0, "2": 0, "3": 0, "4": 1, "5": 2}


def test_response_activity_name(client, admin_headers, seed_client):
    _post(client, admin_headers, seed_client["id"], "2024-08-01", 3)
    acts = client.get("/api/activities/by-action/data_added", headers=admin_headers).json
    assert acts[0]["entity_name"] == "Acme Roofing - Response"
    assert acts[0]["tab_name"] == "ClientResponsesTab"
