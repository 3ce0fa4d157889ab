from datetime import datetime, timedelta

from vibecheck.models import CheckIn, NotificationSession, Venue, VibeUser


def _venue(db, id="v1", name="Himkok"):
    db.add(Venue(id=id, name=name, city="Oslo", latitude=59.9146, longitude=10.7502))
    db.commit()


def _check_in(client, venue_id="v1", **kw):
    body = {"venue_id": venue_id, "vibe_score": "hot", "intent": "party", **kw}
    return client.post("/api/check-ins", json=body)


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    data = res.json()
    assert data["status"] == "ok"
    assert data["checks"]["database"] == "ok"
    assert data["checks"]["redis"] == "unavailable"


def test_list_venues(client, db):
    _venue(db)
    _venue(db, "v2", "Blå")
    res = client.get("/api/venues")
    assert res.status_code == 200
    assert [v["name"] for v in res.json()] == ["Blå", "Himkok"]


def test_create_check_in(client, db):
    _venue(db)
    res = _check_in(client, user_id="anon-1", gender="female", age_band="25_30")
    assert res.status_code == 201
    data = res.json()
    assert data["id"]
    assert data["user_id"] == "anon-1"
    assert db.query(VibeUser).filter(VibeUser.id == "anon-1").count() == 1


def test_check_in_validation(client, db):
    _venue(db)
    assert _check_in(client, vibe_score="lit").status_code == 422
    assert _check_in(client, age_band="12_17").status_code == 422


def test_check_in_unknown_venue(client):
    assert _check_in(client, venue_id="nope").status_code == 404


def test_list_check_ins(client, db):
    _venue(db)
    _venue(db, "v2", "Blå")
    _check_in(client)
    _check_in(client, venue_id="v2")
    assert len(client.get("/api/check-ins").json()) == 2
    assert len(client.get("/api/check-ins?venue_id=v2").json()) == 1


def test_venue_detail_gates_demographics(client, db):
    _venue(db)
    _check_in(client, gender="male")
    _check_in(client, gender="female")
    data = client.get("/api/venues/v1").json()
    assert data["stats"]["check_in_count"] == 2
    assert data["demographics"] is None
    assert data["intent_distribution"]["dominant_intent"] == "party"
    assert len(data["recent_check_ins"]) == 2

    _check_in(client)
    data = client.get("/api/venues/v1").json()
    assert data["demographics"]["total_gender_responses"] == 2


def test_venue_detail_not_found(client):
    assert client.get("/api/venues/missing").status_code == 404


def test_live_venues_sorted(client, db):
    _venue(db)
    _venue(db, "v2", "Blå")
    _check_in(client, venue_id="v2")
    _check_in(client, venue_id="v2")
    _check_in(client, venue_id="v1")
    res = client.get("/api/venues/live?mode=activity&window=60")
    assert res.status_code == 200
    venues = res.json()["venues"]
    assert [v["id"] for v in venues] == ["v2", "v1"]
    assert venues[0]["heat_weight"] > 0


def test_live_venues_rejects_bad_window(client):
    assert client.get("/api/venues/live?window=45").status_code == 422
    assert client.get("/api/venues/live?mode=loudest").status_code == 422


def test_notification_session_lifecycle(client, db):
    res = client.post("/api/notification-sessions", json={"user_id": "anon-1", "filters": {"heatmapMode": "ons"}})
    assert res.status_code == 201
    first = res.json()
    assert first["is_active"] and first["is_valid"]

    second = client.post("/api/notification-sessions", json={"user_id": "anon-1"}).json()
    assert client.get(f"/api/notification-sessions/{first['id']}").json()["is_active"] is False

    stopped = client.delete(f"/api/notification-sessions/{second['id']}").json()
    assert stopped["is_active"] is False
    assert stopped["is_valid"] is False


def test_expired_session_is_deactivated(client, db):
    db.add(VibeUser(id="anon-2"))
    db.add(NotificationSession(
        id="s1", user_id="anon-2", filters={},
        started_at=datetime.utcnow() - timedelta(hours=5),
        ends_at=datetime.utcnow() - timedelta(hours=1),
    ))
    db.commit()
    data = client.get("/api/notification-sessions/s1").json()
    assert data["is_active"] is False
    assert data["is_valid"] is False


def test_notification_session_not_found(client):
    res = client.get("/api/notification-sessions/missing")
    assert res.status_code == 404
    assert res.json()["kind"] == "validation"


def test_insights_require_pin(client, db):
    _venue(db)
    assert client.get("/api/insights-stats").status_code == 401
    assert client.get("/api/insights-stats", headers={"x-insights-pin": "0000"}).status_code == 401
    assert client.get("/api/insights/venues/v1/overview").status_code == 401


def test_insights_stats(client, db, pin_headers):
    _venue(db)
    _check_in(client, user_id="anon-1")
    db.add(CheckIn(
        venue_id="v1", vibe_score="ok", intent="chill",
        created_at=datetime.utcnow() - timedelta(hours=3),
    ))
    db.commit()
    data = client.get("/api/insights-stats", headers=pin_headers).json()
    assert data["total_users"] == 1
    assert data["active_users_last_10_min"] == 1
    assert data["check_ins_last_24h"] == 2
    assert data["check_ins_last_hour"] == 1
    assert data["total_venues"] == 1
    assert data["active_venues_last_24h"] == 1


def test_synthetic_overview(client, db, pin_headers):
    _venue(db)
    res = client.get("/api/insights/venues/v1/overview?days=7", headers=pin_headers)
    assert res.status_code == 200
    data = res.json()
    assert len(data["activity_trend"]) == 7
    assert data["kpis"]["base_check_ins"] == 150 + sum(map(ord, "v1")) % 100
    assert client.get("/api/insights/venues/v1/overview?days=5", headers=pin_headers).status_code == 422


def test_live_insights(client, db, pin_headers):
    _venue(db)
    _check_in(client, relationship_status="single", age_band="18_25")
    res = client.get("/api/insights/venues/v1/live?period=7", headers=pin_headers)
    assert res.status_code == 200
    data = res.json()
    assert len(data["activity_series"]) == 7
    assert data["activity_series"][-1]["visits"] == 1
    assert data["kpi"]["single_rate"]["value"] == 100


def test_splits_sources(client, db, pin_headers):
    _venue(db)
    _check_in(client, ons_intent="maybe")
    synthetic = client.get("/api/insights/venues/v1/splits?days=30", headers=pin_headers).json()
    live = client.get("/api/insights/venues/v1/splits?days=30&source=live", headers=pin_headers).json()
    assert synthetic["source"] == "synthetic"
    assert live["source"] == "live"
    assert len(live["activity"]) == 30
    assert {"label": "Maybe", "value": 100} in live["ons"]
    assert client.get("/api/insights/venues/v1/splits?source=magic", headers=pin_headers).status_code == 422


def test_list_venues_by_city(client, db):
    _venue(db)
    db.add(Venue(id="v3", name="Bakgården", city="Bergen", latitude=60.39, longitude=5.32))
    db.commit()
    assert [v["id"] for v in client.get("/api/venues?city=oslo").json()] == ["v1"]
    assert [v["id"] for v in client.get("/api/venues?city=Bergen").json()] == ["v3"]
    assert len(client.get("/api/venues").json()) == 2


def test_live_venues_rejects_unknown_filters(client, db):
    _venue(db)
    _check_in(client)
    res = client.get("/api/venues/live?mode=intent&intents=karaoke")
    assert res.status_code == 422
    assert "karaoke" in res.json()["detail"]
    assert client.get("/api/venues/live?mode=intent&intents=total").status_code == 422
    assert client.get("/api/venues/live?mode=age&age_bands=12_17").status_code == 422


def test_live_venues_intent_filter(client, db):
    _venue(db)
    _venue(db, "v2", "Blå")
    _check_in(client, intent="party")
    _check_in(client, venue_id="v2", intent="chill")
    res = client.get("/api/venues/live?mode=intent&intents=chill&intents=solo")
    assert res.status_code == 200
    assert [v["id"] for v in res.json()["venues"]] == ["v2", "v1"]


def test_live_venues_window_narrows_snapshot(client, db):
    _venue(db)
    db.add(CheckIn(
        venue_id="v1", vibe_score="hot", intent="party",
        created_at=datetime.utcnow() - timedelta(minutes=90),
    ))
    db.commit()
    hour = client.get("/api/venues/live?window=60").json()["venues"][0]
    two_hours = client.get("/api/venues/live?window=120").json()["venues"][0]
    assert hour["check_in_count"] == 0
    assert two_hours["check_in_count"] == 1
