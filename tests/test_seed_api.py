SMALL = {"width": 30, "height": 30, "min_room_size": 4, "max_room_size": 8}


def test_save_numeric_seed(client):
    r = client.post("/api/dungeon/seed", json={"seed": 12345, "config": SMALL})
    assert r.status_code == 201
    data = r.get_json()
    assert data["seed"] == 12345
    assert isinstance(data["layout_id"], int)


def test_string_seed_hash_is_stable(client):
    a = client.post("/api/dungeon/seed", json={"seed": "alpha", "config": SMALL}).get_json()
    b = client.post("/api/dungeon/seed", json={"seed": "alpha", "config": SMALL}).get_json()
    assert a["seed"] == b["seed"]
    assert a["layout_id"] != b["layout_id"]


def test_random_regenerate_seed(client):
    data = client.post("/api/dungeon/seed", json={"regenerate": True, "config": SMALL}).get_json()
    assert isinstance(data["seed"], int)


def test_bad_seed_and_config_rejected(client):
    assert client.post("/api/dungeon/seed", json={"seed": True}).status_code == 400
    assert client.post("/api/dungeon/seed", json={"seed": [1, 2]}).status_code == 400
    r = client.post("/api/dungeon/seed", json={"seed": 1, "config": {"fill_percent": 400}})
    assert r.status_code == 400
    assert client.post("/api/dungeon/seed", json={"seed": 1, "config": "big"}).status_code == 400


def test_fetch_saved_layout(client):
    saved = client.post("/api/dungeon/seed", json={"seed": 777, "name": "demo", "config": SMALL}).get_json()
    r = client.get(f"/api/dungeon/seed/{saved['layout_id']}")
    assert r.status_code == 200
    data = r.get_json()
    assert data["seed"] == 777
    assert data["name"] == "demo"
    assert data["config"]["width"] == 30
    assert data["summary"]["size"] == [30, 30]
    # the summary is the same layout the generate endpoint returns
    direct = client.get("/api/dungeon/generate?seed=777&width=30&height=30&min_room_size=4&max_room_size=8").get_json()
    assert data["summary"]["rooms"] == direct["rooms"]


def test_missing_layout_is_404(client):
    assert client.get("/api/dungeon/seed/999999").status_code == 404


def test_save_respects_grid_limit(client, test_app):
    test_app.config["CAVEMESH_MAX_GRID"] = 50
    r = client.post("/api/dungeon/seed", json={"seed": 3, "config": {"width": 60, "height": 60}})
    assert r.status_code == 400
    assert "limit" in r.get_json()["error"]


def test_fetch_respects_lowered_grid_limit(client, test_app):
    big = {"width": 60, "height": 60, "min_room_size": 4, "max_room_size": 8}
    saved = client.post("/api/dungeon/seed", json={"seed": 3, "config": big})
    assert saved.status_code == 201
    test_app.config["CAVEMESH_MAX_GRID"] = 50
    r = client.get(f"/api/dungeon/seed/{saved.get_json()['layout_id']}")
    assert r.status_code == 400
    assert "limit" in r.get_json()["error"]
