def test_unknown_tool_has_zero_likes(client):
    assert client.get("/likes/99").json() == {"tool_id": 99, "count": 0}


def test_like_stores_known_count_plus_one(client):
    assert client.post("/likes/3", json={"current_count": 10}).json()["count"] == 11
    assert client.get("/likes/3").json()["count"] == 11


def test_like_is_last_write_wins(client):
    client.post("/likes/3", json={"current_count": 10})
    # a second client that still saw 10 overwrites instead of incrementing
    assert client.post("/likes/3", json={"current_count": 10}).json()["count"] == 11


def test_negative_count_is_rejected(client):
    assert client.post("/likes/3", json={"current_count": -1}).status_code == 422
