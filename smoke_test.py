from __future__ import annotations

from web import create_app


def main() -> None:
    app = create_app({"AI_REPLY_DELAY": 0, "AI_OPENING_DELAY": 0, "AUTOPLAY_DELAY": 0})
    client = app.test_client()

    # fresh round
    resp = client.post("/api/reset", json={})
    assert resp.status_code == 200, resp.data
    data = resp.get_json()
    assert "board" in data and "status" in data

    # make a move and have AI reply
    resp = client.post("/api/move", json={"index": 4})
    assert resp.status_code == 200, resp.data
    data = resp.get_json()
    assert data["history"]
    print("Smoke OK. AI replied:", data["history"][0])


if __name__ == "__main__":
    main()
