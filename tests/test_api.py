"""End-to-end tests for the JSON HTTP surface."""

import pytest

from santadraw import create_app
from santadraw.extensions import db

from .conftest import ADMIN_PIN


def _join(client, name, pin):
    return client.post("/join", json={"name": name, "pin": pin})


def _error_code(response):
    body = response.get_json()
    assert body["ok"] is False
    return body["error"]["code"]


def test_status_on_empty_event(client):
    response = client.get("/")
    assert response.status_code == 200
    state = response.get_json()["state"]
    assert state == {
        "is_drawn": False,
        "drawn_at": None,
        "participant_count": 0,
        "min_participants": 3,
        "can_draw": False,
    }


def test_join_returns_public_participant(client):
    response = _join(client, "Ana", "1111")
    assert response.status_code == 201
    body = response.get_json()
    assert body["ok"] is True
    assert body["participant"]["name"] == "Ana"
    assert set(body["participant"]) == {"id", "name"}


def test_join_accepts_form_data_and_numeric_pins(client):
    assert client.post("/join", data={"name": "Ana", "pin": "1111"}).status_code == 201
    assert client.post("/join", json={"name": "Luis", "pin": 2222}).status_code == 201

    names = [row["name"] for row in client.get("/participants").get_json()["participants"]]
    assert names == ["Ana", "Luis"]


def test_join_errors(client):
    _join(client, "Ana", "1111")

    response = _join(client, "ANA", "2222")
    assert response.status_code == 409
    assert _error_code(response) == "DuplicateName"

    response = _join(client, "Luis", "12")
    assert response.status_code == 400
    assert _error_code(response) == "WeakPin"

    response = client.post("/join", json={})
    assert response.status_code == 400
    assert _error_code(response) == "InvalidName"


def test_admin_request_without_pin_is_invalid_input(client):
    response = client.post("/admin/draw", json={})
    assert response.status_code == 400
    assert _error_code(response) == "InvalidInput"


def test_draw_with_too_few_participants(client):
    _join(client, "Ana", "1111")
    _join(client, "Luis", "2222")

    response = client.post("/admin/draw", json={"admin_pin": ADMIN_PIN})
    assert response.status_code == 409
    body = response.get_json()
    assert body["error"]["code"] == "InsufficientParticipants"
    assert body["error"]["kind"] == "StateError"
    assert client.get("/").get_json()["state"]["is_drawn"] is False


@pytest.mark.parametrize("path", ["/admin/draw", "/admin/reset", "/admin/wipe", "/admin/participants/1/delete"])
def test_admin_endpoints_reject_wrong_pin(client, path):
    for name, pin in (("Ana", "1111"), ("Luis", "2222"), ("Marta", "3333")):
        _join(client, name, pin)

    response = client.post(path, json={"admin_pin": "0000"})
    assert response.status_code == 403
    body = response.get_json()
    assert body["error"] == {
        "code": "InvalidAdminPin",
        "kind": "AuthError",
        "message": "Invalid admin PIN.",
    }
    assert client.get("/").get_json()["state"]["participant_count"] == 3
    assert client.get("/").get_json()["state"]["is_drawn"] is False


def test_check_before_draw(client):
    _join(client, "Ana", "1111")
    response = client.post("/check", json={"name": "Ana", "pin": "1111"})
    assert response.status_code == 409
    assert _error_code(response) == "DrawNotYetDone"


def test_check_with_bad_credentials(client):
    _join(client, "Ana", "1111")
    response = client.post("/check", json={"name": "Ana", "pin": "9999"})
    assert response.status_code == 401
    assert _error_code(response) == "NotFoundOrBadCredentials"


def test_remove_participant(client):
    ana = _join(client, "Ana", "1111").get_json()["participant"]
    _join(client, "Luis", "2222")

    response = client.post(f"/admin/participants/{ana['id']}/delete", json={"admin_pin": ADMIN_PIN})
    assert response.status_code == 200
    assert [row["name"] for row in response.get_json()["participants"]] == ["Luis"]

    response = client.post(f"/admin/participants/{ana['id']}/delete", json={"admin_pin": ADMIN_PIN})
    assert response.status_code == 404
    assert _error_code(response) == "NotFound"


def test_change_admin_pin(client):
    response = client.post("/admin/pin", json={"admin_pin": ADMIN_PIN, "new_pin": "12"})
    assert response.status_code == 400
    assert _error_code(response) == "WeakNewPin"

    response = client.post("/admin/pin", json={"admin_pin": ADMIN_PIN, "new_pin": "2468"})
    assert response.status_code == 200

    assert client.post("/admin/wipe", json={"admin_pin": ADMIN_PIN}).status_code == 403
    assert client.post("/admin/wipe", json={"admin_pin": "2468"}).status_code == 200


def test_full_event(client):
    pins = {"Ana": "1111", "Luis": "2222", "Marta": "3333"}
    for name, pin in pins.items():
        assert _join(client, name, pin).status_code == 201

    response = client.post("/admin/draw", json={"admin_pin": ADMIN_PIN})
    assert response.status_code == 200
    state = response.get_json()["state"]
    assert state["is_drawn"] is True
    assert state["drawn_at"]

    # joining and removal are closed
    assert _error_code(_join(client, "Pedro", "4444")) == "DrawAlreadyDone"
    assert _error_code(client.post("/admin/participants/1/delete", json={"admin_pin": ADMIN_PIN})) == "DrawAlreadyDone"
    assert _error_code(client.post("/admin/draw", json={"admin_pin": ADMIN_PIN})) == "DrawAlreadyDone"

    recipients = {}
    for name, pin in pins.items():
        response = client.post("/check", json={"name": name.lower(), "pin": pin})
        assert response.status_code == 200
        recipients[name] = response.get_json()["recipient"]

    assert all(giver != receiver for giver, receiver in recipients.items())
    assert sorted(recipients.values()) == sorted(pins)

    response = client.post("/admin/reset", json={"admin_pin": ADMIN_PIN})
    assert response.status_code == 200
    assert response.get_json()["state"]["is_drawn"] is False
    assert _error_code(client.post("/check", json={"name": "Ana", "pin": "1111"})) == "DrawNotYetDone"

    assert _join(client, "Pedro", "4444").status_code == 201

    response = client.post("/admin/wipe", json={"admin_pin": ADMIN_PIN})
    assert response.get_json()["removed"] == 4
    assert client.get("/participants").get_json()["participants"] == []


def test_csrf_is_enforced_when_enabled(tmp_path):
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'csrf.db'}",
        "WTF_CSRF_ENABLED": True,
        "LOG_LEVEL": "WARNING",
    })
    with app.app_context():
        db.create_all()

    client = app.test_client()
    response = client.post("/join", json={"name": "Ana", "pin": "1111"})
    assert response.status_code == 400
    assert _error_code(response) == "CSRFError"

    token = client.get("/csrf-token").get_json()["csrf_token"]
    response = client.post("/join", json={"name": "Ana", "pin": "1111"}, headers={"X-CSRFToken": token})
    assert response.status_code == 201


def test_unknown_strategy_is_a_configuration_error(tmp_path):
    with pytest.raises(ValueError):
        create_app({
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'bad.db'}",
            "SANTA_DRAW_STRATEGY": "hat",
        })


def test_init_db_command(tmp_path):
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'cli.db'}",
        "LOG_LEVEL": "WARNING",
    })
    result = app.test_cli_runner().invoke(args=["init-db"])
    assert result.exit_code == 0
    assert "Database ready" in result.output


@pytest.mark.parametrize("padded", ["  1234  ", " 1234", "1234 ", "1234\n"])
def test_padded_admin_pin_is_not_the_admin_pin(client, padded):
    for name, pin in (("Ana", "1111"), ("Luis", "2222"), ("Marta", "3333")):
        _join(client, name, pin)

    response = client.post("/admin/wipe", json={"admin_pin": padded})
    assert response.status_code == 403
    assert _error_code(response) == "InvalidAdminPin"
    assert client.get("/").get_json()["state"]["participant_count"] == 3


def test_participant_pins_are_used_as_sent(client):
    response = _join(client, "Ana", " 1111 ")
    assert response.status_code == 400
    assert _error_code(response) == "WeakPin"

    for name, pin in (("Ana", "1111"), ("Luis", "2222"), ("Marta", "3333")):
        _join(client, name, pin)
    client.post("/admin/draw", json={"admin_pin": ADMIN_PIN})

    response = client.post("/check", json={"name": "  Ana ", "pin": " 1111"})
    assert response.status_code == 401
    assert client.post("/check", json={"name": "  Ana ", "pin": "1111"}).status_code == 200


def test_sqlite_writers_wait_up_to_lock_timeout(app):
    assert app.config["SQLALCHEMY_ENGINE_OPTIONS"] == {"connect_args": {"timeout": 10.0}}
