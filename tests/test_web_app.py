"""
tests/test_web_app.py

Tests for the Flask interface, using Flask's test client.
Requires 'pytest' to run.
"""
import io
import pytest
import web_app


def tickets_csv(count_per_branch=6):
    lines = ["Hall Ticket"]
    for code in ("01", "02", "04", "05"):
        lines.extend(f"259F1A{code}{n:02d}" for n in range(1, count_per_branch + 1))
    return ("\n".join(lines) + "\n").encode("utf-8")


@pytest.fixture
def client():
    web_app.reset_state()
    web_app.app.config['TESTING'] = True
    with web_app.app.test_client() as client:
        yield client
    web_app.reset_state()


def upload(client, data=None, name="tickets.csv"):
    return client.post(
        '/upload',
        data={'file': (io.BytesIO(data or tickets_csv()), name)},
        content_type='multipart/form-data',
    )


def test_index_before_upload(client):
    response = client.get('/')
    assert response.status_code == 200
    assert b"Exam Seating Planner" in response.data
    assert client.get('/api/plan').get_json()['generated'] is False


def test_upload_generates_plan(client):
    response = upload(client)
    assert response.status_code == 302

    plan = client.get('/api/plan').get_json()
    assert plan['generated'] is True
    assert len(plan['rooms']) == 1
    assert len(plan['assignments']) == 24
    assert plan['room_names'] == ["Room 1"]
    assert {s['branch'] for s in plan['branch_statistics']} == {"CIVIL", "EEE", "ECE", "CSE"}

    page = client.get('/')
    assert b"259F1A0501" in page.data
    assert b"Adjacent same-branch pairs: 0" in page.data


def test_upload_without_tickets(client):
    upload(client, data=b"name\nnobody\n")
    page = client.get('/')
    assert b"No valid hall ticket numbers found" in page.data
    assert client.get('/api/plan').get_json()['generated'] is False


def test_upload_without_file(client):
    client.post('/upload', data={}, content_type='multipart/form-data')
    assert b"No file selected" in client.get('/').data


def test_settings_change_regenerates(client):
    upload(client)
    client.post('/settings', data={'students_per_room': '12', 'rows': '3', 'cols': '4'})
    plan = client.get('/api/plan').get_json()
    assert plan['layout'] == {'rows': 3, 'cols': 4}
    assert plan['students_per_room'] == 12
    assert len(plan['rooms']) == 2
    assert plan['room_names'] == ["Room 1", "Room 2"]


def test_invalid_settings_rejected(client):
    upload(client)
    client.post('/settings', data={'students_per_room': '0', 'rows': '11', 'cols': '4'})
    assert web_app.g_settings['rows'] == 4
    page = client.get('/')
    assert b"must be" in page.data


def test_rename_room(client):
    upload(client)
    response = client.post('/rename-room', data={'index': '0', 'name': 'Seminar Hall'})
    assert response.status_code == 302
    assert client.get('/api/plan').get_json()['room_names'] == ["Seminar Hall"]
    assert client.post('/rename-room', data={'index': '5', 'name': 'X'}).status_code == 400


def test_lookup(client):
    upload(client)
    found = client.get('/api/lookup?ticket=259f1a0501').get_json()
    assert found['identifier'] == "259F1A0501"
    assert found['branch'] == "CSE"
    assert found['room'] == "Room 1"
    assert client.get('/api/lookup?ticket=259F1A9999').status_code == 404


def test_downloads(client):
    assert client.get('/download/excel').status_code == 400
    upload(client)
    excel = client.get('/download/excel')
    assert excel.status_code == 200
    assert excel.data[:2] == b"PK"
    pdf = client.get('/download/pdf')
    assert pdf.status_code == 200
    assert pdf.data.startswith(b"%PDF")


def test_room_names_survive_settings_change(client):
    upload(client, tickets_csv(12))
    assert client.get('/api/plan').get_json()['room_names'] == ["Room 1", "Room 2"]
    client.post('/rename-room', data={'index': '0', 'name': 'Hall A'})

    client.post('/settings', data={'students_per_room': '12', 'rows': '3', 'cols': '4'})
    plan = client.get('/api/plan').get_json()
    names = plan['room_names']
    assert len(names) == len(plan['rooms']) > 2
    assert names == ["Hall A"] + [f"Room {i}" for i in range(2, len(names) + 1)]

    client.post('/settings', data={'students_per_room': '24', 'rows': '4', 'cols': '6'})
    assert client.get('/api/plan').get_json()['room_names'] == ["Hall A", "Room 2"]

    upload(client, tickets_csv(12))
    assert client.get('/api/plan').get_json()['room_names'] == ["Room 1", "Room 2"]


def test_carry_room_names():
    assert web_app.carry_room_names(["Hall A", "Lab"], 4) == ["Hall A", "Lab", "Room 3", "Room 4"]
    assert web_app.carry_room_names(["Hall A", "Lab", "Room 3"], 1) == ["Hall A"]


def test_branch_codes_file_is_used(client, tmp_path, monkeypatch):
    codes = tmp_path / "branch_codes.csv"
    codes.write_text("code,branch\n05,CSD\n")
    monkeypatch.setattr(web_app, "BRANCH_CODES_FILE", str(codes))
    upload(client)
    found = client.get('/api/lookup?ticket=259F1A0501').get_json()
    assert found['branch'] == "CSD"


def test_list_view(client):
    upload(client)
    page = client.get('/?view=list')
    assert b"DESK - 1 COLUMN - 1" in page.data
    assert b"Grid View" in page.data
    assert b"24 / 24 seats" in page.data
    assert b"DESK - 1 COLUMN - 1" not in client.get('/').data
