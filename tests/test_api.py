import os

from fastapi.testclient import TestClient

from config import VARIANT_STATUS
from errors import PredictionError
from tests.conftest import FakePredictionClient, build_app

PHOTO = ("street.jpg", b"\xff\xd8fake-jpeg", "image/jpeg")
FORM = {"latitude": "12.9", "longitude": "77.6", "location": "MG Road", "description": "Flood"}


def submit(client, form=FORM, photo=PHOTO):
    return client.post("/user/report/", files={"image": photo}, data=form)


def upload_dir(client):
    return client.app.state.settings.upload_dir


# -------------------- status variant --------------------

def test_status_report_scenario(status_client):
    response = submit(status_client)
    assert response.status_code == 200
    report = response.json()
    assert report["id"] == 1
    assert report["status"] == "not_resolved"
    assert report["latitude"] == 12.9
    assert report["longitude"] == 77.6
    assert report["location"] == "MG Road"
    assert report["description"] == "Flood"
    assert report["image_filename"].endswith("-street.jpg")
    assert "urgency_level" not in report

    response = status_client.put("/admin/report/1/status", json={"status": "resolved"})
    assert response.status_code == 200
    assert response.json()["report"]["status"] == "resolved"

    [stored] = status_client.get("/user/reports/").json()
    assert stored == dict(report, status="resolved")


def test_upload_is_served(status_client):
    report = submit(status_client).json()
    assert os.path.exists(os.path.join(upload_dir(status_client), report["image_filename"]))

    response = status_client.get(f"/uploaded_images/{report['image_filename']}")
    assert response.status_code == 200
    assert response.content == PHOTO[1]


def test_report_without_image(status_client):
    response = status_client.post("/user/report/", data=FORM)
    assert response.status_code == 400
    assert response.json() == {"message": "Image file is required."}
    assert status_client.get("/user/reports/").json() == []


def test_report_with_bad_coordinates(status_client):
    response = submit(status_client, form=dict(FORM, latitude="north"))
    assert response.status_code == 400
    assert "latitude" in response.json()["message"]


def test_report_text_with_commas(status_client):
    submit(status_client, form=dict(FORM, location="Block 4, MG Road", description="Flood, 2ft water"))
    [report] = status_client.get("/user/reports/").json()
    assert report["location"] == "Block 4, MG Road"
    assert report["description"] == "Flood, 2ft water"
    assert report["status"] == "not_resolved"


def test_ids_follow_submission_order(status_client):
    ids = [submit(status_client).json()["id"] for _ in range(3)]
    assert ids == [1, 2, 3]
    assert status_client.get("/user/reports/2").json()["id"] == 2


def test_get_unknown_report(status_client):
    response = status_client.get("/user/reports/9")
    assert response.status_code == 404
    assert response.json() == {"message": "Report 9 not found."}


def test_status_update_unknown_report(status_client):
    submit(status_client)
    response = status_client.put("/admin/report/5/status", json={"status": "resolved"})
    assert response.status_code == 404
    assert status_client.get("/user/reports/1").json()["status"] == "not_resolved"


def test_status_update_requires_status(status_client):
    submit(status_client)
    response = status_client.put("/admin/report/1/status", json={})
    assert response.status_code == 400


# -------------------- prediction variant --------------------

def test_prediction_report(predicting_client, fake_predictor):
    response = submit(predicting_client)
    assert response.status_code == 200
    report = response.json()
    assert report["id"] == 1
    assert report["severity"] == "severe"
    assert report["humanitarian"] == "affected_injured_or_dead_people"
    assert report["disaster_or_not"] == "disaster"
    assert report["urgency_level"] == "5 (Critical)"
    assert "status" not in report

    [(image_path, description)] = fake_predictor.calls
    assert os.path.basename(image_path) == report["image_filename"]
    assert description == "Flood"

    assert predicting_client.get("/user/reports/").json() == [report]


def test_prediction_unknown_labels(tmp_path):
    predictor = FakePredictionClient(severity="extreme", humanitarian="other")
    app = build_app(tmp_path, "prediction", predictor=predictor)
    with TestClient(app) as client:
        report = submit(client).json()
    assert report["urgency_level"] == "N/A"


def test_prediction_failure_stores_nothing(tmp_path):
    predictor = FakePredictionClient(error=PredictionError("damage prediction request failed"))
    app = build_app(tmp_path, "prediction", predictor=predictor)
    with TestClient(app) as client:
        response = submit(client)
        assert response.status_code == 500
        assert response.json() == {"message": "Internal server error."}
        assert client.get("/user/reports/").json() == []
        assert os.listdir(upload_dir(client)) == []


def test_unexpected_failure_is_generic_500(tmp_path):
    predictor = FakePredictionClient(error=RuntimeError("boom"))
    app = build_app(tmp_path, "prediction", predictor=predictor)
    with TestClient(app, raise_server_exceptions=False) as client:
        response = submit(client)
        assert response.status_code == 500
        assert response.json() == {"message": "Internal server error."}
        assert os.listdir(upload_dir(client)) == []


def test_admin_route_only_in_status_variant(predicting_client):
    submit(predicting_client)
    response = predicting_client.put("/admin/report/1/status", json={"status": "resolved"})
    assert response.status_code == 404


def test_corrupted_store_is_500(status_client):
    submit(status_client)
    with open(status_client.app.state.settings.reports_csv, "a") as f:
        f.write("2,broken\n")
    response = status_client.get("/user/reports/")
    assert response.status_code == 500
    assert response.json() == {"message": "Internal server error."}


# -------------------- users --------------------

def signup(client, mobile_number, name="Asha", mpin="1234"):
    return client.post("/signup", json={
        "mobile_number": mobile_number,
        "name": name,
        "email": f"{name.lower()}@example.com",
        "password": "hunter2",
        "mpin": mpin,
    })


def test_signup(status_client):
    response = signup(status_client, "9000000001")
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "User created successfully"
    assert body["user"] == {
        "mobile_number": "9000000001",
        "name": "Asha",
        "email": "asha@example.com",
        "wallet_amount": 0.0,
    }


def test_signup_duplicate(status_client):
    signup(status_client, "9000000001")
    response = signup(status_client, "9000000001", name="Ravi")
    assert response.status_code == 400
    assert response.json() == {"message": "Mobile number already exists."}


def test_signup_missing_fields(status_client):
    response = status_client.post("/signup", json={"mobile_number": "9000000001"})
    assert response.status_code == 400


def test_login(status_client):
    signup(status_client, "9000000001", name="Asha")
    signup(status_client, "9000000002", name="Ravi")

    response = status_client.post("/login", json={"mobile_number": "9000000001", "mpin": "1234"})
    assert response.status_code == 200
    assert response.json() == {
        "message": "Login successful",
        "user": {"mobile_number": "9000000001", "name": "Asha"},
        "contacts": [{"mobile_number": "9000000002", "name": "Ravi"}],
    }


def test_login_wrong_mpin(status_client):
    signup(status_client, "9000000001")
    response = status_client.post("/login", json={"mobile_number": "9000000001", "mpin": "9999"})
    assert response.status_code == 401
    assert response.json() == {"message": "Invalid MPIN."}


def test_login_unknown_user(status_client):
    response = status_client.post("/login", json={"mobile_number": "9000000001", "mpin": "1234"})
    assert response.status_code == 404
    assert response.json() == {"message": "User not found."}


def test_health(status_client):
    body = status_client.get("/health").json()
    assert body["status"] == "healthy"
    assert body["variant"] == VARIANT_STATUS
    assert body["prediction_service"] == "disabled"


def test_report_with_non_finite_coordinates(status_client):
    for value in ("nan", "inf", "-Infinity"):
        response = submit(status_client, form=dict(FORM, longitude=value))
        assert response.status_code == 400
        assert "longitude" in response.json()["message"]
    assert status_client.get("/user/reports/").json() == []


def test_report_text_with_carriage_return(status_client):
    submit(status_client, form=dict(FORM, description="Flood\rroad closed"))
    submit(status_client)

    reports = status_client.get("/user/reports/").json()
    assert [r["id"] for r in reports] == [1, 2]
    assert reports[0]["description"] == "Flood\rroad closed"

    response = status_client.put("/admin/report/1/status", json={"status": "resolved"})
    assert response.status_code == 200


def test_failed_upload_copy_leaves_no_file(status_client, monkeypatch):
    def copy_then_fail(source, target):
        target.write(b"partial")
        raise OSError("No space left on device")

    monkeypatch.setattr("routers.reports.shutil.copyfileobj", copy_then_fail)
    client = TestClient(status_client.app, raise_server_exceptions=False)

    response = submit(client)
    assert response.status_code == 500
    assert os.listdir(upload_dir(status_client)) == []
    assert status_client.get("/user/reports/").json() == []


def test_users_live_in_configured_database(tmp_path):
    database_url = f"sqlite:///{tmp_path / 'users.db'}"

    with TestClient(build_app(tmp_path, VARIANT_STATUS, database_url=database_url)) as client:
        assert signup(client, "9000000001").status_code == 200
        assert client.get("/health").json()["database"] == "connected"

    assert (tmp_path / "users.db").exists()

    with TestClient(build_app(tmp_path, VARIANT_STATUS, database_url=database_url)) as client:
        response = client.post("/login", json={"mobile_number": "9000000001", "mpin": "1234"})
        assert response.status_code == 200
        assert response.json()["user"]["name"] == "Asha"
