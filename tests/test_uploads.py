"""Tests for file uploads."""

import io
import os

from paperfair.services.uploads import is_allowed_file


def upload(client, content=b"%PDF-1.4 test", filename="paper.pdf", mimetype="application/pdf"):
    return client.post(
        "/api/upload",
        data={"file": (io.BytesIO(content), filename, mimetype)},
        content_type="multipart/form-data",
    )


class TestUpload:
    def test_stores_pdf(self, client, app):
        resp = upload(client)
        body = resp.get_json()
        assert resp.status_code == 200
        assert body["fileName"] == "paper.pdf"
        assert body["fileSize"] == len(b"%PDF-1.4 test")
        assert body["fileUrl"].startswith("/api/uploads/")
        assert body["fileUrl"].endswith("-paper.pdf")

        stored = body["fileUrl"].rsplit("/", 1)[1]
        assert os.path.exists(os.path.join(app.config["UPLOAD_FOLDER"], stored))

    def test_stored_file_is_served(self, client, app):
        url = upload(client, content=b"slides").get_json()["fileUrl"]
        resp = client.get(url)
        assert resp.status_code == 200
        assert resp.data == b"slides"

    def test_non_ascii_name_keeps_extension(self, client, app):
        resp = upload(client, filename="论文.pdf")
        assert resp.status_code == 200
        assert resp.get_json()["fileUrl"].endswith(".pdf")

    def test_missing_file(self, client, app):
        resp = client.post("/api/upload", data={}, content_type="multipart/form-data")
        assert resp.status_code == 400
        assert resp.get_json()["error"]["message"] == "No file uploaded"

    def test_disallowed_extension(self, client, app):
        resp = upload(client, filename="run.exe", mimetype="application/pdf")
        assert resp.status_code == 400
        assert "Invalid file type" in resp.get_json()["error"]["message"]

    def test_disallowed_mime_type(self, client, app):
        assert upload(client, filename="paper.pdf", mimetype="text/html").status_code == 400

    def test_too_large(self, client, app):
        app.config["MAX_UPLOAD_BYTES"] = 10
        resp = upload(client, content=b"x" * 11)
        assert resp.status_code == 400
        assert "exceeds" in resp.get_json()["error"]["message"]
        assert not os.path.exists(app.config["UPLOAD_FOLDER"])


def test_allow_list_requires_both_extension_and_mime():
    assert is_allowed_file("talk.MP4", "video/mp4")
    assert is_allowed_file("deck.pptx", "application/vnd.openxmlformats-officedocument.presentationml.presentation")
    assert not is_allowed_file("talk.exe", "video/mp4")
    assert not is_allowed_file("talk.mp4", "text/plain")
    assert not is_allowed_file("notes.txt", "text/plain")


def test_oversized_body_rejected_before_parsing(client, app):
    app.config["MAX_CONTENT_LENGTH"] = 512
    resp = upload(client, content=b"x" * 4096)
    assert resp.status_code == 413
    assert resp.get_json()["error"]["code"] == "REQUEST_ENTITY_TOO_LARGE"
    assert not os.path.exists(app.config["UPLOAD_FOLDER"])


def test_request_limit_leaves_room_for_upload_limit(app):
    assert app.config["MAX_CONTENT_LENGTH"] > app.config["MAX_UPLOAD_BYTES"]
