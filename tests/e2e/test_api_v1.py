"""
End-to-end tests for the JSON API under /api/v1.
"""

from io import BytesIO

from tests.conftest import VALID_TOKEN

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def api_upload(client, files, token=VALID_TOKEN):
    data = {"files": files}
    if token is not None:
        data["token"] = token
    return client.post("/api/v1/objects", data=data, content_type="multipart/form-data")


class TestUploadEndpoint:
    def test_single_file(self, client):
        response = api_upload(client, (BytesIO(b"hello"), "notes.txt"))
        body = response.get_json()

        assert response.status_code == 201
        assert body["name"].endswith(".txt")
        assert body["reference"] == f"https://paste.example.com/{body['name']}"
        assert body["members"] == []

    def test_several_files(self, client):
        response = api_upload(
            client, [(BytesIO(b"A"), "a.txt"), (BytesIO(b"B"), "b.txt")]
        )
        body = response.get_json()

        assert response.status_code == 201
        assert body["name"].startswith("m-")
        assert len(body["members"]) == 2

    def test_bearer_header(self, client):
        response = client.post(
            "/api/v1/objects",
            data={"files": (BytesIO(b"x"), "a.txt")},
            content_type="multipart/form-data",
            headers={"Authorization": f"Bearer {VALID_TOKEN}"},
        )
        assert response.status_code == 201

    def test_unauthorized(self, client):
        response = api_upload(client, (BytesIO(b"x"), "a.txt"), token="nope")
        body = response.get_json()

        assert response.status_code == 401
        assert body["error"] == "unauthorized"
        assert body["message"] == "Not authenticated."

    def test_no_files(self, client):
        response = client.post(
            "/api/v1/objects", data={"token": VALID_TOKEN}, content_type="multipart/form-data"
        )

        assert response.status_code == 400
        assert response.get_json()["error"] == "no_files"


class TestDescribeEndpoint:
    def test_text_object(self, client):
        name = api_upload(client, (BytesIO(b"hello"), "notes.txt")).get_json()["name"]

        body = client.get(f"/api/v1/objects/{name}").get_json()

        assert body["kind"] == "text"
        assert body["mimetype"] == "text/plain"
        assert body["members"] == []

    def test_binary_object(self, client):
        name = api_upload(client, (BytesIO(PNG_BYTES), "image.png")).get_json()["name"]

        body = client.get(f"/api/v1/objects/{name}").get_json()

        assert body["kind"] == "binary"
        assert body["mimetype"] == "image/png"

    def test_multi_object(self, client):
        uploaded = api_upload(
            client, [(BytesIO(b"A"), "a.txt"), (BytesIO(b"B"), "b.txt")]
        ).get_json()

        body = client.get(f"/api/v1/objects/{uploaded['name']}").get_json()

        assert body["kind"] == "multi"
        assert [m["name"] for m in body["members"]] == uploaded["members"]
        assert all(m["exists"] for m in body["members"])

    def test_missing(self, client):
        response = client.get("/api/v1/objects/nope.txt")

        assert response.status_code == 404
        assert response.get_json()["error"] == "file_not_found"


class TestDocumentation:
    def test_swagger_document(self, client):
        response = client.get("/api/v1/swagger.json")

        assert response.status_code == 200
        assert "/objects" in response.get_json()["paths"]
