"""
API Integration Tests for Buffer and System Endpoints
"""

import base64

import pytest

from core.image.converters import encode_image_to_base64
from raster.patterns import gradient_pattern


class TestBuffersAPI:
    """Integration tests for buffer lifecycle endpoints"""

    def test_create_buffer(self, client):
        """Test creating a blank buffer"""
        response = client.post("/api/buffers", json={"width": 16, "height": 8, "fill": "#FF0000"})

        assert response.status_code == 200
        data = response.json()

        assert data["id"].startswith("buf_")
        assert data["width"] == 16
        assert data["height"] == 8
        assert data["metadata"]["source"] == "blank"

    def test_create_with_int_fill(self, client):
        response = client.post(
            "/api/buffers", json={"width": 2, "height": 2, "fill": 0x80112233}
        )
        buffer_id = response.json()["id"]

        pixel = client.get(f"/api/buffers/{buffer_id}/pixel?x=0&y=0").json()
        assert pixel["hex"] == "#80112233"

    @pytest.mark.parametrize(
        "payload",
        [
            {"width": 0, "height": 4},
            {"width": 4, "height": -1},
            {"width": 4, "height": 4, "fill": "#12"},
            {"width": 4, "height": 4, "fill": "#GGGGGG"},
        ],
    )
    def test_create_invalid_request(self, client, payload):
        """Test invalid dimensions and colors are rejected by validation"""
        response = client.post("/api/buffers", json=payload)

        assert response.status_code == 422

    def test_list_buffers(self, client, canvas_id):
        client.post("/api/buffers", json={"width": 4, "height": 4})

        response = client.get("/api/buffers")

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert canvas_id in [info["id"] for info in data["buffers"]]

    def test_get_buffer(self, client, canvas_id):
        response = client.get(f"/api/buffers/{canvas_id}")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "canvas"
        assert (data["width"], data["height"]) == (32, 32)

    def test_get_missing_buffer(self, client):
        """Test unknown buffer IDs give 404"""
        response = client.get("/api/buffers/buf_missing")

        assert response.status_code == 404
        data = response.json()
        assert "error" in data or "detail" in data

    def test_get_pixel(self, client, canvas_id):
        response = client.get(f"/api/buffers/{canvas_id}/pixel?x=31&y=31")

        assert response.status_code == 200
        data = response.json()
        assert data["argb"] == 0xFF000000
        assert data["hex"] == "#FF000000"
        assert data["a"] == 255

    def test_get_pixel_out_of_range(self, client, canvas_id):
        response = client.get(f"/api/buffers/{canvas_id}/pixel?x=32&y=0")

        assert response.status_code == 400

    def test_get_pixel_negative(self, client, canvas_id):
        response = client.get(f"/api/buffers/{canvas_id}/pixel?x=-1&y=0")

        assert response.status_code == 422

    def test_preview(self, client, canvas_id):
        """Test preview magnifies the buffer"""
        response = client.get(f"/api/buffers/{canvas_id}/preview?scale=4")

        assert response.status_code == 200
        data = response.json()
        assert data["scale"] == 4
        assert (data["width"], data["height"]) == (128, 128)
        assert base64.b64decode(data["image_base64"])[:4] == b"\x89PNG"

    def test_preview_default_scale(self, client, canvas_id):
        response = client.get(f"/api/buffers/{canvas_id}/preview")

        assert response.status_code == 200
        assert response.json()["scale"] == 16

    @pytest.mark.parametrize(
        "fmt,media_type,magic",
        [
            ("png", "image/png", b"\x89PNG"),
            ("bmp", "image/bmp", b"BM"),
            ("jpg", "image/jpeg", b"\xff\xd8"),
        ],
    )
    def test_download(self, client, canvas_id, fmt, media_type, magic):
        response = client.get(f"/api/buffers/{canvas_id}/download?format={fmt}")

        assert response.status_code == 200
        assert response.headers["content-type"] == media_type
        assert response.content[: len(magic)] == magic

    def test_download_unknown_format(self, client, canvas_id):
        response = client.get(f"/api/buffers/{canvas_id}/download?format=gif")

        assert response.status_code == 422

    def test_upload(self, client):
        """Test uploading an encoded PNG"""
        image_base64 = encode_image_to_base64(gradient_pattern(20, 10))

        response = client.post(
            "/api/buffers/upload", json={"image_base64": image_base64, "name": "ramp"}
        )

        assert response.status_code == 200
        data = response.json()
        assert (data["width"], data["height"]) == (20, 10)
        assert data["metadata"]["source"] == "upload"

    def test_upload_garbage(self, client):
        response = client.post(
            "/api/buffers/upload",
            json={"image_base64": base64.b64encode(b"not an image").decode()},
        )

        assert response.status_code == 400

    def test_delete_buffer(self, client, canvas_id):
        response = client.delete(f"/api/buffers/{canvas_id}")

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert client.get(f"/api/buffers/{canvas_id}").status_code == 404

    def test_delete_missing_buffer(self, client):
        response = client.delete("/api/buffers/buf_missing")

        assert response.status_code == 404


class TestSystemAPI:
    """Integration tests for system endpoints"""

    def test_status(self, client, canvas_id):
        response = client.get("/api/system/status")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["buffer_usage"]["count"] == 1
        assert data["buffer_usage"]["total_pixels"] == 32 * 32
        assert "memory_usage" in data

    def test_config(self, client):
        response = client.get("/api/system/config")

        assert response.status_code == 200
        assert isinstance(response.json(), dict)

    def test_clear(self, client, canvas_id):
        response = client.post("/api/system/clear")

        assert response.status_code == 200
        assert client.get("/api/buffers").json()["count"] == 0

    def test_health(self, client):
        assert client.get("/api/system/health").json()["status"] == "healthy"

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Raster Flow"
        assert data["endpoints"]["codec"] == "/api/codec"

    def test_root_health(self, client):
        data = client.get("/health").json()

        assert data["services"]["buffer_store"] is True
