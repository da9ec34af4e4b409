"""
API Integration Tests for Transform and System Endpoints
"""

import base64
import io

from PIL import Image


def decode(image_base64):
    with Image.open(io.BytesIO(base64.b64decode(image_base64))) as decoded:
        return decoded.size, decoded.format


class TestTransformAPI:
    """Integration tests for the transform endpoint"""

    def test_resize(self, client, png_base64):
        request_data = {"image_base64": png_base64, "format": "image/png", "resize": {"width": 100}}
        response = client.post("/api/transform", json=request_data)

        assert response.status_code == 200
        data = response.json()

        assert data["success"] is True
        assert data["width"] == 100
        assert data["height"] == 75
        assert data["format"] == "image/png"
        assert data["data_url"].startswith("data:image/png;base64,")
        assert data["size_bytes"] == len(base64.b64decode(data["image_base64"]))
        assert data["processing_time_ms"] >= 0
        assert decode(data["image_base64"]) == ((100, 75), "PNG")

    def test_defaults_to_jpeg(self, client, png_base64):
        response = client.post("/api/transform", json={"image_base64": png_base64})

        assert response.status_code == 200
        data = response.json()
        assert data["format"] == "image/jpeg"
        assert (data["width"], data["height"]) == (400, 300)

    def test_data_url_input(self, client, png_base64):
        request_data = {"image_base64": f"data:image/png;base64,{png_base64}", "rotate": 90}
        response = client.post("/api/transform", json=request_data)

        assert response.status_code == 200
        assert (response.json()["width"], response.json()["height"]) == (300, 400)

    def test_full_pipeline(self, client, png_base64):
        request_data = {
            "image_base64": png_base64,
            "format": "image/webp",
            "quality": 0.8,
            "resize": {"width": 120, "height": 120, "crop_mode": "thumb", "gravity": "left"},
            "algorithm": "multistep",
            "sharpen": 1,
            "crop_shape": {"type": "roundedRect", "radius": 16},
        }
        response = client.post("/api/transform", json=request_data)

        assert response.status_code == 200
        data = response.json()
        assert data["format"] == "image/webp"
        assert (data["width"], data["height"]) == (160, 120)

    def test_circle_crop_is_square(self, client, png_base64):
        request_data = {"image_base64": png_base64, "format": "image/png", "crop_shape": {"type": "circle"}}
        response = client.post("/api/transform", json=request_data)

        assert response.status_code == 200
        assert response.json()["width"] == response.json()["height"] == 300

    def test_sharpen_level_is_clamped(self, client, png_base64):
        response = client.post("/api/transform", json={"image_base64": png_base64, "sharpen": 7})
        assert response.status_code == 200

    def test_undecodable_image(self, client):
        response = client.post("/api/transform", json={"image_base64": "aGVsbG8gd29ybGQ="})

        assert response.status_code == 400
        assert response.json()["error"] == "LoadError"

    def test_unsupported_format(self, client, png_base64):
        response = client.post("/api/transform", json={"image_base64": png_base64, "format": "image/tiff"})

        assert response.status_code == 415
        assert response.json()["error"] == "EncodeUnavailable"

    def test_invalid_aspect_ratio(self, client, png_base64):
        request_data = {"image_base64": png_base64, "resize": {"height": 100, "aspect_ratio": "wide"}}
        response = client.post("/api/transform", json=request_data)
        assert response.status_code == 422

    def test_invalid_quality(self, client, png_base64):
        response = client.post("/api/transform", json={"image_base64": png_base64, "quality": 2})
        assert response.status_code == 422

    def test_oversized_payload(self, client, png_base64, monkeypatch):
        from core.constants import APIConstants

        monkeypatch.setattr(APIConstants, "MAX_REQUEST_IMAGE_MB", 0.000001)
        response = client.post("/api/transform", json={"image_base64": png_base64})
        assert response.status_code == 422

    def test_missing_image(self, client):
        response = client.post("/api/transform", json={"format": "image/png"})
        assert response.status_code == 422


class TestSystemAPI:
    """Integration tests for system endpoints"""

    def test_status(self, client):
        response = client.get("/api/system/status")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["backend"] == "opencv"
        assert data["max_dimension"] > 0
        assert "process_mb" in data["memory_usage"]

    def test_config(self, client):
        response = client.get("/api/system/config")

        assert response.status_code == 200
        data = response.json()
        assert data["transform"]["default_format"] == "image/jpeg"
        assert "log_level" in data["system"]

    def test_system_health(self, client):
        response = client.get("/api/system/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["endpoints"]["transform"] == "/api/transform"

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["services"]["backend"] is True
