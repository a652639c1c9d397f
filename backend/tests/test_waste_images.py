"""
Waste photo upload tests.

Verifies:
- Uploaded photos are shrunk to fit 800x800 and stored as WebP
- Small photos are not enlarged
- Non-image and oversized uploads are rejected without writing a row
- Stored photos are served back under /uploads
"""

import io
import os

import pytest
from PIL import Image

from outletstock.errors import InternalError
from outletstock.extensions import db
from outletstock.models import Waste
from outletstock.services import image_service


DAY = "2026-03-10"


def _png_bytes(width, height, color=(200, 40, 40)):
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buf, format="PNG")
    return buf.getvalue()


def _post_waste(client, headers, product_id, data, filename="photo.png", content_type="image/png"):
    return client.post(
        "/api/waste",
        data={
            "productId": str(product_id),
            "quantity": "1.5",
            "date": DAY,
            "reason": "Dropped tray",
            "image": (io.BytesIO(data), filename, content_type),
        },
        headers=headers,
        content_type="multipart/form-data",
    )


def _stored_path(app, image_url):
    relative = image_url[len("/uploads/"):]
    return os.path.join(app.config["UPLOAD_FOLDER"], *relative.split("/"))


class TestWasteImages:

    def test_large_photo_is_resized_to_webp(self, app, client, seed, cafe_headers):
        resp = _post_waste(client, cafe_headers, seed.bread, _png_bytes(1600, 1200))

        assert resp.status_code == 201, resp.json
        data = resp.json["data"]
        assert data["quantity"] == 1.5
        assert data["reason"] == "Dropped tray"
        assert data["imageUrl"].startswith("/uploads/waste/waste-")
        assert data["imageUrl"].endswith(".webp")

        with Image.open(_stored_path(app, data["imageUrl"])) as img:
            assert img.format == "WEBP"
            assert img.size == (800, 600)

    def test_small_photo_is_not_enlarged(self, app, client, seed, cafe_headers):
        resp = _post_waste(client, cafe_headers, seed.bread, _png_bytes(320, 200))

        assert resp.status_code == 201
        with Image.open(_stored_path(app, resp.json["data"]["imageUrl"])) as img:
            assert img.size == (320, 200)

    def test_stored_photo_is_served(self, client, seed, cafe_headers):
        resp = _post_waste(client, cafe_headers, seed.bread, _png_bytes(100, 100))
        image_url = resp.json["data"]["imageUrl"]

        served = client.get(image_url)
        assert served.status_code == 200
        assert served.data[:4] == b"RIFF"

    def test_non_image_rejected(self, app, client, seed, cafe_headers):
        resp = _post_waste(
            client, cafe_headers, seed.bread, b"%PDF-1.4 not a photo",
            filename="receipt.pdf", content_type="application/pdf",
        )

        assert resp.status_code == 400
        assert resp.json["error"] == "Only image files are allowed"
        with app.app_context():
            assert db.session.query(Waste).count() == 0

    def test_oversized_image_rejected(self, app, client, seed, cafe_headers):
        app.config["WASTE_IMAGE_MAX_BYTES"] = 1024 * 1024
        resp = _post_waste(client, cafe_headers, seed.bread, b"\x89PNG" + b"\x00" * (1024 * 1024))

        assert resp.status_code == 400
        assert resp.json["error"] == "Image must be smaller than 1 MB"
        with app.app_context():
            assert db.session.query(Waste).count() == 0

    def test_validation_runs_before_the_image_is_stored(self, app, client, seed, cafe_headers):
        resp = client.post(
            "/api/waste",
            data={
                "quantity": "1",
                "date": DAY,
                "image": (io.BytesIO(_png_bytes(50, 50)), "photo.png", "image/png"),
            },
            headers=cafe_headers,
            content_type="multipart/form-data",
        )

        assert resp.status_code == 400
        assert resp.json["error"] == "Product ID is required"
        waste_dir = os.path.join(app.config["UPLOAD_FOLDER"], "waste")
        assert not os.path.isdir(waste_dir) or os.listdir(waste_dir) == []

    def test_multipart_without_image(self, client, seed, cafe_headers):
        resp = client.post(
            "/api/waste",
            data={"productId": str(seed.bread), "quantity": "1", "date": DAY},
            headers=cafe_headers,
            content_type="multipart/form-data",
        )
        assert resp.status_code == 201
        assert resp.json["data"]["imageUrl"] is None


class TestImageService:

    def test_compress_keeps_aspect_ratio(self, app):
        with app.app_context():
            out = image_service.compress_image(_png_bytes(400, 2000), 800, 80)

        with Image.open(io.BytesIO(out)) as img:
            assert img.format == "WEBP"
            assert img.size == (160, 800)

    def test_undecodable_bytes(self, app):
        with app.app_context():
            with pytest.raises(InternalError):
                image_service.compress_image(b"definitely not an image", 800, 80)

    def test_discard_missing_file_is_quiet(self, app, tmp_path):
        with app.app_context():
            image_service.discard(str(tmp_path / "gone.webp"))
            image_service.discard(None)
