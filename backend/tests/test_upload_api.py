import os
import re

from runbook_checklist.core.config import settings
from runbook_checklist.services.upload_storage import stored_filename


PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def test_upload_stores_file_and_serves_it(client):
    resp = client.post("/api/upload", files={"file": ("dashboard.png", PNG_BYTES, "image/png")})
    assert resp.status_code == 200, resp.text
    url = resp.json()["url"]
    assert re.fullmatch(r"/uploads/dashboard-\d{13}\.png", url)

    stored = os.path.join(settings.UPLOAD_DIR, url.rsplit("/", 1)[1])
    with open(stored, "rb") as f:
        assert f.read() == PNG_BYTES

    served = client.get(url)
    assert served.status_code == 200
    assert served.content == PNG_BYTES


def test_upload_without_file_part_is_rejected(client):
    resp = client.post("/api/upload", data={"note": "no file here"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "No file uploaded"


def test_upload_over_the_size_limit_is_rejected(client, monkeypatch):
    monkeypatch.setattr(settings, "MAX_FILE_SIZE", 8)
    before = set(os.listdir(settings.UPLOAD_DIR))

    resp = client.post("/api/upload", files={"file": ("big.png", PNG_BYTES, "image/png")})
    assert resp.status_code == 413
    assert set(os.listdir(settings.UPLOAD_DIR)) == before


def test_stored_filename_keeps_extension_and_drops_directories():
    assert stored_filename("shot.final.jpg", timestamp_ms=1700000000000) == "shot.final-1700000000000.jpg"
    assert stored_filename("../../etc/passwd", timestamp_ms=1) == "passwd-1"
    assert stored_filename("C:\\images\\log.txt", timestamp_ms=2) == "log-2.txt"
    assert stored_filename(None, timestamp_ms=3) == "upload-3"
