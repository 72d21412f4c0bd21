import base64
from io import BytesIO

import pytest
from docx import Document
from PIL import Image

from api.profile.schemas import UserProfile
from factories import make_profile
from layout_engine import render_resume
from layout_presets import get_preset
from qr_generator import generate_qr_code, to_data_url
from resume_pdf_service import _safe_text, create_docx_from_resume, create_pdf_from_resume


def test_qr_code_png_has_requested_size():
    png = generate_qr_code("https://resumin.test/jane-doe", size=200)

    image = Image.open(BytesIO(png))
    assert image.format == "PNG"
    assert image.size == (200, 200)
    assert to_data_url(png).startswith("data:image/png;base64,")


def test_qr_code_rejects_empty_text():
    with pytest.raises(ValueError):
        generate_qr_code("")


def test_share_route_returns_png(client):
    resp = client.get("/api/share/jane-doe/qr", params={"size": 128, "dark": "#112233"})

    assert resp.status_code == 200
    assert resp.headers["content-type"] == "image/png"
    assert Image.open(BytesIO(resp.content)).size == (128, 128)


def test_share_route_validates_colours(client):
    assert client.get("/api/share/jane-doe/qr", params={"dark": "red"}).status_code == 422


def test_share_link_route_embeds_qr_as_data_url(client):
    body = client.get("/api/share/Jane-Doe", params={"size": 96}).json()

    assert body["username"] == "jane-doe"
    assert body["url"] == "https://resumin.test/jane-doe"
    prefix = "data:image/png;base64,"
    assert body["qr_code"].startswith(prefix)
    png = base64.b64decode(body["qr_code"][len(prefix):])
    assert Image.open(BytesIO(png)).size == (96, 96)


@pytest.mark.parametrize("preset_id", ["professional", "developer", "minimal", "modern"])
def test_pdf_export_for_presets(preset_id):
    profile = UserProfile.model_validate(make_profile(bio="Ships “fast” — reliably…"))
    pdf = create_pdf_from_resume(render_resume(profile, get_preset(preset_id)))

    assert pdf.startswith(b"%PDF")


def test_docx_export_contains_sections():
    profile = UserProfile.model_validate(make_profile())
    docx_bytes = create_docx_from_resume(render_resume(profile, get_preset("professional")))

    text = [paragraph.text for paragraph in Document(BytesIO(docx_bytes)).paragraphs]
    assert "Jane Doe" in text
    assert "Experience" in text
    assert "- Built services" in text


def test_safe_text_replaces_typography():
    assert _safe_text("“quoted” – ok…") == '"quoted" - ok...'


def test_export_route_records_download(client, mongo, saved_profile):
    resp = client.get("/api/profile/public/jane-doe/export", params={"format": "docx"})

    assert resp.status_code == 200
    assert resp.headers["content-disposition"] == 'attachment; filename="Jane Doe resume.docx"'
    assert mongo["resumin"]["analytics"].count_documents({"event_type": "download_click"}) == 1


def test_export_route_for_owner_is_not_tracked(client, mongo, owner_headers, saved_profile):
    resp = client.get("/api/profile/public/jane-doe/export", headers=owner_headers)

    assert resp.status_code == 200
    assert resp.content.startswith(b"%PDF")
    assert mongo["resumin"]["analytics"].count_documents({}) == 0


def test_export_missing_profile(client):
    assert client.get("/api/profile/public/nobody/export").status_code == 404


def test_layout_catalogue_and_preview(client):
    presets = client.get("/api/layout/presets").json()
    themes = client.get("/api/layout/themes").json()

    assert [p["id"] for p in presets] == ["professional", "creative", "developer", "minimal", "executive", "modern"]
    assert len(themes) == 12

    resp = client.post("/api/layout/preview", json={"profile": make_profile(), "preset_id": "minimal"})
    assert resp.status_code == 200
    assert resp.json()["header"]["contact_block"] is None

    assert client.post("/api/layout/preview", json={"profile": {}, "preset_id": "nope"}).status_code == 400
    assert client.post("/api/layout/preview", json={"profile": {"skills": "x"}}).status_code == 422
