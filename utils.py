import re

from fastapi.responses import Response

from api.layout.schemas import RenderedResume
from resume_pdf_service import create_docx_from_resume, create_pdf_from_resume

EXPORT_FORMATS = {
    "pdf": ("application/pdf", create_pdf_from_resume),
    "docx": (
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        create_docx_from_resume,
    ),
}


def _sanitize_filename(value: str) -> str:
    value = re.sub(r'[\\/:*?"<>|]+', "-", value)
    value = re.sub(r"\s+", " ", value).strip(" .")
    return value or "resume"


def render_resume_response(resume: RenderedResume, output_format: str) -> Response:
    extension = output_format.lower()
    if extension not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format: {output_format}")

    media_type, render = EXPORT_FORMATS[extension]
    file_name = f"{_sanitize_filename(f'{resume.header.name or resume.username} resume')}.{extension}"
    return Response(
        content=render(resume),
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )
