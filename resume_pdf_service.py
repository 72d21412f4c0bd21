import re
from io import BytesIO
from pathlib import Path
from typing import Any

from docx import Document
from docx.shared import Pt, RGBColor
from fpdf import FPDF

from api.layout.schemas import RenderedHeader, RenderedResume, RenderedSection, SectionKey


def _safe_text(value: str) -> str:
    text = value
    replacements = {
        "•": "-",
        "●": "-",
        "◦": "-",
        "–": "-",
        "—": "-",
        "−": "-",
        "’": "'",
        "‘": "'",
        "“": '"',
        "”": '"',
        "…": "...",
        " ": " ",
        "​": "",
    }
    for old, new in replacements.items():
        text = text.replace(old, new)

    text = text.encode("latin-1", errors="ignore").decode("latin-1")
    text = re.sub(r"\s+", " ", text).strip()
    # FPDF can fail when a single token is wider than the printable area.
    # Break very long non-space tokens into smaller chunks.
    parts = text.split()
    normalized: list[str] = []
    for part in parts:
        if len(part) <= 45:
            normalized.append(part)
            continue
        chunks = [part[i : i + 45] for i in range(0, len(part), 45)]
        normalized.append(" ".join(chunks))
    return " ".join(normalized)


def _hex_to_rgb(value: str) -> tuple[int, int, int]:
    value = value.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def _percent(width: str) -> float:
    try:
        return float(width.rstrip("%")) / 100
    except ValueError:
        return 0.0


def _join(parts: list[Any], separator: str = " | ") -> str:
    return separator.join(str(part).strip() for part in parts if part and str(part).strip())


def _section_lines(section: RenderedSection) -> list[str]:
    """Flatten a rendered section into plain text lines for the document writers."""
    lines: list[str] = []
    key = section.key
    for item in section.items:
        if key is SectionKey.BIO:
            lines.append(item.get("text", ""))
        elif key is SectionKey.SOCIALS:
            lines.append(f"{str(item.get('platform', '')).capitalize()}: {item.get('url', '')}")
        elif key is SectionKey.SKILLS:
            if "skills" in item:
                names = ", ".join(f"{skill['name']} ({skill['level']})" for skill in item["skills"])
                lines.append(f"{item.get('label', '')}: {names}")
            elif "text" in item:
                lines.append(f"{item.get('label', '')}: {item['text']}")
            else:
                lines.append(f"{item.get('name', '')} - {item.get('level', '')}")
        elif key is SectionKey.EXPERIENCE:
            heading = " at ".join(part for part in [item.get("role"), item.get("company")] if part)
            lines.append(_join([heading, item.get("duration"), item.get("location"), item.get("type_label")]))
            lines.extend(f"- {bullet}" for bullet in item.get("bullets", []))
        elif key is SectionKey.PROJECTS:
            name = f"{item.get('name', '')}{' *' if item.get('featured') else ''}"
            lines.append(_join([name, item.get("link")]))
            if item.get("desc"):
                lines.append(f"- {item['desc']}")
            technologies = item.get("technologies") or []
            if technologies:
                lines.append(f"- Tech: {', '.join(technologies)}")
        elif key is SectionKey.EDUCATION:
            left = " - ".join(part for part in [item.get("degree"), item.get("institution")] if part)
            extras = [item.get("year"), f"GPA: {item['gpa']}" if item.get("gpa") else None, item.get("honors")]
            lines.append(_join([left, *extras]))
        elif key is SectionKey.CERTIFICATIONS:
            expiry = f"Expires: {item['expiry_date']}" if item.get("expiry_date") else None
            lines.append(_join([item.get("name"), item.get("issuer"), item.get("date"), expiry]))
        elif key is SectionKey.ACHIEVEMENTS:
            lines.append(_join([item.get("title"), item.get("date"), item.get("category")]))
            if item.get("description"):
                lines.append(f"- {item['description']}")
        elif key is SectionKey.LANGUAGES:
            lines.append(_join([item.get("name"), item.get("proficiency")], " - "))
    return [line for line in lines if line.strip()]


def _header_contact_lines(header: RenderedHeader) -> list[str]:
    if header.contact_block is not None:
        contact = header.contact_block
        return [value for value in (contact.email, contact.phone, contact.location) if value]
    return list(header.contact_line)


def create_pdf_from_resume(resume: RenderedResume, output_path: Path | None = None) -> bytes:
    accent = _hex_to_rgb(resume.header.gradient.middle) if resume.header.gradient else (47, 112, 180)

    section_spacing = resume.section_gap
    item_spacing = 2

    pdf = FPDF()
    pdf.set_auto_page_break(auto=True, margin=12)
    pdf.add_page()

    def draw_divider() -> None:
        y = pdf.get_y() + 1
        pdf.set_draw_color(160, 160, 160)
        pdf.set_line_width(0.4)
        pdf.line(pdf.l_margin, y, pdf.w - pdf.r_margin, y)
        pdf.ln(section_spacing)

    def write_line(text: str, h: float = 6, bold: bool = False, color: tuple[int, int, int] | None = None) -> None:
        pdf.set_x(pdf.l_margin)
        pdf.set_text_color(*(color or (0, 0, 0)))
        if bold:
            pdf.set_font("Helvetica", "B", 11)
        pdf.multi_cell(0, h, _safe_text(text))
        pdf.set_text_color(0, 0, 0)

    def write_clickable_line(label: str, url: str, h: float = 6) -> None:
        if not url.strip():
            return
        link = url if url.lower().startswith(("http://", "https://", "mailto:")) else f"https://{url}"
        pdf.set_x(pdf.l_margin)
        pdf.set_font("Helvetica", "", 10)
        if label:
            pdf.write(h, _safe_text(label))
        pdf.set_font("Helvetica", "U", 10)
        pdf.set_text_color(0, 64, 160)
        pdf.write(h, _safe_text(url), link=link)
        pdf.ln(h)
        pdf.set_text_color(0, 0, 0)
        pdf.set_font("Helvetica", "", 10)

    def draw_skill_bar(name: str, level: str, width: str, color: str) -> None:
        pdf.set_font("Helvetica", "", 10)
        pdf.set_x(pdf.l_margin)
        pdf.cell(60, 6, _safe_text(name))
        bar_x = pdf.get_x()
        bar_y = pdf.get_y() + 2
        pdf.set_fill_color(229, 231, 235)
        pdf.rect(bar_x, bar_y, 40, 2, style="F")
        pdf.set_fill_color(*_hex_to_rgb(color))
        pdf.rect(bar_x, bar_y, 40 * _percent(width), 2, style="F")
        pdf.set_x(bar_x + 44)
        pdf.cell(0, 6, _safe_text(level.capitalize()))
        pdf.ln(6)

    header = resume.header
    pdf.set_font("Helvetica", "B", 18)
    write_line(header.name or resume.username, h=10, bold=True)
    if header.title:
        pdf.set_font("Helvetica", "", 12)
        write_line(header.title, h=7)
    if header.availability:
        pdf.set_font("Helvetica", "", 10)
        write_line(header.availability.text, h=6, color=accent)
    pdf.set_font("Helvetica", "", 10)
    contact_lines = _header_contact_lines(header)
    if contact_lines:
        write_line(" | ".join(contact_lines), h=6)
    draw_divider()

    for column in resume.columns:
        for section in column.sections:
            pdf.set_font("Helvetica", "B", 12)
            write_line(section.title, h=8, bold=True, color=accent)
            pdf.set_font("Helvetica", "", 11)
            if section.key is SectionKey.SKILLS and section.display == "bars":
                for group in section.items:
                    pdf.set_font("Helvetica", "B", 10)
                    write_line(group.get("label", ""), h=6, bold=True)
                    for skill in group.get("skills", []):
                        draw_skill_bar(skill["name"], skill["level"], skill["width"], skill["color"])
                    pdf.ln(item_spacing)
            elif section.key is SectionKey.SOCIALS:
                for item in section.items:
                    write_clickable_line(f"{str(item['platform']).capitalize()}: ", item["url"])
            else:
                for line in _section_lines(section):
                    pdf.set_font("Helvetica", "", 11)
                    write_line(line, h=6)
            draw_divider()

    pdf_bytes = bytes(pdf.output())

    if output_path is not None:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(pdf_bytes)

    return pdf_bytes


def create_docx_from_resume(resume: RenderedResume, output_path: Path | None = None) -> bytes:
    doc = Document()
    accent = _hex_to_rgb(resume.header.gradient.middle) if resume.header.gradient else (47, 112, 180)

    def _set_spacing(paragraph, before: int = 0, after: int = 6) -> None:
        paragraph.paragraph_format.space_before = Pt(before)
        paragraph.paragraph_format.space_after = Pt(after)

    header = resume.header
    p = doc.add_paragraph()
    r = p.add_run(_safe_text(header.name or resume.username))
    r.bold = True
    r.font.size = Pt(16)
    _set_spacing(p, before=0, after=4)
    if header.title:
        p = doc.add_paragraph(_safe_text(header.title))
        p.runs[0].font.size = Pt(11)
        _set_spacing(p, before=0, after=4)
    if header.availability:
        p = doc.add_paragraph(header.availability.text)
        _set_spacing(p, before=0, after=4)
    contact = " | ".join(_header_contact_lines(header))
    if contact:
        p = doc.add_paragraph(_safe_text(contact))
        _set_spacing(p, before=0, after=4)

    # small spacer paragraph
    p = doc.add_paragraph()
    _set_spacing(p, before=0, after=resume.section_gap)

    for column in resume.columns:
        for section in column.sections:
            p = doc.add_paragraph()
            run = p.add_run(section.title)
            run.bold = True
            run.font.color.rgb = RGBColor(*accent)
            _set_spacing(p, before=4, after=6)
            for line in _section_lines(section):
                p = doc.add_paragraph(_safe_text(line))
                _set_spacing(p, before=0, after=3)

    bio = BytesIO()
    doc.save(bio)
    docx_bytes = bio.getvalue()

    if output_path is not None:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(docx_bytes)

    return docx_bytes
