from __future__ import annotations

import logging
import re
from datetime import date
from io import BytesIO
from pathlib import Path
from typing import Callable, Tuple

from flask import (
    Blueprint,
    Flask,
    abort,
    current_app,
    g,
    redirect,
    render_template,
    request,
    send_file,
    session,
    url_for,
)
from fpdf import FPDF
from fpdf.enums import XPos, YPos

from answers import (
    FIELD_NAMES,
    RANK_FIELD,
    REQUIRED_FIELDS,
    SET_FIELDS,
    AnswerSet,
    deserialize,
    missing_required,
    serialize,
)
from catalog import (
    CATALOG,
    COPY,
    LANGUAGES,
    PERSONAL_FIELDS,
    QUESTIONS,
    RANK_OPTIONS,
    SERVICE_OPTIONS,
    Text,
    get_copy,
    resolve_language,
)
from controller import QuestionnaireController
from errors import RecordFormatError, SubmissionError
from gateway import PersistenceGateway, build_gateway
from report import Report, render_report
from settings import Settings, configure_logging, get_settings

logger = logging.getLogger(__name__)

PDF_FONT_FAMILY = "NotoSansDevanagari"
PDF_FONT_REGULAR = "NotoSansDevanagari-Regular.ttf"
PDF_FONT_BOLD = "NotoSansDevanagari-Bold.ttf"
SUBMITTED_RECORD_KEY = "submitted_record"

bp = Blueprint("questionnaire", __name__)


def get_gateway() -> PersistenceGateway:
    return current_app.extensions["persistence_gateway"]


def get_clock() -> Callable[[], date]:
    return current_app.extensions["questionnaire_clock"]


def get_settings_for_app() -> Settings:
    return current_app.extensions["questionnaire_settings"]


def build_language_switcher(language: str):
    links = []
    for code, meta in LANGUAGES.items():
        url = url_for("questionnaire.questionnaire", lang=code)
        links.append({"code": code, "label": meta["label"], "url": url, "active": code == language})
    return links


@bp.before_app_request
def set_language():
    default = get_settings_for_app().DEFAULT_LANGUAGE
    g.language = resolve_language(request.values.get("lang") or default)


@bp.app_context_processor
def inject_language():
    language = getattr(g, "language", get_settings_for_app().DEFAULT_LANGUAGE)
    return {
        "language": language,
        "copy": get_copy(language),
        "language_switcher": build_language_switcher(language),
    }


@bp.app_template_filter("t")
def translate(text: Text | None) -> str:
    if text is None:
        return ""
    return text.render(getattr(g, "language", get_settings_for_app().DEFAULT_LANGUAGE))


@bp.app_template_filter("t_lines")
def translate_lines(text: Text):
    return text.lines(getattr(g, "language", get_settings_for_app().DEFAULT_LANGUAGE))


def controller_from_form(form, gateway: PersistenceGateway, language: str) -> QuestionnaireController:
    """Replay a posted form into a fresh controller as individual edits."""
    controller = QuestionnaireController(gateway, language=language)
    for name in FIELD_NAMES:
        if name in SET_FIELDS:
            for value in form.getlist(name):
                controller.toggle_set_member(name, value, True)
        elif name != RANK_FIELD and name in form:
            controller.set_field(name, form.get(name, ""))
    for option in SERVICE_OPTIONS:
        controller.set_rank(option.value, form.get(f"rank-{option.value}", ""))
    return controller


def render_form(answers: AnswerSet, error: str | None = None, status: int = 200):
    return (
        render_template(
            "questionnaire.html",
            answers=answers,
            error=error,
            questions=QUESTIONS,
            personal_fields=PERSONAL_FIELDS,
            required_fields=REQUIRED_FIELDS,
            catalog=CATALOG,
            services=SERVICE_OPTIONS,
            ranks=RANK_OPTIONS,
        ),
        status,
    )


@bp.route("/", methods=["GET", "POST"])
def questionnaire():
    language = getattr(g, "language", get_settings_for_app().DEFAULT_LANGUAGE)

    if request.method == "POST":
        try:
            controller = controller_from_form(request.form, get_gateway(), language)
        except ValueError as exc:
            logger.warning("Malformed questionnaire post: %s", exc)
            abort(400)

        try:
            answers = controller.submit()
        except SubmissionError as exc:
            return render_form(controller.answers, error=exc.render(language))

        session[SUBMITTED_RECORD_KEY] = serialize(answers)
        return redirect(url_for("questionnaire.show_report", lang=language))

    return render_form(AnswerSet())


@bp.get("/report")
def show_report():
    language = getattr(g, "language", get_settings_for_app().DEFAULT_LANGUAGE)
    record = session.get(SUBMITTED_RECORD_KEY)
    if not record:
        return redirect(url_for("questionnaire.questionnaire", lang=language))

    try:
        answers = deserialize(record)
    except RecordFormatError as exc:
        logger.warning("Discarding unreadable submitted record: %s", exc)
        session.pop(SUBMITTED_RECORD_KEY, None)
        return redirect(url_for("questionnaire.questionnaire", lang=language))

    return render_template(
        "report.html",
        report=render_report(answers, clock=get_clock(), language=language),
        record=record,
        saved_message=COPY["report"]["saved"].render(language),
    )


class QuestionnairePDF(FPDF):
    footer_family = "Helvetica"
    footer_style = ""
    page_label = "Page"

    def footer(self):
        self.set_y(-12)
        self.set_font(self.footer_family, self.footer_style, 9)
        self.set_text_color(110, 116, 132)
        self.cell(0, 8, f"{self.page_label} {self.page_no()}/{{nb}}", align="C")


def sanitize_for_pdf(text: str, unicode_font: bool = False) -> str:
    replacements = {
        "’": "'",
        "‘": "'",
        "“": '"',
        "”": '"',
        "–": "-",
        "—": "-",
        "‑": "-",
        "…": "...",
    }
    for src, dest in replacements.items():
        text = text.replace(src, dest)
    if unicode_font:
        return text
    text = text.replace("₹", "Rs.")
    return text.encode("latin-1", "replace").decode("latin-1")


def pdf_fonts_available(font_dir: Path) -> bool:
    return (font_dir / PDF_FONT_REGULAR).exists()


def load_pdf_fonts(pdf: FPDF, font_dir: Path) -> Tuple[str, str, str, bool]:
    """Register the Devanagari font when present.

    Returns ``(regular_family, bold_family, bold_style, unicode_font)``.
    Text shaping is switched on whenever the Devanagari font is in use.
    """
    if not pdf_fonts_available(font_dir):
        return "Helvetica", "Helvetica", "B", False
    try:
        pdf.add_font(PDF_FONT_FAMILY, "", str(font_dir / PDF_FONT_REGULAR))
        bold_style = ""
        if (font_dir / PDF_FONT_BOLD).exists():
            pdf.add_font(PDF_FONT_FAMILY, "B", str(font_dir / PDF_FONT_BOLD))
            bold_style = "B"
    except RuntimeError:
        logger.warning("Could not load PDF fonts from %s; falling back to Helvetica", font_dir)
        return "Helvetica", "Helvetica", "B", False
    pdf.set_text_shaping(True)
    return PDF_FONT_FAMILY, PDF_FONT_FAMILY, bold_style, True


def generate_pdf_report(report: Report, font_dir: Path) -> BytesIO:
    pdf = QuestionnairePDF()
    pdf.set_auto_page_break(auto=True, margin=18)

    base_text_color = (32, 37, 45)
    accent_color = (22, 101, 132)
    muted_color = (110, 116, 132)

    regular_family, bold_family, bold_style, unicode_font = load_pdf_fonts(pdf, font_dir)
    regular_style = ""

    def clean(text: str) -> str:
        return sanitize_for_pdf(text, unicode_font)

    site_copy = COPY["site"]
    pdf.footer_family = regular_family
    pdf.page_label = clean(COPY["report"]["page"].render(report.language))
    pdf.set_title(clean(" / ".join(report.title)))
    pdf.set_author(clean(site_copy["centre"].en))
    pdf.add_page()
    pdf.set_text_color(*base_text_color)

    pdf.set_font(bold_family, bold_style, 16)
    pdf.set_text_color(*accent_color)
    for line in site_copy["centre"].lines(report.language):
        pdf.cell(0, 9, clean(line), align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_text_color(*base_text_color)
    pdf.set_font(bold_family, bold_style, 13)
    for line in report.title:
        pdf.cell(0, 8, clean(line), align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_font(regular_family, regular_style, 10)
    pdf.set_text_color(*muted_color)
    pdf.cell(0, 6, clean(f"{report.date_label}: {report.date}"), align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_text_color(*base_text_color)
    pdf.ln(4)

    pdf.set_font(bold_family, bold_style, 13)
    pdf.set_fill_color(235, 244, 248)
    pdf.cell(0, 9, clean(report.personal_title), fill=True, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(1)
    pdf.set_font(regular_family, regular_style, 11)
    for line in report.personal:
        pdf.multi_cell(0, 6, clean(f"{line.label}: {line.value}"), align="L", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(4)

    for block in report.questions:
        pdf.set_font(bold_family, bold_style, 12)
        pdf.multi_cell(0, 6, clean(block.heading), align="L", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        if len(block.prompt) > 1:
            pdf.set_font(regular_family, regular_style, 10)
            pdf.set_text_color(*muted_color)
            for line in block.prompt[1:]:
                pdf.multi_cell(0, 5, clean(line), align="L", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
            pdf.set_text_color(*base_text_color)
        pdf.set_font(regular_family, regular_style, 11)
        pdf.multi_cell(
            0, 6, clean(f"{report.answer_label}: {block.answer}"), align="L", new_x=XPos.LMARGIN, new_y=YPos.NEXT
        )
        for detail in block.details:
            pdf.set_text_color(*muted_color)
            pdf.multi_cell(
                0, 6, clean(f"{detail.label}: {detail.value}"), align="L", new_x=XPos.LMARGIN, new_y=YPos.NEXT
            )
            pdf.set_text_color(*base_text_color)
        pdf.ln(3)

    pdf.ln(4)
    pdf.set_font(regular_family, regular_style, 10)
    pdf.set_text_color(*muted_color)
    for line in site_copy["thanks"].lines(report.language):
        pdf.multi_cell(0, 5, clean(line), align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.multi_cell(0, 5, clean(site_copy["team"].en), align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    buffer = BytesIO()
    pdf.output(buffer)
    buffer.seek(0)
    return buffer


def pdf_filename(answers: AnswerSet, day: date) -> str:
    slug = re.sub(r"[^A-Za-z0-9]+", "-", answers.name).strip("-") or "response"
    return f"Questionnaire_{slug}_{day.strftime('%Y%m%d')}.pdf"


@bp.post("/export/pdf")
def export_pdf():
    language = getattr(g, "language", get_settings_for_app().DEFAULT_LANGUAGE)
    try:
        answers = deserialize(request.form.to_dict())
    except RecordFormatError as exc:
        logger.warning("Malformed PDF export request: %s", exc)
        abort(400)

    if missing_required(answers):
        return (COPY["errors"]["incomplete_pdf"].render(language), 400)

    font_dir = get_settings_for_app().PDF_FONT_DIR
    pdf_language = language if pdf_fonts_available(font_dir) else "en"
    clock = get_clock()
    today = clock()
    report = render_report(answers, clock=lambda: today, language=pdf_language)
    pdf_buffer = generate_pdf_report(report, font_dir)

    return send_file(
        pdf_buffer,
        mimetype="application/pdf",
        as_attachment=True,
        download_name=pdf_filename(answers, today),
    )


@bp.get("/health")
def health_check():
    return {"status": "ok"}


def create_app(
    settings: Settings | None = None,
    gateway: PersistenceGateway | None = None,
    clock: Callable[[], date] | None = None,
) -> Flask:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    flask_app = Flask(__name__)
    flask_app.config["SECRET_KEY"] = settings.SECRET_KEY
    flask_app.extensions["questionnaire_settings"] = settings
    flask_app.extensions["persistence_gateway"] = gateway or build_gateway(settings)
    flask_app.extensions["questionnaire_clock"] = clock or date.today
    flask_app.register_blueprint(bp)
    return flask_app


app = create_app()


if __name__ == "__main__":
    app.run(debug=True, port=5001)
