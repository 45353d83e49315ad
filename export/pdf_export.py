"""PDF-Export der Teilnehmerliste einer Route (fpdf2)."""

from pathlib import Path

from models.student import Student, StudentStatus

from export.helpers import (
    COLORS, TABLE_HEADERS, hex_to_rgb, sort_by_ticket, student_row, today_str,
)


def _pdf_safe(text: str) -> str:
    """Ersetzt nicht-latin-1-fähige Zeichen für fpdf2-Built-in-Fonts."""
    text = (
        text
        .replace("\u2014", " - ")   # em dash
        .replace("\u2013", "-")      # en dash
    )
    return text.encode("latin-1", "replace").decode("latin-1")


# ─── A4-Hochformat-Dimensionen ────────────────────────────────────────────────
# Nutzbare Breite (Margin 14 links+rechts): 182 mm
# Spalten: 12 + 52 + 26 + 30 + 24 + 28 = 172 mm

_COL_WIDTHS = [12, 52, 26, 30, 24, 28]
_ROW_H        = 7    # mm
_FONT_TITLE   = 18   # pt
_FONT_SUB     = 11   # pt
_FONT_TABLE   = 9    # pt
_MARGIN       = 14   # mm


class PdfExporter:
    """Erzeugt die Liste einer Route: Titel, Datum, Tabelle, Summe.

    Reine Projektion der übergebenen Anmeldungen, ohne Rückwirkung auf den State.
    """

    def __init__(self, students: list[Student], route_name: str, route_subtitle: str = ""):
        self.students = sort_by_ticket(students)
        self.route_name = route_name
        self.route_subtitle = route_subtitle

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def export(self, output_path: Path) -> Path:
        from fpdf import FPDF

        pdf = FPDF(orientation="P", unit="mm", format="A4")
        pdf.alias_nb_pages()
        pdf.set_auto_page_break(auto=True, margin=18)
        pdf.set_margins(left=_MARGIN, top=16, right=_MARGIN)
        pdf.add_page()

        self._draw_title(pdf)
        self._draw_header_row(pdf)
        for i, student in enumerate(self.students):
            if pdf.will_page_break(_ROW_H):
                pdf.add_page()
                self._draw_header_row(pdf)
            self._draw_student_row(pdf, student, zebra=(i % 2 == 1))

        pdf.ln(4)
        pdf.set_font("Helvetica", "B", _FONT_SUB)
        pdf.cell(0, 8, f"Anmeldungen gesamt: {len(self.students)}")

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        pdf.output(str(output_path))
        return output_path

    # ─── Zeichnen ─────────────────────────────────────────────────────────────

    def _draw_title(self, pdf) -> None:
        pdf.set_font("Helvetica", "B", _FONT_TITLE)
        pdf.cell(0, 10, _pdf_safe(f"Teilnehmerliste - Route {self.route_name}"))
        pdf.ln(10)
        pdf.set_font("Helvetica", "", _FONT_SUB)
        if self.route_subtitle:
            pdf.cell(0, 6, _pdf_safe(self.route_subtitle))
            pdf.ln(6)
        pdf.cell(0, 6, f"Erstellt am: {today_str()}")
        pdf.ln(10)

    def _draw_header_row(self, pdf) -> None:
        pdf.set_font("Helvetica", "B", _FONT_TABLE)
        pdf.set_fill_color(*hex_to_rgb(COLORS["header"]))
        pdf.set_text_color(255, 255, 255)
        for label, w in zip(TABLE_HEADERS, _COL_WIDTHS):
            pdf.cell(w, _ROW_H, _pdf_safe(label), border=1, align="C", fill=True)
        pdf.ln(_ROW_H)
        pdf.set_text_color(0, 0, 0)

    def _draw_student_row(self, pdf, student: Student, zebra: bool) -> None:
        pdf.set_font("Helvetica", "", _FONT_TABLE)
        values = student_row(student)
        for col, (value, w) in enumerate(zip(values, _COL_WIDTHS)):
            # Status-Spalte farbig, sonst Zebra-Streifen
            if col == len(values) - 1 and student.status != StudentStatus.PENDING:
                bg = COLORS[student.status.value]
            else:
                bg = COLORS["zebra"] if zebra else COLORS["pending"]
            pdf.set_fill_color(*hex_to_rgb(bg))
            align = "L" if col == 1 else "C"
            pdf.cell(w, _ROW_H, _pdf_safe(value)[:34], border=1, align=align, fill=True)
        pdf.ln(_ROW_H)
