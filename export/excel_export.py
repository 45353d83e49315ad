"""Excel-Export der Teilnehmerlisten (openpyxl)."""

from pathlib import Path
from typing import Optional

from models.app_state import AppState
from models.route import RouteConfig
from models.student import StudentStatus

from export.helpers import COLORS, TABLE_HEADERS, sort_by_ticket, student_row, today_str


def _sheet_title(cfg: RouteConfig) -> str:
    """Blattname aus dem Routennamen: ohne die in Excel verbotenen Zeichen, max. 31 Zeichen."""
    from openpyxl.workbook.child import INVALID_TITLE_REGEX
    title = INVALID_TITLE_REGEX.sub("", cfg.name).strip()[:31]
    return title or f"Route {cfg.order}"


class ExcelExporter:
    """Eine Arbeitsmappe mit einem Blatt je Route (in Anzeigereihenfolge)."""

    # Spaltenbreiten (Excel-Einheiten)
    COL_WIDTHS = [6, 32, 14, 14, 10, 14]

    ROW_HEADER_H = 22

    def __init__(self, state: AppState):
        self.state = state

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def export(self, output_path: Path, route: Optional[str] = None) -> Path:
        """Erstellt die Excel-Datei. Mit route nur das Blatt dieser Route."""
        from openpyxl import Workbook
        wb = Workbook()
        wb.remove(wb.active)   # Leeres Standard-Sheet entfernen

        for name, cfg in self.state.sorted_routes():
            if route is not None and name != route:
                continue
            self._sheet_route(wb, cfg)

        if not wb.worksheets:
            raise ValueError(f"Unbekannte Route: {route}")

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(output_path)
        return output_path

    # ─── Style-Helpers ────────────────────────────────────────────────────────

    def _fill(self, hex_color: str):
        from openpyxl.styles import PatternFill
        return PatternFill(start_color=hex_color, end_color=hex_color, fill_type="solid")

    def _thin_border(self):
        from openpyxl.styles import Border, Side
        s = Side(border_style="thin", color="BBBBBB")
        return Border(left=s, right=s, top=s, bottom=s)

    # ─── Blätter ──────────────────────────────────────────────────────────────

    def _sheet_route(self, wb, cfg: RouteConfig) -> None:
        from openpyxl.styles import Alignment, Font
        from openpyxl.utils import get_column_letter

        ws = wb.create_sheet(title=_sheet_title(cfg))
        for col, width in enumerate(self.COL_WIDTHS, 1):
            ws.column_dimensions[get_column_letter(col)].width = width

        ws.cell(row=1, column=1, value=f"Route {cfg.name}").font = Font(bold=True, size=14)
        ws.cell(row=2, column=1, value=cfg.subtitle)
        ws.cell(row=3, column=1, value=f"Erstellt am: {today_str()}")

        header_row = 5
        border = self._thin_border()
        for col, text in enumerate(TABLE_HEADERS, 1):
            cell = ws.cell(row=header_row, column=col, value=text)
            cell.fill = self._fill(COLORS["header"])
            cell.font = Font(bold=True, color="FFFFFF")
            cell.alignment = Alignment(horizontal="center", vertical="center")
            cell.border = border
        ws.row_dimensions[header_row].height = self.ROW_HEADER_H

        students = sort_by_ticket(self.state.students_on_route(cfg.id))
        row = header_row
        for row, student in enumerate(students, header_row + 1):
            for col, value in enumerate(student_row(student), 1):
                cell = ws.cell(row=row, column=col, value=value)
                cell.border = border
            if student.status != StudentStatus.PENDING:
                ws.cell(row=row, column=len(TABLE_HEADERS)).fill = self._fill(
                    COLORS[student.status.value])

        ws.cell(row=row + 2, column=1,
                value=f"Anmeldungen gesamt: {len(students)} / {cfg.capacity}")
        ws.freeze_panes = ws.cell(row=header_row + 1, column=1)
