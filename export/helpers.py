"""Gemeinsame Hilfsfunktionen für Excel- und PDF-Export."""

from datetime import date

from models.route import slugify
from models.student import Student, StudentStatus

# ─── Farbpalette (RRGGBB, ohne #) ─────────────────────────────────────────────

COLORS: dict[str, str] = {
    "header":    "0054A6",   # UNI-Blau
    "zebra":     "F5F5F5",
    "boarded":   "B3FFB3",
    "no-show":   "FF9999",
    "pending":   "FFFFFF",
}

STATUS_LABELS: dict[StudentStatus, str] = {
    StudentStatus.BOARDED: "Ja",
    StudentStatus.NO_SHOW: "Nein",
    StudentStatus.PENDING: "Offen",
}

TABLE_HEADERS = ["#", "Name", "Code", "Telefon", "Fakultät", "Eingestiegen"]


def hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    """Wandelt RRGGBB-String in (r, g, b)-Tupel um."""
    h = hex_color.lstrip("#")
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def today_str() -> str:
    """Gibt das heutige Datum als DD.MM.YYYY zurück."""
    return date.today().strftime("%d.%m.%Y")


def status_label(status: StudentStatus) -> str:
    return STATUS_LABELS.get(status, STATUS_LABELS[StudentStatus.PENDING])


def student_row(student: Student) -> list[str]:
    """Eine Tabellenzeile in Spaltenreihenfolge von TABLE_HEADERS."""
    return [
        str(student.ticket_number),
        student.full_name,
        student.code,
        student.phone,
        student.faculty,
        status_label(student.status),
    ]


def sort_by_ticket(students: list[Student]) -> list[Student]:
    return sorted(students, key=lambda s: s.ticket_number)


def default_export_filename(route_name: str, suffix: str) -> str:
    """'Puente Piedra', 'pdf' → 'liste_puente-piedra_20261018.pdf'."""
    stamp = date.today().strftime("%Y%m%d")
    return f"liste_{slugify(route_name)}_{stamp}.{suffix}"
