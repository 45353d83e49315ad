"""Bus-Anmeldung — Haupt-CLI.

Verwendung:
  python main.py routes list                      Routen anzeigen
  python main.py routes add <name>                Route anlegen
  python main.py routes update <name> ...         Route ändern
  python main.py routes delete <name>             Route löschen
  python main.py routes move <name> <pos>         Route verschieben
  python main.py register ...                     Selbstanmeldung
  python main.py students add ...                 Anmeldung durch Verwaltung
  python main.py students list                    Anmeldungen anzeigen
  python main.py students status <id> <status>    Status setzen
  python main.py clarifications add ...           Code sperren
  python main.py export <route>                   PDF/Excel-Liste
  python main.py report                           Belegungsbericht
  python main.py config show                      Konfiguration anzeigen
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich import box

from config.defaults import FACULTIES
from models.student import StudentInput, StudentStatus

console = Console()


def _load_config():
    from config.manager import ConfigManager
    return ConfigManager().load_or_default()


def _load_engine():
    """Lädt Konfiguration und Snapshot."""
    from engine.core import RegistrationEngine
    engine = RegistrationEngine.from_config(_load_config())
    if engine.store.recovered:
        console.print(
            "[yellow]Speicherstand war defekt – es wurden die Standard-Routen geladen.[/yellow]"
        )
    return engine


def _abort(message: str) -> None:
    console.print(f"[red]{message}[/red]")
    sys.exit(1)


def _status_text(status: StudentStatus) -> str:
    return {
        StudentStatus.PENDING: "[dim]offen[/dim]",
        StudentStatus.BOARDED: "[green]eingestiegen[/green]",
        StudentStatus.NO_SHOW: "[red]nicht erschienen[/red]",
    }[status]


# ─── ROUTES ───────────────────────────────────────────────────────────────────

@click.group("routes")
def cmd_routes():
    """Routen anzeigen und verwalten."""


@cmd_routes.command("list")
def routes_list():
    """Zeigt alle Routen in Anzeigereihenfolge."""
    engine = _load_engine()
    state = engine.state

    table = Table(title="Routen", box=box.ROUNDED)
    table.add_column("#", justify="right")
    table.add_column("Name", style="bold")
    table.add_column("Untertitel")
    table.add_column("Aktiv")
    table.add_column("Belegt", justify="right")
    table.add_column("Farbe")
    for name, cfg in engine.routes.get_sorted_routes():
        count = len(state.students_on_route(cfg.id))
        table.add_row(
            str(cfg.order), name, cfg.subtitle,
            "ja" if cfg.is_active else "[dim]nein[/dim]",
            f"{count}/{cfg.capacity}",
            f"[{cfg.color}]■[/{cfg.color}] {cfg.color}",
        )
    console.print(table)


@cmd_routes.command("add")
@click.argument("name")
@click.option("--subtitle", "-s", default="", help="Untertitel (Start - Ziel).")
@click.option("--capacity", "-c", type=int, default=None, help="Anzahl Plätze.")
@click.option("--color", default=None, help="Farbe als #RRGGBB.")
@click.option("--inactive", is_flag=True, default=False, help="Route inaktiv anlegen.")
def routes_add(name: str, subtitle: str, capacity: Optional[int],
               color: Optional[str], inactive: bool):
    """Legt eine neue Route am Ende an."""
    engine = _load_engine()
    result = engine.routes.add_route(
        name, subtitle=subtitle, capacity=capacity, color=color, is_active=not inactive,
    )
    if not result.accepted:
        _abort(result.rejection.message)
    console.print(
        f"[green]✓[/green] Route '{result.route.name}' angelegt "
        f"(Position {result.route.order}, {result.route.capacity} Plätze)"
    )


@cmd_routes.command("update")
@click.argument("name")
@click.option("--rename", default=None, help="Neuer Name.")
@click.option("--subtitle", "-s", default=None)
@click.option("--capacity", "-c", type=int, default=None)
@click.option("--color", default=None)
@click.option("--active/--inactive", default=None, help="Route (de)aktivieren.")
def routes_update(name: str, rename: Optional[str], subtitle: Optional[str],
                  capacity: Optional[int], color: Optional[str], active: Optional[bool]):
    """Ändert einzelne Felder einer Route."""
    from pydantic import ValidationError

    changes = {
        "name": rename, "subtitle": subtitle, "capacity": capacity,
        "color": color, "is_active": active,
    }
    changes = {k: v for k, v in changes.items() if v is not None}
    if not changes:
        _abort("Keine Änderungen angegeben.")

    engine = _load_engine()
    try:
        rejection = engine.routes.update_route_config(name, **changes)
    except ValidationError as e:
        _abort(f"Ungültige Werte: {e}")
    if rejection:
        _abort(rejection.message)
    console.print(f"[green]✓[/green] Route '{rename or name}' aktualisiert.")


@cmd_routes.command("delete")
@click.argument("name")
def routes_delete(name: str):
    """Löscht eine Route ohne Anmeldungen."""
    engine = _load_engine()
    rejection = engine.routes.delete_route(name)
    if rejection:
        _abort(rejection.message)
    console.print(f"[green]✓[/green] Route '{name}' gelöscht.")


@cmd_routes.command("move")
@click.argument("name")
@click.argument("position", type=int)
def routes_move(name: str, position: int):
    """Verschiebt eine Route an eine Position (0-basiert)."""
    engine = _load_engine()
    rejection = engine.routes.reorder_routes(name, position)
    if rejection:
        _abort(rejection.message)
    console.print(f"[green]✓[/green] Route '{name}' auf Position {position}.")


# ─── REGISTER ─────────────────────────────────────────────────────────────────

def _student_options(func):
    """Gemeinsame Formularfelder für Selbst- und Verwaltungsanmeldung."""
    options = [
        click.option("--name", required=True, help="Vorname."),
        click.option("--last-name", required=True, help="Nachname."),
        click.option("--code", required=True, help="Matrikelnummer."),
        click.option("--faculty", required=True, type=click.Choice(FACULTIES)),
        click.option("--route", required=True, help="Name der Route."),
        click.option("--phone", default="", help="Telefonnummer."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _print_admission(result, route: str) -> None:
    if not result.accepted:
        _abort(f"Anmeldung abgelehnt: {result.rejection.message}")
    s = result.student
    console.print(Panel(
        f"[bold]{s.full_name}[/bold]  ({s.code})\n"
        f"Route: {route}\n"
        f"Ticket: [bold cyan]#{s.ticket_number}[/bold cyan]",
        title="Anmeldung bestätigt",
        border_style="green",
    ))


@click.command("register")
@_student_options
def cmd_register(name, last_name, code, faculty, route, phone):
    """Selbstanmeldung (mit Sperrliste, Aktiv- und Kapazitätsprüfung)."""
    engine = _load_engine()
    data = StudentInput(name=name, last_name=last_name, code=code,
                        faculty=faculty, route=route, phone=phone)
    _print_admission(engine.registration.register_self_service(data), route)


# ─── STUDENTS ─────────────────────────────────────────────────────────────────

@click.group("students")
def cmd_students():
    """Anmeldungen verwalten."""


@cmd_students.command("add")
@_student_options
def students_add(name, last_name, code, faculty, route, phone):
    """Anmeldung durch die Verwaltung (ohne Kapazitäts-/Sperrprüfung)."""
    engine = _load_engine()
    data = StudentInput(name=name, last_name=last_name, code=code,
                        faculty=faculty, route=route, phone=phone)
    _print_admission(engine.registration.register_manually(data), route)


@cmd_students.command("list")
@click.option("--route", "-r", default=None, help="Nur diese Route.")
@click.option("--search", "-q", default=None, help="Suche in Name, Code, Telefon.")
def students_list(route: Optional[str], search: Optional[str]):
    """Listet Anmeldungen, sortiert nach Ticketnummer."""
    engine = _load_engine()
    state = engine.state
    students = engine.registration.find_students(route=route, search=search)

    table = Table(title=f"Anmeldungen ({len(students)})", box=box.ROUNDED)
    table.add_column("Ticket", justify="right")
    table.add_column("Name", style="bold")
    table.add_column("Code")
    table.add_column("Fakultät")
    table.add_column("Route")
    table.add_column("Telefon")
    table.add_column("Status")
    table.add_column("ID", style="dim")
    for s in students:
        table.add_row(
            str(s.ticket_number), s.full_name, s.code, s.faculty,
            state.route_name(s.route_id), s.phone, _status_text(s.status), s.id,
        )
    console.print(table)


@cmd_students.command("edit")
@click.argument("student_id")
@click.option("--name", default=None)
@click.option("--last-name", default=None)
@click.option("--code", default=None)
@click.option("--faculty", default=None, type=click.Choice(FACULTIES))
@click.option("--route", default=None, help="Auf andere Route umbuchen.")
@click.option("--phone", default=None)
def students_edit(student_id, name, last_name, code, faculty, route, phone):
    """Ändert eine Anmeldung."""
    engine = _load_engine()
    current = engine.registration.get_student(student_id)
    if current is None:
        _abort("Anmeldung nicht gefunden.")

    changes = {"name": name, "last_name": last_name, "code": code,
               "faculty": faculty, "phone": phone}
    changes = {k: v for k, v in changes.items() if v is not None}
    if route is not None:
        cfg = engine.routes.get_route(route)
        if cfg is None:
            _abort(f"Unbekannte Route: {route}")
        changes["route_id"] = cfg.id

    rejection = engine.registration.update_student(current.model_copy(update=changes))
    if rejection:
        _abort(rejection.message)
    console.print("[green]✓[/green] Anmeldung aktualisiert.")


@cmd_students.command("status")
@click.argument("student_id")
@click.argument("status", type=click.Choice([s.value for s in StudentStatus]))
def students_status(student_id: str, status: str):
    """Setzt den Status (pending, boarded, no-show)."""
    engine = _load_engine()
    rejection = engine.registration.set_status(student_id, status)
    if rejection:
        _abort(rejection.message)
    console.print(f"[green]✓[/green] Status: {_status_text(StudentStatus(status))}")


@cmd_students.command("delete")
@click.argument("student_id")
def students_delete(student_id: str):
    """Löscht eine Anmeldung."""
    engine = _load_engine()
    rejection = engine.registration.delete_student(student_id)
    if rejection:
        _abort(rejection.message)
    console.print("[green]✓[/green] Anmeldung gelöscht.")


@cmd_students.command("clear")
@click.argument("route")
@click.option("--yes", is_flag=True, default=False, help="Ohne Rückfrage löschen.")
def students_clear(route: str, yes: bool):
    """Löscht alle Anmeldungen einer Route."""
    if not yes and not click.confirm(f"Alle Anmeldungen auf '{route}' löschen?", default=False):
        console.print("[yellow]Abgebrochen.[/yellow]")
        return
    engine = _load_engine()
    removed = engine.registration.delete_students_on_route(route)
    console.print(f"[green]✓[/green] {removed} Anmeldungen gelöscht.")


# ─── CLARIFICATIONS ───────────────────────────────────────────────────────────

@click.group("clarifications")
def cmd_clarifications():
    """Klärungsfälle (gesperrte Codes) verwalten."""


@cmd_clarifications.command("add")
@click.option("--name", required=True)
@click.option("--last-name", required=True)
@click.option("--code", required=True)
@click.option("--phone", default="")
@click.option("--reason", default="", help="Grund der Sperre.")
def clarifications_add(name, last_name, code, phone, reason):
    """Sperrt einen Code für die Selbstanmeldung."""
    engine = _load_engine()
    entry = engine.clarifications.add_clarification(
        name=name, last_name=last_name, code=code, phone=phone, reason=reason,
    )
    console.print(f"[green]✓[/green] Klärungsfall angelegt: {entry.id}")


@cmd_clarifications.command("list")
def clarifications_list():
    """Listet alle Klärungsfälle (neueste zuerst)."""
    engine = _load_engine()
    entries = engine.clarifications.list_clarifications()
    if not entries:
        console.print("[dim]Keine Klärungsfälle vorhanden.[/dim]")
        return

    table = Table(title="Klärungsfälle", box=box.ROUNDED)
    table.add_column("Code", style="bold")
    table.add_column("Name")
    table.add_column("Telefon")
    table.add_column("Grund")
    table.add_column("Erstellt")
    table.add_column("ID", style="dim")
    for c in entries:
        table.add_row(
            c.code, f"{c.name} {c.last_name}", c.phone, c.reason,
            c.timestamp.strftime("%d.%m.%Y %H:%M"), c.id,
        )
    console.print(table)


@cmd_clarifications.command("delete")
@click.argument("clarification_id")
def clarifications_delete(clarification_id: str):
    """Entfernt einen Klärungsfall."""
    engine = _load_engine()
    rejection = engine.clarifications.delete_clarification(clarification_id)
    if rejection:
        _abort(rejection.message)
    console.print("[green]✓[/green] Klärungsfall entfernt.")


# ─── EXPORT ───────────────────────────────────────────────────────────────────

@click.command("export")
@click.argument("route", required=False)
@click.option("--format", "fmt", type=click.Choice(["pdf", "xlsx"]), default="pdf")
@click.option("--output", "-o", default=None, help="Ausgabepfad.")
def cmd_export(route: Optional[str], fmt: str, output: Optional[str]):
    """Exportiert die Teilnehmerliste einer Route (PDF) oder aller Routen (Excel)."""
    from export.helpers import default_export_filename

    config = _load_config()
    engine = _load_engine()

    if fmt == "pdf":
        from export.pdf_export import PdfExporter
        if route is None:
            _abort("Für den PDF-Export bitte eine Route angeben.")
        cfg = engine.routes.get_route(route)
        if cfg is None:
            _abort(f"Unbekannte Route: {route}")
        out = Path(output) if output else Path(config.export_dir) / default_export_filename(route, "pdf")
        students = engine.registration.students_on_route(route)
        PdfExporter(students, cfg.name, cfg.subtitle).export(out)
    else:
        from export.excel_export import ExcelExporter
        if route is not None and engine.routes.get_route(route) is None:
            _abort(f"Unbekannte Route: {route}")
        out = Path(output) if output else Path(config.export_dir) / default_export_filename(
            route or "alle", "xlsx")
        ExcelExporter(engine.state).export(out, route=route)

    console.print(f"[green]✓[/green] Liste gespeichert: {out}")


# ─── REPORT ───────────────────────────────────────────────────────────────────

@click.command("report")
def cmd_report():
    """Zeigt die Belegung aller Routen."""
    from analysis.occupancy import OccupancyAnalyzer

    engine = _load_engine()
    console.print(f"[dim]{engine.state.summary()}[/dim]\n")
    OccupancyAnalyzer().analyze(engine.state).print_rich()


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anzeigen oder anlegen."""


@cmd_config.command("show")
def config_show():
    """Zeigt die aktuelle Konfiguration an."""
    config = _load_config()
    table = Table(title="Konfiguration", box=box.ROUNDED)
    table.add_column("Parameter", style="bold")
    table.add_column("Wert")
    for k, v in config.model_dump().items():
        table.add_row(k, str(v))
    console.print(table)


@cmd_config.command("init")
def config_init():
    """Schreibt die Default-Konfiguration als YAML."""
    from config.defaults import default_app_config
    from config.manager import ConfigManager
    mgr = ConfigManager()
    if not mgr.first_run_check():
        if not click.confirm("Konfiguration existiert bereits. Überschreiben?", default=False):
            return
    mgr.save(default_app_config())


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Debug-Ausgaben.")
def cli(verbose: bool):
    """Anmeldung von Studierenden für die Buslinien."""
    level = "DEBUG" if verbose else _load_config().log_level
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def main():
    """Einstiegspunkt."""
    cli()


# Befehle registrieren
cli.add_command(cmd_routes)
cli.add_command(cmd_register)
cli.add_command(cmd_students)
cli.add_command(cmd_clarifications)
cli.add_command(cmd_export)
cli.add_command(cmd_report)
cli.add_command(cmd_config)


if __name__ == "__main__":
    main()
