"""Belegungsbericht: Auslastung und Status je Route."""

from pydantic import BaseModel

from models.app_state import AppState
from models.student import StudentStatus


# ─── Metriken-Modelle ─────────────────────────────────────────────────────────

class RouteOccupancy(BaseModel):
    """Belegung einer einzelnen Route."""

    name: str
    order: int
    is_active: bool
    capacity: int
    registered: int
    pending: int
    boarded: int
    no_show: int

    @property
    def free_seats(self) -> int:
        return max(self.capacity - self.registered, 0)

    @property
    def utilization(self) -> float:
        """0.0–1.0 (über 1.0 bei manueller Überbuchung)."""
        if self.capacity == 0:
            return 1.0 if self.registered else 0.0
        return self.registered / self.capacity

    @property
    def is_full(self) -> bool:
        return self.registered >= self.capacity


class OccupancyReport(BaseModel):
    """Belegung aller Routen in Anzeigereihenfolge."""

    routes: list[RouteOccupancy]
    total_registered: int
    total_capacity: int
    blocked_codes: int
    warnings: list[str]

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        console = Console()
        table = Table(title="Belegung", box=box.ROUNDED)
        table.add_column("#", justify="right")
        table.add_column("Route", style="bold")
        table.add_column("Aktiv")
        table.add_column("Belegt", justify="right")
        table.add_column("Frei", justify="right")
        table.add_column("Offen", justify="right")
        table.add_column("Eingestiegen", justify="right")
        table.add_column("Nicht erschienen", justify="right")
        for r in self.routes:
            color = "red" if r.is_full else "green"
            table.add_row(
                str(r.order),
                r.name,
                "ja" if r.is_active else "[dim]nein[/dim]",
                f"[{color}]{r.registered}/{r.capacity}[/{color}]",
                str(r.free_seats),
                str(r.pending),
                str(r.boarded),
                str(r.no_show),
            )
        console.print(table)
        console.print(
            f"[bold]Gesamt:[/bold] {self.total_registered}/{self.total_capacity} Plätze | "
            f"Gesperrte Codes: {self.blocked_codes}"
        )
        for w in self.warnings:
            console.print(f"  [yellow]• {w}[/yellow]")


# ─── Analyzer ─────────────────────────────────────────────────────────────────

class OccupancyAnalyzer:
    """Berechnet die Belegung für einen Snapshot."""

    def analyze(self, state: AppState) -> OccupancyReport:
        routes: list[RouteOccupancy] = []
        warnings: list[str] = []

        for name, cfg in state.sorted_routes():
            students = state.students_on_route(cfg.id)
            by_status = {status: 0 for status in StudentStatus}
            for s in students:
                by_status[s.status] += 1
            occ = RouteOccupancy(
                name=name,
                order=cfg.order,
                is_active=cfg.is_active,
                capacity=cfg.capacity,
                registered=len(students),
                pending=by_status[StudentStatus.PENDING],
                boarded=by_status[StudentStatus.BOARDED],
                no_show=by_status[StudentStatus.NO_SHOW],
            )
            routes.append(occ)

            if occ.registered > occ.capacity:
                warnings.append(
                    f"Route '{name}': {occ.registered} Anmeldungen bei "
                    f"{occ.capacity} Plätzen (manuell überbucht)."
                )
            if not cfg.is_active and students:
                warnings.append(
                    f"Route '{name}' ist inaktiv, hat aber {len(students)} Anmeldungen."
                )

        return OccupancyReport(
            routes=routes,
            total_registered=len(state.students),
            total_capacity=sum(r.capacity for r in state.routes.values()),
            blocked_codes=len({c.code for c in state.clarifications}),
            warnings=warnings,
        )
