"""AppState: vollständiger Snapshot aus Routen, Anmeldungen und Klärungsfällen."""

from collections import Counter
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator

from config.defaults import DEFAULT_CAPACITY, DEFAULT_ROUTES, ROUTE_COLORS
from models.clarification import Clarification
from models.route import RouteConfig, slugify
from models.student import Student


class AppState(BaseModel):
    """Der persistierte Snapshot.

    Wird nie in-place verändert: jede Operation erzeugt per model_copy()
    einen neuen Snapshot. Die Invarianten werden beim Deserialisieren geprüft.
    """

    model_config = ConfigDict(frozen=True)

    students: tuple[Student, ...] = ()
    routes: dict[str, RouteConfig] = {}     # Anzeigename → RouteConfig
    clarifications: tuple[Clarification, ...] = ()

    @model_validator(mode="after")
    def _check_invariants(self):
        for key, route in self.routes.items():
            if key != route.name:
                raise ValueError(
                    f"Routen-Schlüssel '{key}' passt nicht zum Namen '{route.name}'")

        orders = sorted(r.order for r in self.routes.values())
        if orders != list(range(len(orders))):
            raise ValueError(f"Routen-Reihenfolge nicht lückenlos: {orders}")

        ids = [r.id for r in self.routes.values()]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Routen-IDs nicht eindeutig: {ids}")

        dup_codes = [c for c, n in Counter(s.code for s in self.students).items() if n > 1]
        if dup_codes:
            raise ValueError(f"Codes mehrfach angemeldet: {dup_codes}")

        known = set(ids)
        tickets = Counter((s.route_id, s.ticket_number) for s in self.students)
        for (route_id, ticket), n in tickets.items():
            if route_id not in known:
                raise ValueError(f"Anmeldung verweist auf unbekannte Route '{route_id}'")
            if n > 1:
                raise ValueError(
                    f"Ticketnummer {ticket} auf Route '{route_id}' mehrfach vergeben")
        return self

    # ─── Lookups ───

    def route_by_id(self, route_id: str) -> Optional[RouteConfig]:
        for route in self.routes.values():
            if route.id == route_id:
                return route
        return None

    def route_name(self, route_id: str) -> str:
        """Anzeigename zu einer Routen-ID (ID selbst, falls unbekannt)."""
        route = self.route_by_id(route_id)
        return route.name if route else route_id

    def students_on_route(self, route_id: str) -> list[Student]:
        return [s for s in self.students if s.route_id == route_id]

    def sorted_routes(self) -> list[tuple[str, RouteConfig]]:
        """Routen aufsteigend nach order (stabil)."""
        return sorted(self.routes.items(), key=lambda item: item[1].order)

    # ─── Übersicht ───

    def summary(self) -> str:
        """Kurze Übersicht über den Snapshot."""
        active = sum(1 for r in self.routes.values() if r.is_active)
        seats = sum(r.capacity for r in self.routes.values())
        lines = [
            f"Routen: {len(self.routes)} ({active} aktiv)",
            f"Anmeldungen: {len(self.students)} / {seats} Plätze",
            f"Klärungsfälle: {len(self.clarifications)}",
        ]
        return "\n".join(lines)

    # ─── Serialisierung ───

    def to_json(self) -> str:
        return self.model_dump_json(indent=2)

    @classmethod
    def from_json(cls, payload: str) -> "AppState":
        return cls.model_validate_json(payload)


def default_routes(capacity: int = DEFAULT_CAPACITY) -> dict[str, RouteConfig]:
    """Die fünf Start-Routen (aktiv, order 0..4)."""
    return {
        name: RouteConfig(
            id=slugify(name),
            name=name,
            subtitle=subtitle,
            is_active=True,
            capacity=capacity,
            order=i,
            color=ROUTE_COLORS[name],
        )
        for i, (name, subtitle) in enumerate(DEFAULT_ROUTES)
    }


def default_state(capacity: int = DEFAULT_CAPACITY) -> AppState:
    """Snapshot für den Erstaufruf bzw. nach defektem Speicherstand."""
    return AppState(routes=default_routes(capacity))
