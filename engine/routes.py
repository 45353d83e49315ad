"""Routen-Verwaltung: Anlegen, Ändern, Löschen und Umsortieren.

Invariante: die order-Werte aller Routen bilden immer 0..N-1 ohne Lücken.
Löschen und Verschieben berechnen deshalb alle Reihenfolgen in einem Schritt neu.
"""

import logging
from typing import Optional

from config.defaults import FALLBACK_ROUTE_COLOR, ROUTE_COLORS
from engine.outcomes import Rejection, RouteResult
from engine.store import SnapshotStore
from models.route import RouteConfig, slugify

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = {"name", "subtitle", "is_active", "capacity", "color"}


class RouteRegistry:
    """CRUD und Reihenfolge der Routen."""

    def __init__(self, store: SnapshotStore) -> None:
        self._store = store

    # ─── Anlegen / Ändern ───

    def add_route(
        self,
        name: str,
        subtitle: str = "",
        capacity: Optional[int] = None,
        color: Optional[str] = None,
        is_active: bool = True,
    ) -> RouteResult:
        """Legt eine Route am Ende der Reihenfolge an."""
        name = name.strip()
        if not name:
            return RouteResult(rejection=Rejection.INVALID_NAME)

        state = self._store.read()
        if name in state.routes:
            logger.warning(f"Route '{name}' existiert bereits")
            return RouteResult(rejection=Rejection.ROUTE_EXISTS)

        taken_ids = {r.id for r in state.routes.values()}
        route_id = slugify(name)
        suffix = 2
        while route_id in taken_ids:
            route_id = f"{slugify(name)}-{suffix}"
            suffix += 1

        order = max((r.order for r in state.routes.values()), default=-1) + 1
        route = RouteConfig(
            id=route_id,
            name=name,
            subtitle=subtitle,
            is_active=is_active,
            capacity=self._store.default_capacity if capacity is None else capacity,
            order=order,
            color=color or ROUTE_COLORS.get(name, FALLBACK_ROUTE_COLOR),
        )
        routes = dict(state.routes)
        routes[name] = route
        self._store.commit(state.model_copy(update={"routes": routes}))
        logger.info(f"Route '{name}' angelegt (Position {order}, {route.capacity} Plätze)")
        return RouteResult(route=route)

    def update_route_config(self, name: str, /, **changes) -> Optional[Rejection]:
        """Übernimmt die angegebenen Felder (flaches Merge).

        Umbenennen ist erlaubt: Anmeldungen verweisen auf die unveränderliche
        Routen-ID. Ungültige Werte lösen einen ValidationError aus.
        """
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Nicht änderbare Felder: {sorted(unknown)}")

        state = self._store.read()
        route = state.routes.get(name)
        if route is None:
            return Rejection.NOT_FOUND

        new_name = name
        if "name" in changes:
            new_name = changes["name"].strip()
            if not new_name:
                return Rejection.INVALID_NAME
            if new_name != name and new_name in state.routes:
                return Rejection.ROUTE_EXISTS

        updated = RouteConfig.model_validate(
            {**route.model_dump(), **changes, "name": new_name}
        )
        routes = {
            (new_name if key == name else key): (updated if key == name else cfg)
            for key, cfg in state.routes.items()
        }
        self._store.commit(state.model_copy(update={"routes": routes}))
        if new_name != name:
            logger.info(f"Route '{name}' umbenannt in '{new_name}'")
        return None

    # ─── Löschen ───

    def can_delete_route(self, name: str) -> bool:
        """True, wenn keine Anmeldung (egal welcher Status) auf die Route verweist."""
        state = self._store.read()
        route = state.routes.get(name)
        if route is None:
            return False
        return not any(s.route_id == route.id for s in state.students)

    def delete_route(self, name: str) -> Optional[Rejection]:
        """Löscht die Route und schließt die Lücke in der Reihenfolge."""
        state = self._store.read()
        deleted = state.routes.get(name)
        if deleted is None:
            return Rejection.NOT_FOUND
        if any(s.route_id == deleted.id for s in state.students):
            logger.warning(f"Route '{name}' hat noch Anmeldungen – nicht gelöscht")
            return Rejection.ROUTE_HAS_STUDENTS

        routes = {
            key: (cfg.model_copy(update={"order": cfg.order - 1})
                  if cfg.order > deleted.order else cfg)
            for key, cfg in state.routes.items()
            if key != name
        }
        self._store.commit(state.model_copy(update={"routes": routes}))
        logger.info(f"Route '{name}' gelöscht")
        return None

    # ─── Reihenfolge ───

    def reorder_routes(self, name: str, new_order: int) -> Optional[Rejection]:
        """Verschiebt eine Route an Position new_order, die anderen rücken nach."""
        state = self._store.read()
        moved = state.routes.get(name)
        if moved is None:
            return Rejection.NOT_FOUND
        if not 0 <= new_order < len(state.routes):
            return Rejection.INVALID_ORDER

        old_order = moved.order
        if old_order == new_order:
            return None

        def shifted(order: int) -> int:
            if old_order < order <= new_order:
                return order - 1
            if new_order <= order < old_order:
                return order + 1
            return order

        routes = {}
        for key, cfg in state.routes.items():
            target = new_order if key == name else shifted(cfg.order)
            routes[key] = cfg if target == cfg.order else cfg.model_copy(
                update={"order": target})
        self._store.commit(state.model_copy(update={"routes": routes}))
        logger.info(f"Route '{name}' von Position {old_order} nach {new_order} verschoben")
        return None

    # ─── Abfragen ───

    def get_route(self, name: str) -> Optional[RouteConfig]:
        return self._store.read().routes.get(name)

    def get_sorted_routes(self) -> list[tuple[str, RouteConfig]]:
        """Alle Routen in Anzeigereihenfolge (stabil nach order sortiert)."""
        return self._store.read().sorted_routes()

    def active_routes(self) -> list[tuple[str, RouteConfig]]:
        return [(n, r) for n, r in self.get_sorted_routes() if r.is_active]

    def get_route_color(self, name: str) -> str:
        route = self.get_route(name)
        if route is not None and route.color:
            return route.color
        return ROUTE_COLORS.get(name, FALLBACK_ROUTE_COLOR)
