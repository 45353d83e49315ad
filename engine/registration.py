"""Anmeldungen: Zulassungsregeln, Ticketnummern, Status und Pflege.

Ticketnummern zählen pro Route und werden nie wiederverwendet; Lücken nach
Löschungen bleiben bestehen. Sie sind Ausgabe-Reihenfolge, keine Sitzplätze.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, Union

from engine.outcomes import RegistrationResult, Rejection
from engine.store import SnapshotStore
from models.app_state import AppState
from models.route import RouteConfig
from models.student import Student, StudentInput, StudentStatus

logger = logging.getLogger(__name__)


def _next_ticket(state: AppState, route: RouteConfig) -> int:
    issued = [s.ticket_number for s in state.students_on_route(route.id)]
    return max([route.last_ticket_number, *issued]) + 1


def _with_ticket_issued(state: AppState, route: RouteConfig,
                        ticket: int) -> dict[str, RouteConfig]:
    routes = dict(state.routes)
    routes[route.name] = route.model_copy(update={"last_ticket_number": ticket})
    return routes


class RegistrationService:
    """Selbst- und Verwaltungsanmeldung gegen denselben Snapshot."""

    def __init__(self, store: SnapshotStore) -> None:
        self._store = store

    # ─── Anmeldung ───

    def register_self_service(self, data: StudentInput) -> RegistrationResult:
        """Selbstanmeldung mit allen Prüfungen (Sperrliste, Code, Route, Kapazität)."""
        state = self._store.read()

        if any(c.code == data.code for c in state.clarifications):
            return self._reject(data, Rejection.CODE_BLOCKED)
        if self._code_taken(state, data.code):
            return self._reject(data, Rejection.CODE_TAKEN)

        route = state.routes.get(data.route)
        if route is None:
            return self._reject(data, Rejection.ROUTE_NOT_FOUND)
        if not route.is_active:
            return self._reject(data, Rejection.ROUTE_INACTIVE)
        if len(state.students_on_route(route.id)) >= route.capacity:
            return self._reject(data, Rejection.ROUTE_FULL)

        return self._admit(state, data, route)

    def register_manually(self, data: StudentInput) -> RegistrationResult:
        """Anmeldung durch die Verwaltung.

        Übergeht Sperrliste, Aktiv-Status und Kapazität. Der Code bleibt
        trotzdem global eindeutig.
        """
        state = self._store.read()

        if self._code_taken(state, data.code):
            return self._reject(data, Rejection.CODE_TAKEN)
        route = state.routes.get(data.route)
        if route is None:
            return self._reject(data, Rejection.ROUTE_NOT_FOUND)

        return self._admit(state, data, route)

    def _admit(self, state: AppState, data: StudentInput,
               route: RouteConfig) -> RegistrationResult:
        ticket = _next_ticket(state, route)
        student = Student(
            id=str(uuid.uuid4()),
            name=data.name,
            last_name=data.last_name,
            code=data.code,
            faculty=data.faculty,
            route_id=route.id,
            phone=data.phone,
            ticket_number=ticket,
            status=StudentStatus.PENDING,
            timestamp=datetime.now(timezone.utc),
        )
        self._store.commit(state.model_copy(update={
            "students": state.students + (student,),
            "routes": _with_ticket_issued(state, route, ticket),
        }))
        logger.info(f"Angemeldet: {data.code} auf '{route.name}' mit Ticket {ticket}")
        return RegistrationResult.admit(student)

    def _reject(self, data: StudentInput, reason: Rejection) -> RegistrationResult:
        logger.warning(f"Anmeldung {data.code} auf '{data.route}' abgelehnt: {reason.value}")
        return RegistrationResult.reject(reason)

    # ─── Pflege ───

    def set_status(self, student_id: str,
                   status: Union[StudentStatus, str]) -> Optional[Rejection]:
        """Setzt den Status; jeder Übergang ist erlaubt (auch zurück auf pending)."""
        status = StudentStatus(status)
        state = self._store.read()
        if self._find(state, student_id) is None:
            return Rejection.NOT_FOUND
        self._store.commit(state.model_copy(update={
            "students": tuple(
                s.model_copy(update={"status": status}) if s.id == student_id else s
                for s in state.students
            ),
        }))
        return None

    def update_student(self, student: Student) -> Optional[Rejection]:
        """Ersetzt eine Anmeldung anhand der ID.

        id, ticket_number und timestamp bleiben vom gespeicherten Eintrag.
        Beim Routenwechsel gibt es eine neue Ticketnummer auf der Zielroute.
        """
        state = self._store.read()
        current = self._find(state, student.id)
        if current is None:
            return Rejection.NOT_FOUND
        if any(s.code == student.code and s.id != student.id for s in state.students):
            return Rejection.CODE_TAKEN
        target = state.route_by_id(student.route_id)
        if target is None:
            return Rejection.ROUTE_NOT_FOUND

        routes = state.routes
        ticket = current.ticket_number
        if target.id != current.route_id:
            ticket = _next_ticket(state, target)
            routes = _with_ticket_issued(state, target, ticket)
            logger.info(
                f"{current.code} wechselt nach '{target.name}', neues Ticket {ticket}"
            )

        replacement = student.model_copy(update={
            "ticket_number": ticket,
            "timestamp": current.timestamp,
        })
        self._store.commit(state.model_copy(update={
            "students": tuple(
                replacement if s.id == student.id else s for s in state.students
            ),
            "routes": routes,
        }))
        return None

    def delete_student(self, student_id: str) -> Optional[Rejection]:
        state = self._store.read()
        if self._find(state, student_id) is None:
            return Rejection.NOT_FOUND
        self._store.commit(state.model_copy(update={
            "students": tuple(s for s in state.students if s.id != student_id),
        }))
        return None

    def delete_students_on_route(self, route_name: str) -> int:
        """Löscht alle Anmeldungen einer Route. Gibt die Anzahl zurück."""
        state = self._store.read()
        route = state.routes.get(route_name)
        if route is None:
            return 0
        remaining = tuple(s for s in state.students if s.route_id != route.id)
        removed = len(state.students) - len(remaining)
        if removed:
            self._store.commit(state.model_copy(update={"students": remaining}))
            logger.info(f"{removed} Anmeldungen auf '{route_name}' gelöscht")
        return removed

    # ─── Abfragen ───

    def get_student(self, student_id: str) -> Optional[Student]:
        return self._find(self._store.read(), student_id)

    def is_code_registered(self, code: str) -> bool:
        return self._code_taken(self._store.read(), code)

    def next_ticket_number(self, route_name: str) -> int:
        state = self._store.read()
        if route_name not in state.routes:
            raise KeyError(f"Unbekannte Route: {route_name}")
        return _next_ticket(state, state.routes[route_name])

    def students_on_route(self, route_name: str) -> list[Student]:
        """Anmeldungen einer Route, sortiert nach Ticketnummer."""
        return self.find_students(route=route_name)

    def find_students(self, route: Optional[str] = None,
                      search: Optional[str] = None) -> list[Student]:
        """Filtert nach Route und Suchbegriff, sortiert nach Ticketnummer."""
        state = self._store.read()
        students = list(state.students)
        if route is not None:
            cfg = state.routes.get(route)
            if cfg is None:
                return []
            students = [s for s in students if s.route_id == cfg.id]
        if search:
            students = [s for s in students if s.matches(search)]
        return sorted(students, key=lambda s: s.ticket_number)

    @staticmethod
    def _find(state: AppState, student_id: str) -> Optional[Student]:
        return next((s for s in state.students if s.id == student_id), None)

    @staticmethod
    def _code_taken(state: AppState, code: str) -> bool:
        return any(s.code == code for s in state.students)
