"""Tests für die Anmeldung: Zulassungsregeln, Ticketnummern, Pflege und Suche."""

import pytest

from engine.core import RegistrationEngine
from engine.outcomes import Rejection
from models.student import StudentInput, StudentStatus


def _input(code: str, route: str = "Norte", **kwargs) -> StudentInput:
    data = dict(name="Ana", last_name="Quispe", code=code,
                faculty="FIIS", route=route, phone="987654321")
    data.update(kwargs)
    return StudentInput(**data)


def _fill(engine: RegistrationEngine, route: str, n: int, prefix: str = "C") -> None:
    for i in range(n):
        result = engine.registration.register_self_service(_input(f"{prefix}{i:03d}", route))
        assert result.accepted, result.rejection


# ─── SELBSTANMELDUNG ──────────────────────────────────────────────────────────

class TestSelfService:
    def test_admits_with_first_ticket(self, engine: RegistrationEngine):
        result = engine.registration.register_self_service(_input("20231001A"))
        assert result.accepted
        s = result.student
        assert s.ticket_number == 1
        assert s.status == StudentStatus.PENDING
        assert s.route_id == "norte"
        assert engine.state.students == (s,)

    def test_blocked_code_rejected(self, engine: RegistrationEngine):
        engine.clarifications.add_clarification("Ana", "Quispe", "20231001A")
        result = engine.registration.register_self_service(_input("20231001A"))
        assert result.rejection == Rejection.CODE_BLOCKED
        assert engine.state.students == ()

    def test_blocked_code_wins_over_inactive_and_full(self, engine: RegistrationEngine):
        engine.routes.update_route_config("Sur", is_active=False, capacity=0)
        engine.clarifications.add_clarification("Ana", "Quispe", "X1")
        result = engine.registration.register_self_service(_input("X1", "Sur"))
        assert result.rejection == Rejection.CODE_BLOCKED

    def test_block_check_is_case_sensitive(self, engine: RegistrationEngine):
        engine.clarifications.add_clarification("Ana", "Quispe", "abc")
        assert engine.registration.register_self_service(_input("ABC")).accepted

    def test_code_taken_across_routes(self, engine: RegistrationEngine):
        engine.registration.register_self_service(_input("20231001A", "Norte"))
        result = engine.registration.register_self_service(_input("20231001A", "Sur"))
        assert result.rejection == Rejection.CODE_TAKEN

    def test_inactive_route_rejected(self, engine: RegistrationEngine):
        engine.routes.update_route_config("Este", is_active=False)
        result = engine.registration.register_self_service(_input("X1", "Este"))
        assert result.rejection == Rejection.ROUTE_INACTIVE

    def test_unknown_route_rejected(self, engine: RegistrationEngine):
        result = engine.registration.register_self_service(_input("X1", "Luna"))
        assert result.rejection == Rejection.ROUTE_NOT_FOUND

    @pytest.mark.parametrize("capacity", [0, 1, 7])
    def test_capacity_boundary(self, engine: RegistrationEngine, capacity: int):
        """Angenommen solange count < capacity, abgelehnt bei count == capacity."""
        engine.routes.update_route_config("Ate", capacity=capacity)
        _fill(engine, "Ate", capacity)
        result = engine.registration.register_self_service(_input("LAST", "Ate"))
        assert result.rejection == Rejection.ROUTE_FULL
        assert len(engine.registration.students_on_route("Ate")) == capacity

    def test_rejection_has_message(self, engine: RegistrationEngine):
        result = engine.registration.register_self_service(_input("X1", "Luna"))
        assert result.rejection.message


# ─── VERWALTUNGSANMELDUNG ─────────────────────────────────────────────────────

class TestManualRegistration:
    def test_bypasses_capacity(self, engine: RegistrationEngine):
        engine.routes.update_route_config("Sur", capacity=0)
        assert engine.registration.register_manually(_input("X1", "Sur")).accepted

    def test_bypasses_inactive_and_block(self, engine: RegistrationEngine):
        engine.routes.update_route_config("Sur", is_active=False)
        engine.clarifications.add_clarification("Ana", "Quispe", "X1")
        result = engine.registration.register_manually(_input("X1", "Sur"))
        assert result.accepted
        assert result.student.ticket_number == 1

    def test_code_uniqueness_not_overridable(self, engine: RegistrationEngine):
        engine.registration.register_self_service(_input("X1", "Norte"))
        result = engine.registration.register_manually(_input("X1", "Sur"))
        assert result.rejection == Rejection.CODE_TAKEN

    def test_unknown_route(self, engine: RegistrationEngine):
        result = engine.registration.register_manually(_input("X1", "Luna"))
        assert result.rejection == Rejection.ROUTE_NOT_FOUND


# ─── TICKETNUMMERN ────────────────────────────────────────────────────────────

class TestTicketNumbers:
    def test_numbering_is_per_route(self, engine: RegistrationEngine):
        _fill(engine, "Norte", 3, prefix="N")
        _fill(engine, "Sur", 2, prefix="S")
        assert [s.ticket_number for s in engine.registration.students_on_route("Norte")] == [1, 2, 3]
        assert [s.ticket_number for s in engine.registration.students_on_route("Sur")] == [1, 2]

    def test_gap_after_delete_is_kept(self, engine: RegistrationEngine):
        _fill(engine, "Norte", 4)
        third = engine.registration.students_on_route("Norte")[2]
        engine.registration.delete_student(third.id)
        tickets = [s.ticket_number for s in engine.registration.students_on_route("Norte")]
        assert tickets == [1, 2, 4]
        assert engine.registration.next_ticket_number("Norte") == 5

    def test_highest_ticket_not_reused_after_delete(self, engine: RegistrationEngine):
        _fill(engine, "Norte", 3)
        last = engine.registration.students_on_route("Norte")[-1]
        engine.registration.delete_student(last.id)
        result = engine.registration.register_self_service(_input("NEW"))
        assert result.student.ticket_number == 4

    def test_not_reused_after_clearing_route(self, engine: RegistrationEngine):
        _fill(engine, "Este", 2)
        assert engine.registration.delete_students_on_route("Este") == 2
        result = engine.registration.register_self_service(_input("NEW", "Este"))
        assert result.student.ticket_number == 3

    def test_monotonic_and_unique(self, engine: RegistrationEngine):
        issued = []
        for i in range(12):
            result = engine.registration.register_manually(_input(f"M{i}", "Ate"))
            issued.append(result.student.ticket_number)
            if i % 3 == 2:
                engine.registration.delete_student(result.student.id)
        assert issued == sorted(issued)
        assert len(set(issued)) == len(issued)

    def test_next_ticket_unknown_route(self, engine: RegistrationEngine):
        with pytest.raises(KeyError):
            engine.registration.next_ticket_number("Luna")


# ─── STATUS ───────────────────────────────────────────────────────────────────

class TestStatus:
    def test_any_transition_allowed(self, engine: RegistrationEngine):
        s = engine.registration.register_self_service(_input("X1")).student
        for status in ("boarded", "pending", "no-show", "boarded", "pending"):
            assert engine.registration.set_status(s.id, status) is None
            assert engine.registration.get_student(s.id).status == StudentStatus(status)

    def test_unknown_id_is_noop(self, engine: RegistrationEngine):
        before = engine.state
        assert engine.registration.set_status("nope", StudentStatus.BOARDED) == Rejection.NOT_FOUND
        assert engine.state == before

    def test_invalid_status_raises(self, engine: RegistrationEngine):
        s = engine.registration.register_self_service(_input("X1")).student
        with pytest.raises(ValueError):
            engine.registration.set_status(s.id, "verloren")


# ─── BEARBEITEN / LÖSCHEN ─────────────────────────────────────────────────────

class TestUpdateDelete:
    def test_update_keeps_identity_fields(self, engine: RegistrationEngine):
        s = engine.registration.register_self_service(_input("X1")).student
        edited = s.model_copy(update={"name": "María", "ticket_number": 99})
        assert engine.registration.update_student(edited) is None
        stored = engine.registration.get_student(s.id)
        assert stored.name == "María"
        assert stored.ticket_number == 1
        assert stored.timestamp == s.timestamp

    def test_update_rejects_code_of_other_student(self, engine: RegistrationEngine):
        a = engine.registration.register_self_service(_input("X1")).student
        engine.registration.register_self_service(_input("X2"))
        rejection = engine.registration.update_student(a.model_copy(update={"code": "X2"}))
        assert rejection == Rejection.CODE_TAKEN
        assert engine.registration.get_student(a.id).code == "X1"

    def test_update_own_code_allowed(self, engine: RegistrationEngine):
        a = engine.registration.register_self_service(_input("X1")).student
        assert engine.registration.update_student(a.model_copy(update={"phone": "1"})) is None

    def test_update_route_change_gets_new_ticket(self, engine: RegistrationEngine):
        _fill(engine, "Sur", 2, prefix="S")
        a = engine.registration.register_self_service(_input("X1", "Norte")).student
        assert engine.registration.update_student(a.model_copy(update={"route_id": "sur"})) is None
        moved = engine.registration.get_student(a.id)
        assert moved.route_id == "sur"
        assert moved.ticket_number == 3

    def test_update_unknown_route(self, engine: RegistrationEngine):
        a = engine.registration.register_self_service(_input("X1")).student
        rejection = engine.registration.update_student(a.model_copy(update={"route_id": "luna"}))
        assert rejection == Rejection.ROUTE_NOT_FOUND

    def test_update_unknown_id(self, engine: RegistrationEngine):
        a = engine.registration.register_self_service(_input("X1")).student
        rejection = engine.registration.update_student(a.model_copy(update={"id": "nope"}))
        assert rejection == Rejection.NOT_FOUND

    def test_delete_unknown_is_noop(self, engine: RegistrationEngine):
        _fill(engine, "Norte", 2)
        assert engine.registration.delete_student("nope") == Rejection.NOT_FOUND
        assert len(engine.state.students) == 2

    def test_delete_students_on_route_only_that_route(self, engine: RegistrationEngine):
        _fill(engine, "Norte", 3, prefix="N")
        _fill(engine, "Sur", 2, prefix="S")
        assert engine.registration.delete_students_on_route("Norte") == 3
        assert len(engine.state.students) == 2
        assert engine.registration.delete_students_on_route("Luna") == 0


# ─── SUCHE ────────────────────────────────────────────────────────────────────

class TestFindStudents:
    def test_search_is_case_insensitive(self, engine: RegistrationEngine):
        engine.registration.register_self_service(_input("X1", name="Rosa", last_name="Huamán"))
        engine.registration.register_self_service(_input("X2", name="Pedro", last_name="Salas"))
        found = engine.registration.find_students(search="huam")
        assert [s.code for s in found] == ["X1"]

    def test_search_by_code_and_phone(self, engine: RegistrationEngine):
        engine.registration.register_self_service(_input("20231001A", phone="911222333"))
        assert len(engine.registration.find_students(search="1001")) == 1
        assert len(engine.registration.find_students(search="222")) == 1

    def test_filter_by_route_sorted_by_ticket(self, engine: RegistrationEngine):
        _fill(engine, "Ate", 3, prefix="A")
        _fill(engine, "Norte", 1, prefix="N")
        found = engine.registration.find_students(route="Ate")
        assert [s.ticket_number for s in found] == [1, 2, 3]
        assert engine.registration.find_students(route="Luna") == []

    def test_is_code_registered(self, engine: RegistrationEngine):
        engine.registration.register_self_service(_input("X1"))
        assert engine.registration.is_code_registered("X1")
        assert not engine.registration.is_code_registered("X2")


# ─── SZENARIO ─────────────────────────────────────────────────────────────────

class TestScenario:
    def test_norte_full_then_manual_then_delete_sur(self, engine: RegistrationEngine):
        _fill(engine, "Norte", 50)

        result = engine.registration.register_self_service(_input("EXTRA1"))
        assert result.rejection == Rejection.ROUTE_FULL

        manual = engine.registration.register_manually(_input("EXTRA2"))
        assert manual.accepted
        assert manual.student.ticket_number == 51

        assert engine.routes.delete_route("Sur") is None
        orders = {r.order for r in engine.state.routes.values()}
        assert orders == {0, 1, 2, 3}
