"""Tests für die Routen-Verwaltung: Anlegen, Ändern, Löschen, Reihenfolge."""

import random

import pytest
from pydantic import ValidationError

from engine.core import RegistrationEngine
from engine.outcomes import Rejection
from models.student import StudentInput


def _input(code: str, route: str) -> StudentInput:
    return StudentInput(name="Ana", last_name="Quispe", code=code,
                        faculty="FC", route=route)


def _orders(engine: RegistrationEngine) -> dict[str, int]:
    return {name: r.order for name, r in engine.state.routes.items()}


def _assert_dense(engine: RegistrationEngine) -> None:
    orders = sorted(_orders(engine).values())
    assert orders == list(range(len(orders)))


# ─── ANLEGEN ──────────────────────────────────────────────────────────────────

class TestAddRoute:
    def test_added_last_with_slug(self, engine: RegistrationEngine):
        result = engine.routes.add_route("San Juan  de Lurigancho", subtitle="SJL - UNI", capacity=30)
        assert result.accepted
        assert result.route.id == "san-juan-de-lurigancho"
        assert result.route.order == 5
        assert result.route.capacity == 30
        assert engine.routes.get_sorted_routes()[-1][0] == "San Juan  de Lurigancho"

    def test_default_capacity_and_color(self, engine: RegistrationEngine):
        route = engine.routes.add_route("Callao").route
        assert route.capacity == 50
        assert route.color == "#3B82F6"

    def test_duplicate_name_rejected(self, engine: RegistrationEngine):
        before = engine.state
        assert engine.routes.add_route("Norte").rejection == Rejection.ROUTE_EXISTS
        assert engine.state == before

    def test_empty_name_rejected(self, engine: RegistrationEngine):
        assert engine.routes.add_route("   ").rejection == Rejection.INVALID_NAME

    def test_slug_collision_gets_suffix(self, engine: RegistrationEngine):
        route = engine.routes.add_route("norte").route
        assert route.id == "norte-2"

    def test_first_route_after_all_deleted(self, engine: RegistrationEngine):
        for name in list(engine.state.routes):
            engine.routes.delete_route(name)
        assert engine.routes.add_route("Nueva").route.order == 0


# ─── ÄNDERN ───────────────────────────────────────────────────────────────────

class TestUpdateRoute:
    def test_shallow_merge(self, engine: RegistrationEngine):
        assert engine.routes.update_route_config("Este", capacity=10, subtitle="Nuevo") is None
        route = engine.routes.get_route("Este")
        assert route.capacity == 10
        assert route.subtitle == "Nuevo"
        assert route.order == 2
        assert route.is_active is True

    def test_unknown_route(self, engine: RegistrationEngine):
        assert engine.routes.update_route_config("Luna", capacity=1) == Rejection.NOT_FOUND

    def test_unknown_field_raises(self, engine: RegistrationEngine):
        with pytest.raises(ValueError):
            engine.routes.update_route_config("Este", order=0)

    def test_negative_capacity_raises(self, engine: RegistrationEngine):
        with pytest.raises(ValidationError):
            engine.routes.update_route_config("Este", capacity=-1)

    def test_rename_keeps_students_attached(self, engine: RegistrationEngine):
        engine.registration.register_self_service(_input("X1", "Este"))
        assert engine.routes.update_route_config("Este", name="Este Nuevo") is None
        assert "Este" not in engine.state.routes
        assert len(engine.registration.students_on_route("Este Nuevo")) == 1
        assert engine.routes.get_route("Este Nuevo").id == "este"
        assert engine.routes.get_sorted_routes()[2][0] == "Este Nuevo"

    def test_rename_to_existing_rejected(self, engine: RegistrationEngine):
        assert engine.routes.update_route_config("Este", name="Sur") == Rejection.ROUTE_EXISTS

    def test_rename_to_blank_rejected(self, engine: RegistrationEngine):
        assert engine.routes.update_route_config("Este", name=" ") == Rejection.INVALID_NAME

    def test_route_color(self, engine: RegistrationEngine):
        engine.routes.update_route_config("Ate", color="#000000")
        assert engine.routes.get_route_color("Ate") == "#000000"
        assert engine.routes.get_route_color("Luna") == "#3B82F6"


# ─── LÖSCHEN ──────────────────────────────────────────────────────────────────

class TestDeleteRoute:
    def test_can_delete_iff_no_students(self, engine: RegistrationEngine):
        assert engine.routes.can_delete_route("Ate") is True
        s = engine.registration.register_self_service(_input("X1", "Ate")).student
        engine.registration.set_status(s.id, "no-show")
        assert engine.routes.can_delete_route("Ate") is False
        engine.registration.delete_student(s.id)
        assert engine.routes.can_delete_route("Ate") is True

    def test_can_delete_unknown_is_false(self, engine: RegistrationEngine):
        assert engine.routes.can_delete_route("Luna") is False

    def test_delete_with_students_is_noop(self, engine: RegistrationEngine):
        engine.registration.register_self_service(_input("X1", "Ate"))
        before = engine.state
        assert engine.routes.delete_route("Ate") == Rejection.ROUTE_HAS_STUDENTS
        assert engine.state == before

    def test_delete_compacts_orders(self, engine: RegistrationEngine):
        assert engine.routes.delete_route("Puente Piedra") is None
        assert _orders(engine) == {"Norte": 0, "Este": 1, "Ate": 2, "Sur": 3}

    def test_delete_unknown(self, engine: RegistrationEngine):
        assert engine.routes.delete_route("Luna") == Rejection.NOT_FOUND


# ─── REIHENFOLGE ──────────────────────────────────────────────────────────────

class TestReorder:
    def test_move_ate_to_front(self, engine: RegistrationEngine):
        assert engine.routes.reorder_routes("Ate", 0) is None
        assert _orders(engine) == {
            "Ate": 0, "Norte": 1, "Puente Piedra": 2, "Este": 3, "Sur": 4,
        }

    def test_move_later(self, engine: RegistrationEngine):
        assert engine.routes.reorder_routes("Norte", 3) is None
        assert _orders(engine) == {
            "Puente Piedra": 0, "Este": 1, "Ate": 2, "Norte": 3, "Sur": 4,
        }

    def test_same_position_is_noop(self, engine: RegistrationEngine):
        before = engine.state
        assert engine.routes.reorder_routes("Este", 2) is None
        assert engine.state == before

    @pytest.mark.parametrize("position", [-1, 5, 100])
    def test_out_of_range_rejected(self, engine: RegistrationEngine, position: int):
        before = engine.state
        assert engine.routes.reorder_routes("Este", position) == Rejection.INVALID_ORDER
        assert engine.state == before

    def test_unknown_route(self, engine: RegistrationEngine):
        assert engine.routes.reorder_routes("Luna", 0) == Rejection.NOT_FOUND

    def test_sorted_routes_follow_order(self, engine: RegistrationEngine):
        engine.routes.reorder_routes("Sur", 0)
        names = [name for name, _ in engine.routes.get_sorted_routes()]
        assert names == ["Sur", "Norte", "Puente Piedra", "Este", "Ate"]

    def test_active_routes(self, engine: RegistrationEngine):
        engine.routes.update_route_config("Este", is_active=False)
        names = [name for name, _ in engine.routes.active_routes()]
        assert names == ["Norte", "Puente Piedra", "Ate", "Sur"]


# ─── INVARIANTE ───────────────────────────────────────────────────────────────

class TestOrderInvariant:
    def test_random_sequence_keeps_orders_dense(self, engine: RegistrationEngine):
        """Zufällige Folge aus Anlegen/Löschen/Verschieben: order bleibt 0..N-1."""
        rng = random.Random(42)
        counter = 0
        for _ in range(200):
            names = list(engine.state.routes)
            op = rng.choice(["add", "delete", "move", "move"])
            if op == "add" or not names:
                counter += 1
                engine.routes.add_route(f"Ruta {counter}")
            elif op == "delete":
                engine.routes.delete_route(rng.choice(names))
            else:
                engine.routes.reorder_routes(rng.choice(names), rng.randrange(len(names)))
            _assert_dense(engine)
