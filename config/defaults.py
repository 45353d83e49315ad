"""Default-Werte: Fakultäten, Routen-Farben und die Start-Routen."""

from config.schema import AppConfig


# ─── FAKULTÄTEN ───

FACULTIES: list[str] = [
    "FAUA", "FC", "FIA", "FIC", "FIEECS", "FIEE",
    "FIGMM", "FIIS", "FIM", "FIP", "FIQT",
]


# ─── ROUTEN ───

# Farbe je Standard-Route (auch Fallback für umbenannte/gelöschte Einträge)
ROUTE_COLORS: dict[str, str] = {
    "Norte":         "#3B82F6",
    "Puente Piedra": "#22C55E",
    "Este":          "#F59E0B",
    "Ate":           "#EF4444",
    "Sur":           "#8B5CF6",
}

FALLBACK_ROUTE_COLOR = "#3B82F6"

DEFAULT_CAPACITY = 50

# (Name, Untertitel) in Anzeigereihenfolge
DEFAULT_ROUTES: list[tuple[str, str]] = [
    ("Norte",         "Plaza Norte - UNI"),
    ("Puente Piedra", "Plaza Puente Piedra - UNI"),
    ("Este",          "Metro Santa Anita - UNI"),
    ("Ate",           "Mall de Ate - UNI"),
    ("Sur",           "Plaza Sur - UNI"),
]


def default_app_config() -> AppConfig:
    return AppConfig()
