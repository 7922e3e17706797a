import json
import logging
import os
import sys
from dataclasses import asdict, dataclass, fields

logger = logging.getLogger(__name__)

# ============================================================
# ===================== USER SETTINGS ========================
# ============================================================

WINDOW_WIDTH  = 1000
WINDOW_HEIGHT = 640
FPS           = 60

STEP_DELAY_MS = 100      # pause between two animation frames
BAR_SCALE     = 3.0      # pixels per unit of value
BAR_WIDTH     = 20
BAR_GAP       = 2

FREQ_LOW      = 120.0
FREQ_HIGH     = 960.0

if sys.platform == "win32":
    APPDATA = os.getenv("APPDATA") or os.path.expanduser("~\\AppData\\Roaming")
    CONFIG_DIR = os.path.join(APPDATA, "SortStepper")
else:
    CONFIG_DIR = os.path.expanduser("~/.sortstepper")

SETTINGS_PATH = os.path.join(CONFIG_DIR, "settings.json")


@dataclass
class Settings:
    step_delay_ms: int   = STEP_DELAY_MS
    bar_scale:     float = BAR_SCALE
    bar_width:     int   = BAR_WIDTH
    bar_gap:       int   = BAR_GAP
    window_width:  int   = WINDOW_WIDTH
    window_height: int   = WINDOW_HEIGHT
    fps:           int   = FPS
    sound:         bool  = False
    freq_low:      float = FREQ_LOW
    freq_high:     float = FREQ_HIGH

    @property
    def step_delay(self) -> float:
        return self.step_delay_ms / 1000.0


def _coerce(name, kind, value):
    if kind is bool:
        if isinstance(value, bool): return value
        raise ValueError(f"{name} must be true or false")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number")
    value = kind(value)
    if value < 0:
        raise ValueError(f"{name} must not be negative")
    return value


def settings_from_dict(data: dict) -> Settings:
    """Build Settings from a dict, keeping the default for every bad or missing field."""
    settings = Settings()
    known = {f.name: f for f in fields(Settings)}
    for name, value in data.items():
        if name not in known:
            logger.warning("ignoring unknown setting %r", name)
            continue
        kind = type(getattr(settings, name))
        try:
            setattr(settings, name, _coerce(name, kind, value))
        except ValueError as e:
            logger.warning("bad setting: %s; keeping %r", e, getattr(settings, name))
    if settings.freq_high <= settings.freq_low:
        logger.warning("freq_high must exceed freq_low; using defaults")
        settings.freq_low, settings.freq_high = FREQ_LOW, FREQ_HIGH
    return settings


def load_settings(path=None) -> Settings:
    path = path or SETTINGS_PATH
    if not os.path.exists(path):
        return Settings()
    try:
        with open(path) as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("could not read settings from %s: %s", path, e)
        return Settings()
    if not isinstance(data, dict):
        logger.warning("settings file %s must hold a JSON object", path)
        return Settings()
    return settings_from_dict(data)


def save_settings(settings: Settings, path=None):
    path = path or SETTINGS_PATH
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    with open(path, "w") as f:
        json.dump(asdict(settings), f, indent=2)
