"""
Configuration models - typed view of config.yaml

Every section has working defaults, so a partial
YAML file (or none at all) still yields a complete configuration.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional, Union, get_args, get_origin, get_type_hints

from dotswarm.models.enums import LogLevel
from dotswarm.models.geometry import GridResolution
from dotswarm.models.transition import TransitionTiming, EASING_FUNCTIONS


@dataclass
class GridConfig:
    scaled_width: int = 60
    min_dots: int = 3

    @property
    def resolution(self) -> GridResolution:
        return GridResolution.from_width(self.scaled_width)


@dataclass
class TimingConfig:
    """
    Capture cadence and per-pixel scheduling bounds (ms)

    min_pixel_duration_ms defaults to capture_interval_ms - 1000.
    """
    capture_interval_ms: float = 8000.0
    initial_delay_ms: float = 200.0
    duration_jitter_ms: float = 500.0
    safe_end_margin_ms: float = 500.0
    min_pixel_duration_ms: Optional[float] = None

    @property
    def effective_min_pixel_duration_ms(self) -> float:
        if self.min_pixel_duration_ms is not None:
            return self.min_pixel_duration_ms
        return self.capture_interval_ms - 1000.0

    def to_transition_timing(self) -> TransitionTiming:
        return TransitionTiming(
            total_duration=self.capture_interval_ms,
            duration_jitter=self.duration_jitter_ms,
            min_pixel_duration=self.effective_min_pixel_duration_ms,
            safe_end_margin=self.safe_end_margin_ms,
        )


@dataclass
class MatchingConfig:
    tolerance: float = 30.0


@dataclass
class RenderConfig:
    fps: int = 60
    diameter_adj: float = 0.9
    background_color: int = 0
    background_fader: int = 8
    mirror: bool = True
    draw_underlay: bool = True
    window_width: float = 960.0
    easing: str = "in_out_cubic"
    terminal_preview: bool = False
    terminal_columns: int = 80


@dataclass
class CaptureConfig:
    fps: int = 15
    seed: Optional[int] = None


@dataclass
class ApiConfig:
    enabled: bool = True
    host: str = "0.0.0.0"
    port: int = 8000


@dataclass
class LoggingConfig:
    level: LogLevel = LogLevel.INFO
    colors: bool = True


@dataclass
class DotSwarmConfig:
    """Complete application configuration"""

    grid: GridConfig = field(default_factory=GridConfig)
    timing: TimingConfig = field(default_factory=TimingConfig)
    matching: MatchingConfig = field(default_factory=MatchingConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    capture: CaptureConfig = field(default_factory=CaptureConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'DotSwarmConfig':
        """
        Build typed config from raw YAML data

        Raises:
            ValueError: Unknown keys or invalid values
        """
        data = data or {}

        logging_raw = data.get("logging") or {}
        if not isinstance(logging_raw, dict):
            raise ValueError("Config section 'logging' must be a mapping")
        logging_raw = dict(logging_raw)
        if "level" in logging_raw:
            level = str(logging_raw["level"]).upper()
            try:
                logging_raw["level"] = LogLevel[level]
            except KeyError:
                raise ValueError(f"Invalid log level: {logging_raw['level']}")

        config = cls(
            grid=_section(GridConfig, data, "grid"),
            timing=_section(TimingConfig, data, "timing"),
            matching=_section(MatchingConfig, data, "matching"),
            render=_section(RenderConfig, data, "render"),
            capture=_section(CaptureConfig, data, "capture"),
            api=_section(ApiConfig, data, "api"),
            logging=_build(LoggingConfig, logging_raw, "logging"),
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Raise ValueError for values the engine cannot run with"""
        if self.grid.scaled_width < 2:
            raise ValueError(f"grid.scaled_width must be >= 2 (got {self.grid.scaled_width})")
        if self.grid.min_dots < 1:
            raise ValueError(f"grid.min_dots must be >= 1 (got {self.grid.min_dots})")
        if self.timing.initial_delay_ms < 0:
            raise ValueError("timing.initial_delay_ms must be >= 0")
        # TransitionTiming validates the scheduling bounds
        self.timing.to_transition_timing()
        if self.matching.tolerance < 0:
            raise ValueError("matching.tolerance must be >= 0")
        if not 1 <= self.render.fps <= 240:
            raise ValueError(f"render.fps must be 1-240 (got {self.render.fps})")
        if not 0 < self.render.diameter_adj <= 1:
            raise ValueError(f"render.diameter_adj must be in (0, 1] (got {self.render.diameter_adj})")
        if not 0 <= self.render.background_color <= 255 or not 0 <= self.render.background_fader <= 255:
            raise ValueError("render.background_color and render.background_fader must be 0-255")
        if self.render.window_width <= 0:
            raise ValueError("render.window_width must be > 0")
        if self.render.easing not in EASING_FUNCTIONS:
            raise ValueError(f"render.easing must be one of {sorted(EASING_FUNCTIONS)}")
        if self.render.terminal_columns < 1:
            raise ValueError("render.terminal_columns must be >= 1")
        if self.capture.fps < 1:
            raise ValueError("capture.fps must be >= 1")


def _section(section_cls, data: Dict[str, Any], key: str):
    raw = data.get(key) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config section '{key}' must be a mapping")
    return _build(section_cls, raw, key)


def _build(section_cls, raw: Dict[str, Any], key: str):
    try:
        section = section_cls(**raw)
    except TypeError as ex:
        raise ValueError(f"Invalid keys in config section '{key}': {ex}")

    hints = get_type_hints(section_cls)
    for f in fields(section):
        value = getattr(section, f.name)
        setattr(section, f.name, _coerce(value, hints[f.name], f"{key}.{f.name}"))
    return section


def _coerce(value: Any, expected: Any, name: str) -> Any:
    """Check a YAML value against its field type; ints widen to float"""
    allowed = get_args(expected) if get_origin(expected) is Union else (expected,)
    if value is None and type(None) in allowed:
        return None
    for kind in allowed:
        if kind is type(None):
            continue
        if kind is float and isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        if kind is int and isinstance(value, bool):
            continue
        if isinstance(value, kind):
            return value
    raise ValueError(f"{name} has wrong type {type(value).__name__} ({value!r})")
