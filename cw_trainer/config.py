"""Load and validate the JSON training configuration."""

import json
import logging
import os

from cw_trainer.constants import OUTPUT_BITRATE
from cw_trainer.errors import ConfigError
from cw_trainer.models import OutputSettings, Segment, SpeedProfile, TrainingConfig

logger = logging.getLogger(__name__)

_SEGMENT_LIST_FIELDS = ("words", "callsigns", "phrases", "characters")


def load_config(path: str) -> TrainingConfig:
    """Read a configuration file and return a validated TrainingConfig."""
    if not os.path.exists(path):
        raise ConfigError(f"Config file not found: {path}")
    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Malformed config file {path}: {e}") from e
    logger.debug("Loaded config from %s", path)
    return parse_config(data)


def _require(mapping: dict, key: str, where: str):
    if key not in mapping:
        raise ConfigError(f"Missing '{key}' in {where}")
    return mapping[key]


def _parse_int(value, where: str) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{where} must be an integer, got {value!r}")
    return value


def _parse_speeds(raw, where: str) -> tuple[SpeedProfile, ...]:
    if not isinstance(raw, list):
        raise ConfigError(f"{where} must be a list of [wpm, farnsworth] pairs")
    speeds = []
    for i, pair in enumerate(raw):
        if not isinstance(pair, (list, tuple)) or len(pair) != 2:
            raise ConfigError(f"{where}[{i}] must be a [wpm, farnsworth] pair, got {pair!r}")
        wpm = _parse_int(pair[0], f"{where}[{i}] wpm")
        farnsworth = _parse_int(pair[1], f"{where}[{i}] farnsworth")
        speeds.append(SpeedProfile(wpm=wpm, farnsworth=farnsworth))
    return tuple(speeds)


def _parse_segment(raw, index: int) -> Segment:
    where = f"segments[{index}]"
    if not isinstance(raw, dict):
        raise ConfigError(f"{where} must be an object")
    name = _require(raw, "name", where)
    if not isinstance(name, (str, int)) or isinstance(name, bool):
        raise ConfigError(f"{where}.name must be a string, got {name!r}")
    fields = {}
    for key in _SEGMENT_LIST_FIELDS:
        values = raw.get(key, [])
        if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
            raise ConfigError(f"{where}.{key} must be a list of strings")
        fields[key] = tuple(values)
    return Segment(name=str(name), **fields)


def parse_config(data: dict) -> TrainingConfig:
    """Build a TrainingConfig from the decoded JSON mapping.

    Keys follow the configuration file format (camelCase); see
    configs/cwops_beginner.json for a complete example.
    """
    if not isinstance(data, dict):
        raise ConfigError("Config root must be an object")

    raw_segments = _require(data, "segments", "config")
    if not isinstance(raw_segments, list):
        raise ConfigError("segments must be a list")
    segments = tuple(_parse_segment(s, i) for i, s in enumerate(raw_segments))

    output = _require(data, "output", "config")
    if not isinstance(output, dict):
        raise ConfigError("output must be an object")
    manifest = output.get("manifest")
    settings = OutputSettings(
        segment_dir=str(_require(output, "segmentDir", "output")),
        icrt_dir=str(_require(output, "icrtDir", "output")),
        segment_speeds=_parse_speeds(output.get("segmentSpeeds", []), "output.segmentSpeeds"),
        icrt_speeds=_parse_speeds(output.get("icrtSpeeds", []), "output.icrtSpeeds"),
        bitrate=str(output.get("bitrate", OUTPUT_BITRATE)),
        manifest=str(manifest) if manifest else None,
    )

    config = TrainingConfig(
        segments=segments,
        repetition=_parse_int(_require(data, "repetition", "config"), "repetition"),
        target_segment_length=_parse_int(
            _require(data, "targetSegmentLength", "config"), "targetSegmentLength"
        ),
        target_icrt_length=_parse_int(
            _require(data, "targetICRTLength", "config"), "targetICRTLength"
        ),
        output=settings,
    )
    validate_config(config)
    return config


def validate_config(config: TrainingConfig) -> None:
    """Check invariants that every downstream step relies on.

    Raises ConfigError describing the first violation found.
    """
    if config.repetition < 1:
        raise ConfigError(f"repetition must be >= 1, got {config.repetition}")
    if config.target_segment_length < 0:
        raise ConfigError("targetSegmentLength must be >= 0")
    if config.target_icrt_length < 0:
        raise ConfigError("targetICRTLength must be >= 0")

    seen = set()
    for seg in config.segments:
        if not seg.name:
            raise ConfigError("Segment name must not be empty")
        if os.sep in seg.name or (os.altsep and os.altsep in seg.name):
            raise ConfigError(f"Segment name must not contain a path separator: {seg.name!r}")
        if seg.name in seen:
            raise ConfigError(f"Duplicate segment name: {seg.name!r}")
        seen.add(seg.name)

        for ch in seg.characters:
            if len(ch) != 1:
                raise ConfigError(f"Segment {seg.name!r}: characters must be single characters, got {ch!r}")
        # Wrapped phrases are never empty, bare words and callsigns may be
        has_tokens = any(seg.words) or any(seg.callsigns) or bool(seg.phrases)
        if config.target_segment_length > 0 and not has_tokens:
            raise ConfigError(f"Segment {seg.name!r} has no words, callsigns or phrases")
        if config.target_icrt_length > 0 and not seg.characters:
            raise ConfigError(f"Segment {seg.name!r} has no characters for ICRT drills")

    for where, speeds in (
        ("segmentSpeeds", config.output.segment_speeds),
        ("icrtSpeeds", config.output.icrt_speeds),
    ):
        for profile in speeds:
            if profile.wpm <= 0 or profile.farnsworth <= 0:
                raise ConfigError(f"{where}: speeds must be positive, got {profile.suffix}")
            if profile.farnsworth > profile.wpm:
                raise ConfigError(
                    f"{where}: farnsworth speed must not exceed wpm, got {profile.suffix}"
                )
