"""Data models for CW practice material."""

from dataclasses import dataclass, field

from cw_trainer.constants import OUTPUT_BITRATE

# Text artifact kinds
KIND_REPETITIVE = "repetitive"
KIND_SINGLE = "single"
KIND_DRILL_NEW = "drill-new"
KIND_DRILL_CUMULATIVE = "drill-cumulative"


@dataclass(frozen=True)
class Segment:
    name: str                            # unique, used verbatim in filenames
    words: tuple[str, ...] = ()
    callsigns: tuple[str, ...] = ()
    phrases: tuple[str, ...] = ()
    characters: tuple[str, ...] = ()     # single characters for ICRT drills


@dataclass(frozen=True)
class SpeedProfile:
    wpm: int           # character speed
    farnsworth: int    # effective speed, <= wpm

    @property
    def suffix(self) -> str:
        """Filename tag, e.g. "25@10"."""
        return f"{self.wpm}@{self.farnsworth}"


@dataclass(frozen=True)
class OutputSettings:
    segment_dir: str
    icrt_dir: str
    segment_speeds: tuple[SpeedProfile, ...] = ()
    icrt_speeds: tuple[SpeedProfile, ...] = ()
    bitrate: str = OUTPUT_BITRATE
    manifest: str | None = None          # optional run manifest path


@dataclass(frozen=True)
class TrainingConfig:
    segments: tuple[Segment, ...]
    repetition: int
    target_segment_length: int
    target_icrt_length: int
    output: OutputSettings


@dataclass(frozen=True)
class TextArtifact:
    segment: str
    kind: str          # one of the KIND_* values
    path: str


@dataclass
class RenderFailure:
    source: str        # text artifact path
    profile: SpeedProfile
    error_kind: str
    message: str


@dataclass
class RenderReport:
    rendered: list[str] = field(default_factory=list)
    failures: list[RenderFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def failures_by_kind(self) -> dict[str, list[RenderFailure]]:
        """Group failures by error kind, preserving first-seen order."""
        grouped: dict[str, list[RenderFailure]] = {}
        for failure in self.failures:
            grouped.setdefault(failure.error_kind, []).append(failure)
        return grouped


@dataclass
class ProductionReport:
    text_artifacts: list[TextArtifact] = field(default_factory=list)
    render: RenderReport = field(default_factory=RenderReport)
    manifest_path: str | None = None
