"""Write the run manifest describing what was produced."""

import json
import os
from datetime import datetime, timezone

from cw_trainer.constants import VERSION
from cw_trainer.models import RenderReport, TextArtifact, TrainingConfig


def export_manifest(
    path: str,
    config: TrainingConfig,
    text_artifacts: list[TextArtifact],
    render: RenderReport,
) -> str:
    """Write a provenance manifest to path.

    Records settings, every text and audio artifact, and failed renders.
    Returns the manifest path.
    """
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)

    out = config.output
    manifest = {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "producer_version": VERSION,
        "settings": {
            "repetition": config.repetition,
            "target_segment_length": config.target_segment_length,
            "target_icrt_length": config.target_icrt_length,
            "segment_speeds": [[p.wpm, p.farnsworth] for p in out.segment_speeds],
            "icrt_speeds": [[p.wpm, p.farnsworth] for p in out.icrt_speeds],
            "bitrate": out.bitrate,
        },
        "text_artifacts": [
            {"segment": a.segment, "kind": a.kind, "path": a.path}
            for a in text_artifacts
        ],
        "audio_artifacts": list(render.rendered),
        "failures": [
            {
                "source": f.source,
                "speed": f.profile.suffix,
                "error_kind": f.error_kind,
                "message": f.message,
            }
            for f in render.failures
        ],
        "stats": {
            "segments": len(config.segments),
            "text_files": len(text_artifacts),
            "audio_files": len(render.rendered),
            "failures": len(render.failures),
        },
    }

    with open(path, "w") as f:
        json.dump(manifest, f, indent=2)
    return path
