"""Tests for the run manifest."""

import json
import os

from cw_trainer.exporter import export_manifest
from cw_trainer.models import RenderFailure, RenderReport, SpeedProfile, TextArtifact


def _report():
    return RenderReport(
        rendered=["out/segments/segment_A_2x_25@15.mp3"],
        failures=[RenderFailure(
            "out/icrt/icrt_A_new.txt", SpeedProfile(25, 25), "external_tool", "boom",
        )],
    )


def _artifacts():
    return [TextArtifact("A", "repetitive", "out/segments/segment_A_2x.txt")]


def test_manifest_written(tmp_path, make_config):
    path = str(tmp_path / "nested" / "output.json")
    result = export_manifest(path, make_config(), _artifacts(), _report())
    assert result == path
    assert os.path.exists(path)


def test_manifest_has_required_fields(tmp_path, make_config):
    path = str(tmp_path / "output.json")
    export_manifest(path, make_config(), _artifacts(), _report())
    with open(path) as f:
        data = json.load(f)
    for field in ["generated_at", "producer_version", "settings", "text_artifacts",
                  "audio_artifacts", "failures", "stats"]:
        assert field in data, f"Missing field: {field}"


def test_manifest_contents(tmp_path, make_config):
    path = str(tmp_path / "output.json")
    config = make_config()
    export_manifest(path, config, _artifacts(), _report())
    with open(path) as f:
        data = json.load(f)
    assert data["settings"]["repetition"] == 2
    assert data["settings"]["segment_speeds"] == [[25, 15]]
    assert data["text_artifacts"][0] == {
        "segment": "A", "kind": "repetitive", "path": "out/segments/segment_A_2x.txt",
    }
    assert data["failures"][0]["speed"] == "25@25"
    assert data["failures"][0]["error_kind"] == "external_tool"
    assert data["stats"] == {
        "segments": 2, "text_files": 1, "audio_files": 1, "failures": 1,
    }
