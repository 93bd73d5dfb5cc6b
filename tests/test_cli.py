"""CLI tests for remap and check subcommands."""

import json
from pathlib import Path
import sys

import pytest
import yaml

from crdremap import cli


MANIFEST = """\
apiVersion: apiextensions.k8s.io/v1
kind: CustomResourceDefinition
metadata:
  name: legacy.example.com
spec:
  group: example.com
  versions:
  - name: v1
---
apiVersion: apiextensions.k8s.io/v1
kind: CustomResourceDefinition
metadata:
  name: modern.example.com
spec:
  group: example.com
  versions:
  - name: v1
    schema:
      openAPIV3Schema:
        type: object
status:
  conditions:
  - type: Established
    status: "True"
---
apiVersion: v1
kind: ConfigMap
metadata:
  name: cfg
"""


def _run_cli(args, monkeypatch):
    monkeypatch.setattr(sys, "argv", ["crdremap"] + args)
    return cli.main()


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_remap_to_stdout(monkeypatch, capsys, tmp_path):
    manifest = _write(tmp_path / "crds.yaml", MANIFEST)
    _run_cli(["remap", "--in", str(manifest)], monkeypatch)

    docs = list(yaml.safe_load_all(capsys.readouterr().out))
    assert [d["apiVersion"] for d in docs] == [
        "apiextensions.k8s.io/v1beta1",
        "apiextensions.k8s.io/v1",
        "v1",
    ]


def test_remap_to_file_with_report(monkeypatch, capsys, tmp_path):
    manifest = _write(tmp_path / "crds.yaml", MANIFEST)
    out = tmp_path / "out" / "crds.json"
    report = tmp_path / "report.json"

    _run_cli(
        ["remap", "--in", str(manifest), "--out", str(out), "--format", "json", "--report", str(report)],
        monkeypatch,
    )

    docs = json.loads(out.read_text(encoding="utf-8"))
    assert docs[0]["apiVersion"] == "apiextensions.k8s.io/v1beta1"
    assert "[OK] Remapped 1 of 2 CRDs" in capsys.readouterr().err

    decisions = json.loads(report.read_text(encoding="utf-8"))["decisions"]
    assert [d["crd_name"] for d in decisions] == ["legacy.example.com", "modern.example.com"]
    assert decisions[0]["reasons"] == ["SCHEMA_ABSENT"]
    assert decisions[1]["remapped"] is False


def test_check_prints_decisions(monkeypatch, capsys, tmp_path):
    manifest = _write(tmp_path / "crds.yaml", MANIFEST)
    _run_cli(["check", "--in", str(manifest)], monkeypatch)

    out = capsys.readouterr().out
    assert "REMAP\tlegacy.example.com\tapiextensions.k8s.io/v1beta1\tSCHEMA_ABSENT" in out
    assert "KEEP\tmodern.example.com\tapiextensions.k8s.io/v1\t-" in out
    assert "CRDs: 2  Remapped: 1  Skipped: 1" in out


def test_check_quiet(monkeypatch, capsys, tmp_path):
    manifest = _write(tmp_path / "crds.yaml", MANIFEST)
    _run_cli(["check", "--in", str(manifest), "--quiet"], monkeypatch)
    assert capsys.readouterr().out == ""


def test_projection_error_exits_1(monkeypatch, capsys, tmp_path):
    manifest = _write(tmp_path / "bad.json", json.dumps({
        "apiVersion": "apiextensions.k8s.io/v1",
        "kind": "CustomResourceDefinition",
        "spec": {"versions": "not-a-list"},
    }))

    with pytest.raises(SystemExit) as excinfo:
        _run_cli(["remap", "--in", str(manifest)], monkeypatch)

    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert "unable to convert unstructured item to CRD" in err
    assert "spec.versions" in err


def test_missing_input_exits_2(monkeypatch, capsys, tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        _run_cli(["check", "--in", str(tmp_path / "missing.yaml")], monkeypatch)
    assert excinfo.value.code == 2
    assert "Manifest not found" in capsys.readouterr().err


def test_no_command_prints_help(monkeypatch, capsys):
    with pytest.raises(SystemExit) as excinfo:
        _run_cli([], monkeypatch)
    assert excinfo.value.code == 1
    assert "usage: crdremap" in capsys.readouterr().out


TIMESTAMPED = """\
apiVersion: apiextensions.k8s.io/v1
kind: CustomResourceDefinition
metadata:
  name: legacy.example.com
  creationTimestamp: 2020-01-01T00:00:00Z
spec:
  versions:
  - name: v1
"""


def test_remap_keeps_timestamps_as_json(monkeypatch, capsys, tmp_path):
    manifest = _write(tmp_path / "crds.yaml", TIMESTAMPED)
    _run_cli(["remap", "--in", str(manifest), "--format", "json"], monkeypatch)

    doc = json.loads(capsys.readouterr().out)
    assert doc["apiVersion"] == "apiextensions.k8s.io/v1beta1"
    assert doc["metadata"]["creationTimestamp"] == "2020-01-01T00:00:00Z"


def test_remap_keeps_timestamps_as_yaml(monkeypatch, capsys, tmp_path):
    manifest = _write(tmp_path / "crds.yaml", TIMESTAMPED)
    _run_cli(["remap", "--in", str(manifest)], monkeypatch)

    out = capsys.readouterr().out
    assert "2020-01-01T00:00:00Z" in out
    assert "2020-01-01 00:00:00" not in out


def test_remap_keeps_list_wrapper(monkeypatch, capsys, tmp_path):
    crd = yaml.safe_load(MANIFEST.split("---")[0])
    manifest = _write(tmp_path / "list.json", json.dumps({"apiVersion": "v1", "kind": "List", "items": [crd]}))

    _run_cli(["remap", "--in", str(manifest)], monkeypatch)

    out = json.loads(capsys.readouterr().out)
    assert out["kind"] == "List"
    assert [i["apiVersion"] for i in out["items"]] == ["apiextensions.k8s.io/v1beta1"]
