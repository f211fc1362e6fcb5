"""Rendered manifest I/O — parsing, indexing, writing, warnings."""

import sys
from pathlib import Path

import yaml


def parse_manifests(rendered_dir: str) -> dict[str, list[dict]]:
    """Load all YAML files from rendered_dir, classify by kind."""
    manifests: dict[str, list[dict]] = {}
    rendered = Path(rendered_dir)
    for yaml_file in sorted(rendered.rglob("*.yaml")):
        with open(yaml_file, encoding="utf-8") as f:
            for doc in yaml.safe_load_all(f):
                if not doc or not isinstance(doc, dict):
                    continue
                kind = doc.get("kind", "Unknown")
                manifests.setdefault(kind, []).append(doc)
    return manifests


def index_secrets(manifests: dict[str, list[dict]]) -> dict[str, dict]:
    """Index Secret manifests by name for key lookup."""
    return {m["metadata"]["name"]: m for m in manifests.get("Secret", [])
            if "name" in (m.get("metadata") or {})}


def write_manifests(manifests: dict[str, list[dict]], path: str) -> None:
    """Write all manifests to one multi-document YAML file."""
    docs = [m for items in manifests.values() for m in items]
    with open(path, "w", encoding="utf-8") as f:
        f.write("# Generated by catrust — do not edit manually\n")
        yaml.safe_dump_all(docs, f, default_flow_style=False, sort_keys=False,
                           explicit_start=True)
    print(f"Wrote {path}", file=sys.stderr)


def emit_warnings(warnings: list[str]) -> None:
    """Print all warnings to stderr."""
    for w in warnings:
        print(f"⚠ {w}", file=sys.stderr)
