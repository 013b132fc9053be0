from __future__ import annotations

from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]


def _stages() -> list[list[str]]:
    stages: list[list[str]] = []
    for line in (ROOT / "Dockerfile").read_text(encoding="utf-8").splitlines():
        if line.startswith("FROM "):
            stages.append([])
        if stages:
            stages[-1].append(line.strip())
    return stages


def test_two_stage_build():
    stages = _stages()
    assert len(stages) == 2
    assert stages[0][0].endswith(" AS builder")


def test_builder_copies_manifest_lockfile_and_sources():
    builder = "\n".join(_stages()[0])
    assert "COPY pyproject.toml requirements.lock ./" in builder
    for source in ("main.py", "core", "modules", "web"):
        assert f"COPY {source} " in builder


def test_builder_uses_cache_mounts():
    builder = "\n".join(_stages()[0])
    assert "--mount=type=cache,target=/root/.cache/pip" in builder
    assert "--mount=type=cache,target=/app/build" in builder


def test_runtime_ships_static_assets_and_program():
    runtime = _stages()[1]
    assert "COPY static static" in runtime
    assert "COPY --from=builder /opt/venv /opt/venv" in runtime
    assert runtime[-1] == 'ENTRYPOINT ["/opt/venv/bin/prosze-hackowac"]'


def test_bundled_assets_and_manifests_exist():
    assert (ROOT / "static" / "index.html").is_file()
    assert (ROOT / "pyproject.toml").is_file()
    assert (ROOT / "requirements.lock").is_file()
