from pathlib import Path
from unittest.mock import MagicMock

import pytest

from spec_repo.bundle.bundler import bundle
from spec_repo.bundle.options import BundleOptions
from spec_repo.config import PLUGINS_DIR_ENV
from spec_repo.errors import PluginError
from spec_repo.plugins.loader import PluginUnit, discover_plugins, load_plugin
from spec_repo.plugins.pipeline import apply_plugin, find_locations, run_plugins

TAG_PLUGIN = '''
path_expression = "$.paths.*.*"


def init(document, options):
    document.setdefault("x-plugin-log", []).append("init")


def process(parent, key, full_path, document):
    parent[key].setdefault("tags", []).append("generated")
    document["x-plugin-log"].append("/".join(str(p) for p in full_path))


def finish(document):
    document["x-plugin-log"].append("finish")
'''

DECORATE_PLUGIN = '''
path_expression = "$.paths.*.*.tags"


def process(parent, key, full_path, document):
    parent[key] = [tag.upper() for tag in parent[key]]
'''


def _write_plugin(plugins_dir: Path, name: str, source: str) -> None:
    plugins_dir.mkdir(parents=True, exist_ok=True)
    (plugins_dir / f"{name}.py").write_text(source, encoding="utf-8")


def _spec() -> dict:
    return {
        "openapi": "3.0.0",
        "paths": {
            "/pets": {"get": {"summary": "list"}, "post": {"summary": "create"}},
            "/pets/{petId}": {"get": {"summary": "one"}},
        },
    }


class TestDiscovery:
    def test_missing_directory(self, tmp_path):
        assert discover_plugins(tmp_path / "missing") == []

    def test_file_name_order_and_private_files_skipped(self, tmp_path):
        _write_plugin(tmp_path, "b_decorate", DECORATE_PLUGIN)
        _write_plugin(tmp_path, "a_tag", TAG_PLUGIN)
        _write_plugin(tmp_path, "_helpers", "VALUE = 1\n")

        units = discover_plugins(tmp_path)
        assert [u.name for u in units] == ["a_tag", "b_decorate"]
        assert units[0].init is not None and units[0].finish is not None
        assert units[1].init is None and units[1].finish is None

    def test_plugin_without_process(self, tmp_path):
        _write_plugin(tmp_path, "broken", 'path_expression = "$.paths"\n')
        with pytest.raises(PluginError, match="path_expression"):
            load_plugin(tmp_path / "broken.py")

    def test_modules_loaded_fresh(self, tmp_path):
        _write_plugin(tmp_path, "tag", TAG_PLUGIN)
        first = discover_plugins(tmp_path)[0]
        second = discover_plugins(tmp_path)[0]
        assert first.process is not second.process


class TestFindLocations:
    def test_document_order(self):
        assert find_locations(_spec(), "$.paths.*.*") == [
            ["$", "paths", "/pets", "get"],
            ["$", "paths", "/pets", "post"],
            ["$", "paths", "/pets/{petId}", "get"],
        ]

    def test_list_indices(self):
        spec = {"servers": [{"url": "a"}, {"url": "b"}]}
        assert find_locations(spec, "$.servers[*].url") == [
            ["$", "servers", 0, "url"],
            ["$", "servers", 1, "url"],
        ]

    def test_invalid_expression(self):
        with pytest.raises(PluginError):
            find_locations(_spec(), "$.paths[?(")


class TestPipeline:
    def test_lifecycle_order(self, tmp_path):
        _write_plugin(tmp_path, "tag", TAG_PLUGIN)
        spec = _spec()
        run_plugins(spec, None, tmp_path)
        assert spec["x-plugin-log"] == [
            "init",
            "$/paths//pets/get",
            "$/paths//pets/post",
            "$/paths//pets/{petId}/get",
            "finish",
        ]
        assert spec["paths"]["/pets"]["get"]["tags"] == ["generated"]

    def test_later_plugins_see_earlier_mutations(self, tmp_path):
        _write_plugin(tmp_path, "a_tag", TAG_PLUGIN)
        _write_plugin(tmp_path, "b_decorate", DECORATE_PLUGIN)
        spec = _spec()
        run_plugins(spec, None, tmp_path)
        assert spec["paths"]["/pets/{petId}"]["get"]["tags"] == ["GENERATED"]

    def test_process_arguments(self):
        process = MagicMock()
        unit = PluginUnit(name="mock", path_expression="$.paths['/pets'].get", process=process)
        spec = _spec()
        apply_plugin(unit, spec)
        process.assert_called_once_with(
            spec["paths"]["/pets"], "get", ["$", "paths", "/pets", "get"], spec
        )

    def test_match_removed_by_earlier_match_is_skipped(self):
        def process(parent, key, full_path, document):
            document["paths"].pop("/pets/{petId}", None)
            seen.append(key)

        seen = []
        unit = PluginUnit(name="prune", path_expression="$.paths.*.get", process=process)
        apply_plugin(unit, _spec())
        assert seen == ["get"]

    def test_init_receives_options(self):
        init = MagicMock()
        unit = PluginUnit(name="opts", path_expression="$.nothing", process=MagicMock(), init=init)
        options = BundleOptions(action="put")
        spec = _spec()
        apply_plugin(unit, spec, options)
        init.assert_called_once_with(spec, options)
        unit.process.assert_not_called()

    def test_bundle_uses_environment_plugins_dir(self, tmp_path, monkeypatch):
        plugins_dir = tmp_path / "my-plugins"
        _write_plugin(plugins_dir, "tag", TAG_PLUGIN)
        monkeypatch.setenv(PLUGINS_DIR_ENV, str(plugins_dir))
        (tmp_path / "spec").mkdir()
        (tmp_path / "spec" / "openapi.yaml").write_text(
            "openapi: 3.0.0\npaths:\n  /pets:\n    get: {}\n", encoding="utf-8"
        )

        spec = bundle(BundleOptions(basedir=str(tmp_path / "spec")))
        assert spec["paths"]["/pets"]["get"]["tags"] == ["generated"]

        skipped = bundle(BundleOptions(basedir=str(tmp_path / "spec"), skip_plugins=True))
        assert "tags" not in skipped["paths"]["/pets"]["get"]

    def test_options_plugins_dir(self, tmp_path, monkeypatch):
        monkeypatch.delenv(PLUGINS_DIR_ENV, raising=False)
        monkeypatch.chdir(tmp_path)
        _write_plugin(tmp_path / "myplugins", "tag", TAG_PLUGIN)
        spec = _spec()

        run_plugins(spec, BundleOptions(plugins_dir="myplugins"))
        assert spec["x-plugin-log"][0] == "init"
        assert spec["x-plugin-log"][-1] == "finish"

    def test_environment_wins_over_options_plugins_dir(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        _write_plugin(tmp_path / "myplugins", "tag", TAG_PLUGIN)
        monkeypatch.setenv(PLUGINS_DIR_ENV, str(tmp_path / "empty"))
        spec = _spec()

        run_plugins(spec, BundleOptions(plugins_dir="myplugins"))
        assert "x-plugin-log" not in spec
