"""
Tests for the headless merge CLI.
"""
import json
import pytest

import headless
from constants import FLAG_SCOPE

from conftest import CELLAR_ID, KEEP_ID


def read_scenes(path):
    with open(path, encoding='utf-8') as f:
        return json.load(f)['scenes']


class TestLoadLayout:

    def test_load_layout(self, layout_file):
        layouts = headless.load_layout(str(layout_file))
        assert [(l.scene_id, l.x, l.y) for l in layouts] == [(CELLAR_ID, 100, 300), (KEEP_ID, 2100, 50)]

    def test_not_a_list(self, tmp_path):
        path = tmp_path / 'bad.json'
        path.write_text('{"sceneId": "x"}', encoding='utf-8')
        with pytest.raises(ValueError):
            headless.load_layout(str(path))

    def test_incomplete_entry(self, tmp_path):
        path = tmp_path / 'bad.json'
        path.write_text('[{"sceneId": "x", "x": 1}]', encoding='utf-8')
        with pytest.raises(ValueError):
            headless.load_layout(str(path))

    def test_entry_without_scene_id(self, tmp_path):
        path = tmp_path / 'bad.json'
        path.write_text('[{"x": 1, "y": 2, "width": 3, "height": 4}]', encoding='utf-8')
        with pytest.raises(ValueError):
            headless.load_layout(str(path))

    def test_integer_coordinates_kept(self, layout_file):
        entry = headless.load_layout(str(layout_file))[0]
        assert all(isinstance(v, int) for v in (entry.x, entry.y, entry.width, entry.height))


class TestRun:

    def test_merge_in_place(self, world_file, layout_file, capsys):
        code, outcome = headless.run(str(world_file), str(layout_file), name='Fortress')
        assert code == 0

        scenes = read_scenes(world_file)
        assert len(scenes) == 3
        merged = scenes[-1]
        assert merged['name'] == 'Fortress'
        assert merged['flags'][FLAG_SCOPE]['sourceScenes'] == [CELLAR_ID, KEEP_ID]
        assert len(merged['tiles']) == 2

        out = capsys.readouterr().out
        assert 'Warning: Grid size mismatch' in out
        assert 'Created "Fortress"' in out

    def test_output_path(self, world_file, layout_file, tmp_path):
        output = tmp_path / 'merged.json'
        code, _ = headless.run(str(world_file), str(layout_file), output=str(output))
        assert code == 0
        assert len(read_scenes(output)) == 3
        assert len(read_scenes(world_file)) == 2

    def test_missing_world(self, tmp_path, layout_file, capsys):
        code, outcome = headless.run(str(tmp_path / 'nope.json'), str(layout_file))
        assert (code, outcome) == (1, None)
        assert 'Error' in capsys.readouterr().out

    def test_too_few_scenes(self, world_file, tmp_path):
        layout = tmp_path / 'one.json'
        layout.write_text(json.dumps([{'sceneId': CELLAR_ID, 'x': 0, 'y': 0, 'width': 1, 'height': 1}]),
                          encoding='utf-8')
        code, _ = headless.run(str(world_file), str(layout))
        assert code == 1

    def test_unknown_scene_writes_nothing(self, world_file, tmp_path, capsys):
        layout = tmp_path / 'ghost.json'
        layout.write_text(json.dumps([
            {'sceneId': CELLAR_ID, 'x': 0, 'y': 0, 'width': 1, 'height': 1},
            {'sceneId': 'ghost', 'x': 5, 'y': 0, 'width': 1, 'height': 1},
        ]), encoding='utf-8')
        code, _ = headless.run(str(world_file), str(layout))
        assert code == 1
        assert 'ghost' in capsys.readouterr().out
        assert len(read_scenes(world_file)) == 2


def test_main_exit_code(world_file, layout_file):
    with pytest.raises(SystemExit) as exc_info:
        headless.main([str(world_file), str(layout_file), '-n', 'Fortress'])
    assert exc_info.value.code == 0
    assert read_scenes(world_file)[-1]['name'] == 'Fortress'


def test_numeric_scene_id_reports_missing_scene(world_file, tmp_path, capsys):
    layout = tmp_path / 'numeric.json'
    layout.write_text(json.dumps([
        {'sceneId': CELLAR_ID, 'x': 0, 'y': 0, 'width': 1, 'height': 1},
        {'sceneId': 42, 'x': 5, 'y': 0, 'width': 1, 'height': 1},
    ]), encoding='utf-8')
    code, outcome = headless.run(str(world_file), str(layout))
    assert (code, outcome) == (1, None)
    assert 'Error: Could not find scenes: 42' in capsys.readouterr().out
    assert len(read_scenes(world_file)) == 2


def test_layout_without_scene_id_is_an_error(world_file, tmp_path, capsys):
    layout = tmp_path / 'anonymous.json'
    layout.write_text(json.dumps([
        {'sceneId': CELLAR_ID, 'x': 0, 'y': 0, 'width': 1, 'height': 1},
        {'x': 5, 'y': 0, 'width': 1, 'height': 1},
    ]), encoding='utf-8')
    code, _ = headless.run(str(world_file), str(layout))
    assert code == 1
    assert 'Error' in capsys.readouterr().out
