import json
import logging

from familysync.config import DEFAULTS, load_config, save_config


def test_missing_file_gives_defaults(tmp_path):
    cfg = load_config(str(tmp_path / 'none.json'))
    assert cfg == DEFAULTS
    # Defaults dürfen nicht mitverändert werden
    cfg['occurrence_count'] = 99
    assert DEFAULTS['occurrence_count'] == 5


def test_save_and_load_merges_defaults(tmp_path):
    path = str(tmp_path / 'cfg.json')
    save_config({'occurrence_count': 8, 'export_dir': str(tmp_path)}, path)
    cfg = load_config(path)
    assert cfg['occurrence_count'] == 8
    assert cfg['export_dir'] == str(tmp_path)
    assert cfg['default_age_group'] == 'preschool'
    with open(path, encoding='utf-8') as f:
        assert json.load(f)['occurrence_count'] == 8


def test_corrupt_file_is_logged(tmp_path, caplog):
    path = tmp_path / 'cfg.json'
    path.write_text('{not json', encoding='utf-8')
    with caplog.at_level(logging.WARNING):
        cfg = load_config(str(path))
    assert cfg == DEFAULTS
    assert 'Could not read config' in caplog.text
