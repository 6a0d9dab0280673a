import json
import logging
import os

DEFAULTS = {
    'occurrence_count': 5,
    'default_age_group': 'preschool',
    'db_path': None,       # None -> ~/.familysync/familysync.db
    'export_dir': None,    # None -> aktuelles Verzeichnis
}


def _config_path():
    base = os.path.join(os.path.expanduser('~'), '.familysync')
    os.makedirs(base, exist_ok=True)
    return os.path.join(base, 'familysync_config.json')


def load_config(path: str = None) -> dict:
    path = path or _config_path()
    cfg = dict(DEFAULTS)
    if not os.path.exists(path):
        return cfg
    try:
        with open(path, 'r', encoding='utf-8') as f:
            stored = json.load(f)
    except (OSError, ValueError) as e:
        logging.warning(f"Could not read config {path}, using defaults: {e}")
        return cfg
    if isinstance(stored, dict):
        cfg.update(stored)
    return cfg


def save_config(cfg: dict, path: str = None):
    path = path or _config_path()
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(cfg, f, ensure_ascii=False, indent=2)
