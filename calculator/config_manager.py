# config_manager.py
import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

config_json = Path(__file__).resolve().parent.parent / "config.json"
ui_strings = Path(__file__).resolve().parent.parent / "ui_strings.json"


# Used whenever config.json is missing, unreadable or lacks a key
DEFAULT_SETTINGS = {
    "darkmode": False,
    "after_paste_enter": False,
    "show_equation": True,
    "max_nesting_depth": 100,
}

DEFAULT_DESCRIPTIONS = {
    "darkmode": "Dark mode",
    "after_paste_enter": "Calculate directly after pasting",
    "show_equation": "Show the expression next to the result",
    "max_nesting_depth": "Maximum bracket depth",
}


def _read_json(path):
    try:
        with open(path, 'r', encoding= 'utf-8') as f:
            return json.load(f)

    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.debug("Could not read %s: %s", path, e)
        return {}


def load_setting_value(key_value, path=None):
    settings_dict = dict(DEFAULT_SETTINGS)
    settings_dict.update(_read_json(path or config_json))

    if key_value == "all":
        return settings_dict

    else:
        return settings_dict.get(key_value, 0)


def load_setting_description(key_value, path=None):
    settings_dict = dict(DEFAULT_DESCRIPTIONS)
    settings_dict.update(_read_json(path or ui_strings))

    if key_value == "all":
        return settings_dict

    else:
        return settings_dict.get(key_value, 0)




def save_setting(settings_dict, path=None):
    try:
        with open (path or config_json, 'w', encoding= 'utf-8') as f:
            json.dump(settings_dict, f, indent=4)
            return settings_dict

    except (OSError, TypeError) as e:
        logger.error("Settings could not be saved: %s", e)
        return{}


def load_nesting_depth(path=None):
    """Return the max_nesting_depth setting, or the default if the stored value is unusable."""
    limit = load_setting_value("max_nesting_depth", path)
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        logger.warning("Ignoring invalid max_nesting_depth setting: %r", limit)
        return DEFAULT_SETTINGS["max_nesting_depth"]
    return limit
