import logging
import os

import yaml
import constants as cv


USER_SPECS_DATA = os.path.join(cv.PROJECT_DIR, cv.USER_SPECS_DATA)

logger = logging.getLogger(__name__)


def load_user_specs(path=USER_SPECS_DATA):
    """Load the YAML user specs, returning an empty dict if the file is absent"""
    if not os.path.exists(path):
        return {}
    with open(path, 'r') as file:
        user_specs = yaml.safe_load(file)
    if user_specs is None:
        return {}
    if not isinstance(user_specs, dict):
        raise ValueError(f"Invalid user specs in {path}: expected a mapping")
    return user_specs


def _resolve_path(value, default):
    if not value:
        return default
    value = os.path.expanduser(str(value))
    if os.path.isabs(value):
        return value
    return os.path.join(cv.PROJECT_DIR, value)


def get_database_path(user_specs=None):
    if user_specs is None:
        user_specs = load_user_specs()
    return _resolve_path(user_specs.get('database'), cv.DB_PATH)


def get_log_path(user_specs=None):
    if user_specs is None:
        user_specs = load_user_specs()
    return _resolve_path(user_specs.get('log_file'), cv.LOG_PATH)


def get_log_level(user_specs=None):
    if user_specs is None:
        user_specs = load_user_specs()
    return str(user_specs.get('log_level', cv.LOG_LEVEL)).upper()
