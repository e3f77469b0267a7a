import importlib
import os
from types import ModuleType
from typing import Optional

_SETTINGS_MODULES = {
    "development": "config.development",
    "dev": "config.development",
    "testing": "config.testing",
    "test": "config.testing",
    "production": "config.production",
    "prod": "config.production",
}


def get_settings_module(env: Optional[str] = None) -> str:
    """Dotted path of the settings module for ``env``, or for APP_ENV when omitted."""
    name = (env or os.getenv("APP_ENV") or "development").strip().lower()
    try:
        return _SETTINGS_MODULES[name]
    except KeyError:
        known = ", ".join(sorted(_SETTINGS_MODULES))
        raise ValueError(f"Unknown APP_ENV {name!r}; expected one of: {known}") from None


def load_settings(env: Optional[str] = None) -> ModuleType:
    return importlib.import_module(get_settings_module(env))
