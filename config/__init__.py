import os

_ENVIRONMENTS = {
    "prod": "config.production",
    "production": "config.production",
    "test": "config.testing",
    "testing": "config.testing",
    "dev": "config.development",
    "development": "config.development",
}


def get_settings_module() -> str:
    """Dotted path of the settings module for this process.

    ``SETTINGS_MODULE`` wins when set; otherwise ``APP_ENV`` picks one of the
    bundled environments, falling back to development.
    """
    explicit = os.getenv("SETTINGS_MODULE", "").strip()
    if explicit:
        return explicit
    env = os.getenv("APP_ENV", "development").strip().lower()
    return _ENVIRONMENTS.get(env, "config.development")
