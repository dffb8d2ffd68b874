"""
PATH: manage.py

Management entrypoint for the repair shop backend.

DJANGO_SETTINGS_MODULE falls back to backend.settings.dev when it is unset or
points at the bare settings package. Production sets backend.settings.prod.
"""

from __future__ import annotations

import os
import sys

DEFAULT_SETTINGS = "backend.settings.dev"


def _ensure_settings_module() -> None:
    current = (os.environ.get("DJANGO_SETTINGS_MODULE") or "").strip()
    if current in ("", "backend.settings"):
        os.environ["DJANGO_SETTINGS_MODULE"] = DEFAULT_SETTINGS


def main() -> None:
    _ensure_settings_module()

    from django.core.management import execute_from_command_line

    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
