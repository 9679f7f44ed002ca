import os
from pathlib import Path

DEFAULT_CONFIGFILE = "hyclock.yaml"


def get_configfile(raw: str | None = None) -> Path | None:
    # Priority: CLI > ENV > default file in current working directory
    raw = raw or os.getenv("HYCLOCK_CONFIG")

    if raw is None:
        file = Path.cwd() / DEFAULT_CONFIGFILE
        return file if file.is_file() else None

    file = Path(raw)
    if not file.is_file():
        raise SystemExit(
            f"[config] Configuration file not found: '{file}'.\n"
            "  - Use --config <file.yaml>\n"
            "  - Or set the HYCLOCK_CONFIG environment variable\n"
            f"  - Or place a '{DEFAULT_CONFIGFILE}' file in the current working directory."
        )

    return file
