
from contextlib import suppress
from importlib import metadata
from pathlib import Path


def get_version() -> str:
    with suppress(metadata.PackageNotFoundError):
        return metadata.version("zenkit")

    # Running from a checkout without an installed distribution.
    with suppress(OSError, ValueError):
        import tomllib

        pyproject = Path(__file__).resolve().parents[1] / "pyproject.toml"
        if pyproject.exists():
            version = tomllib.loads(pyproject.read_text(encoding="utf-8")).get("project", {}).get("version")
            if isinstance(version, str) and version:
                return version

    return "0.0.0"


def user_agent() -> str:
    """User-Agent value sent with every request, e.g. ``zenkit py 0.3.0``."""
    return f"zenkit py {get_version()}"
