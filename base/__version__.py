import tomllib
from importlib import metadata
from pathlib import Path

DISTRIBUTION_NAME = "smart-dms-desktop"


def get_version() -> str:
    pyproject_path = Path(__file__).parent.parent / "pyproject.toml"
    if pyproject_path.exists():
        try:
            with open(pyproject_path, "rb") as f:
                pyproject = tomllib.load(f)
            return pyproject.get("project", {}).get("version", "unknown")
        except (OSError, tomllib.TOMLDecodeError):
            return "unknown"

    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return "unknown"


__version__ = get_version()
