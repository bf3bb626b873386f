"""depgraph-extractor package for building dependency-graph manifests from resolved builds."""


def _get_version() -> str:
    """Get package version with fallback mechanisms."""
    # Method 1: Try importlib.metadata (preferred for installed packages)
    try:
        from importlib.metadata import version

        return version("depgraph-extractor")
    except ImportError:
        pass
    except Exception:
        pass

    # Method 2: Try reading from pyproject.toml directly
    try:
        from pathlib import Path

        import tomllib

        pyproject_path = Path(__file__).parent.parent / "pyproject.toml"
        if pyproject_path.exists():
            with open(pyproject_path, "rb") as f:
                pyproject_data = tomllib.load(f)
            return pyproject_data.get("project", {}).get("version", "unknown")
    except Exception:
        pass

    # Final fallback
    return "unknown"


__version__ = _get_version()
