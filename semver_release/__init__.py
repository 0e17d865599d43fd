from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("semver-release")

except PackageNotFoundError:
    __version__ = "0.0.0"  # Fallback version for development
