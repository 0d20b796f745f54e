from importlib import metadata

try:
    OPENREF_VERSION = metadata.version("openref")
except metadata.PackageNotFoundError:
    # Local run without installation
    OPENREF_VERSION = "dev"
