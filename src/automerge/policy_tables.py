from __future__ import annotations

NEW_PACKAGE_REGISTRY_FILES = (
    "Compat.toml",
    "Deps.toml",
    "Package.toml",
    "Versions.toml",
)

ALLOWED_AUTOGENERATED_DEPENDENCIES = frozenset({"Pkg", "Libdl"})


def package_directory(package: str) -> str:
    return f"{package[:1].upper()}/{package}"


def allowed_new_package_files(package: str) -> frozenset[str]:
    """Files a new-package submission is allowed to touch."""
    directory = package_directory(package)
    return frozenset({"Registry.toml"}).union(f"{directory}/{name}" for name in NEW_PACKAGE_REGISTRY_FILES)
