from __future__ import annotations

import json
import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Mapping, Protocol, Sequence

logger = logging.getLogger("automerge.registry")

ProbeResult = tuple[bool, str]
Probe = Callable[[str, str], ProbeResult]


class RegistrySnapshot(Protocol):
    """Read-only view of the target registry with the proposed changes applied."""

    def package_names(self) -> frozenset[str]: ...

    def existing_package_names(self) -> frozenset[str]:
        """Names registered before this submission, excluding the proposed package."""
        ...

    def dependencies(self, package: str, version: str) -> tuple[str, ...]: ...

    def compat(self, package: str, version: str) -> Mapping[str, str]: ...

    def is_stdlib(self, name: str) -> bool: ...

    def can_install(self, package: str, version: str) -> ProbeResult: ...

    def can_load(self, package: str, version: str) -> ProbeResult: ...


@dataclass(frozen=True, slots=True)
class StaticProbe:
    """Probe that passes unless ``"<package>@<version>"`` is listed in ``failures``."""

    action: str
    failures: Mapping[str, str] = field(default_factory=dict)

    def __call__(self, package: str, version: str) -> ProbeResult:
        key = f"{package}@{version}"
        if key in self.failures:
            return False, f"Version {version} of package {package} could not be {self.action}: {self.failures[key]}"
        return True, ""


@dataclass(frozen=True, slots=True)
class CommandProbe:
    """Run a command template (``{package}``/``{version}`` placeholders) and pass on exit code 0."""

    action: str
    command: tuple[str, ...]
    timeout_seconds: float = 1800.0
    cwd: str | None = None

    def __call__(self, package: str, version: str) -> ProbeResult:
        argv = [part.format(package=package, version=version) for part in self.command]
        logger.info("probe %s: %s", self.action, " ".join(argv))
        try:
            proc = subprocess.run(
                argv,
                cwd=self.cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds,
                check=False,
            )
        except subprocess.TimeoutExpired:
            return False, (
                f"Version {version} of package {package} could not be {self.action}: "
                f"timed out after {self.timeout_seconds:g}s"
            )
        except OSError as exc:
            return False, f"Version {version} of package {package} could not be {self.action}: {exc}"

        if proc.returncode == 0:
            return True, ""
        tail = "\n".join((proc.stderr or proc.stdout or "").strip().splitlines()[-20:])
        return False, (
            f"Version {version} of package {package} could not be {self.action} "
            f"(exit code {proc.returncode}).\n```\n{tail}\n```"
        )


@dataclass(frozen=True, slots=True)
class InMemoryRegistry:
    packages: frozenset[str]
    deps: Mapping[str, Mapping[str, tuple[str, ...]]] = field(default_factory=dict)
    compat_entries: Mapping[str, Mapping[str, Mapping[str, str]]] = field(default_factory=dict)
    stdlibs: frozenset[str] = frozenset()
    install_probe: Probe = field(default_factory=lambda: StaticProbe("installed"))
    load_probe: Probe = field(default_factory=lambda: StaticProbe("loaded"))
    base_packages: frozenset[str] | None = None

    def package_names(self) -> frozenset[str]:
        return self.packages

    def existing_package_names(self) -> frozenset[str]:
        if self.base_packages is None:
            return self.packages
        return self.base_packages

    def dependencies(self, package: str, version: str) -> tuple[str, ...]:
        return tuple(self.deps.get(package, {}).get(version, ()))

    def compat(self, package: str, version: str) -> Mapping[str, str]:
        return dict(self.compat_entries.get(package, {}).get(version, {}))

    def is_stdlib(self, name: str) -> bool:
        return name in self.stdlibs

    def can_install(self, package: str, version: str) -> ProbeResult:
        return self.install_probe(package, version)

    def can_load(self, package: str, version: str) -> ProbeResult:
        return self.load_probe(package, version)

    @classmethod
    def from_json(cls, path: Path | str) -> "InMemoryRegistry":
        """Load a registry snapshot file.

        Expected keys: ``packages`` (list, after the change), ``base_packages``
        (list, before the change; defaults to ``packages``), ``deps`` and ``compat`` (nested by
        package then version), ``stdlibs`` (list), and either
        ``install_command``/``load_command`` argv templates or
        ``install_failures``/``load_failures`` maps keyed ``"<pkg>@<version>"``.
        """
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(payload, dict):
            raise ValueError(f"registry snapshot must be a JSON object: {path}")

        return cls(
            packages=frozenset(payload.get("packages", [])),
            deps={
                pkg: {ver: tuple(names) for ver, names in versions.items()}
                for pkg, versions in payload.get("deps", {}).items()
            },
            compat_entries={
                pkg: {ver: dict(entries) for ver, entries in versions.items()}
                for pkg, versions in payload.get("compat", {}).items()
            },
            stdlibs=frozenset(payload.get("stdlibs", [])),
            install_probe=_probe_from_payload(payload, "install", "installed"),
            load_probe=_probe_from_payload(payload, "load", "loaded"),
            base_packages=frozenset(payload["base_packages"]) if "base_packages" in payload else None,
        )


def _probe_from_payload(payload: dict, prefix: str, action: str) -> Probe:
    command: Sequence[str] | None = payload.get(f"{prefix}_command")
    if command:
        return CommandProbe(action=action, command=tuple(command))
    return StaticProbe(action=action, failures=dict(payload.get(f"{prefix}_failures", {})))
