"""Host path validation and formatting for volume remaps."""
import re
from dataclasses import dataclass
from pathlib import PureWindowsPath
from typing import Callable, List, Optional, Sequence

from siteremap.models.container import VolumeMapping
from siteremap.models.platform import PathPlatform

PathNormalizer = Callable[[str], str]

_RUNTIME_DRIVE_ALIAS = re.compile(r"^/([A-Za-z])(?:/(.*))?$")


def make_home_normalizer(home_dir) -> PathNormalizer:
    """Return a normalizer that resolves a leading ``~`` to home_dir."""
    home = str(home_dir)

    def normalize(path: str) -> str:
        if path == '~' or path.startswith('~/') or path.startswith('~\\'):
            return home + path[1:]
        return path

    return normalize


def to_runtime_path(path: str, platform: PathPlatform) -> str:
    """Convert a native host path to the form the runtime expects in binds.

    Drive-letter paths become drive aliases: ``C:\\Users\\me`` -> ``/c/Users/me``.
    POSIX paths are returned unchanged.
    """
    if platform != PathPlatform.DRIVE_LETTER:
        return path

    windows_path = PureWindowsPath(path)
    if not windows_path.drive:
        return path.replace('\\', '/')

    rest = str(windows_path)[len(windows_path.anchor):].replace('\\', '/')
    return f"/{windows_path.drive[0].lower()}/{rest}"


def from_runtime_path(path: str, platform: PathPlatform) -> str:
    """Convert a runtime-reported mount source back to a native host path.

    On drive-letter platforms ``/c/Users/me`` becomes ``C:\\Users\\me``.
    """
    if platform != PathPlatform.DRIVE_LETTER:
        return path

    match = _RUNTIME_DRIVE_ALIAS.match(path)
    if not match:
        return path

    drive, rest = match.group(1), match.group(2) or ''
    return f"{drive.upper()}:\\" + rest.replace('/', '\\').rstrip('\\')


def bind_source(source: str, platform: PathPlatform, normalize: PathNormalizer) -> str:
    """Home-normalize a mapping source and format it for the runtime."""
    return to_runtime_path(normalize(source.strip()), platform)


@dataclass(frozen=True)
class PathViolation:
    """A rule broken by one proposed mapping."""
    index: int
    mapping: VolumeMapping
    message: str

    def __str__(self) -> str:
        return f"Volume {self.index + 1} ({self.mapping.source or '<empty>'}): {self.message}"


class PathValidator:
    """Validates proposed host/container path pairs against platform rules."""

    def __init__(self, platform: PathPlatform, normalize: PathNormalizer,
                 user_root: str, external_root: Optional[str] = None):
        """Initialize validator.

        Args:
            platform: Path rule family
            normalize: Resolves home-directory aliases in a source path
            user_root: Per-user root every source must start with
            external_root: Extra allowed source root (POSIX only)
        """
        self.platform = platform
        self.normalize = normalize
        self.user_root = user_root
        self.external_root = external_root

    @classmethod
    def from_config(cls, config) -> "PathValidator":
        """Build a validator from a RemapConfig."""
        return cls(
            platform=config.platform,
            normalize=make_home_normalizer(config.home_dir),
            user_root=config.user_root,
            external_root=config.external_root,
        )

    @property
    def allowed_roots(self) -> List[str]:
        if self.platform == PathPlatform.DRIVE_LETTER or not self.external_root:
            return [self.user_root]
        return [self.user_root, self.external_root]

    def validate(self, mappings: Sequence[VolumeMapping]) -> List[PathViolation]:
        """Check every mapping and return all violations (empty = valid).

        Each mapping reports the first rule it breaks.
        """
        violations = []
        for index, mapping in enumerate(mappings):
            message = self._check(mapping)
            if message:
                violations.append(PathViolation(index=index, mapping=mapping, message=message))
        return violations

    def _check(self, mapping: VolumeMapping) -> Optional[str]:
        source = mapping.source.strip()
        dest = mapping.dest.strip()

        if not source or not dest:
            return "Empty source or destination."

        normalized = self.normalize(source)

        if self.platform == PathPlatform.DRIVE_LETTER:
            if not normalized.lower().startswith(self.user_root.lower()):
                return f"Path does not start with {self.user_root}"
            return None

        if not source.startswith('/') or not dest.startswith('/'):
            return "Path does not start with slash."

        if not any(normalized.startswith(root) for root in self.allowed_roots):
            return f"Path does not start with {' or '.join(self.allowed_roots)}"

        return None


def format_violations(violations: Sequence[PathViolation], allowed_roots: Sequence[str] = ()) -> str:
    """Concatenate violations into one user-facing message."""
    lines = [
        "Sorry! There were invalid paths provided.",
        "",
        "Please ensure that all paths have a valid source and destination.",
    ]
    if allowed_roots:
        lines.append(f"Also, all source paths must begin with {' or '.join(allowed_roots)}.")
    lines.append("")
    lines.extend(str(violation) for violation in violations)
    return "\n".join(lines)
