"""Keeps only the latest documented revision of each operation."""


def _dotted_key(text: str) -> tuple:
    return tuple((0, int(part), "") if part.isdigit() else (1, 0, part) for part in text.split("."))


def version_key(version: str) -> tuple:
    """Sort key for semver-style versions: ``1.10.0`` orders after ``1.9.0``.

    Numeric parts compare numerically and sort before non-numeric parts,
    which compare lexically. A pre-release (``1.0.0-beta``) orders before
    its release; ``+build`` metadata is ignored.
    """
    text = str(version).strip().split("+", 1)[0]
    core, _, prerelease = text.partition("-")
    if not prerelease:
        return _dotted_key(core), 1, ()
    return _dotted_key(core), 0, _dotted_key(prerelease)


class VersionResolver:
    """Tracks the highest version processed per (path, verb)."""

    def __init__(self):
        self._latest: dict[tuple[str, str], str] = {}

    def should_process(self, path: str, verb: str, version: str) -> bool:
        """False when a higher version of this operation was already processed."""
        seen = self._latest.get((path, verb))
        if seen is None:
            return True
        return version_key(version) >= version_key(seen)

    def record(self, path: str, verb: str, version: str) -> None:
        self._latest[(path, verb)] = version

    def latest(self, path: str, verb: str) -> str | None:
        return self._latest.get((path, verb))
