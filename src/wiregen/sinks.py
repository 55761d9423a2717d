from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Protocol

from wiregen.exceptions import WiregenEmissionError


class ArtifactSink(Protocol):
    """Write-only destination of generated adapter modules."""

    def write(self, name: str, source: str, *, origin: str) -> None:
        """Write one artifact; either the whole artifact is written or nothing is.

        Args:
            name: Dotted artifact name, ``<module>.<adapter class>``.
            source: Generated Python source text.
            origin: Qualified name of the target type the artifact was generated for.

        """


class InMemoryArtifactSink:
    """Collect generated artifacts in a dictionary keyed by artifact name."""

    def __init__(self) -> None:
        self.artifacts: dict[str, str] = {}
        self.origins: dict[str, str] = {}

    def write(self, name: str, source: str, *, origin: str) -> None:
        if name in self.artifacts:
            msg = f"Artifact {name!r} was already written for {self.origins[name]!r}."
            raise WiregenEmissionError(msg)
        self.artifacts[name] = source
        self.origins[name] = origin


class DirectoryArtifactSink:
    """Write each artifact to ``<root>/<dotted/name>.py``.

    The source is written to a temporary file in the destination directory and
    moved into place, so readers never observe a truncated module.
    """

    def __init__(self, root: Path | str, *, encoding: str = "utf-8") -> None:
        self._root = Path(root)
        self._encoding = encoding

    def path_for(self, name: str) -> Path:
        parts = name.split(".")
        if any(not part.isidentifier() for part in parts):
            msg = f"Invalid artifact name {name!r}."
            raise WiregenEmissionError(msg)
        return self._root.joinpath(*parts[:-1], f"{parts[-1]}.py")

    def write(self, name: str, source: str, *, origin: str) -> None:
        destination = self.path_for(name)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            file_descriptor, temporary_name = tempfile.mkstemp(
                prefix=f".{destination.stem}.",
                suffix=".tmp",
                dir=destination.parent,
            )
            try:
                with os.fdopen(file_descriptor, "w", encoding=self._encoding) as handle:
                    handle.write(source)
                os.replace(temporary_name, destination)
            except BaseException:
                Path(temporary_name).unlink(missing_ok=True)
                raise
        except OSError as error:
            msg = f"Cannot write {name!r} for {origin!r}: {error}"
            raise WiregenEmissionError(msg) from error
