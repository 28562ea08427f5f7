"""Extract an archive."""

from __future__ import annotations

from pathlib import Path

from workflows.core.result import Err, Ok, Result
from workflows.platform.archive import archive_stem, extract
from workflows.steps.base import Payload, Step, StepError

__all__ = ["Decompress"]


class Decompress(Step):
    """Extract ``path`` into ``target``.

    ``target`` defaults to a directory named after the archive, beside it.
    Pairs naturally with ``download``: ``path: ${input.path}``.
    """

    name = "decompress"
    description = "Extract a zip or tar archive"
    parameters = ("path", "target", "strip_components")
    outputs = ("path", "files_count")

    def execute(self, payload: Payload) -> Result[Payload, StepError]:
        raw = payload.parameter("path").strip()
        if not raw:
            return self.fail("'path' is required")
        archive = Path(raw).expanduser()

        raw_strip = payload.parameter("strip_components").strip() or "0"
        try:
            strip = int(raw_strip)
        except ValueError:
            return self.fail(f"strip_components must be an integer, got '{raw_strip}'")

        raw_target = payload.parameter("target").strip()
        if raw_target:
            target = Path(raw_target).expanduser()
        else:
            target = archive.parent / archive_stem(archive)

        result = extract(archive, target, strip_components=strip)
        if isinstance(result, Err):
            return self.fail(str(result.error), kind="io")

        extracted = result.value
        return Ok(
            self.emit({"path": str(extracted.target), "files_count": str(extracted.files_count)})
        )
