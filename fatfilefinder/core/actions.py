"""Archive and relocation actions applied to matched files."""

import logging
import shutil
import tempfile
import zipfile
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from .models import ArchiveResult, MatchedFile, RelocationResult
from .exceptions import ArchiveError, RelocationError
from .error_handler import ErrorHandler


class ActionExecutor:
    """Applies the post-scan actions to a snapshot of matched files."""

    def __init__(self, config=None, error_handler: Optional[ErrorHandler] = None,
                 move_callback: Optional[Callable[[str, str], None]] = None):
        """
        Initialize the action executor.

        Args:
            config: Optional configuration object
            error_handler: Optional error handler collecting recoverable errors
            move_callback: Optional callback called with (source, destination)
                           after each successful move
        """
        # Import here to avoid circular imports
        from .config import get_config

        self.config = config or get_config()
        self.error_handler = error_handler or ErrorHandler()
        self.move_callback = move_callback
        self.logger = logging.getLogger(__name__)

    def holding_directory(self) -> Path:
        """Directory that relocated files are moved into."""
        temp_root = self.config.actions.temp_root or tempfile.gettempdir()
        return Path(temp_root) / self.config.actions.holding_dir_name

    def archive(self, files: Iterable[MatchedFile], output_path: Union[str, Path]) -> ArchiveResult:
        """
        Roll the files into a single new ZIP archive.

        Each file becomes one entry named after its base name, in input
        order. An existing file at ``output_path`` is an error. A failure on
        one file is reported and the remaining files are still added; the
        partial archive is left on disk.

        Args:
            files: Matched files to archive
            output_path: Path of the ZIP file to create

        Returns:
            ArchiveResult describing the archived entries and errors
        """
        output_path = Path(output_path)
        result = ArchiveResult(archive_path=str(output_path))
        seen_names = set()

        try:
            with zipfile.ZipFile(output_path, "x", compression=zipfile.ZIP_DEFLATED,
                                 compresslevel=self.config.actions.compression_level) as zf:
                for matched in files:
                    if matched.name in seen_names:
                        self.logger.warning(
                            f"Archive entry '{matched.name}' already exists in {output_path}, "
                            f"adding {matched.path} under the same name"
                        )
                    try:
                        zf.write(matched.path, arcname=matched.name)
                    except OSError as e:
                        result.errors.append(
                            self.error_handler.report(e, f"adding '{matched.path}' to archive")
                        )
                        continue

                    seen_names.add(matched.name)
                    result.archived.append(matched.name)
        except (OSError, zipfile.BadZipFile) as e:
            error = ArchiveError(f"Could not write archive {output_path}: {e}")
            result.errors.append(self.error_handler.report(error, "compressing files"))

        if result.complete:
            self.logger.info(f"Archived {len(result.archived)} file(s) into {output_path}")
        return result

    def relocate(self, files: Iterable[MatchedFile]) -> RelocationResult:
        """
        Move the files into the holding directory.

        The holding directory is created if needed. Each file keeps its base
        name; an existing file of the same name in the holding directory is
        never overwritten and counts as an error for that file. A failure
        on one file does not stop the others.

        Args:
            files: Matched files to move

        Returns:
            RelocationResult describing the moves and errors
        """
        holding_dir = self.holding_directory()
        result = RelocationResult(holding_dir=str(holding_dir))

        try:
            holding_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            error = RelocationError(f"Could not create holding directory {holding_dir}: {e}")
            result.errors.append(self.error_handler.report(error, "moving files"))
            return result

        for matched in files:
            destination = holding_dir / matched.name
            try:
                if destination.exists():
                    raise FileExistsError(f"Destination already exists: {destination}")
                shutil.move(matched.path, destination)
            except OSError as e:
                result.errors.append(self.error_handler.report(e, f"moving '{matched.path}'"))
                continue

            result.moved.append((matched.path, str(destination)))
            self.logger.info(f"Moved {matched.path} to {destination}")
            if self.move_callback:
                self.move_callback(matched.path, str(destination))

        return result
