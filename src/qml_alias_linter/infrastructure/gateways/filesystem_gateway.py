"""Filesystem Gateway - Infrastructure implementation of FileSystemProtocol."""

from pathlib import Path

from qml_alias_linter.domain.constants import MODEL_FILE_SUFFIXES
from qml_alias_linter.domain.protocols import FileSystemProtocol


class FileSystemGateway(FileSystemProtocol):
    """Infrastructure implementation of FileSystemProtocol using pathlib."""

    def glob_model_files(self, path: str) -> list[str]:
        """Get all element-model files in path (recursive if directory), sorted."""
        path_obj = Path(path)
        if path_obj.is_dir():
            return sorted(
                str(p) for p in path_obj.glob("**/*") if p.is_file() and p.name.endswith(MODEL_FILE_SUFFIXES)
            )
        return [str(path_obj)] if path_obj.is_file() else []

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        """Read text without newline translation so source offsets stay exact."""
        with open(path, encoding=encoding, newline="") as f:
            return f.read()

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        """Write text content to a file, keeping newlines as given."""
        with open(path, "w", encoding=encoding, newline="") as f:
            f.write(content)

    def join_path(self, *paths: str) -> str:
        """Join path components into a single path string."""
        return str(Path(*paths))

    def parent_directory(self, path: str) -> str:
        return str(Path(path).parent)
