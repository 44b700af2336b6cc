"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
Safe file removal: reported files are moved to the system trash, never erased.
"""
from pathlib import Path
from typing import List, Tuple
from send2trash import send2trash


class FileService:
    """
    Cross-platform trash operations for the "keep one copy" workflow.
    """

    @staticmethod
    def move_to_trash(file_path: str):
        """Moves a file to the system trash."""
        path = Path(file_path)

        if not path.is_file() or path.is_symlink():
            raise FileNotFoundError(f"Regular file not found: {path}")

        try:
            send2trash(str(path.resolve()))
        except Exception as e:
            raise RuntimeError(f"Failed to move to trash: {e}") from e

    @classmethod
    def move_multiple_to_trash(cls, file_paths: List[str]) -> Tuple[int, List[Tuple[str, str]]]:
        """
        Moves multiple files to trash, continuing past individual failures.
        Returns (number moved, [(path, error message), ...]).
        """
        moved = 0
        errors = []
        for path in file_paths:
            try:
                cls.move_to_trash(path)
                moved += 1
            except Exception as e:
                errors.append((path, str(e)))
        return moved, errors

    @staticmethod
    def format_errors(errors: List[Tuple[str, str]], limit: int = 5) -> str:
        """Short multi-line summary of trash failures."""
        summary = "\n".join(
            f"  • {Path(p).name}: {msg.split(':')[-1].strip()}"
            for p, msg in errors[:limit]
        )
        if len(errors) > limit:
            summary += f"\n  • ...and {len(errors) - limit} more files"
        return summary
