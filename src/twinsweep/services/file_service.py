"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
File removal for the deletion API: permanent unlink or move to the system trash.
"""
import os
from pathlib import Path
from send2trash import send2trash


class FileService:
    """
    Removes files from disk.
    Missing files raise FileNotFoundError; any other failure is wrapped as RuntimeError.
    """

    @staticmethod
    def delete_file(file_path: str, use_trash: bool = False) -> None:
        """Deletes a file permanently, or moves it to the trash when `use_trash` is set."""
        if use_trash:
            FileService.move_to_trash(file_path)
        else:
            FileService.remove_permanently(file_path)

    @staticmethod
    def remove_permanently(file_path: str) -> None:
        path = Path(file_path)

        if not path.is_file():
            raise FileNotFoundError(f"File not found: {path}")

        try:
            os.remove(path)
        except FileNotFoundError:
            raise
        except OSError as e:
            raise RuntimeError(f"Failed to delete file: {e}") from e

    @staticmethod
    def move_to_trash(file_path: str) -> None:
        """Moves a file to the system trash."""
        path = Path(file_path).resolve()

        if not path.is_file():
            raise FileNotFoundError(f"File not found: {path}")

        try:
            send2trash(str(path))
        except Exception as e:
            raise RuntimeError(f"Failed to move to trash: {e}") from e
