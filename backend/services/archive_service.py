# backend/services/archive_service.py
import io
import os
import zipfile
from pathlib import Path


def zip_directory(directory: Path) -> bytes:
    """Zip a directory's contents (dotfiles included) without a top-level folder."""
    directory = Path(directory)
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED,
                         compresslevel=9) as archive:
        for root, dirs, files in os.walk(directory):
            dirs.sort()
            for name in sorted(files):
                file_path = Path(root) / name
                archive.write(file_path,
                              file_path.relative_to(directory).as_posix())
    return buffer.getvalue()


def archive_filename(chatbot_id: str) -> str:
    return f"chatbot-{chatbot_id}.zip"
