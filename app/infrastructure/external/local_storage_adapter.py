# app/infrastructure/external/local_storage_adapter.py
import os
from app.domain.ports.file_storage import FileStorage


class LocalFileStorage(FileStorage):
    """Guarda los archivos en un directorio local. Pensado para desarrollo."""

    def __init__(self, root_dir: str, base_url: str):
        self.root_dir = os.path.abspath(root_dir)
        self.base_url = base_url.rstrip('/')

    def _full_path(self, path: str) -> str:
        full_path = os.path.abspath(os.path.join(self.root_dir, path))
        if not full_path.startswith(self.root_dir + os.sep):
            raise ValueError(f"Ruta de archivo inválida: {path}")
        return full_path

    def upload(self, path: str, content: bytes, content_type: str) -> str:
        full_path = self._full_path(path)
        os.makedirs(os.path.dirname(full_path), exist_ok=True)
        with open(full_path, "wb") as f:
            f.write(content)
        return f"{self.base_url}/{path}"

    def download(self, path: str) -> bytes:
        full_path = self._full_path(path)
        if not os.path.exists(full_path):
            raise FileNotFoundError(f"No existe el archivo {path}")
        with open(full_path, "rb") as f:
            return f.read()
