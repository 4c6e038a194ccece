# app/infrastructure/external/gcs_storage_adapter.py
import io
import logging
from urllib.parse import quote
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseUpload, MediaIoBaseDownload
from app.domain.ports.file_storage import FileStorage

logger = logging.getLogger(__name__)


class GoogleCloudStorageAdapter(FileStorage):
    """
    Adaptador de Google Cloud Storage (API JSON) para los PDF y XML de las
    facturas. Las rutas se usan tal cual como nombre del objeto en el bucket.
    """
    def __init__(self, bucket: str, credentials):
        self.bucket = bucket
        self.service = build('storage', 'v1', credentials=credentials, cache_discovery=False)

    def upload(self, path: str, content: bytes, content_type: str) -> str:
        logger.info(f"Subiendo {path} ({len(content)} bytes) a gs://{self.bucket}...")
        media = MediaIoBaseUpload(io.BytesIO(content), mimetype=content_type, resumable=False)
        obj = self.service.objects().insert(
            bucket=self.bucket,
            name=path,
            media_body=media,
            body={'name': path, 'contentType': content_type},
            fields='name,mediaLink'
        ).execute()
        return obj.get('mediaLink') or f"https://storage.googleapis.com/{self.bucket}/{quote(path)}"

    def download(self, path: str) -> bytes:
        request = self.service.objects().get_media(bucket=self.bucket, object=path)
        buffer = io.BytesIO()
        downloader = MediaIoBaseDownload(buffer, request)
        try:
            done = False
            while not done:
                _, done = downloader.next_chunk()
        except HttpError as e:
            if e.resp.status == 404:
                raise FileNotFoundError(f"No existe gs://{self.bucket}/{path}") from e
            raise
        return buffer.getvalue()
