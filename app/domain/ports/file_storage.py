# app/domain/ports/file_storage.py
from abc import ABC, abstractmethod


def invoice_pdf_path(invoice_id: str) -> str:
    return f"invoices/{invoice_id}.pdf"


def invoice_xml_path(filename: str) -> str:
    return f"invoices/xml/{filename}"


class FileStorage(ABC):
    """Puerto para el almacenamiento de los PDF y XML generados."""
    @abstractmethod
    def upload(self, path: str, content: bytes, content_type: str) -> str:
        """
        Sube el contenido a la ruta indicada, reemplazando lo que hubiera.
        Retorna la URL de descarga del archivo.
        """
        pass

    @abstractmethod
    def download(self, path: str) -> bytes:
        """Descarga el archivo. Lanza FileNotFoundError si no existe."""
        pass
