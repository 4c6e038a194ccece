# app/infrastructure/persistence/models.py
from sqlalchemy import Column, String, Float, Boolean, Date, DateTime, Integer, JSON, ForeignKey, Text
from sqlalchemy.sql import func

from .database import Base


class Cliente(Base):
    __tablename__ = "clientes"

    id = Column(String(64), primary_key=True)
    nombre = Column(String(255), nullable=False)
    rnc = Column(String(20), index=True)
    direccion = Column(String(255))
    telefono = Column(String(50))
    correo = Column(String(255))
    creado_en = Column(DateTime(timezone=True), server_default=func.now())


class Factura(Base):
    __tablename__ = "facturas"

    id = Column(String(64), primary_key=True)
    numero = Column(String(50), index=True)
    ncf = Column(String(20))
    cliente_id = Column(String(64), ForeignKey("clientes.id"), nullable=False)
    items = Column(JSON, nullable=False, default=list)
    subtotal = Column(Float, default=0.0)
    itbis = Column(Float, default=0.0)
    total = Column(Float, default=0.0)
    fecha = Column(Date)
    estado = Column(String(20), nullable=False, default="pendiente", index=True)

    procesar_automaticamente = Column(Boolean, default=True)
    enviar_dgii_automaticamente = Column(Boolean, default=False)

    track_id = Column(String(100))
    url_xml = Column(Text)
    fecha_envio_dgii = Column(DateTime(timezone=True))
    respuesta_dgii = Column(JSON)
    fecha_estado_dgii = Column(DateTime(timezone=True))
    respuesta_estado_dgii = Column(JSON)

    url_pdf = Column(Text)
    fecha_generacion_pdf = Column(DateTime(timezone=True))
    correo_enviado = Column(Boolean, default=False)
    fecha_correo = Column(DateTime(timezone=True))
    destinatario_correo = Column(String(255))

    codigo_motivo_anulacion = Column(String(5))
    motivo_anulacion = Column(Text)
    fecha_anulacion = Column(DateTime(timezone=True))
    track_id_anulacion = Column(String(100))

    creado_en = Column(DateTime(timezone=True), server_default=func.now())


class EventoFactura(Base):
    __tablename__ = "eventos_factura"

    id = Column(Integer, primary_key=True, autoincrement=True)
    factura_id = Column(String(64), index=True, nullable=False)
    tipo = Column(String(50), nullable=False)
    fecha = Column(DateTime(timezone=True), nullable=False)
    usuario_id = Column(String(128))
    detalles = Column(JSON)


class ProductoInventario(Base):
    __tablename__ = "inventario"

    id = Column(String(64), primary_key=True)
    lote = Column(String(50), nullable=False)
    nombre = Column(String(255), nullable=False)
    cantidad = Column(Float, nullable=False, default=0)
    unidad = Column(String(20), nullable=False)
    vencimiento = Column(Date, nullable=False)


class Configuracion(Base):
    """Documentos de configuración por clave: 'company', 'certificate', 'ecf'."""
    __tablename__ = "configuracion"

    clave = Column(String(50), primary_key=True)
    datos = Column(JSON, nullable=False)
