import logging
from celery import Celery

import config

# --- CONFIGURACIÓN DE CELERY PARA GOOGLE CLOUD PUB/SUB ---

# El broker es 'pubsub://'; la API publica las tareas en el tema configurado.
celery_app = Celery(
    'tasks',
    broker=config.CELERY_BROKER_URL,
    backend=None  # Pub/Sub no funciona como backend de resultados.
)

celery_app.conf.update(
    broker_transport_options={
        # Tiempo en segundos que una tarea puede estar "en proceso" antes de que
        # Pub/Sub la vuelva a entregar. Debe cubrir la generación del PDF y el envío a la DGII.
        'visibility_timeout': 600,
        'topic': config.CELERY_PUBSUB_TOPIC,
        'subscription_name_prefix': 'celery-worker-sub'
    },
    task_ignore_result=True
)

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - [%(funcName)s] - %(message)s')

from app.infrastructure.persistence.database import SessionLocal
from app.infrastructure.wiring import build_process_new_invoice


@celery_app.task(name="tasks.process_new_invoice")
def process_new_invoice(invoice_id: str) -> dict:
    """Procesamiento automático de una factura recién creada."""
    logging.info(f"[{invoice_id}] >>> INICIO DE LA TAREA.")
    db_session = SessionLocal()
    try:
        use_case = build_process_new_invoice(db_session)
        result = use_case.execute(invoice_id)
        # Los fallos del caso de uso llegan en el resultado; lo ya guardado se confirma
        db_session.commit()
        logging.info(f"[{invoice_id}] Tarea finalizada: {result}")
        return result
    except Exception:
        logging.error(f"[{invoice_id}] ¡ERROR! Se ha capturado una excepción. Iniciando rollback.", exc_info=True)
        db_session.rollback()
        raise
    finally:
        db_session.close()
