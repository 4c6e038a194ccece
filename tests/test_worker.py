from sqlalchemy.orm import sessionmaker

from app.domain.models.invoice import InvoiceStatus
from app.infrastructure.celery import worker
from app.infrastructure.persistence.invoicing_repository_adapter import SQLAlchemyInvoicingRepository


def test_process_new_invoice_task(monkeypatch, engine, db_session, seeded):
    db_session.commit()
    monkeypatch.setattr(worker, "SessionLocal", sessionmaker(bind=engine, autocommit=False, autoflush=False))

    result = worker.process_new_invoice(seeded.id)

    assert result["success"] is True
    db_session.expire_all()
    invoice = SQLAlchemyInvoicingRepository(db_session).find_invoice(seeded.id)
    assert invoice.pdf_url == result["pdfUrl"]
    assert invoice.pdf_url.endswith(f"/invoices/{seeded.id}.pdf")
    assert invoice.status is InvoiceStatus.PENDIENTE


def test_task_is_registered_under_its_public_name():
    assert "tasks.process_new_invoice" in worker.celery_app.tasks
