import pytest

from app.application.use_cases.company_settings import CompanySettingsUseCase
from app.application.use_cases.manage_clients import ClientData, ManageClientsUseCase
from app.domain.exceptions import FailedPrecondition, InvalidArgument, NotFound
from app.domain.models.company import CompanySettings, EcfConfig
from app.infrastructure.signing.certificate_vault import create_development_certificate


@pytest.fixture
def settings(repo, vault):
    factory = lambda name, rnc, password: create_development_certificate(vault, name, rnc, password)
    return CompanySettingsUseCase(repo, certificate_factory=factory)


def test_company_defaults_and_save(settings, caller, company):
    assert settings.get_company(caller) == CompanySettings()
    settings.save_company(caller, company)
    assert settings.get_company(caller).rnc == company.rnc


def test_ecf_config_round_trip(settings, caller):
    assert settings.get_ecf_config(caller) == {"testMode": True, "certificate": None}
    assert settings.save_ecf_config(caller, EcfConfig(test_mode=False))["testMode"] is False


def test_development_certificate_requires_rnc(settings, caller):
    with pytest.raises(FailedPrecondition):
        settings.create_development_certificate(caller, "secreto")


def test_development_certificate_is_stored(settings, repo, caller, company):
    settings.save_company(caller, company)

    result = settings.create_development_certificate(caller, "secreto")

    assert result["certificate"]["type"] == "DESARROLLO"
    stored = repo.get_certificate()
    assert stored.serial_number == result["certificate"]["serialNumber"]
    assert "private_key" not in result["certificate"]
    assert settings.get_ecf_config(caller)["certificate"]["type"] == "DESARROLLO"


def test_client_crud(repo, caller):
    use_case = ManageClientsUseCase(repo)

    created = use_case.create(caller, ClientData(name="Colegio San Juan", rnc="401000001"))
    use_case.update(caller, created.id, ClientData(name="Colegio San Juan Bautista", rnc="401000001"))

    assert [c.name for c in use_case.list(caller)] == ["Colegio San Juan Bautista"]
    with pytest.raises(InvalidArgument):
        use_case.create(caller, ClientData(name="  "))

    use_case.delete(caller, created.id)
    with pytest.raises(NotFound):
        use_case.get(caller, created.id)


def test_client_with_invoices_cannot_be_deleted(repo, caller, seeded):
    with pytest.raises(FailedPrecondition):
        ManageClientsUseCase(repo).delete(caller, seeded.client_id)
