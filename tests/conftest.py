import pytest

from pdf_field_mapper.logging import configure_logging


@pytest.fixture(autouse=True, scope="session")
def _structlog_to_stdlib():
    # Route structlog through stdlib logging so nothing is printed to stdout.
    configure_logging("WARNING")
    yield
