import pytest

import protoavro


@pytest.fixture
def codecs():
    return protoavro.Codecs()


def pytest_report_header(config):
    return f"protoavro {protoavro.__version__}"
