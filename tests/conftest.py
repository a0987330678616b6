import pytest

from certmaker.common.config import Options

from .utils import FakeOpenSSL


@pytest.fixture
def fake_toolkit():
    return FakeOpenSSL()


@pytest.fixture
def make_options(tmp_path):
    def _make(**overrides):
        values = dict(
            fqdn='example.org',
            output_dir=tmp_path / 'out',
            passphrase='s3cret-pass',
            subject='/C=US/O=Example/CN=example.org',
        )
        values.update(overrides)
        return Options(**values)
    return _make
