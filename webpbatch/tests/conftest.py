"""
Pytest fixtures for webpbatch tests.
"""

import pytest

from .fakes import RecordingStorage, make_image_bytes


ENV_VARS = (
    'WEBPBATCH_REGION', 'WEBPBATCH_ENDPOINT', 'WEBPBATCH_ACCESS_KEY',
    'WEBPBATCH_SECRET_KEY', 'WEBPBATCH_BUCKET', 'WEBPBATCH_SOURCE_PATH',
    'AWS_REGION', 'AWS_DEFAULT_REGION', 'AWS_ENDPOINT_URL',
    'AWS_ACCESS_KEY_ID', 'AWS_SECRET_ACCESS_KEY',
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Keep real credentials and any local config.ini out of the tests."""
    monkeypatch.chdir(tmp_path)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def batch_config(tmp_path):
    """Fixture providing a complete configuration."""
    from webpbatch.batch_config import BatchConfig

    return BatchConfig(
        region='us-east-1',
        access_key='test-access-key',
        secret_key='test-secret-key',
        bucket='test-bucket',
        source_path=str(tmp_path),
        workers=4,
    )


@pytest.fixture
def storage():
    """Fixture providing a recording storage double."""
    return RecordingStorage()


@pytest.fixture
def sample_png_bytes():
    """Fixture providing sample PNG image bytes with transparency."""
    return make_image_bytes('PNG', mode='RGBA', size=(20, 10))


@pytest.fixture
def sample_image_bytes():
    """Fixture providing sample JPEG image bytes."""
    return make_image_bytes('JPEG', size=(100, 100))


@pytest.fixture
def image_tree(tmp_path):
    """
    Fixture providing the end-to-end source tree:
    a.png (valid), b.txt (not an image), c.jpg (valid), d.png (zero bytes).
    """
    root = tmp_path / 'src'
    root.mkdir()
    (root / 'a.png').write_bytes(make_image_bytes('PNG'))
    (root / 'b.txt').write_text('not an image')
    (root / 'c.jpg').write_bytes(make_image_bytes('JPEG'))
    (root / 'd.png').write_bytes(b'')
    return root


@pytest.fixture
def make_item():
    """Fixture providing a factory for SourceItems from paths."""
    import os
    from webpbatch.source_item import SourceItem

    def _make(path, root=None):
        path = str(path)
        root = str(root) if root is not None else os.path.dirname(path)
        return SourceItem(
            path=path,
            extension=os.path.splitext(path)[1][1:],
            relative_path=os.path.relpath(path, root).replace(os.sep, '/'),
        )

    return _make


@pytest.fixture
def logger():
    """Fixture providing a logger."""
    import logging
    return logging.getLogger('test')


@pytest.fixture
def sigint_to_self():
    """
    Fixture providing a function that delivers SIGINT to this process.

    The default handler is installed for the duration of the test so the
    signal surfaces as KeyboardInterrupt on the main thread.
    """
    import os
    import signal
    import sys

    if sys.platform == 'win32':
        pytest.skip("requires POSIX signals")

    previous = signal.signal(signal.SIGINT, signal.default_int_handler)
    yield lambda: os.kill(os.getpid(), signal.SIGINT)
    signal.signal(signal.SIGINT, previous)
