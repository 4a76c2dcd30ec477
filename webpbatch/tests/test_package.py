"""Tests for the package namespace."""

import webpbatch


class TestPackage:
    """Tests for the top-level package."""

    def test_exports_resolve(self):
        """Test every name in __all__ is importable from the package."""
        for name in webpbatch.__all__:
            assert getattr(webpbatch, name) is not None

    def test_metadata(self):
        """Test version and description describe this tool."""
        assert webpbatch.__version__ == "1.0.0"
        assert 'local image trees' in webpbatch.__doc__
        assert not hasattr(webpbatch, '__author__')
