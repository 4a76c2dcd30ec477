"""Tests for CLI module."""

import time
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from webpbatch.cli import create_parser, load_config, main

from .fakes import RecordingStorage


class TestCreateParser:
    """Tests for argument parser creation."""

    def test_parser_created(self):
        """Test parser is created successfully."""
        parser = create_parser()
        assert parser is not None

    def test_run_command(self):
        """Test run command parsing."""
        parser = create_parser()
        args = parser.parse_args([
            'run', '-c', 'config.ini', '--workers', '8',
            '--quality', '90', '--preserve-paths', '--key-prefix', 'webp'
        ])

        assert args.command == 'run'
        assert args.config == 'config.ini'
        assert args.workers == 8
        assert args.quality == 90
        assert args.preserve_paths is True
        assert args.key_prefix == 'webp'
        assert args.dry_run is False

    def test_scan_command(self):
        """Test scan command parsing."""
        parser = create_parser()
        args = parser.parse_args(['scan', '--source', '/images', '-q'])

        assert args.command == 'scan'
        assert args.source == '/images'
        assert args.quiet is True


class TestLoadConfig:
    """Tests for configuration layering."""

    def test_cli_overrides_ini(self, tmp_path, monkeypatch):
        """Test flags win over the INI file and environment."""
        ini = tmp_path / 'config.ini'
        ini.write_text("[AWS]\nbucket = ini-bucket\nregion = us-east-1\n[Paths]\nsource_path = /ini\n")
        monkeypatch.setenv('WEBPBATCH_BUCKET', 'env-bucket')
        args = create_parser().parse_args(['run', '-c', str(ini), '--source', '/cli'])

        config = load_config(args)

        assert config.source_path == '/cli'
        assert config.bucket == 'env-bucket'
        assert config.region == 'us-east-1'

    def test_flags_do_not_reset_ini_booleans(self, tmp_path):
        """Test unset boolean flags keep INI values."""
        ini = tmp_path / 'config.ini'
        ini.write_text("[Options]\npreserve_paths = true\n")
        args = create_parser().parse_args(['run', '-c', str(ini)])

        assert load_config(args).preserve_paths is True


class TestMain:
    """Tests for main entry point."""

    @pytest.fixture
    def s3(self, mocker):
        """Patch S3Client in the CLI with a recording double."""
        storage = RecordingStorage()
        storage.check_bucket = MagicMock()
        mocker.patch('webpbatch.cli.S3Client', return_value=storage)
        return storage

    @pytest.fixture
    def run_args(self, image_tree):
        return [
            'run', '--source', str(image_tree), '--bucket', 'b', '--region', 'us-east-1',
            '--access-key', 'ak', '--secret-key', 'sk', '--workers', '2',
        ]

    def test_no_command(self):
        """Test running without command shows help."""
        result = main([])
        assert result == 1

    def test_run_end_to_end(self, s3, run_args, capsys):
        """Test the a/b/c/d scenario through the CLI."""
        result = main(run_args)

        captured = capsys.readouterr()
        assert result == 1
        assert sorted(s3.keys) == ['a.webp', 'c.webp']
        assert '[OK] a.png -> a.webp' in captured.out
        assert '[OK] c.jpg -> c.webp' in captured.out
        assert '[ERROR] d.png -> decode failed' in captured.err
        assert 'Uploaded:    2' in captured.out
        assert 'Failed:      1' in captured.out
        assert 'Completed in:' in captured.out
        assert 'b.txt' not in captured.out + captured.err
        s3.check_bucket.assert_called_once()

    def test_run_all_ok_exits_zero(self, s3, run_args, image_tree):
        """Test exit code 0 when every item succeeds."""
        (image_tree / 'd.png').unlink()

        assert main(run_args) == 0

    def test_run_skip_bucket_check(self, s3, run_args):
        """Test the bucket check can be skipped."""
        main(run_args + ['--skip-bucket-check'])

        s3.check_bucket.assert_not_called()

    def test_run_missing_settings(self, s3, image_tree, capsys):
        """Test missing required settings fail before scanning."""
        result = main(['run', '--source', str(image_tree)])

        assert result == 1
        assert s3.calls == []
        assert not (image_tree / 'a.webp').exists()

    def test_run_missing_source(self, s3, run_args, tmp_path):
        """Test a source path that is not a directory is fatal."""
        args = list(run_args)
        args[args.index('--source') + 1] = str(tmp_path / 'nowhere')

        assert main(args) == 1
        assert s3.calls == []

    def test_run_unreachable_bucket(self, mocker, run_args, image_tree):
        """Test an unreachable store is fatal before any conversion."""
        boto = MagicMock()
        boto.head_bucket.side_effect = ClientError({'Error': {'Code': '403'}}, 'HeadBucket')
        mocker.patch('webpbatch.s3_client.boto3.client', return_value=boto)

        assert main(run_args) == 1
        assert not (image_tree / 'a.webp').exists()
        boto.put_object.assert_not_called()

    def test_run_interrupted_exits_130(self, mocker, run_args, capsys, sigint_to_self):
        """Test Ctrl-C during a batch reports every submitted item and exits 130."""

        class InterruptingStorage(RecordingStorage):
            def put_object(self, key, data, content_type='application/octet-stream'):
                response = super().put_object(key, data, content_type)
                if len(self.calls) == 1:
                    sigint_to_self()
                    time.sleep(0.3)
                return response

        storage = InterruptingStorage()
        storage.check_bucket = MagicMock()
        mocker.patch('webpbatch.cli.S3Client', return_value=storage)

        result = main(run_args + ['--workers', '1'])

        captured = capsys.readouterr()
        assert result == 130
        assert 'INTERRUPTED' in captured.out
        assert len(storage.calls) == 1

    def test_run_dry_run(self, s3, image_tree, capsys):
        """Test dry run lists keys without converting or uploading."""
        result = main(['run', '--source', str(image_tree), '--dry-run'])

        captured = capsys.readouterr()
        assert result == 0
        assert 'a.png -> a.webp' in captured.out
        assert 'Would convert and upload 3 images' in captured.out
        assert s3.calls == []
        assert not (image_tree / 'a.webp').exists()

    def test_scan(self, image_tree, capsys):
        """Test scan lists accepted images."""
        result = main(['scan', '--source', str(image_tree)])

        captured = capsys.readouterr()
        assert result == 0
        assert 'a.png' in captured.out
        assert 'b.txt' not in captured.out
        assert 'Found 3 images' in captured.out

    def test_scan_missing_source(self, capsys):
        """Test scan without a source fails."""
        assert main(['scan']) == 1
