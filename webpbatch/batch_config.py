"""
BatchConfig - Settings for a conversion and upload run.
"""

import configparser
import os
from dataclasses import dataclass, fields
from typing import Iterable, List, Optional


DEFAULT_WORKERS = min(32, (os.cpu_count() or 1) + 4)


def _env(*names: str) -> Optional[str]:
    """Return the first non-empty environment variable among names."""
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return None


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass
class BatchConfig:
    """
    Settings for one batch run.

    Attributes:
        region: AWS region of the bucket
        access_key: Access key ID
        secret_key: Secret access key
        bucket: Destination bucket
        source_path: Root directory to convert
        endpoint: Optional custom S3 endpoint (MinIO, R2, ...)
        verify_ssl: Verify TLS certificates of the endpoint
        workers: Maximum number of items processed at once
        quality: WebP quality 0-100
        lossless: Use lossless WebP
        method: WebP encoder effort 0-6
        key_prefix: Prefix prepended to every upload key
        preserve_paths: Use the path relative to source_path as the key
        delete_converted: Remove the local .webp after a successful upload
        connect_timeout: Seconds to wait for a connection to the store
        read_timeout: Seconds to wait for a response from the store
    """
    region: Optional[str] = None
    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    bucket: Optional[str] = None
    source_path: Optional[str] = None
    endpoint: Optional[str] = None
    verify_ssl: bool = True
    workers: int = DEFAULT_WORKERS
    quality: int = 80
    lossless: bool = False
    method: int = 4
    key_prefix: str = ''
    preserve_paths: bool = False
    delete_converted: bool = False
    connect_timeout: float = 60.0
    read_timeout: float = 60.0

    REQUIRED = ('region', 'access_key', 'secret_key', 'bucket', 'source_path')

    # INI layout: [AWS] for store settings, [Paths] for the source tree
    INI_AWS_KEYS = ('region', 'endpoint', 'access_key', 'secret_key', 'bucket')
    INI_OPTION_TYPES = {
        'workers': int,
        'quality': int,
        'method': int,
        'lossless': _parse_bool,
        'key_prefix': str,
        'preserve_paths': _parse_bool,
        'delete_converted': _parse_bool,
        'verify_ssl': _parse_bool,
        'connect_timeout': float,
        'read_timeout': float,
    }

    @classmethod
    def from_ini(cls, path: str) -> 'BatchConfig':
        """
        Load settings from an INI file.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If an [Options] value has the wrong type
        """
        parser = configparser.ConfigParser()
        with open(path, encoding='utf-8') as f:
            parser.read_file(f)

        config = cls()
        if parser.has_section('AWS'):
            for key in cls.INI_AWS_KEYS:
                value = parser.get('AWS', key, fallback=None)
                if value:
                    setattr(config, key, value.strip())

        if parser.has_section('Paths'):
            source_path = parser.get('Paths', 'source_path', fallback=None)
            if source_path:
                config.source_path = source_path.strip()

        if parser.has_section('Options'):
            for key, convert in cls.INI_OPTION_TYPES.items():
                value = parser.get('Options', key, fallback=None)
                if value is None or value.strip() == '':
                    continue
                try:
                    setattr(config, key, convert(value.strip()))
                except ValueError:
                    raise ValueError(f"Invalid value for [Options] {key}: {value!r}") from None

        return config

    @classmethod
    def from_env(cls, base: Optional['BatchConfig'] = None) -> 'BatchConfig':
        """
        Overlay environment variables on base (or on defaults).

        WEBPBATCH_* variables win over the standard AWS_* ones.
        """
        config = base if base is not None else cls()
        overrides = {
            'region': _env('WEBPBATCH_REGION', 'AWS_REGION', 'AWS_DEFAULT_REGION'),
            'endpoint': _env('WEBPBATCH_ENDPOINT', 'AWS_ENDPOINT_URL'),
            'access_key': _env('WEBPBATCH_ACCESS_KEY', 'AWS_ACCESS_KEY_ID'),
            'secret_key': _env('WEBPBATCH_SECRET_KEY', 'AWS_SECRET_ACCESS_KEY'),
            'bucket': _env('WEBPBATCH_BUCKET'),
            'source_path': _env('WEBPBATCH_SOURCE_PATH'),
        }
        for key, value in overrides.items():
            if value:
                setattr(config, key, value)
        return config

    def merge(self, **overrides) -> 'BatchConfig':
        """Apply non-None overrides (e.g. from CLI flags) in place and return self."""
        names = {f.name for f in fields(self)}
        for key, value in overrides.items():
            if key not in names:
                raise TypeError(f"Unknown setting: {key}")
            if value is not None:
                setattr(self, key, value)
        return self

    def validate(self, required: Optional[Iterable[str]] = None) -> List[str]:
        """
        Validate settings.

        Args:
            required: Settings that must be present (default: REQUIRED)

        Returns:
            List of problems (empty if the configuration is usable)
        """
        errors = []

        for key in (self.REQUIRED if required is None else required):
            if not getattr(self, key):
                errors.append(f"Missing required setting: {key}")

        if self.workers < 1:
            errors.append(f"workers must be at least 1 (got {self.workers})")
        if not 0 <= self.quality <= 100:
            errors.append(f"quality must be between 0 and 100 (got {self.quality})")
        if not 0 <= self.method <= 6:
            errors.append(f"method must be between 0 and 6 (got {self.method})")

        return errors

    def describe(self) -> dict:
        """Settings safe to log (secret key masked)."""
        info = {f.name: getattr(self, f.name) for f in fields(self)}
        if info.get('secret_key'):
            info['secret_key'] = '****'
        return info
