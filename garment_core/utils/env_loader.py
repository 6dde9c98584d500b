"""
Environment variable loading utility.

Reads ``KEY=value`` lines from an env file into ``os.environ`` before the
Django settings module resolves its configuration.
"""
import os
import logging

logger = logging.getLogger(__name__)


def load_env_from_file(file_path, override=True):
    """
    Load environment variables from a file.

    Args:
        file_path: Path to the environment variable file.
        override: When False, variables already present in the process
            environment are left untouched.

    Returns:
        True if the file was loaded, False otherwise.
    """
    if not os.path.exists(file_path):
        logger.warning(f"Environment file not found: {file_path}")
        return False

    try:
        loaded = 0
        with open(file_path, 'r') as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith('#'):
                    continue
                if line.startswith('export '):
                    line = line[len('export '):]

                key, value = line.split('=', 1)
                key = key.strip()
                value = value.strip()
                if not key:
                    raise ValueError(f"empty variable name in line: {line!r}")
                if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
                    value = value[1:-1]
                if not override and key in os.environ:
                    continue
                os.environ[key] = value
                loaded += 1

        logger.info(f"Loaded {loaded} environment variables from {file_path}")
        return True
    except Exception as e:
        logger.error(f"Error loading environment variables from {file_path}: {str(e)}")
        return False


def env_flag(name, default=False):
    """Read a boolean flag such as ``GARMENT_DEBUG=true`` from the environment."""
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


def env_list(name, default=''):
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(',') if item.strip()]
