"""Configuration management for the gene set export."""

import copy
from pathlib import Path
from typing import Dict, Union

import tomli
from tomli_w import dump as tomli_w_dump

from .exceptions import ConfigurationError

DEFAULT_CONFIG_PATH = 'config.toml'

DEFAULT_CONFIG = {
    'neo4j': {
        'host': 'localhost',
        'port': 7687,
        'user': 'neo4j',
        'password': 'root',
    },
    'output': {
        'directory': '.',
    },
}


class ExportConfig:
    """Configuration manager for the gene set export."""

    def __init__(self, config_path: Union[str, Path] = DEFAULT_CONFIG_PATH):
        """Initialize configuration from a TOML file.

        Args:
            config_path: Path to the TOML configuration file
        """
        self.config_path = Path(config_path)
        self.config = self._load_config()

    def _load_config(self) -> dict:
        """Load configuration from TOML file and fill in defaults."""
        try:
            with open(self.config_path, 'rb') as f:
                loaded = tomli.load(f)
        except FileNotFoundError:
            raise ConfigurationError(
                f"Error loading configuration file: {self.config_path} does not exist"
            )
        except (OSError, tomli.TOMLDecodeError) as e:
            raise ConfigurationError(f"Error loading configuration file: {e}") from e

        config = copy.deepcopy(DEFAULT_CONFIG)
        for section, defaults in config.items():
            values = loaded.get(section, {})
            if not isinstance(values, dict):
                raise ConfigurationError(f"Section [{section}] must be a table")
            defaults.update(values)

        _validate_connection(config['neo4j'])
        return config

    @property
    def connection(self) -> Dict:
        """Get graph database connection settings."""
        return self.config['neo4j']

    @property
    def uri(self) -> str:
        """Get the bolt URI of the graph database."""
        return f"bolt://{self.connection['host']}:{self.connection['port']}"

    @property
    def auth(self) -> tuple:
        """Get the (user, password) pair for basic authentication."""
        return self.connection['user'], self.connection['password']

    @property
    def output_config(self) -> Dict:
        """Get output configuration."""
        return self.config['output']

    def get_output_path(self) -> Path:
        """Get the directory the report is written to."""
        return Path(self.output_config['directory'])


def _validate_connection(connection: Dict):
    for key in ('host', 'user', 'password'):
        if not isinstance(connection[key], str) or not connection[key]:
            raise ConfigurationError(f"neo4j.{key} must be a non-empty string")

    port = connection['port']
    if isinstance(port, str) and port.isdigit():
        port = int(port)
    if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
        raise ConfigurationError(f"neo4j.port must be an integer between 1 and 65535, got {port!r}")
    connection['port'] = port


def generate_default_config(config_path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> Path:
    """Write the default configuration, replacing any existing file.

    Args:
        config_path: Destination of the configuration file

    Returns:
        Path of the written file
    """
    config_path = Path(config_path)
    try:
        if config_path.parent != Path('.'):
            config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, 'wb') as f:
            tomli_w_dump(DEFAULT_CONFIG, f)
    except OSError as e:
        raise ConfigurationError(f"Unable to write configuration file {config_path}: {e}") from e
    return config_path
