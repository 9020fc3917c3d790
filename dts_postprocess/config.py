"""
Post processing configuration loaded from the environment / .env file
"""
import os
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from dotenv import load_dotenv

ENV_PREFIX = 'DTS_POSTPROCESS_'


def _split_list(value):
    return tuple(part.strip() for part in value.split(',') if part.strip())


@dataclass(frozen=True)
class PostProcessConfig:
    """Post processing configuration"""
    log_level: str = 'INFO'
    filter_tags: Tuple[str, ...] = ('internal',)
    inherit_tags: Tuple[str, ...] = ('inheritDoc', 'inheritdoc')
    dependencies: bool = True
    graph_output: Optional[str] = None
    graph_indent: int = 2

    def __post_init__(self):
        if not isinstance(self.log_level, str):
            raise TypeError("PostProcessConfig error: 'log_level' is not a string.")
        if isinstance(self.filter_tags, str) or isinstance(self.inherit_tags, str):
            raise TypeError("PostProcessConfig error: tag lists must be tuples of strings.")
        if not isinstance(self.dependencies, bool):
            raise TypeError("PostProcessConfig error: 'dependencies' is not a boolean.")
        if not isinstance(self.graph_indent, int):
            raise TypeError("PostProcessConfig error: 'graph_indent' is not an integer.")

    @classmethod
    def from_env(cls, dotenv_path=None):
        """
        Load configuration from environment variables

        A `.env` file is loaded first; variables already set in the
        environment take precedence over it.

        Args:
            dotenv_path: Optional explicit .env file path

        Returns:
            PostProcessConfig
        """
        load_dotenv(dotenv_path=dotenv_path)

        values = {}

        log_level = os.getenv(f'{ENV_PREFIX}LOG_LEVEL')
        if log_level:
            values['log_level'] = log_level.strip().upper()

        filter_tags = os.getenv(f'{ENV_PREFIX}FILTER_TAGS')
        if filter_tags is not None:
            values['filter_tags'] = _split_list(filter_tags)

        inherit_tags = os.getenv(f'{ENV_PREFIX}INHERIT_TAGS')
        if inherit_tags is not None:
            values['inherit_tags'] = _split_list(inherit_tags)

        graph_output = os.getenv(f'{ENV_PREFIX}GRAPH_OUTPUT')
        if graph_output:
            values['graph_output'] = graph_output

        return cls(**values)

    def with_overrides(self, **overrides):
        """Return a copy with every override that is not None applied"""
        return replace(self, **{key: value for key, value in overrides.items() if value is not None})
