"""Generator configuration.

Settings come from defaults, a JSON file (load_config), or HASH_WITH_*
environment variables (config_from_env).
"""

import json
import keyword
import os
from pathlib import Path
from typing import Mapping, Optional, Union

from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "HASH_WITH_"


class GeneratorConfig(BaseModel):
    """Code generation settings."""
    method_name: str = Field(default="__hash_into__", description="Name of the generated method")
    state_name: str = Field(default="state", description="Name of the hasher parameter")
    collect_all_errors: bool = Field(default=True, description="Report every failing field, not just the first")
    max_workers: Optional[int] = Field(default=None, gt=0, description="Workers for batch compilation")

    @field_validator("method_name", "state_name")
    @classmethod
    def validate_identifier(cls, v: str) -> str:
        if not v.isidentifier() or keyword.iskeyword(v):
            raise ValueError(f"'{v}' is not a valid identifier")
        if v == "self":
            raise ValueError("'self' is reserved for the record instance")
        return v


def load_config(path: Union[str, Path]) -> GeneratorConfig:
    """Load generator settings from a JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If validation fails
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r") as f:
        data = json.load(f)

    return GeneratorConfig.model_validate(data)


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> GeneratorConfig:
    """Build settings from HASH_WITH_* environment variables."""
    environ = os.environ if environ is None else environ
    data = {}
    for name in GeneratorConfig.model_fields:
        value = environ.get(ENV_PREFIX + name.upper())
        if value is not None and value != "":
            data[name] = value
    # pydantic parses "true"/"false"/"1"/"0" and numeric strings in lax mode
    return GeneratorConfig.model_validate(data)
