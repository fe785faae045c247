"""Configuration for the Validoctor driver."""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field

_ENV_PREFIX = "VALIDOCTOR_"


class ValidoctorConfig(BaseModel):
    """Driver behaviour settings.

    Values can be taken from the environment with from_env(), e.g.
    ``VALIDOCTOR_THROW_ON_AILMENT=true``.
    """

    model_config = ConfigDict(frozen=True)

    object_name: str = Field(
        default="this",
        min_length=1,
        description="Property name whole-object ailments are reported under",
    )
    throw_on_ailment: bool = Field(
        default=False,
        description="Raise AilmentsFound instead of returning a non-empty result",
    )
    log_ailments: bool = Field(
        default=True,
        description="Log every ailment found at DEBUG level",
    )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ValidoctorConfig:
        """Build a config from ``VALIDOCTOR_*`` variables, defaults for the rest."""
        env = os.environ if environ is None else environ
        values = {
            name: env[_ENV_PREFIX + name.upper()]
            for name in cls.model_fields
            if _ENV_PREFIX + name.upper() in env
        }
        return cls.model_validate(values)
