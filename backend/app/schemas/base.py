"""Base Pydantic schema shared by every API request and response."""
from pydantic import BaseModel, ConfigDict


class StrictBaseModel(BaseModel):
    """API model that rejects unknown fields.

    A misspelled field such as ``include_fundamental`` is a 422 instead of
    being silently ignored. Symbol lists and pasted text are kept verbatim
    here; cleaning happens once, in ``app.utils.validation.clean_symbols``.

    Settings use ``pydantic_settings.BaseSettings`` with ``extra="ignore"``
    instead, since the environment carries unrelated variables.
    """

    model_config = ConfigDict(extra="forbid")
