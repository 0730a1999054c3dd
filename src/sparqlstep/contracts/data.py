"""Plugin data schema contracts.

PluginSchema is the base class for plugin output schemas.
Plugins declare their expected data shape by subclassing this.
"""

from pydantic import BaseModel, ConfigDict


class PluginSchema(BaseModel):
    """Base class for plugin output schemas.

    Subclass to define the expected shape of data for a plugin:

        class MyOutputSchema(PluginSchema):
            name: str
            value: str

    Extra fields are ignored unless the subclass allows them.
    """

    model_config = ConfigDict(
        extra="ignore",  # Rows may have extra fields
        strict=False,
        frozen=True,
    )
