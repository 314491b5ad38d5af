"""Wire models of the tea API.

Field names are camelCase on the wire; steep times travel as ``hh:mm:ss``
text.
"""

from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from ...domain.entities import TeaVariety, format_steep_time
from ...domain.envelope import ResultEnvelope


class TeaSchema(BaseModel):
    """A tea variety as exchanged with the tea API."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int = Field(default=0, description="Store-assigned id, 0 when unsaved")
    name: str = Field(description="Tea variety name")
    steep_time: str = Field(description="Steep time as hh:mm:ss", examples=["00:03:00"])
    brew_temp: int = Field(description="Brew temperature in degrees Fahrenheit")

    @classmethod
    def from_domain(cls, tea: TeaVariety) -> "TeaSchema":
        """Convert domain entity to wire model."""
        return cls(
            id=tea.id or 0,
            name=tea.name,
            steep_time=format_steep_time(tea.steep_time),
            brew_temp=tea.brew_temp,
        )

    def to_domain(self) -> TeaVariety:
        """Convert wire model to domain entity."""
        return TeaVariety(
            id=self.id or None,
            name=self.name,
            steep_time=self.steep_time,  # type: ignore[arg-type]
            brew_temp=self.brew_temp,
        )

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class EnvelopeSchema(BaseModel):
    """Envelope body returned by the enveloped tea API."""

    success: bool = Field(description="Whether the API call succeeded")
    message: str | None = Field(
        default="", description="Details, especially on failure"
    )
    teas: list[TeaSchema] | None = Field(
        default_factory=list, description="Result teas"
    )

    def to_domain(self) -> ResultEnvelope:
        return ResultEnvelope(
            success=self.success,
            message=self.message or "",
            teas=[tea.to_domain() for tea in self.teas or []],
        )


tea_list_adapter: Final = TypeAdapter(list[TeaSchema])
