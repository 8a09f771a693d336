"""Request payloads sent to the inference services."""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class FertilizerRequest(BaseModel):
    """Soil and crop measurements for a fertilizer recommendation.

    Field aliases are the exact keys the fertilizer service expects.
    """

    model_config = ConfigDict(populate_by_name=True)

    ph: float = Field(alias="pH")
    nitrogen: float = Field(alias="Nitrogen")
    phosphorus: float = Field(alias="Phosphorus")
    potassium: float = Field(alias="Potassium")
    temperature: float
    humidity: float
    moisture: float
    territory_type: str
    crop_type: str

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class DiseaseImageRequest(BaseModel):
    """Base64-encoded leaf photo."""

    image_base64: str
