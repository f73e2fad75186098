"""
Guest-related Pydantic schemas
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

class BilingualText(BaseModel):
    """Czech/English text pair"""
    cs: Optional[str] = None
    en: Optional[str] = None

class AudioPair(BaseModel):
    """Public audio URLs per language"""
    cs: Optional[str] = None
    en: Optional[str] = None

class GuestView(BaseModel):
    """Guest as served to the gallery"""
    model_config = ConfigDict(populate_by_name=True)

    id: int
    number: int
    name: str
    relation: BilingualText
    about: BilingualText
    photo_url: Optional[str] = Field(default=None, alias="photoUrl")
    audio_official: AudioPair = Field(alias="audioOfficial")
    audio_funny: AudioPair = Field(alias="audioFunny")

class GuestListResponse(BaseModel):
    """Response of the guest list endpoint"""
    items: List[GuestView]

class GuestSubmission(BaseModel):
    """Text fields of an admin submission after parsing"""
    id: Optional[int] = None
    number: int
    name: str
    relation_cs: str
    relation_en: str
    about_cs: Optional[str] = None
    about_en: Optional[str] = None

    def text_fields(self) -> Dict[str, Any]:
        """Columns written by both the insert and the update step"""
        return self.model_dump(exclude={"id"})

class SaveResponse(BaseModel):
    """Successful admin submission"""
    ok: bool = True
    id: int

class ManifestResponse(BaseModel):
    """All public media URLs, for offline precaching"""
    urls: List[str]
