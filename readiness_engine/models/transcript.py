#readiness_engine/models/transcript.py
from pydantic import BaseModel, ConfigDict, Field

from readiness_engine.models.enumerations import Speaker


class TranscriptChunk(BaseModel):
    """A single transcribed utterance. Never mutated once appended."""
    model_config = ConfigDict(frozen=True)

    timestamp: int = Field(ge=0, description="Epoch milliseconds")
    speaker: Speaker = Speaker.UNKNOWN
    text: str
