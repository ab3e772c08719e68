"""
Description:
Wire messages exchanged with the live (bidirectional streaming) speech endpoint.
Field names follow the endpoint's camelCase JSON.

# Outbound: LiveSetupMessage (sent once on connect), LiveTurnMessage (one per utterance)
# Inbound: serverContent frames carrying inlineData audio parts and a turnComplete flag

Dependencies:
- pydantic: For data validation and settings management.
- typing: For type annotations.

Author: @kcaparas1630
"""
from pydantic import BaseModel, Field
from typing import List, Optional

class PrebuiltVoiceConfig(BaseModel):
    voiceName: str = "Kore"

class VoiceConfig(BaseModel):
    prebuiltVoiceConfig: PrebuiltVoiceConfig = Field(default_factory=PrebuiltVoiceConfig)

class SpeechConfig(BaseModel):
    voiceConfig: VoiceConfig = Field(default_factory=VoiceConfig)

class GenerationConfig(BaseModel):
    responseModalities: List[str] = Field(default_factory=lambda: ["AUDIO"])
    speechConfig: SpeechConfig = Field(default_factory=SpeechConfig)

class LiveSetup(BaseModel):
    model: str
    generationConfig: GenerationConfig = Field(default_factory=GenerationConfig)

class LiveSetupMessage(BaseModel):
    setup: LiveSetup

class TextPart(BaseModel):
    text: str

class Turn(BaseModel):
    role: str = "user"
    parts: List[TextPart]

class ClientContent(BaseModel):
    turns: List[Turn]
    turnComplete: bool = True

class LiveTurnMessage(BaseModel):
    clientContent: ClientContent

class InlineData(BaseModel):
    mimeType: str = ""
    data: str = ""

class ModelPart(BaseModel):
    text: Optional[str] = None
    inlineData: Optional[InlineData] = None

class ModelTurn(BaseModel):
    parts: List[ModelPart] = Field(default_factory=list)

class ServerContent(BaseModel):
    modelTurn: Optional[ModelTurn] = None
    turnComplete: bool = False

class CompletedTurn(BaseModel):
    """Everything the remote side produced for one turn, joined in receipt order."""
    audio: Optional[str] = Field(default=None, description="Base64 PCM of all fragments, or None when no audio arrived")
    text: str = Field(default="", description="Concatenated text parts")
    chunk_count: int = Field(default=0, description="Number of audio fragments joined")


def build_setup_message(model: str, voice: str = "Kore") -> dict:
    """Setup frame: {setup: {model, generationConfig: {responseModalities, speechConfig: {voiceConfig}}}}."""
    if not model.startswith("models/"):
        model = f"models/{model}"
    return LiveSetupMessage(
        setup=LiveSetup(
            model=model,
            generationConfig=GenerationConfig(
                speechConfig=SpeechConfig(
                    voiceConfig=VoiceConfig(prebuiltVoiceConfig=PrebuiltVoiceConfig(voiceName=voice))
                )
            ),
        )
    ).model_dump()


def build_turn_message(text: str, role: str = "user") -> dict:
    """Turn frame: {clientContent: {turns: [{role, parts: [{text}]}], turnComplete: true}}."""
    return LiveTurnMessage(
        clientContent=ClientContent(turns=[Turn(role=role, parts=[TextPart(text=text)])], turnComplete=True)
    ).model_dump()
