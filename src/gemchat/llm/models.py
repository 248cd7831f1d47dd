from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    """Represents a chat message sent to a provider."""

    model_config = ConfigDict(frozen=True)

    role: str = Field(description="Role of the message sender: 'user', 'assistant', or 'system'")
    content: str = Field(description="Content of the message")


class LLMResponse(BaseModel):
    """Response from an LLM provider."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(description="Generated text content, empty if the reply had none")
    model: str = Field(description="Model that generated the response")
    usage: dict[str, int] | None = Field(
        default=None,
        description="Token usage information"
    )


class ModelInfo(BaseModel):
    """A model advertised by the provider's capability endpoint."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(description="Fully qualified resource name, e.g. 'models/gemini-2.5-flash'")
    version: str = Field(default="", description="Version token as reported by the provider")
    supported_generation_methods: tuple[str, ...] = Field(
        default=(),
        alias="supportedGenerationMethods",
        description="Capabilities the model supports, e.g. 'generateContent'"
    )

    @property
    def short_name(self) -> str:
        """Final path segment of the resource name."""
        return self.name.split("/")[-1]
