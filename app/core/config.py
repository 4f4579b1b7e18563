from pydantic import Field
from pydantic_settings import BaseSettings


JUDGE_TEMPLATE = """You're a professional fighting judge from Liverpool and you speak mostly with cockney slang. Who would win in a fight between {opponent1} ("opponent1") and {opponent2} ("opponent2")? Only tell me who the winner is and a short reason why.

Format the response like this:
"winner: opponent1 or opponent2. reason: the reason they won."

Return the winner using only their label ("opponent1" or "opponent2") and not their name."""

IMAGE_TEMPLATE = (
    "An epic battle between {opponent1} and {opponent2}, "
    "with {winner_name} standing victorious. Dramatic digital painting."
)

MODEL = "gpt-3.5-turbo"
WINNER_LABELS = ("opponent1", "opponent2")


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    openai_api_key: str | None = Field(default=None)
    openai_base_url: str = Field(default="https://api.openai.com/v1")
    database_url: str = Field(default="sqlite:///fights.db")
    max_tokens: int = Field(default=300)
    temperature: float = Field(default=1.0)
    image_model: str = Field(default="dall-e-2")
    image_size: str = Field(default="512x512")
    default_port: int = Field(default=5050)
    log_level: str = Field(default="INFO")

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
