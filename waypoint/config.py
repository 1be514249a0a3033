from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # LLM
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"
    LLM_TEMPERATURE: float = 1.0
    LLM_BACKEND: str = "openai"  # "auto" | "openai" | "vllm"
    VLLM_ENDPOINT: str = ""
    VLLM_MODEL_NAME: str = ""

    # Remote (MCP) map tools, served over SSE at {MCP_HOST}/sse
    MCP_HOST: str = "http://localhost:8931"
    MCP_CONNECT_TIMEOUT: float = 10.0

    # Open-Meteo
    GEOCODING_URL: str = "https://geocoding-api.open-meteo.com/v1/search"
    WEATHER_URL: str = "https://api.open-meteo.com/v1/forecast"
    HTTP_TIMEOUT: float = 10.0

    # Location: "static" uses DEFAULT_LATITUDE/DEFAULT_LONGITUDE, "ip" asks IP_GEOLOCATION_URL
    LOCATION_PROVIDER: str = "static"
    DEFAULT_LATITUDE: float = 52.2297
    DEFAULT_LONGITUDE: float = 21.0122
    IP_GEOLOCATION_URL: str = "http://ip-api.com/json"

    # Persistence (empty = in memory only)
    DATA_DIR: str = ""

    # Agent
    EVENT_BUFFER_SIZE: int = 64
    WEATHER_MAX_ITERATIONS: int = 10
    TRIP_MAX_ITERATIONS: int = 50

    # Server
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    class Config:
        env_file = ".env"
        extra = "ignore"

settings = Settings()
