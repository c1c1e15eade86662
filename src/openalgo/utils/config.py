"""
OpenAlgo Client Configuration
"""

import os
from typing import Dict, Any
from pydantic import BaseModel, Field
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class ApiConfig(BaseModel):
    """REST API configuration"""
    api_key: str = Field(default="", description="OpenAlgo API key")
    host: str = Field(default="http://127.0.0.1:5000", description="OpenAlgo server URL")
    version: str = Field(default="v1", description="REST API version")
    timeout: float = Field(default=30.0, description="REST request timeout in seconds")
    strategy: str = Field(default="Python", description="Strategy name sent with orders")


class StreamingConfig(BaseModel):
    """WebSocket streaming configuration"""
    ws_url: str = Field(default="ws://127.0.0.1:8765", description="WebSocket server URL")

    # Fixed delay, fixed attempt count: bounds worst-case time to data recovery
    max_reconnect_attempts: int = Field(default=5, ge=0, description="Automatic reconnect attempts before giving up")
    reconnect_delay: float = Field(default=3.0, ge=0, description="Seconds between a closure and the next attempt")

    ping_interval: float = Field(default=20.0, description="Keepalive ping interval in seconds")
    ping_timeout: float = Field(default=10.0, description="Keepalive pong timeout in seconds")
    close_timeout: float = Field(default=10.0, description="Closing handshake timeout in seconds")
    resubscribe_on_reconnect: bool = Field(default=True, description="Replay active subscriptions after every reconnect")


class Config:
    """Main configuration class"""

    def __init__(self):
        self.api = ApiConfig(
            api_key=os.getenv("OPENALGO_API_KEY", ""),
            host=os.getenv("OPENALGO_HOST", "http://127.0.0.1:5000")
        )
        self.streaming = StreamingConfig(
            ws_url=os.getenv("OPENALGO_WS_URL", "ws://127.0.0.1:8765")
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary"""
        return {
            "api": self.api.model_dump(),
            "streaming": self.streaming.model_dump()
        }


# Global configuration instance
config = Config()
