"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings

from philgen.engine.config import GeneratorConfig


class Settings(BaseSettings):
    philgen_env: str = "development"
    philgen_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Outlines: bundled descriptors when unset
    outline_dir: str | None = None

    # Generation
    canvas_size: int = 420
    oracle: str = "winding"
    exact_clipping: bool = True
    clip_tolerance: float = 0.25
    default_seed: int | None = None

    # Optimizer channel
    optimizer_timeout_s: float = 5.0
    optimizer_precision: int = 1

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    def generator_config(self) -> GeneratorConfig:
        return GeneratorConfig(
            canvas_size=self.canvas_size,
            oracle=self.oracle,
            exact_clipping=self.exact_clipping,
            clip_tolerance=self.clip_tolerance,
        )


settings = Settings()
