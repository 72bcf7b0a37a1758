"""IQ-Fit solver configuration."""

from dotenv import find_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Determine the environment file path, or None if not found
ENV_FILE = find_dotenv() or None


class SolverConfig(BaseSettings):
    """Configuration settings for the IQ-Fit solver."""

    n_workers: int | None = Field(default=None, ge=1)
    """Number of worker ranks the first piece's placements are striped over.

    If None (default), uses os.cpu_count() minus one.
    """

    max_processes: int | None = Field(default=None, ge=1)
    """Maximum number of worker processes. If None (default), one per rank, up to the CPU count."""

    output_path: str = "solutions.txt"
    """File the solved boards are written to. Default: solutions.txt."""

    log_dir: str = "logs"
    """Directory for per-run log files. Default: logs."""

    report_interval: int = Field(default=10, ge=1)
    """Interval (in first-piece placements searched) at which workers report progress. Default: 10."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        env_prefix="IQFIT_",
        extra="forbid",
    )


config = SolverConfig()
