"""Crawler configuration using Pydantic Settings."""

from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Keyword -> logins appended to every path containing the keyword.
DEFAULT_FALLBACK_OWNERS: dict[str, list[str]] = {
    "ui": ["bryk"],
    "kubectl": ["bgrant0607"],
    "chinese": ["hurf"],
    "example": ["jeffmendoza"],
    "admission": ["erictune", "derekwaynecarr", "davidopp"],
    "api": ["bgrant0607"],
    "machinery": ["lavalamp"],
    "etcd": ["lavalamp"],
    "node": ["dchen1107"],
    "storage": ["saad-ali"],
    "network": ["thockin"],
    "sched": ["davidopp"],
    "control": ["bprashanth"],
    "replic": ["bprashanth"],
    "job": ["erictune", "soltysh"],
    "deploy": ["bgrant0607"],
    "nodecontroller": ["davidopp", "gmarek"],
    "pets": ["bprashanth"],
    "service": ["bprashanth"],
    "endpo": ["bprashanth"],
    "gc": ["mikedanese"],
    "namesp": ["derekwaynecarr"],
    "autosc": ["fgrzadkowski"],
    "quota": ["derekwaynecarr"],
    "account": ["liggitt"],
    "route": ["cjcullen"],
    "volu": ["jsafrane", "saad-ali"],
    "dns": ["ArtfulCoder"],
    "scala": ["wojtek-t"],
    "releas": ["david-mcmahon"],
    "ha": ["mikedanese"],
    "auth": ["erictune"],
    "security": ["erictune"],
    "mesos": ["jdef"],
    "aws": ["justinsb"],
    "openstack": ["xsgordon", "idvoretskyi"],
}


class Settings(BaseSettings):
    """Crawler settings loaded from environment variables and CLI flags.

    The instance is frozen: it is built once at startup and handed to every
    component of the crawl.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # GitHub
    github_token: SecretStr = Field(default=SecretStr(""))
    github_org: str = "kubernetes"
    github_repo: str = "kubernetes"
    github_api_url: str = "https://api.github.com"
    request_timeout: float = 30.0

    # Crawl
    top_dir: str = ""
    local_repo: Path = Path("")
    depth: int = Field(default=10, ge=0)
    process_documents: bool = True
    document_name_marker: str = "md"
    ignore_patterns: list[str] = Field(default_factory=list)
    dry_run: bool = False

    # Ranking
    commits_page_size: int = Field(default=200, gt=0)
    owner_limit: int = Field(default=3, gt=0)
    excluded_logins: list[str] = Field(default_factory=lambda: ["johndmulhausen"])
    merge_commit_prefix: str = "Merge pull request"
    skip_maintenance_commits: bool = True
    maintenance_markers: list[str] = Field(
        default_factory=lambda: ["gendocs", "moving"]
    )
    fallback_owners: dict[str, list[str]] = Field(
        default_factory=lambda: {
            key: list(logins) for key, logins in DEFAULT_FALLBACK_OWNERS.items()
        }
    )

    # Observability
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "console"

    @field_validator("top_dir")
    @classmethod
    def _strip_slashes(cls, value: str) -> str:
        return value.strip("/")

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    @property
    def repo_full_name(self) -> str:
        """Repository in ``org/repo`` form."""
        return f"{self.github_org}/{self.github_repo}"
