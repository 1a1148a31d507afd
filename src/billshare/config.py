from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from billshare.db.models import DistributionOptions, DistributionType


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )

    database_url: Optional[str] = Field(None, alias="DATABASE_URL")
    currency_symbol: str = Field("£", alias="CURRENCY_SYMBOL")
    tax_distribution: DistributionType = Field(DistributionType.PROPORTIONAL, alias="TAX_DISTRIBUTION")
    tip_distribution: DistributionType = Field(DistributionType.PROPORTIONAL, alias="TIP_DISTRIBUTION")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(True, alias="LOG_JSON")

    @property
    def distribution(self) -> DistributionOptions:
        return DistributionOptions(tax=self.tax_distribution, tip=self.tip_distribution)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
