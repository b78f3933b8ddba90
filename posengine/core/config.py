from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_VAT_BUCKETS = (0, 5, 8, 10)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="POS_", extra="ignore")

    app_name: str = "F&B POS order engine"
    env: str = "dev"

    log_level: str = "INFO"
    log_format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"

    vat_buckets: tuple[int, ...] = Field(
        default=DEFAULT_VAT_BUCKETS,
        description="VAT rates (percent) that carry tax; any other rate contributes zero",
    )
    warn_on_unknown_vat_rate: bool = True
    reconciliation_tolerance: float = 1e-6

    # Pay mode used for labels when no FnB config was fetched: 1 counter | 2 table
    default_payment_mode: int = 1
    currency_symbol: str = "₫"

    def model_post_init(self, __context) -> None:
        if not self.vat_buckets:
            raise ValueError("POS_VAT_BUCKETS must list at least one rate")
        negative = [rate for rate in self.vat_buckets if rate < 0]
        if negative:
            raise ValueError(f"negative VAT buckets are not allowed: {negative}")
        if self.default_payment_mode not in (1, 2):
            raise ValueError("POS_DEFAULT_PAYMENT_MODE must be 1 (counter) or 2 (table)")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
