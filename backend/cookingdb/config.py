from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "cookingdb-engine"
    env: str = "local"
    log_level: str = "INFO"

    # Scaling precision: multipliers are snapped to n/16 before scaling ratios.
    fraction_max_denominator: int = 16
    # Converted amounts within this distance of a cooking fraction display as that fraction.
    display_snap_tolerance: float = 0.01

    # Serving search upper bound (inclusive); the search always starts at 1.
    max_servings: int = 20
    default_daily_kcal: float = 2000.0
    default_meals_per_day: int = 3

    class Config:
        env_file = ".env"
        env_prefix = "COOKINGDB_"


settings = Settings()
