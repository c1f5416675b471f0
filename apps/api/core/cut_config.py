"""
Weight Cut Configuration

Backend-configurable thresholds for the cut planning engine.
Coaches can tighten or relax these without code changes.
"""
from pydantic_settings import BaseSettings


class CutConfig(BaseSettings):
    """
    Configurable weight cut settings.

    These can be adjusted via environment variables (CUT_ prefix)
    without requiring code changes.
    """
    # Pace tolerance band (lbs either side of today's target)
    # Default: 1.5 lbs absorbs scale noise and a full bladder
    on_track_buffer_lbs: float = 1.5

    # Hard ceiling on prescribed daily water (oz)
    # Default: 320 oz (2.5 gal) regardless of weight class
    max_daily_water_oz: int = 320

    # Sweat rates above this (lbs/hr) are treated as bad timestamps
    max_sweat_rate_lbs_per_hr: float = 6.0

    # Gram drift tolerated before slice-mode totals overwrite gram totals
    reconcile_gram_tolerance: float = 5.0

    # Protocol assumed when a stored profile carries an unknown id
    default_protocol: str = "2"

    class Config:
        env_prefix = "CUT_"
        case_sensitive = False


# Global config instance
cut_config = CutConfig()
