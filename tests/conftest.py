import os

from hypothesis import HealthCheck, settings

# Slower, more thorough property runs in CI; select with HYPOTHESIS_PROFILE=ci
settings.register_profile(
    "ci", max_examples=500, suppress_health_check=[HealthCheck.too_slow]
)
settings.register_profile("dev", max_examples=100)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))
