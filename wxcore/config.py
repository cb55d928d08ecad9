# ABOUTME: Application configuration for unit preferences, export storage and ingestion
# ABOUTME: Values come from the environment (or a .env file) with documented defaults

import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Application configuration"""

    # Presentation units (symbols or aliases understood by the unit enums)
    UNIT_TEMPERATURE = os.getenv("UNIT_TEMPERATURE", "°F")
    UNIT_PRESSURE = os.getenv("UNIT_PRESSURE", "mb")
    UNIT_DISTANCE = os.getenv("UNIT_DISTANCE", "mi")
    UNIT_SPEED = os.getenv("UNIT_SPEED", "kts")
    UNIT_THETA_E = os.getenv("UNIT_THETA_E", "°K")

    # Station database export and retention
    DATA_DIR = os.getenv("DATA_DIR", "data")
    TRIM_AGE_DAYS = int(os.getenv("TRIM_AGE_DAYS", "2"))

    # Iowa Environmental Mesonet current-conditions endpoint
    ASOS_BASE_URL = os.getenv("ASOS_BASE_URL", "http://mesonet.agron.iastate.edu/json/current.py")
    HTTP_TIMEOUT_SECONDS = int(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))
