"""
deck_signals/configuration.py
Tunable output limits for the feature engine, persisted as JSON.
"""

import json
import os
from pydantic import BaseModel, Field, PositiveInt, ValidationError
from deck_signals import constants
from deck_signals.logger import create_logger

logger = create_logger()

CONFIG_PATH_ENV = "DECK_SIGNALS_CONFIG"
CONFIG_FILE_NAME = "deck_signals.json"


class Settings(BaseModel):
    signal_card_limit: PositiveInt = constants.SIGNAL_CARD_LIMIT
    signal_land_limit: PositiveInt = constants.SIGNAL_LAND_LIMIT
    commander_text_limit: PositiveInt = constants.COMMANDER_TEXT_LIMIT


class Configuration(BaseModel):
    settings: Settings = Field(default_factory=Settings)


def get_config_path():
    """Environment override first, otherwise a file in the working directory."""
    override = os.environ.get(CONFIG_PATH_ENV)
    if override:
        return override
    return os.path.join(os.getcwd(), CONFIG_FILE_NAME)


def read_configuration(file_location=None):
    """
    Loads the configuration file.
    Returns (Configuration, True) on success, defaults and False otherwise.
    """
    file_location = file_location or get_config_path()
    try:
        with open(file_location, "r", encoding="utf-8") as json_file:
            data = json.load(json_file)
        return Configuration.model_validate(data), True
    except FileNotFoundError:
        logger.info(f"No configuration at {file_location}, using defaults")
    except (json.JSONDecodeError, ValidationError) as error:
        logger.error(f"Unreadable configuration {file_location}: {error}")

    return Configuration(), False


def write_configuration(config: Configuration, file_location=None) -> bool:
    file_location = file_location or get_config_path()
    try:
        with open(file_location, "w", encoding="utf-8") as json_file:
            json.dump(config.model_dump(), json_file, indent=4)
    except OSError as error:
        logger.error(f"write_configuration error: {error}")
        return False
    return True


def reset_configuration(file_location=None) -> bool:
    """Overwrites the file with the default configuration."""
    return write_configuration(Configuration(), file_location)
