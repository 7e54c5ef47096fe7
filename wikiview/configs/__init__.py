import codecs
import logging
import os.path as osp
import shutil

import yaml

from wikiview.utils.logger import logger


here = osp.dirname(osp.abspath(__file__))

USER_CONFIG_FILE = osp.join(osp.expanduser("~"), ".wikiviewrc")


def update_dict(target_dict, new_dict, validate_item=None):
    for key, value in new_dict.items():
        if validate_item:
            validate_item(key, value)
        if key not in target_dict:
            logger.warning("Skipping unexpected key in config: {}".format(key))
            continue
        if isinstance(target_dict[key], dict) and isinstance(value, dict):
            update_dict(target_dict[key], value, validate_item=validate_item)
        else:
            target_dict[key] = value


def get_default_config():
    config_file = osp.join(here, "default_config.yaml")
    with open(config_file) as f:
        config = yaml.safe_load(f)

    # save default config to ~/.wikiviewrc
    if not osp.exists(USER_CONFIG_FILE):
        try:
            shutil.copy(config_file, USER_CONFIG_FILE)
        except OSError:
            logger.warning("Failed to save config: {}".format(USER_CONFIG_FILE))

    return config


def validate_config_item(key, value):
    if key == "mime_types":
        if (
            not isinstance(value, list)
            or not value
            or not all(isinstance(v, str) and "/" in v for v in value)
        ):
            raise ValueError(
                "Unexpected value for config key 'mime_types': {}".format(value)
            )
    if key == "file_suffixes" and (
        not isinstance(value, list)
        or not all(isinstance(v, str) and v.startswith(".") for v in value)
    ):
        raise ValueError(
            "Unexpected value for config key 'file_suffixes': {}".format(value)
        )
    if key == "encoding":
        try:
            codecs.lookup(value)
        except (LookupError, TypeError):
            raise ValueError(
                "Unexpected value for config key 'encoding': {}".format(value)
            )
    if key == "level" and not isinstance(
        logging.getLevelName(str(value).upper()), int
    ):
        raise ValueError(
            "Unexpected value for config key 'level': {}".format(value)
        )
    if key in ("status_timeout_ms", "width", "height") and (
        not isinstance(value, int) or isinstance(value, bool) or value < 0
    ):
        raise ValueError(
            "Unexpected value for config key '{}': {}".format(key, value)
        )


def get_config(config_file_or_yaml=None, config_from_args=None):
    # 1. default config
    config = get_default_config()

    # 2. specified as file or yaml
    if config_file_or_yaml is not None:
        config_from_yaml = yaml.safe_load(config_file_or_yaml)
        if not isinstance(config_from_yaml, dict):
            with open(config_from_yaml) as f:
                logger.info(
                    "Loading config file from: {}".format(config_from_yaml)
                )
                config_from_yaml = yaml.safe_load(f) or {}
        update_dict(config, config_from_yaml, validate_item=validate_config_item)

    # 3. command line argument
    if config_from_args is not None:
        update_dict(config, config_from_args, validate_item=validate_config_item)

    return config
