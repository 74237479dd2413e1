# tests/unit/test_config.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import dataclasses

import pytest

from termcast.runtime.config import EnvironmentConfig
from termcast.runtime.pending import DEFAULT_MAX_TIMEOUT


def test_defaults():
    config = EnvironmentConfig()
    assert config.install_builtins is False
    assert config.log_events is False
    assert config.default_timeout is None
    assert config.max_timeout == DEFAULT_MAX_TIMEOUT
    assert config.root_name == "root"
    assert config.logger_name == "termcast.environment"


def test_config_is_frozen():
    config = EnvironmentConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.root_name = "other"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"default_timeout": -1},
        {"max_timeout": -0.5},
        {"max_timeout": None},
        {"max_timeout": float("inf")},
        {"root_name": ""},
        {"root_name": "a.b"},
        {"logger_name": ""},
    ],
)
def test_invalid_config(kwargs):
    with pytest.raises(ValueError):
        EnvironmentConfig(**kwargs)


def test_replace_validates():
    config = EnvironmentConfig(default_timeout=1.0)
    assert dataclasses.replace(config, max_timeout=2.0).max_timeout == 2.0
    with pytest.raises(ValueError):
        dataclasses.replace(config, default_timeout=-1)
