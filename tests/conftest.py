from __future__ import annotations

import sys
from pathlib import Path

import pytest

# 确保项目根目录在 sys.path 中，便于在 pytest 下稳定导入 `nodegraph` 包。
PROJECT_ROOT = Path(__file__).resolve().parents[1]
PROJECT_ROOT_STR = str(PROJECT_ROOT)
if PROJECT_ROOT_STR not in sys.path:
    sys.path.insert(0, PROJECT_ROOT_STR)

# 初始化 settings 的配置文件路径；用户配置不存在时使用类默认值。
from nodegraph.configs.settings import Settings, settings  # noqa: E402

settings.set_config_path(PROJECT_ROOT)
settings.load()

_SETTING_KEYS = [key for key in dir(Settings) if key.isupper() and not key.startswith("_")]


@pytest.fixture(autouse=True)
def _restore_settings():
    """每个用例结束后恢复设置，避免用例之间互相影响。"""
    previous = {key: getattr(settings, key) for key in _SETTING_KEYS}
    yield
    for key, value in previous.items():
        settings.__dict__.pop(key, None)
        setattr(Settings, key, value)
