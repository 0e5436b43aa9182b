from __future__ import annotations

from datetime import datetime
from typing import Any

_settings = None  # 延迟导入 settings，避免循环依赖


def _now() -> str:
    return datetime.now().strftime("%H:%M:%S")


def _get_settings():
    """
    延迟获取全局设置实例。

    这样可以避免在导入阶段形成 `settings ↔ logger` 的循环依赖，
    同时保持对 `settings.ENGINE_LOG_VERBOSE` 等开关的按需读取。
    """
    global _settings
    if _settings is None:
        from nodegraph.configs.settings import settings as _settings_instance

        _settings = _settings_instance
    return _settings


def _format(message: str, args: tuple) -> str:
    if args:
        return message.format(*args)
    return message


def log_info(message: str, *args: Any) -> None:
    """信息日志。由 settings.ENGINE_LOG_VERBOSE 控制是否输出。"""
    settings = _get_settings()
    if getattr(settings, "ENGINE_LOG_VERBOSE", False):
        print(f"[INFO { _now() }] " + _format(message, args))


def log_debug(flag_name: str, message: str, *args: Any) -> None:
    """分区调试日志。仅当 settings 上名为 flag_name 的开关为 True 时输出。

    Args:
        flag_name: 设置项名称，例如 "GROUP_LAYOUT_VERBOSE"
        message: 支持 str.format 占位符的消息模板
    """
    settings = _get_settings()
    if getattr(settings, flag_name, False):
        print(f"[DEBUG { _now() }] " + _format(message, args))


def log_warn(message: str, *args: Any) -> None:
    """警告日志。始终输出。"""
    print(f"[WARN { _now() }] " + _format(message, args))


def log_error(message: str, *args: Any) -> None:
    """错误日志。始终输出。"""
    print(f"[ERR  { _now() }] " + _format(message, args))
