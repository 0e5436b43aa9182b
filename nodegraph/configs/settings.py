"""全局设置模块 - 控制节点图引擎的行为和调试选项

这个模块提供了一个集中的配置系统，用于控制引擎的日志、持久化与分组布局行为。
支持从配置文件加载和保存设置。

使用方法：
    from nodegraph.configs.settings import settings
    from nodegraph.utils.logging.logger import log_info

    if settings.GROUP_LAYOUT_VERBOSE:
        log_info("调试信息")

    # 保存设置
    settings.save()

    # 加载设置
    settings.load()
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from nodegraph.utils.logging.logger import log_info, log_warn

DEFAULT_USER_SETTINGS_RELATIVE_PATH = Path("runtime_cache/nodegraph_settings.json")


class Settings:
    """全局设置类

    所有设置项都是类属性，可以直接访问和修改。
    """

    # ========== 调试选项 ==========

    # 引擎日志：控制 `nodegraph.utils.logging.logger.log_info` 是否输出
    # 默认 False（关闭），生产环境下仅保留 warn/error
    ENGINE_LOG_VERBOSE: bool = False

    # 连线校验详细日志（打印每次被拒绝的连线及原因）
    # 默认 False
    CONNECTION_VALIDATOR_VERBOSE: bool = False

    # 分组框自动布局详细日志（打印包围盒计算与位置修正）
    # 默认 False，避免拖拽时刷屏
    GROUP_LAYOUT_VERBOSE: bool = False

    # 持久化详细日志（加载/迁移/落盘）
    # 默认 False
    PERSISTENCE_VERBOSE: bool = False

    # ========== 持久化选项 ==========

    # 自动保存间隔（秒），0 表示每次稳定修改后在下一次 pump 时立即保存
    # 间隔内的多次修改会合并为一次写入
    AUTO_SAVE_INTERVAL: float = 0.0

    # 项目快照在键值存储中的键前缀，完整键为 "{前缀}:{项目ID}"
    STORAGE_KEY_PREFIX: str = "mdr:nodegraph:native"

    # 新建项目/迁移旧数据时默认的节点图名称
    DEFAULT_GRAPH_NAME: str = "Main"

    # ========== 交互选项 ==========

    # 提示文本自动消失的延迟（秒）；新的提示会重新计时
    HINT_DISMISS_SECONDS: float = 2.2

    # 拖入分组框时是否弹出确认
    # True：通过确认回调逐个询问；False：直接加入分组
    CONFIRM_ATTACH_TO_GROUP: bool = True

    # ========== 分组布局 ==========

    # 分组框位置修正阈值（像素）：位置差小于该值时不写回，避免反复刷新
    GROUP_LAYOUT_EPSILON: float = 0.5

    # 配置文件路径（相对于workspace）
    _config_file: Optional[Path] = None
    # 工作区根目录（由 set_config_path(workspace_root) 显式注入）
    _workspace_root: Optional[Path] = None

    def __repr__(self) -> str:
        """返回所有设置的字符串表示"""
        settings_dict = {
            key: value for key, value in self.__class__.__dict__.items()
            if not key.startswith('_') and key.isupper()
        }
        return f"Settings({settings_dict})"

    @classmethod
    def set_config_path(cls, workspace_path: Path):
        """设置配置文件路径

        Args:
            workspace_path: 工作空间根目录
        """
        config_file = workspace_path / DEFAULT_USER_SETTINGS_RELATIVE_PATH
        log_info(
            "[BOOT][Settings] set_config_path: workspace_path={} -> config_file={}",
            workspace_path,
            config_file,
        )
        cls._config_file = config_file
        cls._workspace_root = workspace_path.resolve()

    def _get_all_settings(self) -> Dict[str, Any]:
        """获取所有设置项的字典

        注意：从实例获取属性，以支持实例属性覆盖类属性的情况
        """
        return {
            key: getattr(self, key)
            for key in dir(self.__class__)
            if not key.startswith('_') and key.isupper()
        }

    def save(self) -> bool:
        """保存设置到配置文件

        Returns:
            是否保存成功
        """
        if self.__class__._config_file is None:
            log_warn("配置文件路径未设置，无法保存设置")
            return False

        settings_dict = self._get_all_settings()
        self.__class__._config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.__class__._config_file, 'w', encoding='utf-8') as file:
            json.dump(settings_dict, file, indent=2, ensure_ascii=False)
        return True

    def load(self) -> bool:
        """从配置文件加载设置

        Returns:
            是否加载成功
        """
        config_file = self.__class__._config_file
        if config_file is None:
            log_info("[BOOT][Settings] load: _config_file 未设置，跳过加载，使用类默认值")
            return False

        if not config_file.exists():
            log_info("[BOOT][Settings] load: 配置文件不存在（{}），跳过加载，使用类默认值", config_file)
            return False

        log_info("[BOOT][Settings] load: 准备从 {} 加载配置", config_file)
        with open(config_file, 'r', encoding='utf-8') as file:
            settings_dict = json.load(file)

        applied_count = 0
        for key, value in settings_dict.items():
            if hasattr(self.__class__, key) and key.isupper():
                setattr(self, key, value)
                applied_count += 1

        log_info("[BOOT][Settings] load: 配置加载完成，共应用 {} 个键", applied_count)
        return True

    @classmethod
    def reset_to_defaults(cls):
        """重置所有设置为默认值"""
        cls.ENGINE_LOG_VERBOSE = False
        cls.CONNECTION_VALIDATOR_VERBOSE = False
        cls.GROUP_LAYOUT_VERBOSE = False
        cls.PERSISTENCE_VERBOSE = False
        cls.AUTO_SAVE_INTERVAL = 0.0
        cls.STORAGE_KEY_PREFIX = "mdr:nodegraph:native"
        cls.DEFAULT_GRAPH_NAME = "Main"
        cls.HINT_DISMISS_SECONDS = 2.2
        cls.CONFIRM_ATTACH_TO_GROUP = True
        cls.GROUP_LAYOUT_EPSILON = 0.5
        log_info("已重置所有设置为默认值")

    @classmethod
    def enable_debug_mode(cls):
        """启用所有调试选项（用于开发调试）"""
        cls.ENGINE_LOG_VERBOSE = True
        cls.CONNECTION_VALIDATOR_VERBOSE = True
        cls.GROUP_LAYOUT_VERBOSE = True
        cls.PERSISTENCE_VERBOSE = True
        log_info("已启用调试模式：所有详细日志已打开")

    @classmethod
    def disable_debug_mode(cls):
        """禁用所有调试选项（恢复默认）"""
        cls.ENGINE_LOG_VERBOSE = False
        cls.CONNECTION_VALIDATOR_VERBOSE = False
        cls.GROUP_LAYOUT_VERBOSE = False
        cls.PERSISTENCE_VERBOSE = False
        log_info("已禁用调试模式：恢复默认设置")


# 全局设置实例
settings = Settings()
