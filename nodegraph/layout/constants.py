"""
布局常量定义模块

集中管理分组框、便签与普通节点的尺寸约束以及回退网格参数。
"""

from typing import Tuple

# ============================================================================
# 分组框（groupBox）
# ============================================================================

# 标题栏高度
GROUP_BOX_HEADER_HEIGHT: float = 34.0

# 内容区内边距（成员节点与分组框边缘之间的留白）
GROUP_BOX_PADDING_TOP: float = 16.0
GROUP_BOX_PADDING_RIGHT: float = 34.0
GROUP_BOX_PADDING_BOTTOM: float = 24.0
GROUP_BOX_PADDING_LEFT: float = 34.0

# 自动布局得到的分组框尺寸范围
GROUP_BOX_MIN_WIDTH: float = 220.0
GROUP_BOX_MAX_WIDTH: float = 2200.0
GROUP_BOX_MIN_HEIGHT: float = 140.0
GROUP_BOX_MAX_HEIGHT: float = 1800.0

# 从 data(autoBoxWidth/boxWidth) 解析尺寸时的默认值与范围
GROUP_BOX_DEFAULT_WIDTH: int = 360
GROUP_BOX_DEFAULT_HEIGHT: int = 220
GROUP_BOX_PARSE_MIN_WIDTH: float = 160.0
GROUP_BOX_PARSE_MIN_HEIGHT: float = 120.0

# 在分组框内新建节点时与内容区左/上边缘的间距
GROUP_BOX_CREATE_INSET: float = 8.0

# ============================================================================
# 普通节点
# ============================================================================

NODE_DEFAULT_WIDTH: float = 220.0
NODE_DEFAULT_HEIGHT: float = 96.0
NODE_MIN_WIDTH: float = 120.0
NODE_MAX_WIDTH: float = 2200.0
NODE_MIN_HEIGHT: float = 64.0
NODE_MAX_HEIGHT: float = 1800.0

# ============================================================================
# 便签（stickyNote）
# ============================================================================

STICKY_NOTE_MIN_WIDTH: float = 24.0
STICKY_NOTE_MAX_WIDTH: float = 1200.0
STICKY_NOTE_MIN_HEIGHT: float = 30.0
STICKY_NOTE_MAX_HEIGHT: float = 1200.0

# 内容估算参数
STICKY_NOTE_CHAR_WIDTH: int = 8
STICKY_NOTE_LINE_HEIGHT: int = 18
STICKY_NOTE_PADDING_X: int = 20
STICKY_NOTE_PADDING_Y: int = 14
STICKY_NOTE_CHARS_PER_EXTRA_ROW: int = 160
STICKY_NOTE_EXTRA_ROW_HEIGHT: int = 10
STICKY_NOTE_ESTIMATE_MAX_WIDTH: int = 1100
STICKY_NOTE_ESTIMATE_MAX_HEIGHT: int = 1200
STICKY_NOTE_EMPTY_MIN_SIZE: Tuple[int, int] = (86, 38)
STICKY_NOTE_CONTENT_MIN_SIZE: Tuple[int, int] = (24, 30)

# ============================================================================
# 回退网格（坐标缺失时按节点下标排布）
# ============================================================================

FALLBACK_GRID_X_STEP: float = 220.0
FALLBACK_GRID_Y_STEP: float = 140.0
FALLBACK_GRID_COLUMNS: int = 4

# ============================================================================
# 节点操作偏移
# ============================================================================

# 从端口菜单新建节点：输出端口向右、输入端口向左
PORT_CREATE_OFFSET_X: float = 260.0
PORT_CREATE_OFFSET_Y: float = 24.0

# 复制节点的位移
DUPLICATE_OFFSET: float = 36.0
