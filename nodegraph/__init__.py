"""节点图逻辑编辑器引擎

- graph: 端口标识与节点图数据模型
- validate: 连线合法性与节点校验提示
- mutation: 节点变更、分组归属、节点命令与右键菜单动作
- layout: 分组框自动布局与几何计算
- persistence: 项目快照、逻辑导出、编辑器布局状态与旧存档迁移
- runtime: 键值存储与编辑会话
"""
