"""
节点图工程文件工具入口（CLI）。

用法：
- `python -X utf8 -m nodegraph.cli.graph_tools inspect project.json`
- `python -X utf8 -m nodegraph.cli.graph_tools validate project.json`

输入文件可以是以下任一种 JSON：
- 项目快照 v2：{"version": 2, "activeGraphId", "graphs"}
- 旧版单图存档：{"nodes", "edges"}
- 组合文档：{"logic": {...}, "x-nodeGraphEditor": {...}}

本工具只读写文件，不访问编辑器的键值存储。
"""

from __future__ import annotations

import argparse
import io
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Sequence


if not __package__:
    raise SystemExit(
        "请从项目根目录使用模块方式运行：\n"
        "  python -X utf8 -m nodegraph.cli.graph_tools --help\n"
        "（不支持直接以脚本路径运行）"
    )

from nodegraph.graph.models.graph_model import GraphDocument, ProjectSnapshot
from nodegraph.persistence.editor_state import build_editor_state
from nodegraph.persistence.logic_export import (
    LOGIC_KEY,
    build_project_document,
    read_project_document,
    serialize_graphs_for_logic,
)
from nodegraph.persistence.project_snapshot import parse_project_payload
from nodegraph.validate.connection_validator import ConnectionCandidate, validate_connection


class ProjectFileError(Exception):
    """输入文件无法读取或结构无法识别。"""


def _install_utf8_streams_on_windows() -> None:
    if sys.platform != "win32":
        return
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8", errors="replace")  # type: ignore[attr-defined]
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding="utf-8", errors="replace")  # type: ignore[attr-defined]


# ---------------------------------------------------------------------------- 读写

def load_project_file(file_path: Path) -> ProjectSnapshot:
    """读取工程文件并规范为项目快照

    Raises:
        ProjectFileError: 文件不存在、不是合法 JSON，或结构无法识别
    """
    if not file_path.is_file():
        raise ProjectFileError(f"文件不存在：{file_path}")
    text = file_path.read_text(encoding="utf-8")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ProjectFileError(f"不是合法的 JSON：{file_path}（{exc}）") from exc

    if isinstance(payload, dict) and isinstance(payload.get(LOGIC_KEY), dict):
        return read_project_document(payload)
    snapshot = parse_project_payload(payload)
    if snapshot is None:
        raise ProjectFileError(f"无法识别的工程文件结构：{file_path}")
    return snapshot


def _write_json(payload: Dict[str, Any], output_text: str) -> None:
    text = json.dumps(payload, ensure_ascii=False, indent=2)
    if not output_text:
        print(text)
        return
    output_path = Path(output_text)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(text + "\n", encoding="utf-8")
    print(f"[OK] 已写出 {output_path}")


# ---------------------------------------------------------------------------- 校验

def collect_invalid_edges(graph: GraphDocument) -> List[Dict[str, str]]:
    """逐条重新校验连线：每条连线都与图中其余连线比较。"""
    problems: List[Dict[str, str]] = []
    for edge in graph.edges:
        other_edges = [other for other in graph.edges if other.id != edge.id]
        result = validate_connection(
            ConnectionCandidate(
                source=edge.src_node,
                target=edge.dst_node,
                source_handle=edge.src_port,
                target_handle=edge.dst_port,
            ),
            graph.nodes,
            other_edges,
        )
        if not result.valid:
            problems.append({"edge_id": edge.id, "reason": result.reason or "", "hint": result.hint or ""})
    return problems


# ---------------------------------------------------------------------------- 子命令

def _run_inspect(snapshot: ProjectSnapshot) -> int:
    print("=" * 80)
    print(f"activeGraphId: {snapshot.active_graph_id}")
    print(f"节点图数量: {len(snapshot.graphs)}")
    for graph in snapshot.graphs:
        marker = "*" if graph.graph_id == snapshot.active_graph_id else " "
        group_count = sum(1 for node in graph.nodes if node.is_group_box)
        print(
            f" {marker} {graph.graph_id}  「{graph.graph_name}」 "
            f"节点 {len(graph.nodes)}，连线 {len(graph.edges)}，分组框 {group_count}"
        )
    print("=" * 80)
    return 0


def _run_validate(snapshot: ProjectSnapshot) -> int:
    invalid_total = 0
    for graph in snapshot.graphs:
        problems = collect_invalid_edges(graph)
        if not problems:
            print(f"[OK] {graph.graph_name} ({graph.graph_id})")
            continue
        invalid_total += len(problems)
        print(f"[FAILED] {graph.graph_name} ({graph.graph_id})：{len(problems)} 条非法连线")
        for problem in problems:
            print(f"  - {problem['edge_id']} [{problem['reason']}] {problem['hint']}")
    print("=" * 80)
    if invalid_total > 0:
        print(f"验证完成：共 {invalid_total} 条非法连线")
        return 1
    print("[SUCCESS] 所有连线合法")
    return 0


def _run_export_logic(snapshot: ProjectSnapshot, parsed_args: argparse.Namespace) -> int:
    if parsed_args.with_layout:
        payload = build_project_document(snapshot)
    else:
        payload = {
            "activeGraphId": snapshot.active_graph_id,
            "graphs": serialize_graphs_for_logic(snapshot.graphs),
        }
    _write_json(payload, parsed_args.output)
    return 0


def _run_export_layout(snapshot: ProjectSnapshot, parsed_args: argparse.Namespace) -> int:
    _write_json(build_editor_state(snapshot).serialize(), parsed_args.output)
    return 0


def _run_migrate(snapshot: ProjectSnapshot, parsed_args: argparse.Namespace) -> int:
    _write_json(snapshot.serialize(), parsed_args.output)
    return 0


def _parse_cli(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="graph_tools",
        description="节点图工程文件工具（检查/校验/导出/迁移）",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    inspect_parser = subparsers.add_parser("inspect", help="打印节点图/节点/连线概要")
    inspect_parser.add_argument("file", help="工程文件路径")

    validate_parser = subparsers.add_parser("validate", help="重新校验全部连线；存在非法连线时返回 1")
    validate_parser.add_argument("file", help="工程文件路径")

    export_logic_parser = subparsers.add_parser("export-logic", help="导出逻辑部分（不含坐标与编辑器字段）")
    export_logic_parser.add_argument("file", help="工程文件路径")
    export_logic_parser.add_argument("-o", "--output", default="", help="输出文件；为空时打印到标准输出")
    export_logic_parser.add_argument(
        "--with-layout",
        dest="with_layout",
        action="store_true",
        help="输出组合文档：{logic, x-nodeGraphEditor}",
    )

    export_layout_parser = subparsers.add_parser("export-layout", help="导出编辑器布局状态（EditorLayoutState v1）")
    export_layout_parser.add_argument("file", help="工程文件路径")
    export_layout_parser.add_argument("-o", "--output", default="", help="输出文件；为空时打印到标准输出")

    migrate_parser = subparsers.add_parser("migrate", help="任意受支持的输入 → 项目快照 v2")
    migrate_parser.add_argument("file", help="工程文件路径")
    migrate_parser.add_argument("-o", "--output", default="", help="输出文件；为空时打印到标准输出")

    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> int:
    _install_utf8_streams_on_windows()

    argv_list: Sequence[str] = sys.argv[1:] if argv is None else argv
    parsed_args = _parse_cli(argv_list)

    try:
        snapshot = load_project_file(Path(parsed_args.file))
    except ProjectFileError as exc:
        print(f"[ERROR] {exc}")
        return 1

    if parsed_args.command == "inspect":
        return _run_inspect(snapshot)
    if parsed_args.command == "validate":
        return _run_validate(snapshot)
    if parsed_args.command == "export-logic":
        return _run_export_logic(snapshot, parsed_args)
    if parsed_args.command == "export-layout":
        return _run_export_layout(snapshot, parsed_args)
    if parsed_args.command == "migrate":
        return _run_migrate(snapshot, parsed_args)

    raise SystemExit(f"未知命令: {parsed_args.command}")


if __name__ == "__main__":
    sys.exit(main())
