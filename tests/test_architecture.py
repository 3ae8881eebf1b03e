"""
アーキテクチャテスト

目的:
- 数値レイヤ（外側→内側のみ許可、同層は許可）
- 個別禁止エッジ（コーデックは図モデルを知らない、engine は api を知らない）
- モジュール単位の import 循環がない
"""

from __future__ import annotations

import ast
import pathlib
from typing import Dict, Iterator, List, Optional, Set, Tuple

import pytest

REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC_DIR = REPO_ROOT / "src"
PKG = "vecfig"

# レイヤ定義（数値が小さいほど内側）
# L0: Base/Geometry, L1: Projection/Style, L2: Model, L3: Export, L4: API
LAYER_MAP = {
    ("common",): 0,
    ("engine", "core"): 0,
    ("engine", "projection"): 1,
    ("engine", "style"): 1,
    ("engine", "model"): 2,
    ("engine", "export"): 3,
    ("api",): 4,
}

# 方言コーデック本体（service 以外）
CODEC_MODULES = {"base", "registry", "tikz", "svg"}


def iter_py_files(root: pathlib.Path) -> Iterator[pathlib.Path]:
    for p in root.rglob("*.py"):
        if "__pycache__" in p.parts:
            continue
        yield p


def module_name_from_path(path: pathlib.Path) -> str:
    rel = path.relative_to(SRC_DIR).with_suffix("")
    parts = list(rel.parts)
    if parts[-1] == "__init__":
        parts = parts[:-1]
    return ".".join(parts)


def strip_pkg(module: str) -> str:
    if module == PKG:
        return ""
    if module.startswith(PKG + "."):
        return module[len(PKG) + 1 :]
    return module


def split_head(module: str) -> tuple[str, Optional[str], Optional[str]]:
    parts = strip_pkg(module).split(".") if strip_pkg(module) else []
    parts += [None] * 3  # type: ignore[list-item]
    return parts[0] or "", parts[1], parts[2]


def layer_of(module: str) -> Optional[int]:
    head, second, _ = split_head(module)
    if not head:
        return None
    key: tuple[str, ...] = (head, second) if head == "engine" and second else (head,)
    return LAYER_MAP.get(key)


def iter_import_edges(py_path: pathlib.Path, known: Set[str]) -> Iterator[Tuple[str, str]]:
    src_mod = module_name_from_path(py_path)
    is_pkg = py_path.name == "__init__.py"
    tree = ast.parse(py_path.read_text(encoding="utf-8"), filename=str(py_path))
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                yield src_mod, alias.name
        elif isinstance(node, ast.ImportFrom):
            if node.level > 0:  # 相対 import
                src_parts = src_mod.split(".")
                keep = len(src_parts) - node.level + (1 if is_pkg else 0)
                base = ".".join(src_parts[:keep])
                mod = f"{base}.{node.module}" if node.module else base
            else:
                mod = node.module or ""
            for alias in node.names:
                # `from pkg import submodule` はサブモジュールへのエッジとして扱う
                sub = f"{mod}.{alias.name}"
                yield src_mod, sub if sub in known else mod


def is_forbidden_edge(src: str, tgt: str) -> bool:
    s_head, s_sec, s_mod = split_head(src)
    t_head, t_sec, _ = split_head(tgt)
    # 1) engine -> api を禁止
    if s_head == "engine" and t_head == "api":
        return True
    # 2) コーデック本体 -> engine.model を禁止（方言追加は図モデルに触れない）
    if s_sec == "export" and s_mod in CODEC_MODULES and t_head == "engine" and t_sec == "model":
        return True
    # 3) common -> engine を禁止
    if s_head == "common" and t_head == "engine":
        return True
    return False


def within_check_scope(module: str) -> bool:
    return module == PKG or module.startswith(PKG + ".")


def collect_graph_and_violations() -> tuple[Dict[str, Set[str]], list[str], list[str]]:
    layering: list[str] = []
    forbidden: list[str] = []
    graph: Dict[str, Set[str]] = {}

    py_files: List[pathlib.Path] = list(iter_py_files(SRC_DIR / PKG))
    for py in py_files:
        graph.setdefault(module_name_from_path(py), set())
    known = set(graph)

    for py in py_files:
        for src, tgt in iter_import_edges(py, known):
            if not within_check_scope(src) or not within_check_scope(tgt):
                continue
            s_layer = layer_of(src)
            t_layer = layer_of(tgt)
            if s_layer is not None and t_layer is not None and s_layer < t_layer:
                layering.append(f"[{py}] {src} (L{s_layer}) -> {tgt} (L{t_layer})")
            if is_forbidden_edge(src, tgt):
                forbidden.append(f"[{py}] {src} -> {tgt}")
            if src in graph and tgt in graph and src != tgt:
                graph[src].add(tgt)

    return graph, layering, forbidden


def find_cycles(graph: Dict[str, Set[str]]) -> List[List[str]]:
    cycles: List[List[str]] = []
    WHITE, GRAY, BLACK = 0, 1, 2
    color: Dict[str, int] = {u: WHITE for u in graph}
    stack: List[str] = []

    def dfs(u: str) -> None:
        color[u] = GRAY
        stack.append(u)
        for v in sorted(graph.get(u, ())):
            if color[v] == WHITE:
                dfs(v)
            elif color[v] == GRAY:
                idx = stack.index(v)
                cycle = stack[idx:] + [v]
                # 辞書順最小の開始点に回転して重複を除く
                base = min(range(len(cycle) - 1), key=lambda i: cycle[i])
                norm = cycle[base:-1] + cycle[:base] + [cycle[base]]
                if norm not in cycles:
                    cycles.append(norm)
        stack.pop()
        color[u] = BLACK

    for node in sorted(graph):
        if color[node] == WHITE:
            dfs(node)
    return cycles


@pytest.mark.smoke
def test_architecture_import_rules():
    graph, layering, forbidden = collect_graph_and_violations()
    cycles = find_cycles(graph)
    msgs: list[str] = []
    if layering:
        msgs.append("Layer violations:\n" + "\n".join(layering))
    if forbidden:
        msgs.append("Forbidden-edge violations:\n" + "\n".join(forbidden))
    if cycles:
        rendered = [" -> ".join(c) for c in cycles[:10]]
        suffix = "\n(and more ...)" if len(cycles) > 10 else ""
        msgs.append("Import cycles detected (module-level):\n" + "\n".join(rendered) + suffix)
    if msgs:
        raise AssertionError("\n\n".join(msgs))


@pytest.mark.smoke
def test_layer_map_covers_all_modules():
    unmapped = [
        m
        for m in sorted(module_name_from_path(p) for p in iter_py_files(SRC_DIR / PKG))
        if m not in (PKG, f"{PKG}.engine") and layer_of(m) is None
    ]
    assert unmapped == []
