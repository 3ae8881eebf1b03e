"""
幾何カーネルの値型（プロジェクト中核モジュール）

本モジュールは、図形オブジェクトが保持する幾何の唯一の表現を提供する。
生成（primitives/PathBuilder）、変換（translate/scale/rotate）、投影（engine.projection）
を明確に分離し、すべての型を不変値として扱う。

データモデル（不変条件）:
- `Point`: シーン座標 (x, y, z)。2D 入力は z=0 で補う。
- `Path.coords: float64 ndarray (N, 3)`: 頂点列（N >= 2、閉路は N >= 3）。
- `Path.controls`: 区間 i（頂点 i → i+1）ごとの制御点。`None` は直線、
  `(1, 3)` は 2 次ベジェ、`(2, 3)` は 3 次ベジェ。閉路の「閉じる区間」は常に直線。
- `Group.items`: Point/Path/Group の空でないタプル（1 オブジェクトを複数部品で描く）。
- 配列はすべて書き込み不可（`setflags(write=False)`）。

API 方針:
- 変換はすべて純関数（副作用ゼロ）であり、新しいインスタンスを返す。
- 不正な入力は `GeometryError(DegenerateShape)`。未定義の出力は作らない。

直感図（制御点の格納）:

    # 頂点 3 点、区間 0 は直線、区間 1 は 3 次ベジェ
    # coords   = [[0,0,0], [1,0,0], [2,1,0]]
    # controls = (None, [[1.5,0,0],[2,0.5,0]])
    # TikZ 相当: (0,0) -- (1,0) .. controls (1.5,0) and (2,0.5) .. (2,1)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence, Union

import numpy as np

from vecfig.common.errors import ErrorKind, GeometryError
from vecfig.common.types import Vec3

NumberLike = float | int
PointLike = Union["Point", Sequence[NumberLike], np.ndarray]


def _degenerate(msg: str) -> GeometryError:
    return GeometryError(ErrorKind.DEGENERATE_SHAPE, msg)


def _readonly(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


def as_vec3(p: PointLike) -> np.ndarray:
    """点らしき入力を float64 の (3,) 配列へ正規化する。

    Raises
    ------
    GeometryError
        要素数が 2/3 でない、または非有限値を含む場合。
    """
    if isinstance(p, Point):
        return np.array([p.x, p.y, p.z], dtype=np.float64)
    try:
        arr = np.asarray(p, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise _degenerate(f"座標として解釈できません: {p!r}") from e
    if arr.ndim == 1 and arr.shape[0] == 3:
        arr = arr.copy()
    if arr.ndim != 1 or arr.shape[0] not in (2, 3):
        raise _degenerate(f"点は 2 または 3 要素である必要があります: shape={arr.shape}")
    if arr.shape[0] == 2:
        arr = np.array([arr[0], arr[1], 0.0], dtype=np.float64)
    if not np.all(np.isfinite(arr)):
        raise _degenerate(f"非有限の座標: {arr.tolist()}")
    return arr


def _as_rows3(values: object, what: str) -> np.ndarray:
    """(K, 2) / (K, 3) 入力を (K, 3) float64 へ正規化する。"""
    if isinstance(values, (list, tuple)) and values and isinstance(values[0], Point):
        return np.stack([as_vec3(p) for p in values])  # type: ignore[arg-type]
    try:
        # 呼び出し側の配列を読み取り専用化しないよう必ず複製する
        arr = np.array(values, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise _degenerate(f"{what} を座標配列として解釈できません") from e
    if arr.ndim != 2 or arr.shape[1] not in (2, 3):
        raise _degenerate(f"{what} の形状が不正です: {arr.shape}")
    if arr.shape[1] == 2:
        arr = np.hstack([arr, np.zeros((arr.shape[0], 1), dtype=np.float64)])
    if not np.all(np.isfinite(arr)):
        raise _degenerate(f"{what} に非有限値が含まれています")
    return np.ascontiguousarray(arr)


# ── 配列に対する純関数の変換 ───────────────────
def _translate_rows(c: np.ndarray, dx: float, dy: float, dz: float) -> np.ndarray:
    return c + np.array([dx, dy, dz], dtype=np.float64)


def _scale_rows(c: np.ndarray, sx: float, sy: float, sz: float, center: Vec3) -> np.ndarray:
    pivot = np.array(center, dtype=np.float64)
    return (c - pivot) * np.array([sx, sy, sz], dtype=np.float64) + pivot


def rotation_matrix(x: float = 0.0, y: float = 0.0, z: float = 0.0) -> np.ndarray:
    """X→Y→Z の順に適用する右手系回転行列（3x3）。"""
    cx, sx = math.cos(x), math.sin(x)
    cy, sy = math.cos(y), math.sin(y)
    cz, sz = math.cos(z), math.sin(z)
    rx = np.array([[1.0, 0.0, 0.0], [0.0, cx, -sx], [0.0, sx, cx]])
    ry = np.array([[cy, 0.0, sy], [0.0, 1.0, 0.0], [-sy, 0.0, cy]])
    rz = np.array([[cz, -sz, 0.0], [sz, cz, 0.0], [0.0, 0.0, 1.0]])
    return rz @ ry @ rx


def _rotate_rows(c: np.ndarray, x: float, y: float, z: float, center: Vec3) -> np.ndarray:
    if x == 0 and y == 0 and z == 0:
        return c.copy()
    pivot = np.array(center, dtype=np.float64)
    return (c - pivot) @ rotation_matrix(x, y, z).T + pivot


def bezier_points(ctrl: np.ndarray, t: np.ndarray) -> np.ndarray:
    """ベジェ曲線の評価（de Casteljau）。

    Parameters
    ----------
    ctrl : np.ndarray
        形状 (K+1, D) の制御多角形（始点・制御点・終点）。
    t : np.ndarray
        形状 (M,) のパラメータ列。

    Returns
    -------
    np.ndarray
        形状 (M, D) の曲線上の点。
    """
    pts = np.repeat(ctrl[np.newaxis, :, :], t.shape[0], axis=0)
    tt = t[:, np.newaxis, np.newaxis]
    while pts.shape[1] > 1:
        pts = (1.0 - tt) * pts[:, :-1, :] + tt * pts[:, 1:, :]
    return pts[:, 0, :]


@dataclass(frozen=True)
class Point:
    """シーン座標の点（不変値）。"""

    x: float
    y: float
    z: float = 0.0

    def __post_init__(self) -> None:
        vals = []
        for name in ("x", "y", "z"):
            try:
                v = float(getattr(self, name))
            except (TypeError, ValueError) as e:
                raise _degenerate(f"Point.{name} は数値である必要があります") from e
            if not math.isfinite(v):
                raise _degenerate(f"Point.{name} が非有限です: {v}")
            vals.append(v)
        object.__setattr__(self, "x", vals[0])
        object.__setattr__(self, "y", vals[1])
        object.__setattr__(self, "z", vals[2])

    @classmethod
    def of(cls, p: PointLike) -> "Point":
        """点らしき入力（タプル/配列/Point）から生成する。"""
        if isinstance(p, Point):
            return p
        x, y, z = as_vec3(p)
        return cls(float(x), float(y), float(z))

    def as_array(self) -> np.ndarray:
        return as_vec3(self)

    def translate(self, dx: float = 0.0, dy: float = 0.0, dz: float = 0.0) -> "Point":
        return Point(self.x + dx, self.y + dy, self.z + dz)

    def scale(
        self,
        sx: float,
        sy: float | None = None,
        sz: float | None = None,
        center: Vec3 = (0.0, 0.0, 0.0),
    ) -> "Point":
        """拡大縮小（`sy/sz` 省略時は `sx` で等方）。"""
        sy = sx if sy is None else sy
        sz = sx if sz is None else sz
        row = _scale_rows(self.as_array()[np.newaxis, :], sx, sy, sz, center)[0]
        return Point.of(row)

    def rotate(
        self, x: float = 0.0, y: float = 0.0, z: float = 0.0, center: Vec3 = (0.0, 0.0, 0.0)
    ) -> "Point":
        """pivot まわりの回転（ラジアン、X→Y→Z）。"""
        row = _rotate_rows(self.as_array()[np.newaxis, :], x, y, z, center)[0]
        return Point.of(row)


class Path:
    """頂点列と区間ごとの曲線メタデータからなる不変パス。

    フィールド:
    - `coords (N,3) float64`: 頂点列（読み取り専用）。
    - `closed`: True で終点→始点の直線区間を持つ閉路。
    - `controls`: 長さ N-1 のタプル。要素は `None` / `(1,3)` / `(2,3)` 配列。
    """

    __slots__ = ("coords", "closed", "controls")

    coords: np.ndarray
    closed: bool
    controls: tuple[np.ndarray | None, ...]

    def __init__(
        self,
        coords: object,
        *,
        closed: bool = False,
        controls: Sequence[object | None] | None = None,
    ) -> None:
        arr = _as_rows3(coords, "Path.coords")
        n = arr.shape[0]
        if n < 2:
            raise _degenerate(f"Path には少なくとも 2 頂点が必要です（got {n}）")
        if closed and n < 3:
            raise _degenerate(f"閉路 Path には少なくとも 3 頂点が必要です（got {n}）")
        n_seg = n - 1
        if controls is None:
            ctrl: list[np.ndarray | None] = [None] * n_seg
        else:
            ctrl = list(controls)
            if len(ctrl) != n_seg:
                raise _degenerate(
                    f"controls の長さ {len(ctrl)} が区間数 {n_seg} と一致しません"
                )
            for i, c in enumerate(ctrl):
                if c is None:
                    continue
                rows = _as_rows3(c, f"controls[{i}]")
                if rows.shape[0] not in (1, 2):
                    raise _degenerate(f"controls[{i}] は 1 点（2 次）か 2 点（3 次）です")
                ctrl[i] = _readonly(rows)
        self.coords = _readonly(arr)
        self.closed = bool(closed)
        self.controls = tuple(ctrl)

    # ── ファクトリ ───────────────────
    @classmethod
    def line(cls, a: PointLike, b: PointLike) -> "Path":
        """2 点間の線分。"""
        return cls(np.stack([as_vec3(a), as_vec3(b)]))

    @classmethod
    def polyline(cls, points: Iterable[PointLike], *, closed: bool = False) -> "Path":
        """点列から折れ線（閉路可）を生成する。"""
        rows = [as_vec3(p) for p in points]
        if not rows:
            raise _degenerate("空の点列から Path は作れません")
        return cls(np.stack(rows), closed=closed)

    # ── 参照系 ───────────────────
    @property
    def n_vertices(self) -> int:
        return int(self.coords.shape[0])

    @property
    def n_segments(self) -> int:
        """制御点を持ちうる区間数（閉じる区間を除く）。"""
        return self.n_vertices - 1

    @property
    def is_curved(self) -> bool:
        return any(c is not None for c in self.controls)

    def __len__(self) -> int:
        return self.n_vertices

    def segments(self) -> Iterator[tuple[np.ndarray, np.ndarray, np.ndarray | None]]:
        """(始点, 終点, 制御点) を区間順に列挙する。閉路の閉じる区間も直線として含む。"""
        for i in range(self.n_segments):
            yield self.coords[i], self.coords[i + 1], self.controls[i]
        if self.closed:
            yield self.coords[-1], self.coords[0], None

    def flatten(self, samples: int = 16) -> np.ndarray:
        """曲線区間を `samples` 分割で折れ線近似した (M, 3) 配列を返す（閉路でも始点は重複させない）。"""
        if samples < 1:
            raise ValueError("samples は 1 以上である必要があります")
        out: list[np.ndarray] = [self.coords[:1]]
        t = np.linspace(0.0, 1.0, samples + 1)[1:]
        for i in range(self.n_segments):
            ctrl = self.controls[i]
            if ctrl is None:
                out.append(self.coords[i + 1 : i + 2])
            else:
                poly = np.vstack([self.coords[i], ctrl, self.coords[i + 1]])
                out.append(bezier_points(poly, t))
        return np.vstack(out)

    # ── 変換（すべて純粋） ────────
    def _map(self, fn) -> "Path":
        ctrls = [None if c is None else fn(c) for c in self.controls]
        return Path(fn(self.coords), closed=self.closed, controls=ctrls)

    def translate(self, dx: float = 0.0, dy: float = 0.0, dz: float = 0.0) -> "Path":
        """平行移動（純関数）。"""
        return self._map(lambda c: _translate_rows(c, dx, dy, dz))

    def scale(
        self,
        sx: float,
        sy: float | None = None,
        sz: float | None = None,
        center: Vec3 = (0.0, 0.0, 0.0),
    ) -> "Path":
        """拡大縮小（純関数）。`sy/sz` 省略時は `sx` を使用。"""
        sy = sx if sy is None else sy
        sz = sx if sz is None else sz
        return self._map(lambda c: _scale_rows(c, sx, sy, sz, center))

    def rotate(
        self, x: float = 0.0, y: float = 0.0, z: float = 0.0, center: Vec3 = (0.0, 0.0, 0.0)
    ) -> "Path":
        """回転（純関数）。X→Y→Z の順に右手系で適用。"""
        return self._map(lambda c: _rotate_rows(c, x, y, z, center))

    # ── 比較/表示 ───────────────────
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Path):
            return NotImplemented
        if self.closed != other.closed or not np.array_equal(self.coords, other.coords):
            return False
        for a, b in zip(self.controls, other.controls):
            if (a is None) != (b is None):
                return False
            if a is not None and not np.array_equal(a, b):
                return False
        return True

    def __hash__(self) -> int:
        ctrl_key = tuple(None if c is None else c.tobytes() for c in self.controls)
        return hash((self.coords.tobytes(), self.closed, ctrl_key))

    def __repr__(self) -> str:  # pragma: no cover - 表示用
        curves = sum(1 for c in self.controls if c is not None)
        return f"Path(N={self.n_vertices}, closed={self.closed}, curves={curves})"


class Group:
    """複数の Point/Path/Group をまとめた合成形状（不変）。"""

    __slots__ = ("items",)

    items: tuple["Shape", ...]

    def __init__(self, items: Iterable["Shape"]) -> None:
        seq = tuple(items)
        if not seq:
            raise _degenerate("空の Group は作れません")
        for it in seq:
            if not isinstance(it, (Point, Path, Group)):
                raise _degenerate(f"Group の要素は Point/Path/Group のみ: got {type(it).__name__}")
        self.items = seq

    def leaves(self) -> Iterator[Point | Path]:
        """入れ子を展開して Point/Path を順に列挙する。"""
        for it in self.items:
            if isinstance(it, Group):
                yield from it.leaves()
            else:
                yield it

    def translate(self, dx: float = 0.0, dy: float = 0.0, dz: float = 0.0) -> "Group":
        return Group(it.translate(dx, dy, dz) for it in self.items)

    def scale(
        self,
        sx: float,
        sy: float | None = None,
        sz: float | None = None,
        center: Vec3 = (0.0, 0.0, 0.0),
    ) -> "Group":
        return Group(it.scale(sx, sy, sz, center) for it in self.items)

    def rotate(
        self, x: float = 0.0, y: float = 0.0, z: float = 0.0, center: Vec3 = (0.0, 0.0, 0.0)
    ) -> "Group":
        return Group(it.rotate(x, y, z, center) for it in self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Group):
            return NotImplemented
        return self.items == other.items

    def __hash__(self) -> int:
        return hash(self.items)

    def __repr__(self) -> str:  # pragma: no cover - 表示用
        return f"Group(n={len(self.items)})"


Shape = Union[Point, Path, Group]


def validate_shape(obj: object) -> Shape:
    """幾何として受理できる値を `Shape` に正規化する。

    - Point/Path/Group はそのまま返す（生成時に検証済み）。
    - 2/3 要素の数値列は `Point`、点列（2 点以上）は折れ線 `Path` とみなす。

    Raises
    ------
    GeometryError
        いずれにも解釈できない、または退化している場合。
    """
    if isinstance(obj, (Point, Path, Group)):
        return obj
    if obj is None or isinstance(obj, (str, bytes)):
        raise _degenerate(f"幾何として解釈できません: {obj!r}")
    arr = np.asarray(obj, dtype=object)
    if arr.ndim == 1 and arr.shape[0] in (2, 3) and all(
        isinstance(v, (int, float, np.number)) and not isinstance(v, bool) for v in arr
    ):
        return Point.of(obj)  # type: ignore[arg-type]
    return Path(obj)


def max_abs_z(shape: Shape) -> float:
    """形状に含まれる z 座標（制御点含む）の絶対値の最大。2D 判定用。"""
    if isinstance(shape, Point):
        return abs(shape.z)
    if isinstance(shape, Path):
        zs = [float(np.max(np.abs(shape.coords[:, 2])))]
        zs.extend(float(np.max(np.abs(c[:, 2]))) for c in shape.controls if c is not None)
        return max(zs)
    return max(max_abs_z(it) for it in shape.items)


class PathBuilder:
    """TikZ のパス記法に倣った逐次ビルダー。

    例:
        PathBuilder((0, 0)).line_to((1, 0)).cubic_to((1.5, 0), (2, 0.5), (2, 1)).build()

    `hv_to` は TikZ の `-|`（水平→垂直）、`vh_to` は `|-`（垂直→水平）に相当する。
    """

    def __init__(self, start: PointLike | None = None) -> None:
        self._pts: list[np.ndarray] = []
        self._ctrls: list[np.ndarray | None] = []
        self._closed = False
        if start is not None:
            self.move_to(start)

    def _current(self) -> np.ndarray:
        if not self._pts:
            raise ValueError("move_to で始点を指定してください")
        return self._pts[-1]

    def move_to(self, p: PointLike) -> "PathBuilder":
        if self._pts:
            raise ValueError("Path は単一の連続パスです（複数パスは Group を使用）")
        self._pts.append(as_vec3(p))
        return self

    def line_to(self, p: PointLike) -> "PathBuilder":
        self._current()
        self._pts.append(as_vec3(p))
        self._ctrls.append(None)
        return self

    def hv_to(self, p: PointLike) -> "PathBuilder":
        cur = self._current()
        q = as_vec3(p)
        self.line_to((q[0], cur[1], cur[2]))
        return self.line_to(q)

    def vh_to(self, p: PointLike) -> "PathBuilder":
        cur = self._current()
        q = as_vec3(p)
        self.line_to((cur[0], q[1], cur[2]))
        return self.line_to(q)

    def quad_to(self, control: PointLike, p: PointLike) -> "PathBuilder":
        self._current()
        self._ctrls.append(as_vec3(control)[np.newaxis, :])
        self._pts.append(as_vec3(p))
        return self

    def cubic_to(self, c1: PointLike, c2: PointLike, p: PointLike) -> "PathBuilder":
        self._current()
        self._ctrls.append(np.stack([as_vec3(c1), as_vec3(c2)]))
        self._pts.append(as_vec3(p))
        return self

    def close(self) -> "PathBuilder":
        self._closed = True
        return self

    def build(self) -> Path:
        if not self._pts:
            raise _degenerate("頂点のない Path は作れません")
        return Path(np.stack(self._pts), closed=self._closed, controls=self._ctrls)


__all__ = [
    "Point",
    "Path",
    "Group",
    "Shape",
    "PathBuilder",
    "validate_shape",
    "as_vec3",
    "max_abs_z",
    "bezier_points",
    "rotation_matrix",
]
