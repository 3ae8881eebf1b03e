"""
どこで: `vecfig.common` の型定義。
何を: Vec2/Vec3 や設定値のリテラル型などの軽量エイリアス（組込みジェネリックで記述）。
なぜ: 依存の少ない場所に配置して循環と分散定義を避けるため。
"""

from typing import Literal

Vec2 = tuple[float, float]
Vec3 = tuple[float, float, float]

ObjectId = int

Axis = Literal["x", "y", "z"]
ScaleMode = Literal["uniform", "stretch"]
ZOrderMode = Literal["insertion", "explicit"]


__all__ = ["Vec2", "Vec3", "ObjectId", "Axis", "ScaleMode", "ZOrderMode"]
