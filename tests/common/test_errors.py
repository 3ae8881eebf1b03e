import pytest

from vecfig.common.errors import (
    CodecError,
    ErrorKind,
    GeometryError,
    ModelError,
    ProjectionError,
    StyleError,
    VecfigError,
)

# What this tests
# - 例外ごとに許される kind の制限と、メッセージへの kind/object_id の埋め込み。


def test_message_includes_kind_and_object_id():
    e = StyleError(ErrorKind.UNRECOGNIZED_OPTION, "unknown option 'glow'", object_id=3)
    assert e.kind is ErrorKind.UNRECOGNIZED_OPTION
    assert e.object_id == 3
    assert str(e) == "[UnrecognizedOption] object 3: unknown option 'glow'"
    assert isinstance(e, VecfigError)


def test_with_object_keeps_type_and_kind():
    e = ProjectionError(ErrorKind.INVALID_PROJECTION, "behind camera")
    tagged = e.with_object(7)
    assert type(tagged) is ProjectionError
    assert tagged.kind is ErrorKind.INVALID_PROJECTION
    assert tagged.object_id == 7


@pytest.mark.parametrize(
    "cls, kind",
    [
        (GeometryError, ErrorKind.DEGENERATE_AXIS),
        (ProjectionError, ErrorKind.DEGENERATE_SHAPE),
        (StyleError, ErrorKind.UNKNOWN_DIALECT),
        (ModelError, ErrorKind.INVALID_VALUE),
        (CodecError, ErrorKind.INVALID_GEOMETRY),
    ],
)
def test_disallowed_kind_raises_type_error(cls, kind):
    with pytest.raises(TypeError):
        cls(kind, "x")
