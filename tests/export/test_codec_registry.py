import pytest

from vecfig.common.errors import CodecError, ErrorKind
from vecfig.engine.export import codec, get_codec, is_codec_registered, list_codecs, unregister
from vecfig.engine.export.svg import SvgCodec
from vecfig.engine.export.tikz import TikzCodec

# What this tests
# - 組込み方言の登録と正規化されたキーでの取得。
# - 未登録方言は CodecError(UnknownDialect)。
# - 新しい方言はモデルに触れずに登録できる。


def test_builtin_dialects_registered():
    assert list_codecs() == ["svg", "tikz"]
    assert isinstance(get_codec("TikZ"), TikzCodec)
    assert isinstance(get_codec(" SVG "), SvgCodec)
    assert is_codec_registered("tikz")


def test_unknown_dialect():
    with pytest.raises(CodecError) as ei:
        get_codec("postscript")
    assert ei.value.kind is ErrorKind.UNKNOWN_DIALECT
    with pytest.raises(CodecError):
        get_codec("")


def test_register_new_dialect_and_unregister():
    @codec
    class PlainCodec:
        dialect = "plain"

        def begin(self, ctx):
            return []

        def emit_object(self, item, ctx):
            return [f"{item.object_id}\n"]

        def end(self, ctx):
            return []

    try:
        assert is_codec_registered("plain")
        assert isinstance(get_codec("plain"), PlainCodec)
    finally:
        unregister("plain")
    assert not is_codec_registered("plain")


def test_codec_decorator_rejects_functions():
    with pytest.raises(TypeError):
        codec("fn")(lambda: None)


def test_option_support_follows_schema():
    from vecfig.engine.export.base import is_optional, supports

    assert supports("tikz", "shading") and not supports("svg", "shading")
    assert not supports("svg", "rounded_corners") and is_optional("svg", "rounded_corners")
    assert not supports("tikz", "css_class") and is_optional("tikz", "css_class")
    assert supports("svg", "line_width") and not is_optional("svg", "shading")
