import pytest

from vecfig.common.base_registry import BaseRegistry

# What this tests
# - Key normalization (Camel→snake, '-'/' '→'_', '_' の連続を 1 つに), duplicate registration ValueError,
#   unregistered name KeyError, empty name fallback to class name.


def test_camel_and_hyphen_normalization_and_lookup():
    reg = BaseRegistry()

    @reg.register()
    class MyCodec:
        pass

    assert reg.get("MyCodec") is MyCodec
    assert reg.get("myCodec") is MyCodec
    assert reg.get("my_codec") is MyCodec
    assert reg.get("my-codec") is MyCodec
    assert reg.get("my codec") is MyCodec

    @reg.register("foo-bar")
    class FooThing:
        pass

    assert reg.get("foo_bar") is FooThing
    assert reg.get("foo--bar") is FooThing


def test_duplicate_registration_raises_and_unregistered_get_raises():
    reg = BaseRegistry()

    @reg.register()
    class MyCodec:
        pass

    class Another:
        pass

    with pytest.raises(ValueError):
        reg.register("MyCodec")(Another)

    # 同一オブジェクトの再登録は許容
    reg.register("my_codec")(MyCodec)

    with pytest.raises(KeyError):
        reg.get("does-not-exist")


def test_empty_name_registration_falls_back_to_classname():
    reg = BaseRegistry()

    class Dummy:
        pass

    reg.register("")(Dummy)
    assert reg.get("dummy") is Dummy


def test_normalize_key_rejects_non_str_and_blank():
    with pytest.raises(TypeError):
        BaseRegistry.normalize_key(3)  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        BaseRegistry.normalize_key("   ")


def test_unregister_clear_and_registry_copy():
    reg = BaseRegistry()
    reg.register("a")(object)
    snapshot = reg.registry
    snapshot["b"] = 1
    assert not reg.is_registered("b")

    reg.unregister("missing")  # 無視される
    reg.unregister("a")
    assert reg.list_all() == []

    reg.register("c")(int)
    reg.clear()
    assert not reg.is_registered("c")
