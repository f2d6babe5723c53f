# tests/loader/test_loader.py
"""
lc3_core_tracer.loader.loaderモジュールの単体テスト。
LC-3 オブジェクトイメージ（ビッグエンディアン、先頭ワードがorigin）のロードを検証します。
"""
import struct
import pytest

from lc3_core_tracer.transport.bus import Bus, RAM
from lc3_core_tracer.loader.loader import ObjectImageLoader, LoadedImage
from lc3_core_tracer.common.errors import ImageLoadError

# @intent:test_suite オブジェクトイメージローダーの検証。

def image(origin, *words):
    return struct.pack(f">{len(words) + 1}H", origin, *words)

class TestObjectImageLoader:
    """
    ObjectImageLoaderの単体テスト。
    """

    @pytest.fixture
    def setup_loader(self, tmp_path):
        bus = Bus()
        ram = RAM(0x10000)
        bus.register_device(0x0000, 0xFFFF, ram)
        loader = ObjectImageLoader()
        return loader, bus, ram, tmp_path

    def test_load_simple_image(self, setup_loader):
        loader, bus, ram, tmp_path = setup_loader
        obj_file = tmp_path / "simple.obj"
        obj_file.write_bytes(bytes([0x30, 0x00, 0x12, 0x34, 0xAB, 0xCD]))

        result = loader.load_image(str(obj_file), bus)

        assert result == LoadedImage(path=str(obj_file), origin=0x3000, size=2)
        assert ram.read(0x3000) == 0x1234
        assert ram.read(0x3001) == 0xABCD
        assert ram.read(0x3002) == 0x0000

    def test_load_accepts_path_object(self, setup_loader):
        loader, bus, ram, tmp_path = setup_loader
        obj_file = tmp_path / "path.obj"
        obj_file.write_bytes(image(0x4000, 0xF025))
        loader.load_image(obj_file, bus)
        assert ram.read(0x4000) == 0xF025

    def test_load_does_not_touch_activity_log(self, setup_loader):
        loader, bus, _, _ = setup_loader
        loader.load_bytes(image(0x3000, 0x1111, 0x2222), bus)
        assert bus.get_and_clear_activity_log() == []

    def test_load_origin_only(self, setup_loader):
        loader, bus, _, _ = setup_loader
        result = loader.load_bytes(image(0x3000), bus)
        assert result.size == 0

    def test_odd_trailing_byte_is_ignored(self, setup_loader):
        loader, bus, ram, _ = setup_loader
        result = loader.load_bytes(image(0x3000, 0x0102) + b"\xFF", bus)
        assert result.size == 1
        assert ram.read(0x3001) == 0x0000

    # @intent:test_case_truncate アドレス空間の終端を越えるワードは捨てられることを検証します。
    def test_truncates_at_end_of_memory(self, setup_loader):
        loader, bus, ram, _ = setup_loader
        result = loader.load_bytes(image(0xFFFE, 0x1111, 0x2222, 0x3333), bus)
        assert result.size == 2
        assert ram.read(0xFFFE) == 0x1111
        assert ram.read(0xFFFF) == 0x2222
        # 折り返して0x0000に書き込まれることはない
        assert ram.read(0x0000) == 0x0000

    def test_later_image_overwrites_earlier(self, setup_loader):
        loader, bus, ram, tmp_path = setup_loader
        first = tmp_path / "first.obj"
        second = tmp_path / "second.obj"
        first.write_bytes(image(0x3000, 0xAAAA, 0xBBBB))
        second.write_bytes(image(0x3001, 0xCCCC))

        loader.load_image(first, bus)
        loader.load_image(second, bus)

        assert ram.read(0x3000) == 0xAAAA
        assert ram.read(0x3001) == 0xCCCC

    def test_load_missing_file(self, setup_loader):
        loader, bus, _, tmp_path = setup_loader
        missing = tmp_path / "missing.obj"
        with pytest.raises(ImageLoadError) as excinfo:
            loader.load_image(str(missing), bus)
        assert excinfo.value.path == str(missing)
        assert str(excinfo.value).startswith(f"failed to load image: {missing}")

    @pytest.mark.parametrize("data", [b"", b"\x30"])
    def test_load_short_file(self, setup_loader, data):
        loader, bus, ram, tmp_path = setup_loader
        obj_file = tmp_path / "short.obj"
        obj_file.write_bytes(data)
        with pytest.raises(ImageLoadError, match="missing origin word"):
            loader.load_image(obj_file, bus)
