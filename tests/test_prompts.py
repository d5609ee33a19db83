"""Tests for prompt builders in prompts.py."""

import json

from prompts import (
    BUILDERS,
    GENERAL_IMAGE,
    TEXT_IMAGE,
    ImageSize,
    build_request_body,
    serialize_body,
)


class TestGeneralImagePrompt:
    """Tests for the general image builder."""

    def test_prompt_with_style(self) -> None:
        assert GENERAL_IMAGE.build_prompt("一只猫", style="水彩") == (
            "生成一张图片，内容是：一只猫，图片风格是：水彩"
        )

    def test_prompt_without_style(self) -> None:
        """Empty style adds no style clause."""
        assert GENERAL_IMAGE.build_prompt("一只猫", style="") == (
            "生成一张图片，内容是：一只猫"
        )

    def test_ratio_table(self) -> None:
        assert GENERAL_IMAGE.size_for("4:3") == ImageSize(768, 576)
        assert GENERAL_IMAGE.size_for("3:4") == ImageSize(576, 768)
        assert GENERAL_IMAGE.size_for("16:9") == ImageSize(768, 432)
        assert GENERAL_IMAGE.size_for("9:16") == ImageSize(432, 768)

    def test_unsupported_ratio(self) -> None:
        assert GENERAL_IMAGE.size_for("1:1") is None
        assert GENERAL_IMAGE.supported_ratios() == "4:3, 3:4, 16:9, 9:16"


class TestTextImagePrompt:
    """Tests for the text-overlay builder."""

    def test_prompt_includes_text_before_style(self) -> None:
        assert TEXT_IMAGE.build_prompt("新年海报", style="国潮", text="新年快乐") == (
            "生成一张图片，内容是：新年海报，图片中需要呈现的文字是：“新年快乐”，图片风格是：国潮"
        )

    def test_prompt_without_text(self) -> None:
        assert TEXT_IMAGE.build_prompt("新年海报") == "生成一张图片，内容是：新年海报"

    def test_square_ratio_supported(self) -> None:
        assert TEXT_IMAGE.size_for("1:1") == ImageSize(1328, 1328)
        assert TEXT_IMAGE.size_for("16:9") == ImageSize(1664, 936)

    def test_registry(self) -> None:
        assert BUILDERS == {
            "generate-image": GENERAL_IMAGE,
            "generate-text-image": TEXT_IMAGE,
        }


class TestRequestBody:
    """Tests for build_request_body and serialize_body."""

    def test_body_fields(self) -> None:
        body = build_request_body(
            GENERAL_IMAGE, "p", ImageSize(768, 576), use_pre_llm=True
        )
        assert body == {
            "req_key": "jimeng_high_aes_general_v21_L",
            "use_pre_llm": True,
            "prompt": "p",
            "return_url": True,
            "width": 768,
            "height": 576,
        }

    def test_serialization_is_compact(self) -> None:
        """No whitespace between tokens."""
        assert serialize_body({"a": 1, "b": True}) == b'{"a":1,"b":true}'

    def test_serialization_keeps_non_ascii(self) -> None:
        """Chinese text is sent as UTF-8, not \\u escapes."""
        raw = serialize_body({"prompt": "猫"})
        assert raw == '{"prompt":"猫"}'.encode("utf-8")
        assert json.loads(raw) == {"prompt": "猫"}
