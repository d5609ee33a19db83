"""jimengpic MCP server (stdio transport)"""

import logging
from typing import Literal

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from log_config import SecretFilter, configure_logging
from prompts import GENERAL_IMAGE, TEXT_IMAGE
from settings import load_settings
from tools import ImageRequest, TextImageRequest, run_generate_image, run_generate_text_image

logger = logging.getLogger(__name__)

_settings = None


def get_settings():
    """Load settings on first use"""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


mcp = FastMCP("jimengpic")


@mcp.tool(name=GENERAL_IMAGE.name, description=GENERAL_IMAGE.description)
async def generate_image(
    prompt: str = Field(description="图片的描述文本"),
    illustration: str = Field(description="图片风格关键词"),
    ratio: Literal["4:3", "3:4", "16:9", "9:16"] = Field(
        description="图片比例。支持: 4:3 (768*576), 3:4 (576*768), 16:9 (768*432), 9:16 (432*768)"
    ),
    use_pre_llm: bool = Field(default=False, description="是否需要LLM进行扩写优化"),
) -> str:
    return await run_generate_image(ImageRequest(prompt, illustration, ratio, use_pre_llm), get_settings())


@mcp.tool(name=TEXT_IMAGE.name, description=TEXT_IMAGE.description)
async def generate_text_image(
    prompt: str = Field(description="图片的描述文本"),
    text: str = Field(description="需要在图片中呈现的文字"),
    illustration: str = Field(description="图片风格关键词"),
    ratio: Literal["1:1", "4:3", "3:4", "16:9", "9:16"] = Field(
        description="图片比例。支持: 1:1 (1328*1328), 4:3 (1472*1104), 3:4 (1104*1472), "
        "16:9 (1664*936), 9:16 (936*1664)"
    ),
    use_pre_llm: bool = Field(default=False, description="是否需要LLM进行扩写优化"),
) -> str:
    return await run_generate_text_image(
        TextImageRequest(prompt, text, illustration, ratio, use_pre_llm), get_settings()
    )


def main():
    configure_logging()
    settings = get_settings()
    for secret in (settings.access_key, settings.secret_key):
        SecretFilter.register_secret(secret)
    logging.getLogger().setLevel(settings.log_level)
    logger.info("jimengpic MCP server started")
    mcp.run()


if __name__ == "__main__":
    main()
