"""Tool handlers: turn a tool request into the text returned to the caller

No exception escapes a handler; every failure becomes a message.
"""

import logging
from dataclasses import dataclass

from jimeng_client import JimengError, MissingCredentialsError, UpstreamError, generate_image_url
from prompts import GENERAL_IMAGE, TEXT_IMAGE, build_request_body

logger = logging.getLogger(__name__)

MISSING_CREDENTIALS_MESSAGE = '错误：未设置环境变量 JIMENG_ACCESS_KEY 和 JIMENG_SECRET_KEY，无法调用API。'
FAILURE_MESSAGE = '生成图片失败，请检查网络连接和API密钥配置。'


@dataclass(frozen=True)
class ImageRequest:
    prompt: str
    illustration: str
    ratio: str
    use_pre_llm: bool = False


@dataclass(frozen=True)
class TextImageRequest:
    prompt: str
    text: str
    illustration: str
    ratio: str
    use_pre_llm: bool = False


def unsupported_ratio_message(builder, ratio):
    return f"错误：不支持的图片比例 {ratio}。支持的比例: {builder.supported_ratios()}"


def success_message(prompt, ratio, size, image_url):
    return (
        f"图片生成成功！\n\n"
        f"Prompt: {prompt}\n"
        f"图片比例: {ratio} ({size.width}×{size.height})\n"
        f"图片URL: {image_url}"
    )


async def _run(builder, settings, ratio, prompt, use_pre_llm, client):
    size = builder.size_for(ratio)
    if size is None:
        return unsupported_ratio_message(builder, ratio)

    if not settings.credentials.is_complete:
        return MISSING_CREDENTIALS_MESSAGE

    body = build_request_body(builder, prompt, size, use_pre_llm)
    try:
        image_url = await generate_image_url(settings, body, client=client)
    except MissingCredentialsError:
        return MISSING_CREDENTIALS_MESSAGE
    except UpstreamError as e:
        logger.error("%s failed: %s", builder.name, e)
        return f"{FAILURE_MESSAGE}\n{e}"
    except JimengError as e:
        logger.error("%s failed: %s", builder.name, e)
        return FAILURE_MESSAGE
    except Exception:
        logger.exception("Unexpected error in %s", builder.name)
        return FAILURE_MESSAGE

    if not image_url:
        return FAILURE_MESSAGE
    return success_message(prompt, ratio, size, image_url)


async def run_generate_image(request, settings, client=None):
    prompt = GENERAL_IMAGE.build_prompt(request.prompt, style=request.illustration)
    return await _run(GENERAL_IMAGE, settings, request.ratio, prompt, request.use_pre_llm, client)


async def run_generate_text_image(request, settings, client=None):
    prompt = TEXT_IMAGE.build_prompt(request.prompt, style=request.illustration, text=request.text)
    return await _run(TEXT_IMAGE, settings, request.ratio, prompt, request.use_pre_llm, client)
