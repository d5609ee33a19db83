"""Prompt builders for the two image tools

Both tools call the same signed endpoint; they differ only in prompt
template, model key and the aspect ratio to pixel size table.
"""

import json
from dataclasses import dataclass


@dataclass(frozen=True)
class ImageSize:
    width: int
    height: int


class PromptBuilder:
    """Base prompt builder. Subclasses set the class attributes below."""

    name = ''
    description = ''
    req_key = ''
    ratios = {}

    def size_for(self, ratio):
        """Pixel size for an aspect ratio, None if unsupported"""
        return self.ratios.get(ratio)

    def supported_ratios(self):
        return ', '.join(self.ratios)

    def build_prompt(self, content, style='', text=''):
        raise NotImplementedError

    @staticmethod
    def _style_clause(style):
        if style:
            return f"，图片风格是：{style}"
        return ''


class GeneralImagePrompt(PromptBuilder):
    name = 'generate-image'
    description = '当用户需要生成图片时使用的工具'
    req_key = 'jimeng_high_aes_general_v21_L'
    ratios = {
        '4:3': ImageSize(768, 576),
        '3:4': ImageSize(576, 768),
        '16:9': ImageSize(768, 432),
        '9:16': ImageSize(432, 768),
    }

    def build_prompt(self, content, style='', text=''):
        return f"生成一张图片，内容是：{content}" + self._style_clause(style)


class TextImagePrompt(PromptBuilder):
    """Typographic images: the picture must render the given text"""

    name = 'generate-text-image'
    description = '当用户需要生成带有文字的图片（海报、封面、标题图）时使用的工具'
    req_key = 'high_aes_general_v30l_zt2i'
    ratios = {
        '1:1': ImageSize(1328, 1328),
        '4:3': ImageSize(1472, 1104),
        '3:4': ImageSize(1104, 1472),
        '16:9': ImageSize(1664, 936),
        '9:16': ImageSize(936, 1664),
    }

    def build_prompt(self, content, style='', text=''):
        prompt = f"生成一张图片，内容是：{content}"
        if text:
            prompt += f"，图片中需要呈现的文字是：“{text}”"
        return prompt + self._style_clause(style)


GENERAL_IMAGE = GeneralImagePrompt()
TEXT_IMAGE = TextImagePrompt()

BUILDERS = {builder.name: builder for builder in (GENERAL_IMAGE, TEXT_IMAGE)}


def build_request_body(builder, prompt, size, use_pre_llm=False):
    return {
        'req_key': builder.req_key,
        'use_pre_llm': use_pre_llm,
        'prompt': prompt,
        'return_url': True,
        'width': size.width,
        'height': size.height,
    }


def serialize_body(body):
    """Compact JSON; these exact bytes are both signed and sent"""
    return json.dumps(body, ensure_ascii=False, separators=(',', ':')).encode('utf-8')
