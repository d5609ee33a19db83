import logging

import uvicorn
from starlette.applications import Starlette
from starlette.responses import JSONResponse
from starlette.routing import Route

from jimeng_client import check_upstream
from log_config import configure_logging
from prompts import BUILDERS
from settings import load_settings
from tools import ImageRequest, TextImageRequest, run_generate_image, run_generate_text_image

logger = logging.getLogger(__name__)


class InvalidArguments(ValueError):
    pass


def parse_arguments(data, required, optional):
    """Validate tool arguments from a JSON body

    Args:
        data: Decoded JSON body
        required: Mapping of argument name to expected type
        optional: Mapping of argument name to (expected type, default)

    Returns:
        dict of argument values
    """
    if not isinstance(data, dict):
        raise InvalidArguments("Arguments must be a JSON object")

    arguments = {}
    for name in required:
        if name not in data:
            raise InvalidArguments(f"Missing argument: {name}")
        arguments[name] = data[name]
    for name, (_, default) in optional.items():
        arguments[name] = data.get(name, default)

    expected_types = {**required, **{name: entry[0] for name, entry in optional.items()}}
    for name, value in arguments.items():
        if not isinstance(value, expected_types[name]):
            raise InvalidArguments(f"Argument {name} must be of type {expected_types[name].__name__}")
    return arguments


def tool_result(text):
    return {"content": [{"type": "text", "text": text}]}


async def read_arguments(request, required, optional):
    try:
        data = await request.json()
    except ValueError:
        raise InvalidArguments("Request body must be valid JSON") from None
    return parse_arguments(data, required, optional)


async def generate_image_handler(request):
    """Tool: generate an image from a description"""
    try:
        arguments = await read_arguments(
            request,
            required={"prompt": str, "ratio": str},
            optional={"illustration": (str, ""), "use_pre_llm": (bool, False)},
        )
    except InvalidArguments as e:
        return JSONResponse({"error": str(e)}, status_code=400)

    text = await run_generate_image(
        ImageRequest(**arguments), request.app.state.settings, client=request.app.state.http_client
    )
    return JSONResponse(tool_result(text))


async def generate_text_image_handler(request):
    """Tool: generate an image that renders the given text"""
    try:
        arguments = await read_arguments(
            request,
            required={"prompt": str, "text": str, "ratio": str},
            optional={"illustration": (str, ""), "use_pre_llm": (bool, False)},
        )
    except InvalidArguments as e:
        return JSONResponse({"error": str(e)}, status_code=400)

    text = await run_generate_text_image(
        TextImageRequest(**arguments), request.app.state.settings, client=request.app.state.http_client
    )
    return JSONResponse(tool_result(text))


async def list_tools(request):
    return JSONResponse({
        "tools": [
            {"name": builder.name, "description": builder.description, "ratios": list(builder.ratios)}
            for builder in BUILDERS.values()
        ]
    })


async def health_check(request):
    """Check if the API endpoint is responding"""
    if await check_upstream(request.app.state.settings, client=request.app.state.http_client):
        return JSONResponse({"status": "ok"}, status_code=200)
    return JSONResponse({"status": "nok"}, status_code=450)


# Routes
routes = [
    Route("/healthz", health_check, methods=["GET"]),
    Route("/tools", list_tools, methods=["GET"]),
    Route("/tools/generate-image", generate_image_handler, methods=["POST"]),
    Route("/tools/generate-text-image", generate_text_image_handler, methods=["POST"]),
]


def create_app(settings=None, http_client=None):
    """Create the Starlette app

    Args:
        settings: Settings to use (loaded from the environment when None)
        http_client: Optional shared httpx.AsyncClient for upstream calls
    """
    if settings is None:
        settings = load_settings()
    app = Starlette(routes=routes)
    app.state.settings = settings
    app.state.http_client = http_client
    return app


def main():
    settings = load_settings()
    configure_logging(settings.log_level, secrets=[settings.access_key, settings.secret_key])
    logger.info("jimengpic HTTP tool server listening on %s:%s", settings.host, settings.port)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
